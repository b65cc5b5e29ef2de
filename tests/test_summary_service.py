"""Tests for the monthly summary and its recommendations."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthlog.errors import ValidationError
from wealthlog.services.summary import budget_status, monthly_summary

NOW = datetime(2024, 6, 15, 12, 0)


def _summary(transaction_repo, category_repo, goal_repo, user, **kwargs):
    kwargs.setdefault("now", NOW)
    return monthly_summary(transaction_repo, category_repo, goal_repo, user_id=user.id, **kwargs)


def test_empty_month_has_no_data(transaction_repo, category_repo, goal_repo, user):
    data = _summary(transaction_repo, category_repo, goal_repo, user, month=3, year=2024)
    assert data["hasData"] is False
    assert data["transactions"]["totalTransactions"] == 0
    assert data["insights"]["savingsRate"] == 0
    assert data["insights"]["budgetStatus"] == "neutral"
    kinds = [r["type"] for r in data["insights"]["recommendations"]]
    assert "tracking" in kinds
    assert data["period"]["monthName"] == "March"


def test_salary_and_expenses_month(
    transaction_repo, category_repo, goal_repo, default_category, transaction_factory, user
):
    transaction_factory(15000, default_category("Salary"), occurred_at=datetime(2024, 6, 1))
    transaction_factory(1500, default_category("Food & Dining"), occurred_at=datetime(2024, 6, 5))
    transaction_factory(1000, default_category("Transportation"), occurred_at=datetime(2024, 6, 9))
    transaction_factory(999, default_category("Travel"), occurred_at=datetime(2024, 5, 31))

    data = _summary(transaction_repo, category_repo, goal_repo, user)

    assert data["hasData"] is True
    assert data["transactions"]["income"] == {"total": 15000, "count": 1}
    assert data["transactions"]["expenses"] == {"total": 2500, "count": 2}
    assert data["transactions"]["netIncome"] == 12500
    insights = data["insights"]
    assert insights["savingsRate"] == 83
    assert insights["budgetStatus"] == "surplus"
    assert insights["topExpenseCategory"]["categoryName"] == "Food & Dining"
    assert insights["topIncomeCategory"]["categoryName"] == "Salary"

    recommendations = {r["type"]: r for r in insights["recommendations"]}
    assert recommendations["savings"]["priority"] == "low"
    assert recommendations["expense"]["message"].startswith("Food & Dining accounts for 60%")
    assert "tracking" not in recommendations
    assert data["categories"]["totalCategories"] == 3


def test_deficit_month_recommends_budgeting(
    transaction_repo, category_repo, goal_repo, default_category, transaction_factory, user
):
    transaction_factory(100, default_category("Freelance"), occurred_at=datetime(2024, 6, 1))
    transaction_factory(300, default_category("Shopping"), occurred_at=datetime(2024, 6, 2))

    data = _summary(transaction_repo, category_repo, goal_repo, user)
    assert data["insights"]["budgetStatus"] == "deficit"
    kinds = {(r["type"], r["priority"]) for r in data["insights"]["recommendations"]}
    assert ("budget", "high") in kinds
    assert ("savings", "high") in kinds


def test_goals_overlapping_month(transaction_repo, category_repo, goal_repo, goal_factory, user):
    goal_factory(title="Fund", target_amount=10000, current_amount=2500)
    goal_factory(title="Ended", end_date=datetime(2024, 2, 1))
    goal_factory(title="Future", start_date=datetime(2024, 8, 1))

    data = _summary(transaction_repo, category_repo, goal_repo, user)
    goals = data["goals"]
    assert [g["title"] for g in goals["goals"]] == ["Fund"]
    assert goals["goals"][0]["progressPercentage"] == 25
    assert goals["goals"][0]["remainingAmount"] == 7500
    assert goals["goals"][0]["isCompleted"] is False
    assert data["insights"]["goalAchievementRate"] == 25
    assert "goals" in {r["type"] for r in data["insights"]["recommendations"]}


@pytest.mark.parametrize(("month", "year"), [(13, 2024), (0, 2024), (1, 1999)])
def test_invalid_period_raises(transaction_repo, category_repo, goal_repo, user, month, year):
    with pytest.raises(ValidationError):
        _summary(transaction_repo, category_repo, goal_repo, user, month=month, year=year)


def test_budget_status_labels():
    assert budget_status(1) == "surplus"
    assert budget_status(-1) == "deficit"
    assert budget_status(0) == "neutral"


def test_completed_in_period(transaction_repo, category_repo, goal_repo, goal_factory, user):
    goal = goal_factory(title="Done", target_amount=100, current_amount=100)
    goal.completed_at = NOW - timedelta(days=1)
    goal_repo.update(goal)
    data = _summary(transaction_repo, category_repo, goal_repo, user)
    assert data["goals"]["completedInPeriod"] == 1
