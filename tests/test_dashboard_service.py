"""Tests for the dashboard chart payloads."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from wealthlog.errors import ValidationError
from wealthlog.services import dashboard

NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def june(default_category, transaction_factory):
    transaction_factory(15000, default_category("Salary"), occurred_at=datetime(2024, 6, 1))
    transaction_factory(1500, default_category("Food & Dining"), occurred_at=datetime(2024, 6, 5))
    transaction_factory(1000, default_category("Transportation"), occurred_at=datetime(2024, 6, 9))
    transaction_factory(10000, default_category("Salary"), occurred_at=datetime(2024, 4, 1))
    transaction_factory(4000, default_category("Travel"), occurred_at=datetime(2024, 4, 20))


def test_expenses_pie(transaction_repo, category_repo, user, june):
    pie = dashboard.expenses_pie(transaction_repo, category_repo, user_id=user.id, now=NOW)
    assert [(d["name"], d["value"], d["percentage"]) for d in pie["data"]] == [
        ("Food & Dining", 1500, 60),
        ("Transportation", 1000, 40),
    ]
    assert pie["data"][0]["color"] == "#F44336"
    assert pie["data"][0]["icon"] == "utensils"
    assert pie["summary"] == {"totalExpenses": 2500, "totalCategories": 2, "hasData": True}


def test_expenses_pie_empty_month(transaction_repo, category_repo, user):
    pie = dashboard.expenses_pie(
        transaction_repo, category_repo, user_id=user.id, month=1, year=2024, now=NOW
    )
    assert pie["data"] == []
    assert pie["summary"]["hasData"] is False


def test_income_line(transaction_repo, user, june):
    line = dashboard.income_line(transaction_repo, user_id=user.id, months=3, now=NOW)
    assert [p["monthKey"] for p in line["data"]] == ["2024-04", "2024-05", "2024-06"]
    april, may, current = line["data"]
    assert april["month"] == "Apr 2024"
    assert april["netIncome"] == 6000
    assert may["transactionCount"] == 0
    assert current["savingsRate"] == pytest.approx(83.333, rel=1e-3)
    assert line["summary"]["totalIncome"] == 25000
    assert line["insights"]["bestMonth"] == "Jun 2024"
    assert line["insights"]["worstMonth"] == "May 2024"
    assert line["insights"]["averageSavingsRate"] == 72
    assert line["period"]["endDate"] == datetime(2024, 7, 1)


def test_income_line_rejects_out_of_range(transaction_repo, user):
    with pytest.raises(ValidationError):
        dashboard.income_line(transaction_repo, user_id=user.id, months=25, now=NOW)


def test_category_bar(transaction_repo, category_repo, user, june):
    bar = dashboard.category_bar(transaction_repo, category_repo, user_id=user.id, now=NOW)
    assert [d["name"] for d in bar["data"]] == ["Salary", "Food & Dining", "Transportation"]
    assert bar["summary"]["income"]["topCategory"]["name"] == "Salary"
    assert bar["summary"]["netIncome"] == 12500

    expenses = dashboard.category_bar(
        transaction_repo, category_repo, user_id=user.id, bar_type="expense",
        include_empty=True, now=NOW,
    )
    assert "income" not in expenses["summary"]
    assert len(expenses["data"]) == 9
    assert expenses["data"][-1]["value"] == 0

    with pytest.raises(ValidationError):
        dashboard.category_bar(transaction_repo, category_repo, user_id=user.id, bar_type="x")


def test_goals_progress(goal_repo, goal_factory, user):
    goal_factory(title="Fund", target_amount=10000, current_amount=2500, end_date=NOW + timedelta(days=45))
    goal_factory(title="Late", target_amount=100, current_amount=10, end_date=NOW - timedelta(days=2))
    goal_factory(title="Done", target_amount=100, current_amount=100, status="completed")

    result = dashboard.goals_progress(goal_repo, user_id=user.id, now=NOW)
    cards = {c["title"]: c for c in result["data"]}
    assert set(cards) == {"Fund", "Late"}
    assert cards["Fund"]["progressText"] == "25% (2,500 / 10,000 ETB)"
    assert cards["Fund"]["timelineText"] == "2 months remaining"
    assert cards["Fund"]["statusLabel"] == "Active"
    assert cards["Late"]["timelineText"] == "Overdue"
    assert cards["Late"]["color"] == "#f44336"

    summary = result["summary"]
    assert summary["overdueGoals"] == 1
    assert summary["hasData"] is True
    assert result["insights"]["topPerformingGoal"]["title"] == "Fund"
    assert result["insights"]["mostUrgentGoal"]["title"] == "Fund"
    kinds = {r["type"] for r in result["insights"]["recommendations"]}
    assert {"progress", "deadline"} <= kinds

    everything = dashboard.goals_progress(goal_repo, user_id=user.id, status="all", now=NOW)
    assert everything["summary"]["completedGoals"] == 1
    with_done = dashboard.goals_progress(
        goal_repo, user_id=user.id, include_completed=True, now=NOW
    )
    assert len(with_done["data"]) == 3


def test_goals_progress_without_goals(goal_repo, user):
    result = dashboard.goals_progress(goal_repo, user_id=user.id, now=NOW)
    assert result["summary"]["hasData"] is False
    assert result["insights"]["recommendations"][0]["type"] == "setup"
    with pytest.raises(ValidationError):
        dashboard.goals_progress(goal_repo, user_id=user.id, status="bogus", now=NOW)


def test_overview_and_stats(transaction_repo, category_repo, goal_repo, goal_factory, user, june):
    goal_factory(title="Fund", target_amount=10000, current_amount=2500)
    overview = dashboard.overview(
        transaction_repo, category_repo, goal_repo, user_id=user.id, months=3, now=NOW
    )
    assert overview["expenses"]["total"] == 2500
    assert overview["summary"]["activeGoals"] == 1
    assert overview["summary"]["overallGoalProgress"] == 25
    assert overview["summary"]["netIncome"] == 12500 + 6000
    assert overview["summary"]["hasData"] is True

    stats = dashboard.stats(transaction_repo, category_repo, goal_repo, user_id=user.id, now=NOW)
    assert stats["currentMonth"]["transactionCount"] == 3
    assert stats["currentMonth"]["categoriesUsed"] == 3
    assert stats["insights"]["savingsRate"] == 83
    assert stats["insights"]["topExpenseCategory"]["name"] == "Food & Dining"
    assert stats["goals"]["active"] == 1
