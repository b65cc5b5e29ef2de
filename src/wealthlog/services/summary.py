"""Monthly financial summary with insights and recommendations."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..constants.finance import EXPENSE, INCOME
from ..domain.repositories.category import CategoryRepository
from ..domain.repositories.goal import GoalRepository
from ..domain.repositories.transaction import TransactionRepository
from ..logging_config import get_logger
from ..models.goal import Goal
from ..timeutils import utcnow
from .aggregation import (
    CategoryTotals,
    PeriodFold,
    PeriodWindow,
    fold_transactions,
    month_window,
    percentage,
    round_half_up,
)
from .goal_metrics import derive
from .transactions import category_lookup

logger = get_logger(__name__)

LOW_SAVINGS_RATE = 10
HIGH_SAVINGS_RATE = 30
TOP_EXPENSE_SHARE = 40
LOW_GOAL_PROGRESS = 50


def _recommendation(kind: str, priority: str, message: str, action: str) -> dict[str, str]:
    return {"type": kind, "priority": priority, "message": message, "action": action}


def _category_entry(group: CategoryTotals) -> dict[str, Any]:
    return {
        "categoryId": group.category_id,
        "categoryName": group.name,
        "type": group.transaction_type,
        "total": group.total,
        "count": group.count,
    }


def _goals_in_window(goals: list[Goal], window: PeriodWindow, now: datetime) -> dict[str, Any]:
    """Active goals whose lifetime overlaps the window."""

    end = window.end or now
    relevant = [
        g for g in goals if g.start_date < end and (g.end_date or now) >= window.start
    ]
    entries = []
    completed_in_period = 0
    total_progress = 0.0
    for goal in relevant:
        metrics = derive(goal, now)
        total_progress += metrics.progress
        if metrics.is_completed and goal.completed_at and window.contains(goal.completed_at):
            completed_in_period += 1
        entries.append(
            {
                "id": goal.id,
                "title": goal.title,
                "targetAmount": goal.target_amount,
                "currentAmount": goal.current_amount,
                "progress": metrics.progress,
                "progressPercentage": metrics.progress_percentage,
                "remainingAmount": metrics.remaining_amount,
                "isCompleted": metrics.is_completed,
                "isOverdue": metrics.is_overdue,
                "daysRemaining": metrics.days_remaining,
                "priority": goal.priority,
                "category": goal.category,
            }
        )
    average = total_progress / len(relevant) if relevant else 0.0
    return {
        "totalGoals": len(relevant),
        "completedInPeriod": completed_in_period,
        "averageProgress": average,
        "goals": entries,
    }


def recommendations(
    fold: PeriodFold, savings_rate: float, goal_count: int, goal_progress: float
) -> list[dict[str, str]]:
    """Fixed rule table; order matches the order rules are evaluated."""

    advice = []
    if savings_rate < LOW_SAVINGS_RATE:
        advice.append(
            _recommendation(
                "savings",
                "high",
                "Consider increasing your savings rate. Aim for at least 10-20% of your income.",
                "Review expenses and identify areas to cut back",
            )
        )
    elif savings_rate > HIGH_SAVINGS_RATE:
        advice.append(
            _recommendation(
                "savings",
                "low",
                "Excellent savings rate! You're building wealth effectively.",
                "Consider investing excess savings for better returns",
            )
        )

    if fold.net_income < 0:
        advice.append(
            _recommendation(
                "budget",
                "high",
                "You spent more than you earned this month. Review your expenses.",
                "Create a budget and track spending more closely",
            )
        )

    expenses = fold.categories_of(EXPENSE)
    if expenses and fold.expense.total > 0:
        share = percentage(expenses[0].total, fold.expense.total)
        if share > TOP_EXPENSE_SHARE:
            name = expenses[0].name
            advice.append(
                _recommendation(
                    "expense",
                    "medium",
                    f"{name} accounts for {round_half_up(share)}% of your expenses.",
                    f"Review {name} spending for optimization opportunities",
                )
            )

    if goal_count > 0 and goal_progress < LOW_GOAL_PROGRESS:
        advice.append(
            _recommendation(
                "goals",
                "medium",
                "Your goal progress is below 50%. Consider adjusting your targets or savings strategy.",
                "Review goal timelines and increase monthly contributions",
            )
        )

    if not fold.has_data:
        advice.append(
            _recommendation(
                "tracking",
                "high",
                "No transactions recorded this month. Start tracking your finances.",
                "Add your income and expenses to get better insights",
            )
        )
    return advice


def budget_status(net_income: float) -> str:
    if net_income > 0:
        return "surplus"
    if net_income < 0:
        return "deficit"
    return "neutral"


def monthly_summary(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    goal_repo: GoalRepository,
    *,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Fold one calendar month into totals, category breakdown, goals and insights.

    An invalid month or year raises ``ValidationError`` before anything is read.
    """

    now = now or utcnow()
    window = month_window(month, year, now=now)

    rows = transaction_repo.filter_by_date_range(window.start, window.end, user_id=user_id)
    lookup = category_lookup(category_repo, user_id=user_id)
    fold = fold_transactions(rows, {cid: c.name for cid, c in lookup.items()})

    active, _ = goal_repo.list_for_user(user_id=user_id, status="active")
    goals = _goals_in_window(active, window, now)

    income_groups = [_category_entry(g) for g in fold.categories_of(INCOME)]
    expense_groups = [_category_entry(g) for g in fold.categories_of(EXPENSE)]
    savings = fold.savings_rate

    insights = {
        "savingsRate": round_half_up(savings),
        "topExpenseCategory": expense_groups[0] if expense_groups else None,
        "topIncomeCategory": income_groups[0] if income_groups else None,
        "budgetStatus": budget_status(fold.net_income),
        "goalAchievementRate": round_half_up(goals["averageProgress"]) if goals["totalGoals"] else 0,
        "recommendations": recommendations(
            fold, savings, goals["totalGoals"], goals["averageProgress"]
        ),
    }

    logger.info(
        "Monthly summary generated",
        extra={
            "user_id": user_id,
            "month": window.month,
            "year": window.year,
            "total_income": fold.income.total,
            "total_expenses": fold.expense.total,
        },
    )

    return {
        "period": window.to_dict(),
        "transactions": {
            "income": {"total": fold.income.total, "count": fold.income.count},
            "expenses": {"total": fold.expense.total, "count": fold.expense.count},
            "netIncome": fold.net_income,
            "totalTransactions": fold.transaction_count,
        },
        "categories": {
            "income": income_groups,
            "expenses": expense_groups,
            "totalCategories": len(fold.categories),
        },
        "goals": goals,
        "insights": insights,
        "hasData": fold.has_data,
    }
