"""Chart-ready dashboard panels built on the aggregation helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..constants.finance import (
    EXPENSE,
    GOAL_ACTIVE,
    GOAL_COMPLETED,
    GOAL_PAUSED,
    INCOME,
)
from ..domain.repositories.category import CategoryRepository
from ..domain.repositories.goal import GoalRepository
from ..domain.repositories.transaction import TransactionRepository
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.category import Category
from ..models.goal import Goal
from ..serializers import goal_to_dict
from ..timeutils import utcnow
from . import presentation, trends
from .aggregation import (
    bucket_by_month,
    fold_transactions,
    month_window,
    percentage,
    rolling_months,
    round_half_up,
    savings_rate,
)
from .goal_metrics import GoalMetrics, derive
from .transactions import category_lookup

logger = get_logger(__name__)

BAR_TYPES = ("both", INCOME, EXPENSE)
GOAL_STATUS_FILTERS = ("active", "completed", "paused", "cancelled", "all")
OVERVIEW_GOAL_LIMIT = 10


def _meta(category: Optional[Category], name: str, category_type: Optional[str]) -> dict[str, Any]:
    if category is not None:
        return {
            "categoryId": category.id,
            "color": category.color or presentation.category_color(category.name, category_type),
            "icon": category.icon or presentation.category_icon(category.name),
        }
    return {
        "categoryId": None,
        "color": presentation.category_color(name, category_type),
        "icon": presentation.category_icon(name),
    }


def expenses_pie(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Expense totals per category for one month, with share of the total."""

    window = month_window(month, year, now=now)
    rows = transaction_repo.filter_by_date_range(
        window.start, window.end, user_id=user_id, transaction_type=EXPENSE
    )
    lookup = category_lookup(category_repo, user_id=user_id)
    fold = fold_transactions(rows, {cid: c.name for cid, c in lookup.items()})

    total = fold.expense.total
    data = []
    for group in fold.categories_of(EXPENSE):
        meta = _meta(lookup.get(group.category_id), group.name, None)
        data.append(
            {
                "name": group.name,
                "value": group.total,
                "color": meta["color"],
                "icon": meta["icon"],
                "categoryId": meta["categoryId"],
                "percentage": round_half_up(percentage(group.total, total)),
            }
        )

    return {
        "period": window.to_dict(),
        "data": data,
        "summary": {
            "totalExpenses": total,
            "totalCategories": len(data),
            "hasData": bool(data),
        },
    }


def income_line(
    transaction_repo: TransactionRepository,
    *,
    user_id: int,
    months: int = 6,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Monthly income/expense series ending with the current month."""

    windows = rolling_months(months, now=now)
    start, end = windows[0].start, windows[-1].end
    rows = transaction_repo.filter_by_date_range(start, end, user_id=user_id)
    per_month = bucket_by_month(rows, windows)

    points = []
    for window in windows:
        fold = per_month[window.key]
        points.append(
            {
                "month": window.label,
                "monthKey": window.key,
                "income": fold.income.total,
                "expenses": fold.expense.total,
                "netIncome": fold.net_income,
                "transactionCount": fold.transaction_count,
                "savingsRate": fold.savings_rate,
            }
        )

    total_income = round(sum(p["income"] for p in points), 2)
    total_expenses = round(sum(p["expenses"] for p in points), 2)
    return {
        "period": {
            "months": months,
            "startDate": start,
            "endDate": end,
            "labels": [
                {"key": w.key, "label": w.label, "month": w.month, "year": w.year}
                for w in windows
            ],
        },
        "data": points,
        "insights": _line_insights(points),
        "summary": {
            "totalIncome": total_income,
            "totalExpenses": total_expenses,
            "averageIncome": total_income / len(points) if points else 0,
            "averageExpenses": total_expenses / len(points) if points else 0,
            "hasData": any(p["income"] > 0 or p["expenses"] > 0 for p in points),
        },
    }


def _line_insights(points: list[dict[str, Any]]) -> dict[str, Any]:
    if len(points) < 2:
        return {
            "incomeTrend": trends.STABLE,
            "expenseTrend": trends.STABLE,
            "netIncomeTrend": trends.STABLE,
            "bestMonth": None,
            "worstMonth": None,
            "averageSavingsRate": 0,
        }

    best = points[0]
    worst = points[0]
    for point in points[1:]:
        if point["netIncome"] > best["netIncome"]:
            best = point
        if point["netIncome"] < worst["netIncome"]:
            worst = point

    with_income = [p["savingsRate"] for p in points if p["income"] > 0]
    average_rate = sum(with_income) / len(with_income) if with_income else 0.0
    return {
        "incomeTrend": trends.classify([p["income"] for p in points]),
        "expenseTrend": trends.classify([p["expenses"] for p in points]),
        "netIncomeTrend": trends.classify([p["netIncome"] for p in points]),
        "bestMonth": best["month"],
        "worstMonth": worst["month"],
        "averageSavingsRate": round_half_up(average_rate),
    }


def category_bar(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    bar_type: str = "both",
    include_empty: bool = False,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Per-category totals for one month, sorted by value then name."""

    if bar_type not in BAR_TYPES:
        raise ValidationError.for_field("type", "Type must be one of: both, income, expense")
    window = month_window(month, year, now=now)
    rows = transaction_repo.filter_by_date_range(
        window.start,
        window.end,
        user_id=user_id,
        transaction_type=None if bar_type == "both" else bar_type,
    )
    lookup = category_lookup(category_repo, user_id=user_id)
    fold = fold_transactions(rows, {cid: c.name for cid, c in lookup.items()})

    data = []
    seen: set[Optional[int]] = set()
    for group in fold.categories:
        seen.add(group.category_id)
        meta = _meta(lookup.get(group.category_id), group.name, group.transaction_type)
        data.append(
            {
                "name": group.name,
                "type": group.transaction_type,
                "value": group.total,
                "count": group.count,
                "color": meta["color"],
                "icon": meta["icon"],
                "categoryId": meta["categoryId"],
                "averageAmount": group.average,
            }
        )

    if include_empty:
        for category in lookup.values():
            if category.id in seen or not category.is_active:
                continue
            if bar_type != "both" and category.category_type != bar_type:
                continue
            meta = _meta(category, category.name, category.category_type)
            data.append(
                {
                    "name": category.name,
                    "type": category.category_type,
                    "value": 0,
                    "count": 0,
                    "color": meta["color"],
                    "icon": meta["icon"],
                    "categoryId": category.id,
                    "averageAmount": 0,
                }
            )

    data.sort(key=lambda item: (-item["value"], item["name"]))
    return {
        "period": window.to_dict(),
        "data": data,
        "summary": _bar_summary(data, bar_type),
        "options": {"includeEmpty": include_empty, "type": bar_type},
    }


def _bar_summary(data: list[dict[str, Any]], bar_type: str) -> dict[str, Any]:
    income = [item for item in data if item["type"] == INCOME]
    expenses = [item for item in data if item["type"] == EXPENSE]
    total_income = round(sum(item["value"] for item in income), 2)
    total_expenses = round(sum(item["value"] for item in expenses), 2)

    summary: dict[str, Any] = {
        "totalCategories": len(data),
        "totalIncome": total_income,
        "totalExpenses": total_expenses,
        "netIncome": round(total_income - total_expenses, 2),
        "hasData": any(item["value"] > 0 for item in data),
    }
    if bar_type in ("both", INCOME):
        summary["income"] = {
            "categories": len(income),
            "total": total_income,
            "topCategory": income[0] if income else None,
            "averagePerCategory": total_income / len(income) if income else 0,
        }
    if bar_type in ("both", EXPENSE):
        summary["expenses"] = {
            "categories": len(expenses),
            "total": total_expenses,
            "topCategory": expenses[0] if expenses else None,
            "averagePerCategory": total_expenses / len(expenses) if expenses else 0,
        }
    return summary


def _goal_card(goal: Goal, metrics: GoalMetrics) -> dict[str, Any]:
    card = goal_to_dict(goal, metrics)
    card.update(
        {
            "color": presentation.progress_color(metrics.progress, metrics.is_overdue),
            "statusLabel": presentation.STATUS_LABELS.get(goal.status, goal.status.title()),
            "priorityLabel": presentation.PRIORITY_LABELS.get(goal.priority, goal.priority.title()),
            "progressText": presentation.progress_text(
                is_completed=metrics.is_completed,
                progress_percentage=metrics.progress_percentage,
                current_amount=goal.current_amount,
                target_amount=goal.target_amount,
                currency=goal.currency,
            ),
            "timelineText": presentation.timeline_text(
                is_completed=metrics.is_completed,
                is_overdue=metrics.is_overdue,
                days_remaining=metrics.days_remaining,
            ),
        }
    )
    return card


def _goals_summary(pairs: list[tuple[Goal, GoalMetrics]]) -> dict[str, Any]:
    total_target = round(sum(g.target_amount for g, _ in pairs), 2)
    total_current = round(sum(g.current_amount for g, _ in pairs), 2)
    average = sum(m.progress for _, m in pairs) / len(pairs) if pairs else 0.0
    return {
        "totalGoals": len(pairs),
        "activeGoals": sum(1 for g, _ in pairs if g.status == GOAL_ACTIVE),
        "completedGoals": sum(1 for g, _ in pairs if g.status == GOAL_COMPLETED),
        "pausedGoals": sum(1 for g, _ in pairs if g.status == GOAL_PAUSED),
        "overdueGoals": sum(1 for _, m in pairs if m.is_overdue),
        "totalTargetAmount": total_target,
        "totalCurrentAmount": total_current,
        "overallProgress": round_half_up(percentage(total_current, total_target)),
        "averageProgress": round_half_up(average),
        "hasData": bool(pairs),
    }


def _goal_recommendations(
    pairs: list[tuple[Goal, GoalMetrics]], completion_rate: int
) -> list[dict[str, str]]:
    if not pairs:
        return [
            {
                "type": "setup",
                "priority": "high",
                "message": "Start your financial journey by setting your first goal.",
                "action": "Create a new financial goal",
            }
        ]

    advice = []
    active = [(g, m) for g, m in pairs if g.status == GOAL_ACTIVE]
    low = [g for g, m in active if m.progress < 25]
    if low:
        advice.append(
            {
                "type": "progress",
                "priority": "medium",
                "message": f"{len(low)} goal(s) have less than 25% progress.",
                "action": "Review and increase contributions to these goals",
            }
        )
    overdue = [g for g, m in pairs if m.is_overdue]
    if overdue:
        advice.append(
            {
                "type": "deadline",
                "priority": "high",
                "message": f"{len(overdue)} goal(s) are overdue.",
                "action": "Extend deadlines or increase contributions",
            }
        )
    if completion_rate >= 80:
        advice.append(
            {
                "type": "achievement",
                "priority": "low",
                "message": f"Excellent! You've completed {completion_rate}% of your goals.",
                "action": "Consider setting more ambitious targets",
            }
        )
    if len(active) > 5:
        advice.append(
            {
                "type": "focus",
                "priority": "medium",
                "message": f"You have {len(active)} active goals. Consider focusing on fewer goals.",
                "action": "Prioritize 3-5 most important goals",
            }
        )
    return advice


def _goals_insights(
    pairs: list[tuple[Goal, GoalMetrics]], cards: dict[int, dict[str, Any]]
) -> dict[str, Any]:
    insights: dict[str, Any] = {
        "topPerformingGoal": None,
        "mostUrgentGoal": None,
        "completionRate": 0,
        "recommendations": [],
    }
    if pairs:
        active = [(g, m) for g, m in pairs if g.status == GOAL_ACTIVE]
        if active:
            top = active[0]
            for pair in active[1:]:
                if pair[1].progress > top[1].progress:
                    top = pair
            insights["topPerformingGoal"] = cards[top[0].id]

        urgent = [(g, m) for g, m in active if g.end_date and (m.days_remaining or 0) > 0]
        if urgent:
            def score(pair: tuple[Goal, GoalMetrics]) -> float:
                return pair[1].days_remaining / (pair[1].progress + 1)

            most = urgent[0]
            for pair in urgent[1:]:
                if score(pair) < score(most):
                    most = pair
            insights["mostUrgentGoal"] = cards[most[0].id]

        completed = sum(1 for g, _ in pairs if g.status == GOAL_COMPLETED)
        insights["completionRate"] = round_half_up(completed / len(pairs) * 100)

    insights["recommendations"] = _goal_recommendations(pairs, insights["completionRate"])
    return insights


def goals_progress(
    goal_repo: GoalRepository,
    *,
    user_id: int,
    status: str = "active",
    include_completed: bool = False,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Goal cards with colour and timeline text, plus summary and insights."""

    if status not in GOAL_STATUS_FILTERS:
        raise ValidationError.for_field(
            "status", f"Status must be one of: {', '.join(GOAL_STATUS_FILTERS)}"
        )
    now = now or utcnow()

    if status == "all":
        goals, _ = goal_repo.list_for_user(user_id=user_id, limit=limit)
    elif include_completed and status == GOAL_ACTIVE:
        everything, _ = goal_repo.list_for_user(user_id=user_id)
        goals = [g for g in everything if g.status in (GOAL_ACTIVE, GOAL_COMPLETED)]
        goals = goals[:limit] if limit else goals
    else:
        goals, _ = goal_repo.list_for_user(user_id=user_id, status=status, limit=limit)

    pairs = [(goal, derive(goal, now)) for goal in goals]
    cards = {goal.id: _goal_card(goal, metrics) for goal, metrics in pairs}

    logger.debug("Goals progress built", extra={"user_id": user_id, "goals": len(pairs)})
    return {
        "data": [cards[goal.id] for goal, _ in pairs],
        "summary": _goals_summary(pairs),
        "insights": _goals_insights(pairs, cards),
        "options": {"status": status, "includeCompleted": include_completed, "limit": limit},
    }


def overview(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    goal_repo: GoalRepository,
    *,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
    months: int = 6,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """All four panels plus headline figures.

    Panels are built one after another; each reads its own window.
    """

    now = now or utcnow()
    pie = expenses_pie(
        transaction_repo, category_repo, user_id=user_id, month=month, year=year, now=now
    )
    line = income_line(transaction_repo, user_id=user_id, months=months, now=now)
    bar = category_bar(
        transaction_repo, category_repo, user_id=user_id, month=month, year=year, now=now
    )
    goals = goals_progress(
        goal_repo, user_id=user_id, status=GOAL_ACTIVE, limit=OVERVIEW_GOAL_LIMIT, now=now
    )

    total_income = line["summary"]["totalIncome"]
    total_expenses = line["summary"]["totalExpenses"]
    result = {
        "period": {
            "currentMonth": pie["period"]["month"],
            "currentYear": pie["period"]["year"],
            "monthsRange": months,
        },
        "expenses": {
            "byCategory": pie["data"],
            "total": pie["summary"]["totalExpenses"],
            "categoriesCount": pie["summary"]["totalCategories"],
        },
        "income": {
            "trend": line["data"],
            "insights": line["insights"],
            "summary": line["summary"],
        },
        "categories": {"breakdown": bar["data"], "summary": bar["summary"]},
        "goals": {
            "progress": goals["data"],
            "summary": goals["summary"],
            "insights": goals["insights"],
        },
        "summary": {
            "netIncome": round(total_income - total_expenses, 2),
            "savingsRate": round_half_up(savings_rate(total_income, total_expenses)),
            "activeGoals": goals["summary"]["activeGoals"],
            "overallGoalProgress": goals["summary"]["overallProgress"],
            "hasData": (
                pie["summary"]["hasData"]
                or line["summary"]["hasData"]
                or goals["summary"]["hasData"]
            ),
        },
    }
    logger.info(
        "Dashboard overview built",
        extra={
            "user_id": user_id,
            "net_income": result["summary"]["netIncome"],
            "savings_rate": result["summary"]["savingsRate"],
        },
    )
    return result


def stats(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    goal_repo: GoalRepository,
    *,
    user_id: int,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Headline numbers for the current month and all goals."""

    now = now or utcnow()
    pie = expenses_pie(
        transaction_repo, category_repo, user_id=user_id, month=now.month, year=now.year, now=now
    )
    bar = category_bar(
        transaction_repo, category_repo, user_id=user_id, month=now.month, year=now.year, now=now
    )
    goals = goals_progress(goal_repo, user_id=user_id, status="all", now=now)

    income = bar["summary"]["totalIncome"]
    expenses = bar["summary"]["totalExpenses"]
    goal_summary = goals["summary"]
    return {
        "currentMonth": {
            "totalIncome": income,
            "totalExpenses": expenses,
            "netIncome": round(income - expenses, 2),
            "transactionCount": sum(item["count"] for item in bar["data"]),
            "categoriesUsed": sum(1 for item in bar["data"] if item["value"] > 0),
        },
        "goals": {
            "total": goal_summary["totalGoals"],
            "active": goal_summary["activeGoals"],
            "completed": goal_summary["completedGoals"],
            "overdue": goal_summary["overdueGoals"],
            "overallProgress": goal_summary["overallProgress"],
            "totalTargetAmount": goal_summary["totalTargetAmount"],
            "totalCurrentAmount": goal_summary["totalCurrentAmount"],
        },
        "insights": {
            "topExpenseCategory": pie["data"][0] if pie["data"] else None,
            "savingsRate": round_half_up(savings_rate(income, expenses)),
            "budgetStatus": "surplus" if income >= expenses else "deficit",
        },
    }
