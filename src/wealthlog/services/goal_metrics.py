"""Derived goal figures: progress, remaining amount, deadline state."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..constants.finance import GOAL_ACTIVE, GOAL_COMPLETED
from ..models.goal import Goal
from ..timeutils import utcnow
from .aggregation import round_half_up

_SECONDS_PER_DAY = 24 * 60 * 60
_DAYS_PER_MONTH = 30


@dataclass(slots=True)
class GoalMetrics:
    """Values computed from a goal at a point in time; never persisted."""

    progress: float
    progress_percentage: int
    remaining_amount: float
    is_completed: bool
    is_overdue: bool
    days_remaining: Optional[int]
    duration: Optional[int]
    required_monthly_amount: float


def progress(current_amount: float, target_amount: float) -> float:
    """Percent of target reached, clamped to 0..100."""

    if target_amount <= 0:
        return 0.0
    return max(0.0, min(current_amount / target_amount * 100, 100.0))


def remaining(current_amount: float, target_amount: float) -> float:
    return round(max(target_amount - current_amount, 0.0), 2)


def _ceil_days(delta_seconds: float) -> int:
    return math.ceil(delta_seconds / _SECONDS_PER_DAY)


def days_remaining(end_date: Optional[datetime], now: datetime) -> Optional[int]:
    if end_date is None:
        return None
    return max(_ceil_days((end_date - now).total_seconds()), 0)


def is_completed(goal: Goal) -> bool:
    return goal.current_amount >= goal.target_amount or goal.status == GOAL_COMPLETED


def can_update_amount(goal: Goal) -> bool:
    return goal.status == GOAL_ACTIVE and not is_completed(goal)


def derive(goal: Goal, now: Optional[datetime] = None) -> GoalMetrics:
    now = now or utcnow()
    pct = progress(goal.current_amount, goal.target_amount)
    left = remaining(goal.current_amount, goal.target_amount)
    completed = is_completed(goal)
    overdue = goal.end_date is not None and now > goal.end_date and not completed
    days = days_remaining(goal.end_date, now)

    duration = None
    if goal.start_date and goal.end_date:
        duration = _ceil_days((goal.end_date - goal.start_date).total_seconds())

    if days:
        required = left / (days / _DAYS_PER_MONTH)
    else:
        required = left

    return GoalMetrics(
        progress=pct,
        progress_percentage=round_half_up(pct),
        remaining_amount=left,
        is_completed=completed,
        is_overdue=overdue,
        days_remaining=days,
        duration=duration,
        required_monthly_amount=round(required, 2),
    )
