"""Savings goal lifecycle: create, progress, status transitions, summary."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..constants.finance import (
    GOAL_ACTIVE,
    GOAL_COMPLETED,
    GOAL_PAUSED,
    GOAL_STATUSES,
)
from ..domain.repositories.goal import GoalRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.goal import Goal
from ..timeutils import utcnow
from .aggregation import percentage, round_half_up
from .goal_metrics import can_update_amount

logger = get_logger(__name__)

_MUTABLE_FIELDS = (
    "title",
    "description",
    "target_amount",
    "current_amount",
    "start_date",
    "end_date",
    "status",
    "priority",
    "category",
    "currency",
)


def mark_completed_if_reached(goal: Goal, now: Optional[datetime] = None) -> bool:
    """Move a goal to completed once current reaches target.

    Idempotent: ``completed_at`` is only stamped the first time. Returns True
    when this call performed the transition.
    """

    if goal.current_amount < goal.target_amount:
        return False
    transitioned = goal.status != GOAL_COMPLETED
    goal.status = GOAL_COMPLETED
    if goal.completed_at is None:
        goal.completed_at = now or utcnow()
    return transitioned


def _check_invariants(goal: Goal) -> None:
    errors: dict[str, list[str]] = {}
    if goal.target_amount <= 0:
        errors.setdefault("targetAmount", []).append("Target amount must be greater than 0")
    if goal.current_amount < 0:
        errors.setdefault("currentAmount", []).append("Current amount cannot be negative")
    if goal.current_amount > goal.target_amount:
        errors.setdefault("currentAmount", []).append(
            "Current amount cannot exceed target amount"
        )
    if goal.end_date is not None and goal.start_date is not None:
        if goal.end_date <= goal.start_date:
            errors.setdefault("endDate", []).append("End date must be after start date")
    if errors:
        raise ValidationError.from_field_errors(errors, "Goal data is invalid")


def get_goal(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> Goal:
    goal = goal_repo.get_by_id(goal_id, user_id=user_id)
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


def create_goal(
    goal_repo: GoalRepository,
    *,
    user_id: int,
    title: str,
    target_amount: float,
    current_amount: float = 0.0,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    priority: str = "medium",
    category: Optional[str] = None,
    description: Optional[str] = None,
    currency: str = "ETB",
    now: Optional[datetime] = None,
) -> Goal:
    """New goals start active and complete immediately when already funded."""

    now = now or utcnow()
    goal = Goal(
        user_id=user_id,
        title=title.strip(),
        description=description,
        target_amount=round(target_amount, 2),
        current_amount=round(current_amount, 2),
        start_date=start_date or now,
        end_date=end_date,
        status=GOAL_ACTIVE,
        priority=priority,
        category=category,
        currency=currency,
    )
    _check_invariants(goal)
    mark_completed_if_reached(goal, now)
    goal = goal_repo.create(goal)
    logger.info(
        "Goal created",
        extra={"user_id": user_id, "goal_id": goal.id, "target_amount": goal.target_amount},
    )
    return goal


def update_goal(
    goal_repo: GoalRepository,
    goal_id: int,
    *,
    user_id: int,
    changes: dict[str, Any],
    now: Optional[datetime] = None,
) -> Goal:
    """Apply partial changes; bounds are checked against the merged record."""

    goal = get_goal(goal_repo, goal_id, user_id=user_id)
    now = now or utcnow()
    for key in _MUTABLE_FIELDS:
        if key in changes:
            value = changes[key]
            if key in ("target_amount", "current_amount"):
                value = round(value, 2)
            setattr(goal, key, value)

    _check_invariants(goal)
    if goal.status == GOAL_COMPLETED and goal.completed_at is None:
        goal.completed_at = now
    mark_completed_if_reached(goal, now)

    goal = goal_repo.update(goal)
    logger.info(
        "Goal updated", extra={"user_id": user_id, "goal_id": goal_id, "fields": sorted(changes)}
    )
    return goal


def delete_goal(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> None:
    if not goal_repo.soft_delete(goal_id, user_id=user_id):
        raise NotFoundError("Goal not found")
    logger.info("Goal deleted", extra={"user_id": user_id, "goal_id": goal_id})


def restore_goal(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> Goal:
    goal = goal_repo.restore(goal_id, user_id=user_id)
    if goal is None:
        raise NotFoundError("Deleted goal not found")
    logger.info("Goal restored", extra={"user_id": user_id, "goal_id": goal_id})
    return goal


def list_goals(
    goal_repo: GoalRepository,
    *,
    user_id: int,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
) -> tuple[list[Goal], int]:
    """``status`` of None or ``all`` returns every status."""

    if status == "all":
        status = None
    offset = (page - 1) * limit if limit else 0
    return goal_repo.list_for_user(
        user_id=user_id,
        status=status,
        priority=priority,
        category=category,
        limit=limit,
        offset=offset,
    )


def active_goals(goal_repo: GoalRepository, *, user_id: int) -> list[Goal]:
    goals, _ = goal_repo.list_for_user(user_id=user_id, status=GOAL_ACTIVE)
    return goals


def overdue_goals(
    goal_repo: GoalRepository, *, user_id: int, now: Optional[datetime] = None
) -> list[Goal]:
    return goal_repo.list_overdue(now or utcnow(), user_id=user_id)


def search_goals(goal_repo: GoalRepository, term: str, *, user_id: int) -> list[Goal]:
    return goal_repo.search(term, user_id=user_id)


def _progress_target(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> Goal:
    goal = get_goal(goal_repo, goal_id, user_id=user_id)
    if not can_update_amount(goal):
        raise ValidationError("Cannot update progress for inactive goal")
    return goal


def _save_progress(
    goal_repo: GoalRepository, goal: Goal, amount: float, *, user_id: int, now: datetime
) -> Goal:
    goal.current_amount = round(min(amount, goal.target_amount), 2)
    completed = mark_completed_if_reached(goal, now)
    goal = goal_repo.update(goal)
    logger.info(
        "Goal progress updated",
        extra={
            "user_id": user_id,
            "goal_id": goal.id,
            "current_amount": goal.current_amount,
            "completed": completed,
        },
    )
    return goal


def update_progress(
    goal_repo: GoalRepository,
    goal_id: int,
    amount: float,
    *,
    user_id: int,
    now: Optional[datetime] = None,
) -> Goal:
    """Set the saved amount, capped at the target."""

    if amount < 0:
        raise ValidationError.for_field("currentAmount", "Amount cannot be negative")
    goal = _progress_target(goal_repo, goal_id, user_id=user_id)
    return _save_progress(goal_repo, goal, amount, user_id=user_id, now=now or utcnow())


def add_progress(
    goal_repo: GoalRepository,
    goal_id: int,
    amount: float,
    *,
    user_id: int,
    now: Optional[datetime] = None,
) -> Goal:
    """Add to the saved amount, capped at the target."""

    if amount <= 0:
        raise ValidationError.for_field("amount", "Amount must be positive")
    goal = _progress_target(goal_repo, goal_id, user_id=user_id)
    return _save_progress(
        goal_repo, goal, goal.current_amount + amount, user_id=user_id, now=now or utcnow()
    )


def complete_goal(
    goal_repo: GoalRepository, goal_id: int, *, user_id: int, now: Optional[datetime] = None
) -> Goal:
    goal = get_goal(goal_repo, goal_id, user_id=user_id)
    if goal.status == GOAL_COMPLETED:
        raise ValidationError("Goal is already completed")
    goal.status = GOAL_COMPLETED
    goal.completed_at = goal.completed_at or now or utcnow()
    goal = goal_repo.update(goal)
    logger.info("Goal completed", extra={"user_id": user_id, "goal_id": goal_id})
    return goal


def pause_goal(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> Goal:
    goal = get_goal(goal_repo, goal_id, user_id=user_id)
    if goal.status != GOAL_ACTIVE:
        raise ValidationError("Only active goals can be paused")
    goal.status = GOAL_PAUSED
    goal = goal_repo.update(goal)
    logger.info("Goal paused", extra={"user_id": user_id, "goal_id": goal_id})
    return goal


def resume_goal(goal_repo: GoalRepository, goal_id: int, *, user_id: int) -> Goal:
    goal = get_goal(goal_repo, goal_id, user_id=user_id)
    if goal.status != GOAL_PAUSED:
        raise ValidationError("Only paused goals can be resumed")
    goal.status = GOAL_ACTIVE
    goal = goal_repo.update(goal)
    logger.info("Goal resumed", extra={"user_id": user_id, "goal_id": goal_id})
    return goal


def goal_summary(goal_repo: GoalRepository, *, user_id: int) -> dict[str, Any]:
    """Counts, targets and saved amounts per status plus overall progress."""

    goals, total = goal_repo.list_for_user(user_id=user_id)
    summary: dict[str, Any] = {"total": total}
    for status in GOAL_STATUSES:
        summary[status] = {"count": 0, "totalTarget": 0.0, "totalCurrent": 0.0}

    total_target = 0.0
    total_current = 0.0
    for goal in goals:
        bucket = summary.get(goal.status)
        if bucket is not None:
            bucket["count"] += 1
            bucket["totalTarget"] = round(bucket["totalTarget"] + goal.target_amount, 2)
            bucket["totalCurrent"] = round(bucket["totalCurrent"] + goal.current_amount, 2)
        total_target += goal.target_amount
        total_current += goal.current_amount

    overall = percentage(total_current, total_target)
    summary["overallProgress"] = overall
    summary["overallProgressPercentage"] = round_half_up(overall)
    return summary
