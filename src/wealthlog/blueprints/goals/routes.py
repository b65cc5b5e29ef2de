"""Goal routes."""

from __future__ import annotations

from flask import request

from ...constants.finance import GOAL_PRIORITIES, GOAL_STATUSES, ValidationLimits
from ...extensions import get_services
from ...responses import created, listing, paginated, success
from ...security import current_user, current_user_id
from ...serializers import goal_to_dict
from ...services import goals as goal_service
from ...timeutils import utcnow
from ...validation import query_choice, query_int, query_text
from . import bp
from .forms import GoalForm, ProgressForm


def _goals_payload(goals) -> list[dict]:
    now = utcnow()
    return [goal_to_dict(goal, now=now) for goal in goals]


@bp.get("")
def list_goals():
    args = request.args
    status = query_choice(args, "status", (*GOAL_STATUSES, "all"))
    priority = query_choice(args, "priority", GOAL_PRIORITIES)
    category = query_text(args, "category", max_length=ValidationLimits.GOAL_CATEGORY_MAX_LENGTH)
    page = query_int(args, "page", default=1, minimum=1)
    limit = query_int(
        args, "limit", default=20, minimum=1, maximum=ValidationLimits.PAGE_LIMIT_MAX
    )
    goals, total = goal_service.list_goals(
        get_services().goal_repo,
        user_id=current_user_id(),
        status=status,
        priority=priority,
        category=category,
        page=page,
        limit=limit,
    )
    return paginated(
        _goals_payload(goals),
        page=page,
        limit=limit,
        total=total,
        message="Goals retrieved successfully",
    )


@bp.get("/active")
def active_goals():
    goals = goal_service.active_goals(get_services().goal_repo, user_id=current_user_id())
    return listing(_goals_payload(goals), "Active goals retrieved successfully")


@bp.get("/overdue")
def overdue_goals():
    goals = goal_service.overdue_goals(get_services().goal_repo, user_id=current_user_id())
    return listing(_goals_payload(goals), "Overdue goals retrieved successfully")


@bp.get("/summary")
def goal_summary():
    data = goal_service.goal_summary(get_services().goal_repo, user_id=current_user_id())
    return success(data, "Goal summary retrieved successfully")


@bp.get("/search")
def search_goals():
    term = query_text(request.args, "q", required=True)
    goals = goal_service.search_goals(get_services().goal_repo, term, user_id=current_user_id())
    return listing(_goals_payload(goals), "Goal search completed")


@bp.get("/<int:goal_id>")
def get_goal(goal_id: int):
    goal = goal_service.get_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(goal_to_dict(goal), "Goal retrieved successfully")


@bp.post("")
def create_goal():
    form = GoalForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    user = current_user()
    goal = goal_service.create_goal(
        get_services().goal_repo,
        user_id=user.id,
        title=form.title,
        target_amount=form.target_amount,
        current_amount=form.current_amount or 0.0,
        start_date=form.start_date,
        end_date=form.end_date,
        priority=form.priority or "medium",
        category=form.category,
        description=form.description,
        currency=form.currency or user.currency,
    )
    return created(goal_to_dict(goal), "Goal created successfully")


@bp.put("/<int:goal_id>")
def update_goal(goal_id: int):
    form = GoalForm.from_mapping(request.get_json(silent=True), partial=True)
    form.validate_or_raise()
    goal = goal_service.update_goal(
        get_services().goal_repo, goal_id, user_id=current_user_id(), changes=form.changes()
    )
    return success(goal_to_dict(goal), "Goal updated successfully")


@bp.delete("/<int:goal_id>")
def delete_goal(goal_id: int):
    goal_service.delete_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(message="Goal deleted successfully")


@bp.patch("/<int:goal_id>/progress")
def update_progress(goal_id: int):
    form = ProgressForm.for_key(request.get_json(silent=True), "currentAmount")
    form.validate_or_raise()
    goal = goal_service.update_progress(
        get_services().goal_repo, goal_id, form.amount, user_id=current_user_id()
    )
    return success(goal_to_dict(goal), "Goal progress updated successfully")


@bp.patch("/<int:goal_id>/add-progress")
def add_progress(goal_id: int):
    form = ProgressForm.for_key(request.get_json(silent=True), "amount")
    form.validate_or_raise()
    goal = goal_service.add_progress(
        get_services().goal_repo, goal_id, form.amount, user_id=current_user_id()
    )
    return success(goal_to_dict(goal), "Progress added successfully")


@bp.patch("/<int:goal_id>/complete")
def complete_goal(goal_id: int):
    goal = goal_service.complete_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(goal_to_dict(goal), "Goal marked as completed")


@bp.patch("/<int:goal_id>/pause")
def pause_goal(goal_id: int):
    goal = goal_service.pause_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(goal_to_dict(goal), "Goal paused successfully")


@bp.patch("/<int:goal_id>/resume")
def resume_goal(goal_id: int):
    goal = goal_service.resume_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(goal_to_dict(goal), "Goal resumed successfully")


@bp.patch("/<int:goal_id>/restore")
def restore_goal(goal_id: int):
    goal = goal_service.restore_goal(get_services().goal_repo, goal_id, user_id=current_user_id())
    return success(goal_to_dict(goal), "Goal restored successfully")
