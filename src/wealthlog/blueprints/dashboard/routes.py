"""Dashboard chart routes."""

from __future__ import annotations

from flask import request

from ...constants.finance import GOAL_STATUSES
from ...extensions import get_services
from ...responses import success
from ...security import current_user_id
from ...services import dashboard
from ...validation import query_bool, query_choice, query_int
from . import bp

_BAR_TYPES = ("both", "income", "expense")


def _month_args() -> dict:
    return {
        "month": query_int(request.args, "month"),
        "year": query_int(request.args, "year"),
    }


@bp.get("/expenses-pie")
def expenses_pie():
    services = get_services()
    data = dashboard.expenses_pie(
        services.transaction_repo,
        services.category_repo,
        user_id=current_user_id(),
        **_month_args(),
    )
    return success(data, "Expenses pie chart data retrieved successfully")


@bp.get("/income-line")
def income_line():
    months = query_int(request.args, "months", default=6)
    data = dashboard.income_line(
        get_services().transaction_repo, user_id=current_user_id(), months=months
    )
    return success(data, "Income line chart data retrieved successfully")


@bp.get("/category-bar")
def category_bar():
    services = get_services()
    data = dashboard.category_bar(
        services.transaction_repo,
        services.category_repo,
        user_id=current_user_id(),
        bar_type=query_choice(request.args, "type", _BAR_TYPES, default="both"),
        include_empty=query_bool(request.args, "includeEmpty"),
        **_month_args(),
    )
    return success(data, "Category bar chart data retrieved successfully")


@bp.get("/goals-progress")
def goals_progress():
    data = dashboard.goals_progress(
        get_services().goal_repo,
        user_id=current_user_id(),
        status=query_choice(request.args, "status", (*GOAL_STATUSES, "all"), default="active"),
        include_completed=query_bool(request.args, "includeCompleted"),
        limit=query_int(request.args, "limit", minimum=1, maximum=50),
    )
    return success(data, "Goals progress data retrieved successfully")


@bp.get("/overview")
def overview():
    services = get_services()
    data = dashboard.overview(
        services.transaction_repo,
        services.category_repo,
        services.goal_repo,
        user_id=current_user_id(),
        months=query_int(request.args, "months", default=6),
        **_month_args(),
    )
    return success(data, "Dashboard overview retrieved successfully")


@bp.get("/stats")
def stats():
    services = get_services()
    data = dashboard.stats(
        services.transaction_repo,
        services.category_repo,
        services.goal_repo,
        user_id=current_user_id(),
    )
    return success(data, "Dashboard statistics retrieved successfully")
