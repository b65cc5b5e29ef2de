"""Monthly summary routes."""

from __future__ import annotations

from flask import request

from ...extensions import get_services
from ...responses import success
from ...security import current_user_id
from ...services.summary import monthly_summary
from ...validation import query_int
from . import bp


@bp.get("/monthly")
def monthly():
    month = query_int(request.args, "month")
    year = query_int(request.args, "year")
    services = get_services()
    data = monthly_summary(
        services.transaction_repo,
        services.category_repo,
        services.goal_repo,
        user_id=current_user_id(),
        month=month,
        year=year,
    )
    return success(data, "Monthly summary retrieved successfully")
