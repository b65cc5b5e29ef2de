"""Transaction routes."""

from __future__ import annotations

from flask import request

from ...constants.finance import TRANSACTION_TYPES, ValidationLimits
from ...domain.repositories.transaction import TransactionFilters
from ...extensions import get_services
from ...responses import created, listing, paginated, success
from ...security import current_user, current_user_id
from ...serializers import transaction_to_dict
from ...services import transactions as transaction_service
from ...services.aggregation import PERIODS
from ...validation import query_choice, query_date, query_float, query_int, query_text
from . import bp
from .forms import TransactionForm


def _serialize_rows(rows) -> list[dict]:
    lookup = transaction_service.category_lookup(
        get_services().category_repo, user_id=current_user_id()
    )
    return [transaction_to_dict(tx, lookup.get(tx.category_id)) for tx in rows]


@bp.get("")
def list_transactions():
    args = request.args
    filters = TransactionFilters(
        transaction_type=query_choice(args, "type", TRANSACTION_TYPES),
        category_id=query_int(args, "categoryId", minimum=1),
        start_date=query_date(args, "startDate"),
        end_date=query_date(args, "endDate"),
        min_amount=query_float(args, "minAmount"),
        max_amount=query_float(args, "maxAmount"),
        text=query_text(args, "search"),
    )
    page = query_int(args, "page", default=1, minimum=1)
    limit = query_int(
        args, "limit", default=20, minimum=1, maximum=ValidationLimits.PAGE_LIMIT_MAX
    )
    rows, total = transaction_service.list_transactions(
        get_services().transaction_repo,
        user_id=current_user_id(),
        filters=filters,
        page=page,
        limit=limit,
    )
    return paginated(
        _serialize_rows(rows),
        page=page,
        limit=limit,
        total=total,
        message="Transactions retrieved successfully",
    )


@bp.get("/summary")
def transaction_summary():
    period = query_choice(request.args, "period", PERIODS, default="month")
    data = transaction_service.period_summary(
        get_services().transaction_repo, user_id=current_user_id(), period=period
    )
    return success(data, "Transaction summary retrieved successfully")


@bp.get("/search")
def search_transactions():
    term = query_text(request.args, "q", required=True)
    rows = get_services().transaction_repo.search(term, user_id=current_user_id())
    return listing(_serialize_rows(rows), "Transaction search completed")


@bp.get("/recent")
def recent_transactions():
    limit = query_int(request.args, "limit", default=10, minimum=1, maximum=50)
    rows = get_services().transaction_repo.recent(user_id=current_user_id(), limit=limit)
    return listing(_serialize_rows(rows), "Recent transactions retrieved successfully")


@bp.get("/spending-by-category")
def spending_by_category():
    period = query_choice(request.args, "period", PERIODS, default="month")
    services = get_services()
    data = transaction_service.spending_by_category(
        services.transaction_repo,
        services.category_repo,
        user_id=current_user_id(),
        period=period,
    )
    return listing(data, "Spending by category retrieved successfully")


@bp.get("/<int:transaction_id>")
def get_transaction(transaction_id: int):
    services = get_services()
    user_id = current_user_id()
    transaction = transaction_service.get_transaction(
        services.transaction_repo, transaction_id, user_id=user_id
    )
    category = services.category_repo.get_by_id(transaction.category_id, user_id=user_id)
    return success(
        transaction_to_dict(transaction, category), "Transaction retrieved successfully"
    )


@bp.post("")
def create_transaction():
    form = TransactionForm.from_mapping(request.get_json(silent=True))
    form.validate_or_raise()
    user = current_user()
    services = get_services()
    transaction, category = transaction_service.create_transaction(
        services.transaction_repo,
        services.category_repo,
        user_id=user.id,
        transaction_type=form.transaction_type,
        amount=form.amount,
        description=form.description,
        category_id=form.category_id,
        occurred_at=form.occurred_at,
        currency=form.currency or user.currency,
        notes=form.notes,
    )
    return created(transaction_to_dict(transaction, category), "Transaction created successfully")


@bp.put("/<int:transaction_id>")
def update_transaction(transaction_id: int):
    form = TransactionForm.from_mapping(request.get_json(silent=True), partial=True)
    form.validate_or_raise()
    services = get_services()
    transaction, category = transaction_service.update_transaction(
        services.transaction_repo,
        services.category_repo,
        transaction_id,
        user_id=current_user_id(),
        changes=form.changes(),
    )
    return success(transaction_to_dict(transaction, category), "Transaction updated successfully")


@bp.delete("/<int:transaction_id>")
def delete_transaction(transaction_id: int):
    transaction_service.delete_transaction(
        get_services().transaction_repo, transaction_id, user_id=current_user_id()
    )
    return success(message="Transaction deleted successfully")


@bp.patch("/<int:transaction_id>/restore")
def restore_transaction(transaction_id: int):
    services = get_services()
    user_id = current_user_id()
    transaction = transaction_service.restore_transaction(
        services.transaction_repo, transaction_id, user_id=user_id
    )
    category = services.category_repo.get_by_id(transaction.category_id, user_id=user_id)
    return success(transaction_to_dict(transaction, category), "Transaction restored successfully")
