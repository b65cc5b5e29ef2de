"""Transaction persistence rules, listings and period summaries."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..domain.repositories.category import CategoryRepository
from ..domain.repositories.transaction import TransactionFilters, TransactionRepository
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.category import Category
from ..models.transaction import Transaction
from .aggregation import fold_transactions, period_window

logger = get_logger(__name__)

_MUTABLE_FIELDS = (
    "transaction_type",
    "amount",
    "description",
    "notes",
    "category_id",
    "occurred_at",
    "currency",
)


def category_lookup(category_repo: CategoryRepository, *, user_id: int) -> dict[int, Category]:
    """Every category visible to the user, active or not, keyed by id."""

    return {
        c.id: c
        for c in category_repo.list_for_user(user_id=user_id, include_inactive=True)
        if c.id is not None
    }


def _checked_category(
    category_repo: CategoryRepository,
    category_id: int,
    transaction_type: str,
    *,
    user_id: int,
) -> Category:
    """Resolve the category and reject a type mismatch before anything is written."""

    category = category_repo.get_by_id(category_id, user_id=user_id)
    if category is None:
        raise NotFoundError("Category not found")
    if not category.is_active:
        raise ValidationError.for_field("categoryId", "Category is inactive")
    if category.category_type != transaction_type:
        raise ValidationError.for_field(
            "type", f"Transaction type must match category type ({category.category_type})"
        )
    return category


def get_transaction(
    transaction_repo: TransactionRepository, transaction_id: int, *, user_id: int
) -> Transaction:
    transaction = transaction_repo.get_by_id(transaction_id, user_id=user_id)
    if transaction is None:
        raise NotFoundError("Transaction not found")
    return transaction


def create_transaction(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    transaction_type: str,
    amount: float,
    description: str,
    category_id: int,
    occurred_at: datetime,
    currency: str,
    notes: Optional[str] = None,
) -> tuple[Transaction, Category]:
    category = _checked_category(category_repo, category_id, transaction_type, user_id=user_id)
    transaction = transaction_repo.create(
        Transaction(
            user_id=user_id,
            category_id=category_id,
            transaction_type=transaction_type,
            amount=round(amount, 2),
            description=description,
            notes=notes,
            occurred_at=occurred_at,
            currency=currency,
        )
    )
    logger.info(
        "Transaction created",
        extra={
            "user_id": user_id,
            "transaction_id": transaction.id,
            "type": transaction_type,
            "amount": transaction.amount,
        },
    )
    return transaction, category


def update_transaction(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    transaction_id: int,
    *,
    user_id: int,
    changes: dict[str, Any],
) -> tuple[Transaction, Optional[Category]]:
    """Apply partial changes; the merged type and category must still agree."""

    transaction = get_transaction(transaction_repo, transaction_id, user_id=user_id)
    merged_type = changes.get("transaction_type", transaction.transaction_type)
    merged_category = changes.get("category_id", transaction.category_id)

    category: Optional[Category]
    if "transaction_type" in changes or "category_id" in changes:
        category = _checked_category(
            category_repo, merged_category, merged_type, user_id=user_id
        )
    else:
        category = category_repo.get_by_id(transaction.category_id, user_id=user_id)

    for key in _MUTABLE_FIELDS:
        if key in changes:
            value = changes[key]
            setattr(transaction, key, round(value, 2) if key == "amount" else value)

    transaction = transaction_repo.update(transaction)
    logger.info(
        "Transaction updated",
        extra={"user_id": user_id, "transaction_id": transaction_id, "fields": sorted(changes)},
    )
    return transaction, category


def delete_transaction(
    transaction_repo: TransactionRepository, transaction_id: int, *, user_id: int
) -> None:
    if not transaction_repo.soft_delete(transaction_id, user_id=user_id):
        raise NotFoundError("Transaction not found")
    logger.info("Transaction deleted", extra={"user_id": user_id, "transaction_id": transaction_id})


def restore_transaction(
    transaction_repo: TransactionRepository, transaction_id: int, *, user_id: int
) -> Transaction:
    transaction = transaction_repo.restore(transaction_id, user_id=user_id)
    if transaction is None:
        raise NotFoundError("Deleted transaction not found")
    logger.info("Transaction restored", extra={"user_id": user_id, "transaction_id": transaction_id})
    return transaction


def list_transactions(
    transaction_repo: TransactionRepository,
    *,
    user_id: int,
    filters: Optional[TransactionFilters] = None,
    page: int = 1,
    limit: int = 20,
) -> tuple[list[Transaction], int]:
    filters = filters or TransactionFilters()
    if (
        filters.start_date is not None
        and filters.end_date is not None
        and filters.start_date > filters.end_date
    ):
        raise ValidationError.for_field("endDate", "End date must be after start date")
    if (
        filters.min_amount is not None
        and filters.max_amount is not None
        and filters.min_amount > filters.max_amount
    ):
        raise ValidationError.for_field(
            "maxAmount", "Maximum amount must be greater than minimum amount"
        )
    return transaction_repo.list_for_user(
        user_id=user_id, filters=filters, page=page, limit=limit
    )


def period_summary(
    transaction_repo: TransactionRepository,
    *,
    user_id: int,
    period: str = "month",
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Per-type total/count/average and net income for week, month or year to date."""

    window = period_window(period, now=now)
    rows = transaction_repo.filter_by_date_range(window.start, window.end, user_id=user_id)
    fold = fold_transactions(rows)
    return {
        "period": period,
        "startDate": window.start,
        "income": {
            "total": fold.income.total,
            "count": fold.income.count,
            "avgAmount": round(fold.income.average, 2),
        },
        "expense": {
            "total": fold.expense.total,
            "count": fold.expense.count,
            "avgAmount": round(fold.expense.average, 2),
        },
        "netIncome": fold.net_income,
    }


def spending_by_category(
    transaction_repo: TransactionRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    period: str = "month",
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Expense totals grouped by category, largest first."""

    window = period_window(period, now=now)
    rows = transaction_repo.filter_by_date_range(
        window.start, window.end, user_id=user_id, transaction_type="expense"
    )
    lookup = category_lookup(category_repo, user_id=user_id)
    fold = fold_transactions(rows, {cid: c.name for cid, c in lookup.items()})
    return [
        {
            "categoryId": group.category_id,
            "categoryName": group.name,
            "total": group.total,
            "count": group.count,
            "avgAmount": round(group.average, 2),
        }
        for group in fold.categories
    ]
