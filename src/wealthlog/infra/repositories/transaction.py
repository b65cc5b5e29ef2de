"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...domain.repositories.transaction import TransactionFilters
from ...models.transaction import Transaction
from ...timeutils import utcnow


def _newest_first(statement):
    return statement.order_by(
        Transaction.occurred_at.desc(),  # type: ignore
        Transaction.id.desc(),  # type: ignore
    )


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(
        self, transaction_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            )
            if not include_deleted:
                statement = statement.where(Transaction.deleted_at.is_(None))  # type: ignore
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(
        self,
        *,
        user_id: int,
        filters: Optional[TransactionFilters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Transaction], int]:
        """Return one page of matching transactions and the total match count."""
        filters = filters or TransactionFilters()
        conditions = [
            Transaction.user_id == user_id,
            Transaction.deleted_at.is_(None),  # type: ignore
        ]
        if filters.transaction_type:
            conditions.append(Transaction.transaction_type == filters.transaction_type)
        if filters.category_id:
            conditions.append(Transaction.category_id == filters.category_id)
        if filters.start_date:
            conditions.append(Transaction.occurred_at >= filters.start_date)
        if filters.end_date:
            conditions.append(Transaction.occurred_at <= filters.end_date)
        if filters.min_amount is not None:
            conditions.append(Transaction.amount >= filters.min_amount)
        if filters.max_amount is not None:
            conditions.append(Transaction.amount <= filters.max_amount)
        if filters.text:
            pattern = f"%{filters.text.strip()}%"
            conditions.append(
                or_(
                    Transaction.description.ilike(pattern),  # type: ignore
                    Transaction.notes.ilike(pattern),  # type: ignore
                )
            )

        with self.session_factory() as session:
            total = session.exec(
                select(func.count()).select_from(Transaction).where(*conditions)
            ).one()
            statement = (
                _newest_first(select(Transaction).where(*conditions))
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows, int(total)

    def filter_by_date_range(
        self,
        start_date: datetime,
        end_date: Optional[datetime],
        *,
        user_id: int,
        transaction_type: Optional[str] = None,
    ) -> list[Transaction]:
        """Get transactions in the half-open window [start_date, end_date).

        An ``end_date`` of None leaves the window open-ended.
        """
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
                .where(Transaction.occurred_at >= start_date)
            )
            if end_date is not None:
                statement = statement.where(Transaction.occurred_at < end_date)
            if transaction_type:
                statement = statement.where(Transaction.transaction_type == transaction_type)
            rows = list(session.exec(_newest_first(statement)).all())
            session.expunge_all()
            return rows

    def search(self, term: str, *, user_id: int, limit: int = 50) -> list[Transaction]:
        """Search descriptions and notes."""
        pattern = f"%{term.strip()}%"
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
                .where(
                    or_(
                        Transaction.description.ilike(pattern),  # type: ignore
                        Transaction.notes.ilike(pattern),  # type: ignore
                    )
                )
            )
            rows = list(session.exec(_newest_first(statement).limit(limit)).all())
            session.expunge_all()
            return rows

    def recent(self, *, user_id: int, limit: int = 10) -> list[Transaction]:
        """Most recent transactions first."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
            )
            rows = list(session.exec(_newest_first(statement).limit(limit)).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            transaction.updated_at = utcnow()
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    def soft_delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Mark a transaction deleted."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
            ).first()
            if not transaction:
                return False
            transaction.deleted_at = utcnow()
            session.add(transaction)
            session.commit()
            return True

    def restore(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Clear the deleted marker of a transaction."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_not(None))  # type: ignore
            ).first()
            if not transaction:
                return None
            transaction.deleted_at = None
            transaction.updated_at = utcnow()
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction
