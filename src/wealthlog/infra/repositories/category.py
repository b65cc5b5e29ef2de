"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...domain.repositories.category import CategoryUsage
from ...models.category import Category
from ...models.transaction import Transaction
from ...timeutils import utcnow


def _visible_to(user_id: int):
    """Rows owned by ``user_id`` plus the global defaults."""
    return or_(Category.user_id == user_id, Category.user_id.is_(None))  # type: ignore


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category the user owns or a default category."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category)
                .where(Category.id == category_id)
                .where(_visible_to(user_id))
                .where(Category.deleted_at.is_(None))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(
        self,
        *,
        user_id: int,
        category_type: Optional[str] = None,
        include_inactive: bool = False,
    ) -> list[Category]:
        """List the user's categories together with the defaults."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(_visible_to(user_id))
                .where(Category.deleted_at.is_(None))  # type: ignore
            )
            if category_type:
                statement = statement.where(Category.category_type == category_type)
            if not include_inactive:
                statement = statement.where(Category.is_active.is_(True))  # type: ignore
            statement = statement.order_by(Category.category_type, Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_defaults(self) -> list[Category]:
        """List the system default categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id.is_(None))  # type: ignore
                .where(Category.deleted_at.is_(None))  # type: ignore
                .order_by(Category.category_type, Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def find_duplicate(
        self, name: str, category_type: str, *, user_id: Optional[int]
    ) -> Optional[Category]:
        """Find a live category with the same name, type and owner (case-insensitive)."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(func.lower(Category.name) == name.strip().lower())
                .where(Category.category_type == category_type)
                .where(Category.deleted_at.is_(None))  # type: ignore
            )
            if user_id is None:
                statement = statement.where(Category.user_id.is_(None))  # type: ignore
            else:
                statement = statement.where(Category.user_id == user_id)
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def search(
        self, term: str, *, user_id: int, category_type: Optional[str] = None
    ) -> list[Category]:
        """Search visible categories by name or description."""
        pattern = f"%{term.strip()}%"
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(_visible_to(user_id))
                .where(Category.deleted_at.is_(None))  # type: ignore
                .where(Category.is_active.is_(True))  # type: ignore
                .where(
                    or_(
                        Category.name.ilike(pattern),  # type: ignore
                        Category.description.ilike(pattern),  # type: ignore
                    )
                )
            )
            if category_type:
                statement = statement.where(Category.category_type == category_type)
            statement = statement.order_by(Category.name)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category: Category) -> Category:
        """Update an existing category."""
        with self.session_factory() as session:
            category.updated_at = utcnow()
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def soft_delete(self, category_id: int, *, user_id: int) -> bool:
        """Mark a user category deleted. Defaults are never touched here."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category)
                .where(Category.id == category_id)
                .where(Category.user_id == user_id)
                .where(Category.deleted_at.is_(None))  # type: ignore
            ).first()
            if not category:
                return False
            category.deleted_at = utcnow()
            category.is_active = False
            session.add(category)
            session.commit()
            return True

    def count_transactions(self, category_id: int, *, user_id: int) -> int:
        """Count live transactions filed under the category."""
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Transaction)
                .where(Transaction.category_id == category_id)
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
            )
            return int(session.exec(statement).one())

    def usage_stats(self, *, user_id: int) -> list[CategoryUsage]:
        """Per-category transaction counts and totals for the user."""
        with self.session_factory() as session:
            statement = (
                select(
                    Transaction.category_id,
                    func.count(Transaction.id),  # type: ignore
                    func.coalesce(func.sum(Transaction.amount), 0.0),
                )
                .where(Transaction.user_id == user_id)
                .where(Transaction.deleted_at.is_(None))  # type: ignore
                .group_by(Transaction.category_id)
            )
            return [
                CategoryUsage(
                    category_id=category_id,
                    transaction_count=int(count),
                    total_amount=float(total),
                )
                for category_id, count, total in session.exec(statement).all()
            ]
