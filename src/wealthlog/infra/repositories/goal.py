"""SQLModel implementation of Goal repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ...constants.finance import GOAL_ACTIVE
from ...models.goal import Goal
from ...timeutils import utcnow


class SQLModelGoalRepository:
    """SQLModel-based goal repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(
        self, goal_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Goal]:
        """Retrieve a goal by ID."""
        with self.session_factory() as session:
            statement = select(Goal).where(Goal.id == goal_id).where(Goal.user_id == user_id)
            if not include_deleted:
                statement = statement.where(Goal.deleted_at.is_(None))  # type: ignore
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(
        self,
        *,
        user_id: int,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[Goal], int]:
        """Return matching goals (newest first) and the total match count."""
        conditions = [
            Goal.user_id == user_id,
            Goal.deleted_at.is_(None),  # type: ignore
        ]
        if status:
            conditions.append(Goal.status == status)
        if priority:
            conditions.append(Goal.priority == priority)
        if category:
            conditions.append(func.lower(Goal.category) == category.strip().lower())

        with self.session_factory() as session:
            total = session.exec(select(func.count()).select_from(Goal).where(*conditions)).one()
            statement = (
                select(Goal)
                .where(*conditions)
                .order_by(Goal.created_at.desc(), Goal.id.desc())  # type: ignore
                .offset(offset)
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows, int(total)

    def list_overdue(self, now: datetime, *, user_id: int) -> list[Goal]:
        """Active goals whose end date has passed, oldest deadline first."""
        with self.session_factory() as session:
            statement = (
                select(Goal)
                .where(Goal.user_id == user_id)
                .where(Goal.deleted_at.is_(None))  # type: ignore
                .where(Goal.status == GOAL_ACTIVE)
                .where(Goal.end_date.is_not(None))  # type: ignore
                .where(Goal.end_date < now)  # type: ignore
                .order_by(Goal.end_date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def search(self, term: str, *, user_id: int, limit: int = 50) -> list[Goal]:
        """Search titles, descriptions and categories."""
        pattern = f"%{term.strip()}%"
        with self.session_factory() as session:
            statement = (
                select(Goal)
                .where(Goal.user_id == user_id)
                .where(Goal.deleted_at.is_(None))  # type: ignore
                .where(
                    or_(
                        Goal.title.ilike(pattern),  # type: ignore
                        Goal.description.ilike(pattern),  # type: ignore
                        Goal.category.ilike(pattern),  # type: ignore
                    )
                )
                .order_by(Goal.created_at.desc())  # type: ignore
                .limit(limit)
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, goal: Goal) -> Goal:
        """Create a new goal."""
        with self.session_factory() as session:
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def update(self, goal: Goal) -> Goal:
        """Update an existing goal."""
        with self.session_factory() as session:
            goal.updated_at = utcnow()
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def soft_delete(self, goal_id: int, *, user_id: int) -> bool:
        """Mark a goal deleted."""
        with self.session_factory() as session:
            goal = session.exec(
                select(Goal)
                .where(Goal.id == goal_id)
                .where(Goal.user_id == user_id)
                .where(Goal.deleted_at.is_(None))  # type: ignore
            ).first()
            if not goal:
                return False
            goal.deleted_at = utcnow()
            session.add(goal)
            session.commit()
            return True

    def restore(self, goal_id: int, *, user_id: int) -> Optional[Goal]:
        """Clear the deleted marker of a goal."""
        with self.session_factory() as session:
            goal = session.exec(
                select(Goal)
                .where(Goal.id == goal_id)
                .where(Goal.user_id == user_id)
                .where(Goal.deleted_at.is_not(None))  # type: ignore
            ).first()
            if not goal:
                return None
            goal.deleted_at = None
            goal.updated_at = utcnow()
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal
