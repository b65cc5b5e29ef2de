"""SQLModel implementation of User repository."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from sqlmodel import Session, select

from ...models.user import User
from ...timeutils import utcnow


class SQLModelUserRepository:
    """SQLModel-based user repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a non-deleted user by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(User).where(User.id == user_id).where(User.deleted_at.is_(None))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a non-deleted user by email."""
        with self.session_factory() as session:
            obj = session.exec(
                select(User)
                .where(User.email == email.strip().lower())
                .where(User.deleted_at.is_(None))  # type: ignore
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        """Create a new user."""
        with self.session_factory() as session:
            user.email = user.email.strip().lower()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def update(self, user: User) -> User:
        """Update an existing user."""
        with self.session_factory() as session:
            user.updated_at = utcnow()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def touch_last_login(self, user_id: int, when: datetime) -> None:
        """Record a successful login."""
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                user.last_login = when
                session.add(user)
                session.commit()
