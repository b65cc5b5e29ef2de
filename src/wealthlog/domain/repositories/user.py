"""User repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Repository for managing user accounts."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a non-deleted user by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a non-deleted user by (case-insensitive) email."""
        ...

    def create(self, user: User) -> User:
        """Create a new user."""
        ...

    def update(self, user: User) -> User:
        """Update an existing user."""
        ...

    def touch_last_login(self, user_id: int, when: datetime) -> None:
        """Record a successful login."""
        ...
