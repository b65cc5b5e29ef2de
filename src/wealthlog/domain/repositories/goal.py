"""Goal repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.goal import Goal


class GoalRepository(Protocol):
    """Repository for managing savings goals."""

    def get_by_id(
        self, goal_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Goal]:
        """Retrieve a goal by ID."""
        ...

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
        """Return matching goals and the total match count."""
        ...

    def list_overdue(self, now: datetime, *, user_id: int) -> list[Goal]:
        """Active goals whose end date has passed."""
        ...

    def search(self, term: str, *, user_id: int, limit: int = 50) -> list[Goal]:
        """Search titles, descriptions and categories."""
        ...

    def create(self, goal: Goal) -> Goal:
        """Create a new goal."""
        ...

    def update(self, goal: Goal) -> Goal:
        """Update an existing goal."""
        ...

    def soft_delete(self, goal_id: int, *, user_id: int) -> bool:
        """Mark a goal deleted."""
        ...

    def restore(self, goal_id: int, *, user_id: int) -> Optional[Goal]:
        """Clear the deleted marker of a goal."""
        ...
