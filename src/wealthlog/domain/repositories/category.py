"""Category repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...models.category import Category


@dataclass(slots=True)
class CategoryUsage:
    """Transaction count and total for a single category."""

    category_id: int
    transaction_count: int
    total_amount: float


class CategoryRepository(Protocol):
    """Repository for categories owned by a user plus the global defaults."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category the user owns or a default category."""
        ...

    def list_for_user(
        self,
        *,
        user_id: int,
        category_type: Optional[str] = None,
        include_inactive: bool = False,
    ) -> list[Category]:
        """List the user's categories together with the defaults."""
        ...

    def list_defaults(self) -> list[Category]:
        """List the system default categories."""
        ...

    def find_duplicate(
        self, name: str, category_type: str, *, user_id: Optional[int]
    ) -> Optional[Category]:
        """Find a live category with the same name, type and owner."""
        ...

    def search(
        self, term: str, *, user_id: int, category_type: Optional[str] = None
    ) -> list[Category]:
        """Search visible categories by name or description."""
        ...

    def create(self, category: Category) -> Category:
        """Create a new category."""
        ...

    def update(self, category: Category) -> Category:
        """Update an existing category."""
        ...

    def soft_delete(self, category_id: int, *, user_id: int) -> bool:
        """Mark a user category deleted."""
        ...

    def count_transactions(self, category_id: int, *, user_id: int) -> int:
        """Count live transactions filed under the category."""
        ...

    def usage_stats(self, *, user_id: int) -> list[CategoryUsage]:
        """Per-category transaction counts and totals for the user."""
        ...
