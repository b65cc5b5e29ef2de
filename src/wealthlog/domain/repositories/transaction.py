"""Transaction repository protocol."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from ...models.transaction import Transaction


@dataclass(slots=True)
class TransactionFilters:
    """Optional filters applied when listing transactions."""

    transaction_type: Optional[str] = None
    category_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    text: Optional[str] = None


class TransactionRepository(Protocol):
    """Repository for managing transaction entities."""

    def get_by_id(
        self, transaction_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_for_user(
        self,
        *,
        user_id: int,
        filters: Optional[TransactionFilters] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Transaction], int]:
        """Return one page of matching transactions and the total match count."""
        ...

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
        ...

    def search(self, term: str, *, user_id: int, limit: int = 50) -> list[Transaction]:
        """Search descriptions and notes."""
        ...

    def recent(self, *, user_id: int, limit: int = 10) -> list[Transaction]:
        """Most recent transactions first."""
        ...

    def create(self, transaction: Transaction) -> Transaction:
        """Create a new transaction."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Update an existing transaction."""
        ...

    def soft_delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Mark a transaction deleted."""
        ...

    def restore(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Clear the deleted marker of a transaction."""
        ...
