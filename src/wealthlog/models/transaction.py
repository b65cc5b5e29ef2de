"""SQLModel definitions for income and expense transactions."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..timeutils import utcnow


class Transaction(SQLModel, table=True):
    """A single dated income or expense record.

    ``amount`` is always positive; the direction lives in ``transaction_type``.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    transaction_type: str = Field(nullable=False, max_length=16, index=True)
    amount: float = Field(nullable=False)
    description: str = Field(default="", max_length=500)
    notes: Optional[str] = Field(default=None, max_length=1000)
    occurred_at: datetime = Field(nullable=False, index=True)
    currency: str = Field(default="ETB", max_length=3, description="ISO-4217 currency code")
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, index=True)
