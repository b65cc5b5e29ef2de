"""Savings goal table."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..timeutils import utcnow


class Goal(SQLModel, table=True):
    """Savings target with progress tracking.

    Progress, remaining amount, overdue flag and days remaining are derived
    in ``services.goal_metrics`` and never stored.
    """

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    target_amount: float = Field(nullable=False)
    current_amount: float = Field(default=0.0, nullable=False)
    start_date: datetime = Field(default_factory=utcnow, nullable=False)
    end_date: Optional[datetime] = Field(default=None, index=True)
    status: str = Field(default="active", nullable=False, max_length=16, index=True)
    priority: str = Field(default="medium", nullable=False, max_length=8)
    category: Optional[str] = Field(default=None, max_length=50)
    currency: str = Field(default="ETB", max_length=3)
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
    deleted_at: Optional[datetime] = Field(default=None, index=True)
