"""Goal form validation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ...constants.finance import CURRENCIES, GOAL_PRIORITIES, GOAL_STATUSES, ValidationLimits
from ...validation import FormBase


@dataclass
class GoalForm(FormBase):
    """Create/update payload for a savings goal.

    Status is only accepted on update; new goals always start active.
    """

    fields = (
        "title",
        "description",
        "targetAmount",
        "currentAmount",
        "startDate",
        "endDate",
        "priority",
        "category",
        "status",
        "currency",
    )

    title: str = ""
    description: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    currency: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()

        if self.should_check("title"):
            self.title = self._required_text(
                "title",
                "Goal title",
                min_length=2,
                max_length=ValidationLimits.GOAL_TITLE_MAX_LENGTH,
            )

        if self.provided("description"):
            self.description = self._optional_text(
                "description", "Description", ValidationLimits.DESCRIPTION_MAX_LENGTH
            )

        if self.should_check("targetAmount"):
            self.target_amount = self._number("targetAmount", "Target amount")
            if self.target_amount is not None:
                if self.target_amount <= 0:
                    self._add_error("targetAmount", "Target amount must be greater than 0")
                elif self.target_amount > ValidationLimits.AMOUNT_MAX:
                    self._add_error("targetAmount", "Target amount cannot exceed 999,999,999.99")

        if self.provided("currentAmount"):
            self.current_amount = self._number("currentAmount", "Current amount")
            if self.current_amount is not None and self.current_amount < 0:
                self._add_error("currentAmount", "Current amount cannot be negative")

        if (
            self.target_amount is not None
            and self.current_amount is not None
            and "targetAmount" not in self.errors
            and "currentAmount" not in self.errors
            and self.current_amount > self.target_amount
        ):
            self._add_error("currentAmount", "Current amount cannot exceed target amount")

        if self.provided("startDate"):
            self.start_date = self._date("startDate", "Start date", required=False)
        if self.provided("endDate"):
            self.end_date = self._date("endDate", "End date", required=False)
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            self._add_error("endDate", "End date must be after start date")

        if self.provided("priority"):
            self.priority = self._choice("priority", "Priority", GOAL_PRIORITIES)

        if self.provided("category"):
            self.category = self._optional_text(
                "category", "Category", ValidationLimits.GOAL_CATEGORY_MAX_LENGTH
            )

        if self.provided("status"):
            if self.partial:
                self.status = self._choice("status", "Status", GOAL_STATUSES)
            else:
                self._add_error("status", "Status cannot be set when creating a goal")

        if self.provided("currency"):
            self.currency = self._choice("currency", "Currency", CURRENCIES)

        return not self.errors

    def changes(self) -> dict[str, Any]:
        """Model-field changes for a partial update."""

        mapping = {
            "title": ("title", self.title),
            "description": ("description", self.description),
            "targetAmount": ("target_amount", self.target_amount),
            "currentAmount": ("current_amount", self.current_amount),
            "startDate": ("start_date", self.start_date),
            "endDate": ("end_date", self.end_date),
            "priority": ("priority", self.priority),
            "category": ("category", self.category),
            "status": ("status", self.status),
            "currency": ("currency", self.currency),
        }
        changes = {name: value for key, (name, value) in mapping.items() if self.provided(key)}
        if changes.get("start_date", False) is None:
            changes.pop("start_date")
        return changes


@dataclass
class ProgressForm(FormBase):
    """Amount payload for the progress endpoints."""

    fields = ("currentAmount", "amount")

    key: str = "currentAmount"
    amount: Optional[float] = None

    @classmethod
    def for_key(cls, data, key: str) -> "ProgressForm":
        form = cls.from_mapping(data)
        form.key = key
        return form

    def validate(self) -> bool:
        self.errors.clear()
        label = "Current amount" if self.key == "currentAmount" else "Amount"
        self.amount = self._number(self.key, label)
        if self.amount is not None and self.amount > ValidationLimits.AMOUNT_MAX:
            self._add_error(self.key, f"{label} cannot exceed 999,999,999.99")
        return not self.errors
