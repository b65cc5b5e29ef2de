"""Transaction form validation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ...constants.finance import CURRENCIES, TRANSACTION_TYPES, ValidationLimits
from ...timeutils import shift_years, utcnow
from ...validation import FormBase, decimal_places


@dataclass
class TransactionForm(FormBase):
    """Create/update payload for a single income or expense entry."""

    fields = ("type", "amount", "description", "notes", "date", "currency", "categoryId")

    transaction_type: Optional[str] = None
    amount: Optional[float] = None
    description: str = ""
    notes: Optional[str] = None
    occurred_at: Optional[datetime] = None
    currency: Optional[str] = None
    category_id: Optional[int] = None

    def validate(self, now: Optional[datetime] = None) -> bool:
        self.errors.clear()
        now = now or utcnow()

        if self.should_check("type"):
            self.transaction_type = self._choice("type", "Transaction type", TRANSACTION_TYPES)

        if self.should_check("amount"):
            self.amount = self._number("amount", "Amount")
            if self.amount is not None:
                if self.amount < ValidationLimits.AMOUNT_MIN:
                    self._add_error("amount", "Amount must be greater than 0")
                elif self.amount > ValidationLimits.AMOUNT_MAX:
                    self._add_error("amount", "Amount cannot exceed 999,999,999.99")
                elif decimal_places(self.amount) > 2:
                    self._add_error("amount", "Amount can have at most 2 decimal places")

        if self.should_check("description"):
            self.description = self._required_text(
                "description",
                "Description",
                max_length=ValidationLimits.DESCRIPTION_MAX_LENGTH,
            )

        if self.provided("notes"):
            self.notes = self._optional_text("notes", "Notes", ValidationLimits.NOTES_MAX_LENGTH)

        if self.should_check("date"):
            self.occurred_at = self._date("date", "Date")
            if self.occurred_at is not None and not (
                shift_years(now, -1) <= self.occurred_at <= shift_years(now, 1)
            ):
                self._add_error("date", "Date must be within one year of today")

        if self.provided("currency"):
            self.currency = self._choice("currency", "Currency", CURRENCIES)

        if self.should_check("categoryId"):
            self.category_id = self._category_id()

        return not self.errors

    def _category_id(self) -> Optional[int]:
        raw = self.raw_data.get("categoryId")
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            self._add_error("categoryId", "Category is required")
            return None
        if isinstance(raw, bool):
            self._add_error("categoryId", "Category ID must be a positive integer")
            return None
        try:
            value = int(raw)
        except (TypeError, ValueError):
            self._add_error("categoryId", "Category ID must be a positive integer")
            return None
        if value < 1:
            self._add_error("categoryId", "Category ID must be a positive integer")
            return None
        return value

    def changes(self) -> dict[str, Any]:
        """Model-field changes for a partial update."""

        mapping = {
            "type": ("transaction_type", self.transaction_type),
            "amount": ("amount", self.amount),
            "description": ("description", self.description),
            "notes": ("notes", self.notes),
            "date": ("occurred_at", self.occurred_at),
            "currency": ("currency", self.currency),
            "categoryId": ("category_id", self.category_id),
        }
        return {name: value for key, (name, value) in mapping.items() if self.provided(key)}
