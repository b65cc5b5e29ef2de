"""Enumerations for currencies, transaction types and goal states."""

from __future__ import annotations

CURRENCIES = ("ETB", "USD", "EUR", "GBP")

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)
CATEGORY_TYPES = TRANSACTION_TYPES

GOAL_ACTIVE = "active"
GOAL_COMPLETED = "completed"
GOAL_PAUSED = "paused"
GOAL_CANCELLED = "cancelled"
GOAL_STATUSES = (GOAL_ACTIVE, GOAL_COMPLETED, GOAL_PAUSED, GOAL_CANCELLED)

GOAL_PRIORITIES = ("low", "medium", "high")


class ValidationLimits:
    """Field bounds enforced by the request forms."""

    PASSWORD_MIN_LENGTH = 8
    NAME_MIN_LENGTH = 2
    NAME_MAX_LENGTH = 50
    DESCRIPTION_MAX_LENGTH = 500
    NOTES_MAX_LENGTH = 1000
    GOAL_TITLE_MAX_LENGTH = 100
    GOAL_CATEGORY_MAX_LENGTH = 50
    AMOUNT_MIN = 0.01
    AMOUNT_MAX = 999_999_999.99
    PAGE_LIMIT_MAX = 100
