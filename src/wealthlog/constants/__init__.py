"""Enumerations and fixed lookup tables."""

from .categories import DEFAULT_CATEGORIES, DefaultCategory
from .finance import (
    CATEGORY_TYPES,
    CURRENCIES,
    GOAL_PRIORITIES,
    GOAL_STATUSES,
    TRANSACTION_TYPES,
    ValidationLimits,
)

__all__ = [
    "CATEGORY_TYPES",
    "CURRENCIES",
    "DEFAULT_CATEGORIES",
    "DefaultCategory",
    "GOAL_PRIORITIES",
    "GOAL_STATUSES",
    "TRANSACTION_TYPES",
    "ValidationLimits",
]
