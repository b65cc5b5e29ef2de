"""
System default categories, shared read-only by every user.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DefaultCategory:
    name: str
    category_type: str
    color: str
    icon: str


DEFAULT_CATEGORIES: tuple[DefaultCategory, ...] = (
    # Income
    DefaultCategory("Salary", "income", "#4CAF50", "briefcase"),
    DefaultCategory("Freelance", "income", "#2196F3", "laptop"),
    DefaultCategory("Business", "income", "#FF9800", "store"),
    DefaultCategory("Investment", "income", "#9C27B0", "trending-up"),
    DefaultCategory("Other Income", "income", "#607D8B", "plus-circle"),
    # Expenses
    DefaultCategory("Food & Dining", "expense", "#F44336", "utensils"),
    DefaultCategory("Transportation", "expense", "#3F51B5", "car"),
    DefaultCategory("Shopping", "expense", "#E91E63", "shopping-bag"),
    DefaultCategory("Entertainment", "expense", "#FF5722", "film"),
    DefaultCategory("Bills & Utilities", "expense", "#795548", "file-text"),
    DefaultCategory("Healthcare", "expense", "#009688", "heart"),
    DefaultCategory("Education", "expense", "#673AB7", "book"),
    DefaultCategory("Travel", "expense", "#00BCD4", "map-pin"),
    DefaultCategory("Other Expenses", "expense", "#9E9E9E", "minus-circle"),
)

INCOME_CATEGORIES = [c.name for c in DEFAULT_CATEGORIES if c.category_type == "income"]
EXPENSE_CATEGORIES = [c.name for c in DEFAULT_CATEGORIES if c.category_type == "expense"]
