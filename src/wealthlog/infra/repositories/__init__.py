"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .goal import SQLModelGoalRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelGoalRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]
