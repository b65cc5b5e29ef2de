"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository, CategoryUsage
from .goal import GoalRepository
from .transaction import TransactionFilters, TransactionRepository
from .user import UserRepository

__all__ = [
    "CategoryRepository",
    "CategoryUsage",
    "GoalRepository",
    "TransactionFilters",
    "TransactionRepository",
    "UserRepository",
]
