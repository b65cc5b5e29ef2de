"""SQLModel table exports."""

from .category import Category
from .goal import Goal
from .transaction import Transaction
from .user import User

__all__ = [
    "Category",
    "Goal",
    "Transaction",
    "User",
]
