"""Repository protocols the services depend on."""

from .category import CategoryRepository
from .goal import GoalRepository
from .notification import NotificationRepository
from .spending_limit import SpendingLimitRepository
from .transaction import TransactionRepository
from .user import UserRepository

__all__ = [
    "CategoryRepository",
    "GoalRepository",
    "NotificationRepository",
    "SpendingLimitRepository",
    "TransactionRepository",
    "UserRepository",
]
