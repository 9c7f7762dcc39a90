"""SQLModel table exports."""

from .category import Category
from .goal import Goal
from .notification import Notification, NotificationType
from .spending_limit import AlertLevel, LimitPeriod, SpendingLimit
from .transaction import Transaction, TransactionType
from .user import User

__all__ = [
    "AlertLevel",
    "Category",
    "Goal",
    "LimitPeriod",
    "Notification",
    "NotificationType",
    "SpendingLimit",
    "Transaction",
    "TransactionType",
    "User",
]
