"""SQLModel repository implementations."""

from .category import SQLModelCategoryRepository
from .goal import SQLModelGoalRepository
from .notification import SQLModelNotificationRepository
from .spending_limit import SQLModelSpendingLimitRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelGoalRepository",
    "SQLModelNotificationRepository",
    "SQLModelSpendingLimitRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]
