"""Service module exports."""

from . import (
    auth,
    budgeting,
    categories,
    dashboard,
    goals,
    import_csv,
    mpesa,
    notifications,
    reports,
    spending_limits,
    suggestions,
    transactions,
    users,
)

__all__ = [
    "auth",
    "budgeting",
    "categories",
    "dashboard",
    "goals",
    "import_csv",
    "mpesa",
    "notifications",
    "reports",
    "spending_limits",
    "suggestions",
    "transactions",
    "users",
]
