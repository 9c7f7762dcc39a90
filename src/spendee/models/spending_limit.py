"""Spending limit table and its enumerations."""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class LimitPeriod(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class AlertLevel(str, enum.Enum):
    """Highest alert already raised for a limit inside one period window."""

    NONE = "NONE"
    WARNING = "WARNING"
    EXCEEDED = "EXCEEDED"

    @property
    def rank(self) -> int:
        return _ALERT_RANK[self]


_ALERT_RANK = {AlertLevel.NONE: 0, AlertLevel.WARNING: 1, AlertLevel.EXCEEDED: 2}

DEFAULT_THRESHOLD = Decimal("0.80")


class SpendingLimit(SQLModel, table=True):
    """A recurring cap on expenses for one category, or for all spending."""

    __tablename__: ClassVar[str] = "spending_limit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    limit_amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    period: LimitPeriod = Field(default=LimitPeriod.MONTHLY, nullable=False)
    notification_threshold: Decimal = Field(
        default=DEFAULT_THRESHOLD, nullable=False, max_digits=5, decimal_places=4
    )
    current_spent: Decimal = Field(
        default=Decimal("0.00"), nullable=False, max_digits=14, decimal_places=2
    )
    is_active: bool = Field(default=True, nullable=False, index=True)
    alert_level: AlertLevel = Field(default=AlertLevel.NONE, nullable=False)
    alert_period_start: Optional[date] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
