"""Savings goal table."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Goal(SQLModel, table=True):
    """A savings target with manual progress updates."""

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    target_amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    current_amount: Decimal = Field(
        default=Decimal("0.00"), nullable=False, max_digits=14, decimal_places=2
    )
    start_date: date = Field(default_factory=date.today, nullable=False)
    deadline: Optional[date] = Field(default=None)
    icon: str = Field(default="piggy-bank", max_length=64)
    completed: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
