"""SQLModel definitions for income and expense transactions."""

from __future__ import annotations

import enum
import datetime as dt
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .category import Category


class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Transaction(SQLModel, table=True):
    """A single transaction, hand-entered or imported from a statement."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    description: str = Field(default="", max_length=255)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    date: dt.date = Field(nullable=False, index=True)
    transaction_type: TransactionType = Field(nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        nullable=False,
    )

    category: "Category | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Category", back_populates="transactions"),
    )

    @property
    def is_expense(self) -> bool:
        return self.transaction_type == TransactionType.EXPENSE
