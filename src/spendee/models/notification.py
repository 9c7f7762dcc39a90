"""In-app notifications shown in the header bell."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class NotificationType(str, enum.Enum):
    SPENDING_LIMIT_WARNING = "SPENDING_LIMIT_WARNING"
    SPENDING_LIMIT_EXCEEDED = "SPENDING_LIMIT_EXCEEDED"
    BUDGET_ALERT = "BUDGET_ALERT"
    TRANSACTION_ALERT = "TRANSACTION_ALERT"
    GENERAL = "GENERAL"


class Notification(SQLModel, table=True):
    """A message addressed to one user; read state is the only mutable part."""

    __tablename__: ClassVar[str] = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    notification_type: NotificationType = Field(nullable=False)
    title: str = Field(nullable=False, max_length=128)
    message: str = Field(nullable=False, max_length=512)
    is_read: bool = Field(default=False, nullable=False, index=True)
    related_entity_id: Optional[int] = Field(default=None)
    related_entity_type: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
