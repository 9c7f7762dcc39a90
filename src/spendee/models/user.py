"""User model supporting authentication, roles and display preferences."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import LargeBinary
from sqlmodel import Column, Field, SQLModel


class User(SQLModel, table=True):
    """Application user with credentials and stored preferences."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(default="", max_length=64)
    last_name: str = Field(default="", max_length=64)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    role: str = Field(default="user", nullable=False, max_length=16, index=True)
    currency: str = Field(default="USD", nullable=False, max_length=3)
    date_format: str = Field(default="MM/DD/YYYY", nullable=False, max_length=16)
    photo: Optional[bytes] = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    photo_content_type: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
