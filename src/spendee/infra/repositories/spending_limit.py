"""SQLModel implementation of SpendingLimit repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import select

from ...models.spending_limit import SpendingLimit
from ..database import SessionFactory


class SQLModelSpendingLimitRepository:
    """SQLModel-based spending limit repository; reads only return active limits."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, limit_id: int, *, user_id: int) -> Optional[SpendingLimit]:
        """Retrieve an active limit owned by the user."""
        with self.session_factory() as session:
            obj = session.exec(
                select(SpendingLimit)
                .where(SpendingLimit.id == limit_id)
                .where(SpendingLimit.user_id == user_id)
                .where(SpendingLimit.is_active == True)  # noqa: E712
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def find_active(self, category_id: Optional[int], *, user_id: int) -> Optional[SpendingLimit]:
        """Return the active limit for a category, or the global one when ``None``."""
        with self.session_factory() as session:
            statement = (
                select(SpendingLimit)
                .where(SpendingLimit.user_id == user_id)
                .where(SpendingLimit.is_active == True)  # noqa: E712
            )
            if category_id is None:
                statement = statement.where(SpendingLimit.category_id.is_(None))  # type: ignore[union-attr]
            else:
                statement = statement.where(SpendingLimit.category_id == category_id)
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_active(self, *, user_id: int) -> list[SpendingLimit]:
        """List the user's active limits, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(SpendingLimit)
                .where(SpendingLimit.user_id == user_id)
                .where(SpendingLimit.is_active == True)  # noqa: E712
                .order_by(SpendingLimit.created_at, SpendingLimit.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_owner_ids(self) -> list[int]:
        """Return the ids of users owning at least one active limit."""
        with self.session_factory() as session:
            return list(
                session.exec(
                    select(SpendingLimit.user_id)
                    .where(SpendingLimit.is_active == True)  # noqa: E712
                    .distinct()
                ).all()
            )

    def create(self, limit: SpendingLimit, *, user_id: int) -> SpendingLimit:
        """Create a new limit."""
        with self.session_factory() as session:
            limit.user_id = user_id
            session.add(limit)
            session.commit()
            session.refresh(limit)
            session.expunge(limit)
            return limit

    def update(self, limit: SpendingLimit, *, user_id: int) -> SpendingLimit:
        """Persist changes to an existing limit and stamp ``updated_at``."""
        with self.session_factory() as session:
            limit.user_id = user_id
            limit.updated_at = datetime.now(timezone.utc)
            merged = session.merge(limit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def deactivate(self, limit_id: int, *, user_id: int) -> bool:
        """Soft-delete a limit; returns False when nothing matched."""
        with self.session_factory() as session:
            limit = session.exec(
                select(SpendingLimit)
                .where(SpendingLimit.id == limit_id)
                .where(SpendingLimit.user_id == user_id)
                .where(SpendingLimit.is_active == True)  # noqa: E712
            ).first()
            if limit is None:
                return False
            limit.is_active = False
            limit.updated_at = datetime.now(timezone.utc)
            session.add(limit)
            session.commit()
            return True
