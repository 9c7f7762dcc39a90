"""SQLModel implementation of Notification repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from ...models.notification import Notification
from ..database import SessionFactory


def _newest_first(statement):
    return statement.order_by(Notification.created_at.desc(), Notification.id.desc())  # type: ignore


class SQLModelNotificationRepository:
    """SQLModel-based notification repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_all(self, *, user_id: int) -> list[Notification]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    _newest_first(select(Notification).where(Notification.user_id == user_id))
                ).all()
            )
            session.expunge_all()
            return rows

    def list_unread(self, *, user_id: int) -> list[Notification]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    _newest_first(
                        select(Notification)
                        .where(Notification.user_id == user_id)
                        .where(Notification.is_read == False)  # noqa: E712
                    )
                ).all()
            )
            session.expunge_all()
            return rows

    def count_unread(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            return int(
                session.exec(
                    select(func.count(Notification.id))
                    .where(Notification.user_id == user_id)
                    .where(Notification.is_read == False)  # noqa: E712
                ).one()
            )

    def create(self, notification: Notification, *, user_id: int) -> Notification:
        with self.session_factory() as session:
            notification.user_id = user_id
            session.add(notification)
            session.commit()
            session.refresh(notification)
            session.expunge(notification)
            return notification

    def mark_read(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        """Mark one notification read; ``None`` when it is missing or foreign."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Notification)
                .where(Notification.id == notification_id)
                .where(Notification.user_id == user_id)
            ).first()
            if obj is None:
                return None
            obj.is_read = True
            session.add(obj)
            session.commit()
            session.refresh(obj)
            session.expunge(obj)
            return obj

    def mark_all_read(self, *, user_id: int) -> int:
        """Mark every unread notification read; returns how many changed."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Notification)
                    .where(Notification.user_id == user_id)
                    .where(Notification.is_read == False)  # noqa: E712
                ).all()
            )
            for row in rows:
                row.is_read = True
                session.add(row)
            session.commit()
            return len(rows)
