"""Notification repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.notification import Notification


class NotificationRepository(Protocol):
    """Repository for user notifications."""

    def list_all(self, *, user_id: int) -> list[Notification]:
        ...

    def list_unread(self, *, user_id: int) -> list[Notification]:
        ...

    def count_unread(self, *, user_id: int) -> int:
        ...

    def create(self, notification: Notification, *, user_id: int) -> Notification:
        ...

    def mark_read(self, notification_id: int, *, user_id: int) -> Optional[Notification]:
        ...

    def mark_all_read(self, *, user_id: int) -> int:
        ...
