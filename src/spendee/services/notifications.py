"""Notification creation and read-state management."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional

from ..errors import NotFoundError
from ..logging_config import get_logger
from ..models.notification import Notification, NotificationType
from ..models.spending_limit import AlertLevel

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

SPENDING_LIMIT_ENTITY = "SPENDING_LIMIT"


def format_amount(amount: Decimal) -> str:
    """Render money as ``$1234.50`` (no grouping, two decimals)."""

    return "$" + str(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def build_limit_notification(
    level: AlertLevel,
    *,
    category_name: Optional[str],
    limit_amount: Decimal,
    current_spent: Decimal,
    limit_id: Optional[int] = None,
) -> Notification:
    """Build (unsaved) the warning or exceeded notification for a limit."""

    subject = category_name or "total spending"
    amounts = f"Limit: {format_amount(limit_amount)}, Current spending: {format_amount(current_spent)}"
    if level is AlertLevel.EXCEEDED:
        title = "Spending Limit Exceeded!"
        message = f"You've exceeded your spending limit for {subject}. {amounts}"
        notification_type = NotificationType.SPENDING_LIMIT_EXCEEDED
    elif level is AlertLevel.WARNING:
        title = "Spending Limit Warning"
        message = f"You're approaching your spending limit for {subject}. {amounts}"
        notification_type = NotificationType.SPENDING_LIMIT_WARNING
    else:
        raise ValueError("No notification exists for alert level NONE")

    return Notification(
        notification_type=notification_type,
        title=title,
        message=message,
        related_entity_id=limit_id,
        related_entity_type=SPENDING_LIMIT_ENTITY,
    )


def notify_limit(
    ctx: AppContext,
    *,
    user_id: int,
    level: AlertLevel,
    category_name: Optional[str],
    limit_amount: Decimal,
    current_spent: Decimal,
    limit_id: Optional[int],
) -> Notification:
    notification = build_limit_notification(
        level,
        category_name=category_name,
        limit_amount=limit_amount,
        current_spent=current_spent,
        limit_id=limit_id,
    )
    saved = ctx.notification_repo.create(notification, user_id=user_id)
    logger.info(
        "Spending limit notification emitted",
        extra={"user_id": user_id, "limit_id": limit_id, "level": level.value},
    )
    return saved


def list_notifications(ctx: AppContext, *, user_id: int) -> list[Notification]:
    return ctx.notification_repo.list_all(user_id=user_id)


def list_unread(ctx: AppContext, *, user_id: int) -> list[Notification]:
    return ctx.notification_repo.list_unread(user_id=user_id)


def unread_count(ctx: AppContext, *, user_id: int) -> int:
    return ctx.notification_repo.count_unread(user_id=user_id)


def mark_read(ctx: AppContext, *, user_id: int, notification_id: int) -> Notification:
    notification = ctx.notification_repo.mark_read(notification_id, user_id=user_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def mark_all_read(ctx: AppContext, *, user_id: int) -> int:
    changed = ctx.notification_repo.mark_all_read(user_id=user_id)
    logger.info("Notifications marked read", extra={"user_id": user_id, "count": changed})
    return changed
