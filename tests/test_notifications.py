"""Tests for limit notifications and their read state."""

from __future__ import annotations

from decimal import Decimal

import pytest

from spendee.errors import NotFoundError
from spendee.models import AlertLevel, NotificationType
from spendee.services import notifications


def test_format_amount_has_two_decimals_and_no_grouping():
    assert notifications.format_amount(Decimal("1234.5")) == "$1234.50"
    assert notifications.format_amount(Decimal("0.005")) == "$0.01"


def test_build_limit_notification_texts():
    warning = notifications.build_limit_notification(
        AlertLevel.WARNING,
        category_name="Food",
        limit_amount=Decimal("500"),
        current_spent=Decimal("450"),
        limit_id=7,
    )
    assert warning.title == "Spending Limit Warning"
    assert warning.notification_type is NotificationType.SPENDING_LIMIT_WARNING
    assert warning.related_entity_id == 7

    exceeded = notifications.build_limit_notification(
        AlertLevel.EXCEEDED,
        category_name=None,
        limit_amount=Decimal("100"),
        current_spent=Decimal("120"),
    )
    assert exceeded.message == (
        "You've exceeded your spending limit for total spending. Limit: $100.00, Current spending: $120.00"
    )


def test_build_limit_notification_rejects_none_level():
    with pytest.raises(ValueError):
        notifications.build_limit_notification(
            AlertLevel.NONE, category_name=None, limit_amount=Decimal("1"), current_spent=Decimal("0")
        )

def _notify(ctx, user_id, level=AlertLevel.WARNING, limit_id=None):
    return notifications.notify_limit(
        ctx,
        user_id=user_id,
        level=level,
        category_name="Food",
        limit_amount=Decimal("500"),
        current_spent=Decimal("450"),
        limit_id=limit_id,
    )


def test_notify_limit_persists_unread_notification(ctx, user):
    saved = _notify(ctx, user.id, limit_id=3)

    assert saved.id is not None
    assert saved.user_id == user.id
    assert saved.is_read is False
    assert saved.related_entity_type == notifications.SPENDING_LIMIT_ENTITY


def test_unread_listing_count_and_mark_read(ctx, user):
    first = _notify(ctx, user.id)
    _notify(ctx, user.id, level=AlertLevel.EXCEEDED)

    assert notifications.unread_count(ctx, user_id=user.id) == 2

    read = notifications.mark_read(ctx, user_id=user.id, notification_id=first.id)
    assert read.is_read is True
    assert [n.title for n in notifications.list_unread(ctx, user_id=user.id)] == ["Spending Limit Exceeded!"]
    assert len(notifications.list_notifications(ctx, user_id=user.id)) == 2


def test_mark_all_read_returns_changed_count(ctx, user):
    for _ in range(3):
        _notify(ctx, user.id)

    assert notifications.mark_all_read(ctx, user_id=user.id) == 3
    assert notifications.unread_count(ctx, user_id=user.id) == 0
    assert notifications.mark_all_read(ctx, user_id=user.id) == 0


def test_cannot_mark_another_users_notification(ctx, user, other_user):
    theirs = _notify(ctx, other_user.id)

    with pytest.raises(NotFoundError):
        notifications.mark_read(ctx, user_id=user.id, notification_id=theirs.id)
    assert notifications.unread_count(ctx, user_id=other_user.id) == 1
