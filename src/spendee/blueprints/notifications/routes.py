"""Notification API routes backing the navbar badge."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import envelope, notification_to_dict
from ...services import notifications as service
from . import bp


@bp.get("")
@login_required
def list_notifications():
    items = service.list_notifications(get_context(), user_id=current_user_id())
    return jsonify([notification_to_dict(n) for n in items])


@bp.get("/unread")
@login_required
def list_unread():
    items = service.list_unread(get_context(), user_id=current_user_id())
    return jsonify([notification_to_dict(n) for n in items])


@bp.get("/unread/count")
@login_required
def unread_count():
    # Bare number body; the badge script reads it directly.
    return jsonify(service.unread_count(get_context(), user_id=current_user_id()))


@bp.post("/<int:notification_id>/mark-read")
@login_required
def mark_read(notification_id: int):
    service.mark_read(get_context(), user_id=current_user_id(), notification_id=notification_id)
    return jsonify(envelope("Notification marked as read"))


@bp.post("/mark-all-read")
@login_required
def mark_all_read():
    service.mark_all_read(get_context(), user_id=current_user_id())
    return jsonify(envelope("All notifications marked as read"))
