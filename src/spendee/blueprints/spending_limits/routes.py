"""Spending limit API routes.

Mutations answer with the ``{message, data, success}`` envelope.
"""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import envelope, limit_to_dict
from ...services import spending_limits as service
from ..common import FieldReader, json_body
from . import bp


def _limit_fields(reader: FieldReader) -> dict:
    return {
        "limit_amount": reader.decimal("limitAmount"),
        "period": reader.optional_text("period"),
        "notification_threshold": reader.decimal("notificationThreshold"),
    }


@bp.get("")
@login_required
def list_limits():
    views = service.list_limits(get_context(), user_id=current_user_id())
    return jsonify([limit_to_dict(view) for view in views])


@bp.get("/<int:limit_id>")
@login_required
def get_limit(limit_id: int):
    view = service.get_limit(get_context(), user_id=current_user_id(), limit_id=limit_id)
    return jsonify(limit_to_dict(view))


@bp.post("")
@login_required
def create_limit():
    reader = FieldReader(json_body())
    fields = _limit_fields(reader)
    category_id = reader.integer("categoryId")
    reader.raise_for_errors("Invalid spending limit")
    view = service.create_limit(get_context(), user_id=current_user_id(), category_id=category_id, **fields)
    return jsonify(envelope("Spending limit created successfully", limit_to_dict(view)))


@bp.put("/<int:limit_id>")
@login_required
def update_limit(limit_id: int):
    reader = FieldReader(json_body())
    fields = _limit_fields(reader)
    reader.raise_for_errors("Invalid spending limit")
    view = service.update_limit(get_context(), user_id=current_user_id(), limit_id=limit_id, **fields)
    return jsonify(envelope("Spending limit updated successfully", limit_to_dict(view)))


@bp.delete("/<int:limit_id>")
@login_required
def delete_limit(limit_id: int):
    service.delete_limit(get_context(), user_id=current_user_id(), limit_id=limit_id)
    return jsonify(envelope("Spending limit deleted successfully"))
