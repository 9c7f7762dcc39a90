"""Category API routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import ValidationError
from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import category_to_dict
from ...services import categories as service
from ..common import FieldReader, coerce_int, json_body
from . import bp


def _fields() -> dict:
    reader = FieldReader(json_body())
    return {
        "name": reader.text("name"),
        "color": reader.optional_text("color"),
        "icon": reader.optional_text("icon"),
        "description": reader.optional_text("description"),
    }


@bp.get("")
@login_required
def list_categories():
    items = service.list_categories(get_context(), user_id=current_user_id())
    return jsonify([category_to_dict(c) for c in items])


@bp.get("/<int:category_id>")
@login_required
def get_category(category_id: int):
    category = service.get_category(get_context(), user_id=current_user_id(), category_id=category_id)
    return jsonify(category_to_dict(category))


@bp.post("")
@login_required
def create_category():
    category = service.create_category(get_context(), user_id=current_user_id(), **_fields())
    return jsonify(category_to_dict(category)), 201


@bp.put("/<int:category_id>")
@login_required
def update_category(category_id: int):
    category = service.update_category(
        get_context(), user_id=current_user_id(), category_id=category_id, **_fields()
    )
    return jsonify(category_to_dict(category))


@bp.delete("/<int:category_id>")
@login_required
def delete_category(category_id: int):
    service.delete_category(get_context(), user_id=current_user_id(), category_id=category_id)
    return "", 204


@bp.delete("")
@login_required
def delete_categories():
    raw_ids = json_body().get("ids") or []
    if not isinstance(raw_ids, list):
        raise ValidationError("ids must be a list")
    ids = [coerce_int(value) for value in raw_ids]
    service.delete_categories(
        get_context(), user_id=current_user_id(), category_ids=[i for i in ids if i is not None]
    )
    return "", 204
