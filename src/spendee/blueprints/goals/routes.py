"""Goal API routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import goal_to_dict
from ...services import goals as service
from ..common import FieldReader, json_body
from . import bp


def _goal_fields() -> dict:
    reader = FieldReader(json_body())
    fields = {
        "name": reader.text("name"),
        "target_amount": reader.decimal("targetAmount"),
        "start_date": reader.date("startDate"),
        "deadline": reader.date("deadline"),
        "icon": reader.optional_text("icon"),
    }
    reader.raise_for_errors("Invalid goal")
    return fields


@bp.get("")
@login_required
def list_goals():
    return jsonify([goal_to_dict(g) for g in service.list_goals(get_context(), user_id=current_user_id())])


@bp.get("/<int:goal_id>")
@login_required
def get_goal(goal_id: int):
    return jsonify(goal_to_dict(service.get_goal(get_context(), user_id=current_user_id(), goal_id=goal_id)))


@bp.post("")
@login_required
def create_goal():
    goal = service.create_goal(get_context(), user_id=current_user_id(), **_goal_fields())
    return jsonify(goal_to_dict(goal))


@bp.put("/<int:goal_id>")
@login_required
def update_goal(goal_id: int):
    goal = service.update_goal(get_context(), user_id=current_user_id(), goal_id=goal_id, **_goal_fields())
    return jsonify(goal_to_dict(goal))


@bp.patch("/<int:goal_id>/progress")
@login_required
def add_progress(goal_id: int):
    reader = FieldReader(json_body())
    amount = reader.decimal("amount")
    reader.raise_for_errors("Invalid amount")
    goal = service.add_progress(get_context(), user_id=current_user_id(), goal_id=goal_id, amount=amount)
    return jsonify(goal_to_dict(goal))


@bp.delete("/<int:goal_id>")
@login_required
def delete_goal(goal_id: int):
    service.delete_goal(get_context(), user_id=current_user_id(), goal_id=goal_id)
    return "", 204
