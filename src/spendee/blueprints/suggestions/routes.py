"""Suggestion routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import suggestion_to_dict
from ...services import suggestions as service
from . import bp


@bp.get("")
@login_required
def list_suggestions():
    found = service.suggestions_for_user(get_context(), user_id=current_user_id())
    return jsonify([suggestion_to_dict(s) for s in found])
