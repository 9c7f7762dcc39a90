"""Login, registration and role management API."""

from __future__ import annotations

from flask import g, jsonify

from ...errors import PermissionDeniedError
from ...extensions import get_context
from ...security import login_required
from ...services import auth as service
from ..common import FieldReader, json_body
from . import bp


@bp.post("/login")
def login():
    reader = FieldReader(json_body())
    ctx = get_context()
    user = service.authenticate(ctx, email=reader.text("email"), password=reader.text("password"))
    return jsonify({"message": "User Logged Successfully", "token": service.issue_token(ctx.config, user)})


@bp.post("/register")
def register():
    reader = FieldReader(json_body())
    ctx = get_context()
    user = service.register_user(
        ctx,
        email=reader.text("email"),
        password=reader.text("password"),
        first_name=reader.text("firstName"),
        last_name=reader.text("lastName"),
    )
    return jsonify({"message": "User Registered Successfully", "token": service.issue_token(ctx.config, user)})


@bp.post("/admin/promote/<int:user_id>")
@login_required
def promote(user_id: int):
    if g.current_user.role != "admin":
        raise PermissionDeniedError("Admin role required")
    service.set_role(get_context(), user_id=user_id, role="admin")
    return jsonify({"message": "User promoted to admin successfully", "success": True})
