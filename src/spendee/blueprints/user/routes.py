"""Profile, photo, password and preference routes."""

from __future__ import annotations

from flask import Response, jsonify, request
from werkzeug.exceptions import NotFound

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import user_to_dict
from ...services import auth as auth_service
from ...services import users as service
from ..common import FieldReader, json_body
from . import bp


@bp.get("/me")
@login_required
def me():
    return jsonify(user_to_dict(service.get_user(get_context(), user_id=current_user_id())))


@bp.post("/update")
@login_required
def update():
    photo = request.files.get("photo")
    payload = photo.read() if photo is not None and photo.filename else None
    service.update_profile(
        get_context(),
        user_id=current_user_id(),
        first_name=request.form.get("firstName", ""),
        last_name=request.form.get("lastName", ""),
        email=request.form.get("email", ""),
        photo=payload,
        photo_content_type=photo.mimetype if payload else None,
    )
    return jsonify({"success": True})


@bp.get("/photo")
@login_required
def photo():
    user = service.get_user(get_context(), user_id=current_user_id())
    if not user.photo:
        raise NotFound("No profile photo")
    response = Response(user.photo, mimetype=user.photo_content_type or "image/jpeg")
    response.headers["Cache-Control"] = "no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


@bp.post("/change-password")
@login_required
def change_password():
    reader = FieldReader(json_body())
    auth_service.change_password(
        get_context(),
        user_id=current_user_id(),
        current_password=reader.text("currentPassword"),
        new_password=reader.text("newPassword"),
    )
    return jsonify({"message": "Password changed successfully", "success": True})


@bp.get("/preferences")
@login_required
def get_preferences():
    return jsonify(service.get_preferences(get_context(), user_id=current_user_id()))


@bp.post("/preferences")
@login_required
def update_preferences():
    reader = FieldReader(json_body())
    prefs = service.update_preferences(
        get_context(),
        user_id=current_user_id(),
        currency=reader.optional_text("currency"),
        date_format=reader.optional_text("dateFormat"),
    )
    return jsonify(prefs)
