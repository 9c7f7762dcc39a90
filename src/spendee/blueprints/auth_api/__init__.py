"""Token-issuing authentication API."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("auth_api", __name__, url_prefix="/api/auth")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
