"""M-Pesa statement import blueprint."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("mpesa", __name__, url_prefix="/api/mpesa")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
