"""Suggestions API blueprint."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("suggestions", __name__, url_prefix="/api/suggestions")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
