"""Spending limits API blueprint."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("spending_limits", __name__, url_prefix="/api/spending-limits")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
