"""Application context wiring for Flask."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppContext, create_app_context

EXTENSION_KEY = "spendee"


def init_context(app: Flask, config: BaseConfig) -> AppContext:
    """Build the engine, repositories and schema, and attach them to ``app``."""

    ctx = create_app_context(config)
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def get_context() -> AppContext:
    """Return the ``AppContext`` for the active Flask app."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:  # pragma: no cover - exercised only on misconfiguration
        raise RuntimeError("Application context not initialized") from exc
