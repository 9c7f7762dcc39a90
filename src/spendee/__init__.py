"""Spendee application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Union

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import register_error_handlers
from .extensions import init_context
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "spendee.blueprints.auth"
    yield "spendee.blueprints.auth_api"
    yield "spendee.blueprints.categories"
    yield "spendee.blueprints.transactions"
    yield "spendee.blueprints.spending_limits"
    yield "spendee.blueprints.notifications"
    yield "spendee.blueprints.dashboard"
    yield "spendee.blueprints.goals"
    yield "spendee.blueprints.reports"
    yield "spendee.blueprints.user"
    yield "spendee.blueprints.mpesa"
    yield "spendee.blueprints.suggestions"
    yield "spendee.blueprints.web"


def create_app(config: Union[str, BaseConfig, None] = None) -> Flask:
    """Create and configure the Flask application instance.

    ``config`` is either an environment name from ``_CONFIG_MAP`` or a ready
    config object.
    """

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config if isinstance(config, BaseConfig) else _resolve_config(config)()
    app.config.from_object(config_obj)
    app.config["SPENDEE_CONFIG"] = config_obj

    setup_logging(config_obj)
    ctx = init_context(app, config_obj)
    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)

    if config_obj.SCHEDULER_ENABLED:
        from .scheduler import LimitScheduler

        scheduler = LimitScheduler(ctx)
        scheduler.start()
        app.extensions["spendee_scheduler"] = scheduler

    get_logger(__name__).info(
        "Application created",
        extra={"config": type(config_obj).__name__, "scheduler": config_obj.SCHEDULER_ENABLED},
    )
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, "bp"))


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
