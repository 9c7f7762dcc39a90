"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Spendee"
    DB_FILENAME = "spendee.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    JWT_ALGORITHM = "HS256"
    TOKEN_COOKIE = "jwt_token"
    EMAIL_COOKIE = "user_email"
    NOTIFICATION_POLL_SECONDS = 30
    LIMIT_EVALUATION_MINUTES = 60
    DEFAULT_CURRENCY = "USD"
    DEFAULT_DATE_FORMAT = "MM/DD/YYYY"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("SPENDEE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("SPENDEE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("SPENDEE_DATABASE_URL", self._build_sqlite_url())
        self.TOKEN_TTL_MINUTES = _env_int("SPENDEE_TOKEN_TTL_MINUTES", 120)
        self.SCHEDULER_ENABLED = _env_bool("SPENDEE_SCHEDULER_ENABLED", default=False)
        self.MAX_CONTENT_LENGTH = _env_int("SPENDEE_MAX_UPLOAD_MB", 10) * 1024 * 1024
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("SPENDEE_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("SPENDEE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {"pool_pre_ping": True}
        return {"connect_args": {"check_same_thread": False}}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never starts the scheduler."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.SCHEDULER_ENABLED = False
