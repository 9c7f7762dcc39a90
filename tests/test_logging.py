"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from spendee.config import BaseConfig
from spendee.logging_config import JSONFormatter, get_logger, setup_logging


def _record(level=logging.INFO, msg="Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="spendee.test",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


@pytest.fixture
def log_config(tmp_path, monkeypatch) -> BaseConfig:
    monkeypatch.setenv("SPENDEE_DATA_DIR", str(tmp_path))
    return BaseConfig()


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "spendee.test"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.user_id = 7
    record.limit_id = 3

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"user_id": 7, "limit_id": 3}


def test_setup_logging_writes_json_file(log_config, tmp_path):
    logger = setup_logging(log_config)

    assert logger.name == "spendee"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    log_file = tmp_path / "logs" / "spendee.log"
    assert log_file.exists()

    get_logger("spendee.services.test").warning("Limit exceeded", extra={"user_id": 1})
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["extra"] == {"user_id": 1}


def test_setup_logging_twice_does_not_stack_handlers(log_config):
    setup_logging(log_config)
    logger = setup_logging(log_config)

    assert len(logger.handlers) == 2


def test_get_logger_namespacing():
    assert get_logger("module1").name == "spendee.module1"
    assert get_logger("spendee.services.auth").name == "spendee.services.auth"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_by_mode(log_config, dev_mode):
    log_config.DEV_MODE = dev_mode

    logger = setup_logging(log_config)

    console = [
        h
        for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(console) == 1
    assert console[0].level == (logging.INFO if dev_mode else logging.WARNING)
