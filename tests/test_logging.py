"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from wealthlog.config import BaseConfig
from wealthlog.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture()
def log_config(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("WEALTHLOG_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("WEALTHLOG_LOG_LEVEL", raising=False)
    return BaseConfig()


def _record(**kwargs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=kwargs.pop("level", logging.INFO),
        pathname="test.py",
        lineno=42,
        msg=kwargs.pop("msg", "Test message"),
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )
    record.module = "test_module"
    record.funcName = "test_function"
    for key, value in kwargs.items():
        setattr(record, key, value)
    return record


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_carries_extra_fields():
    log_data = json.loads(JSONFormatter().format(_record(user_id=5, amount=12.5)))
    assert log_data["extra"] == {"user_id": 5, "amount": 12.5}


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = _record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info)
    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_setup_logging(log_config, tmp_path):
    logger = setup_logging(log_config)

    assert logger.name == "wealthlog"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2

    log_file = tmp_path / "logs" / "wealthlog.log"
    assert log_file.exists()

    logger.warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    assert len(lines) >= 2
    for line in lines:
        entry = json.loads(line)
        assert {"timestamp", "level", "message"} <= set(entry)


def test_setup_logging_does_not_stack_handlers(log_config):
    setup_logging(log_config)
    logger = setup_logging(log_config)
    assert len(logger.handlers) == 2


def test_get_logger():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")

    assert logger1.name == "wealthlog.module1"
    assert logger2.name == "wealthlog.module2"
    assert get_logger("wealthlog.services").name == "wealthlog.services"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(log_config, dev_mode):
    log_config.DEV_MODE = dev_mode
    logger = setup_logging(log_config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
