"""Tests for dyslexia_screener/utils/logging.py."""

from __future__ import annotations

import json
import logging

import pytest

from dyslexia_screener.config import LoggingConfig
from dyslexia_screener.utils.logging import JsonFormatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "dyslexia_screener.scoring.engine", logging.WARNING, __file__, 1, msg, None, None
    )
    for key, val in extra.items():
        setattr(record, key, val)
    return record


class TestJsonFormatter:
    def test_core_fields(self):
        payload = json.loads(JsonFormatter().format(_record("skipped %s")))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "dyslexia_screener.scoring.engine"
        assert payload["msg"] == "skipped %s"
        assert payload["ts"].endswith("Z")

    def test_extra_fields_promoted(self):
        payload = json.loads(JsonFormatter().format(_record("scored", test_id="sequencing")))
        assert payload["test_id"] == "sequencing"


class TestConfigureLogging:
    def test_file_handler_created(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "screener.log"
        configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file)))
        logging.getLogger("dyslexia_screener.test").info("hello")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
        assert restore_root_logger.level == logging.DEBUG

    def test_no_file_handler(self, restore_root_logger):
        configure_logging(LoggingConfig(level="WARNING", log_file=""))
        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING
