# tests/unit/logging/test_logger.py — v1
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging

from imgresizer.logging.context import clear_context, set_request_context, set_stage
from imgresizer.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "image_id" not in parsed

    def test_format_with_context(self):
        set_request_context("cats/1.jpg", "transform:cats/1.jpg:local:abc")
        set_stage("encode")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["image_id"] == "cats/1.jpg"
        assert parsed["cache_key"].startswith("transform:")
        assert parsed["stage"] == "encode"

    def test_format_extra_data(self):
        record = _record("with data")
        record.data = {"width": 10}
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["data"] == {"width": 10}


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        set_request_context("a.png", "k")
        set_stage("resize")
        output = TextFormatter().format(_record("x"))
        assert "[a.png]" in output
        assert "(resize)" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "imgresizer.test_module"


class TestSetupLogging:
    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("imgresizer")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("imgresizer")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("imgresizer").handlers) == 1

    def test_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "imgresizer.log"
        setup_logging(log_file=str(log_file))
        root = logging.getLogger("imgresizer")
        assert len(root.handlers) == 2
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_unknown_format_falls_back_to_text(self):
        root = setup_logging(log_format="yaml")
        assert isinstance(root.handlers[0].formatter, TextFormatter)
