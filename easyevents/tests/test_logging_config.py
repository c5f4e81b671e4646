"""
Tests for structured logging setup.
"""

import io
import json
import logging

import pytest

from easyevents.logging_config import TraceIDFilter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logs_carry_trace_id(monkeypatch, restore_root_logger):
    monkeypatch.setenv("EASYEVENTS_LOG_FORMAT", "json")
    out = io.StringIO()
    setup_logging(stream=out)

    get_logger("easyevents.test", trace_id="AppEvents").info("replaying")

    line = json.loads(out.getvalue().strip().splitlines()[-1])
    assert line["message"] == "replaying"
    assert line["trace_id"] == "AppEvents"
    assert line["level"] == "INFO"
    assert line["logger"] == "easyevents.test"


def test_text_logs_default_trace_id(monkeypatch, restore_root_logger):
    monkeypatch.setenv("EASYEVENTS_LOG_FORMAT", "text")
    out = io.StringIO()
    setup_logging(stream=out)

    logging.getLogger("easyevents.child").warning("no trace here")

    assert "no trace here [trace_id=N/A]" in out.getvalue()


def test_level_from_env(monkeypatch, restore_root_logger):
    monkeypatch.setenv("EASYEVENTS_LOG_LEVEL", "warning")
    monkeypatch.setenv("EASYEVENTS_LOG_FORMAT", "text")
    out = io.StringIO()
    setup_logging(stream=out)

    logging.getLogger("easyevents.quiet").info("hidden")

    assert out.getvalue() == ""


def test_unknown_format_is_rejected(monkeypatch, restore_root_logger):
    monkeypatch.setenv("EASYEVENTS_LOG_FORMAT", "xml")

    with pytest.raises(ValueError):
        setup_logging()


def test_trace_id_filter_keeps_existing_value():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.trace_id = "S"

    assert TraceIDFilter().filter(record)
    assert record.trace_id == "S"
