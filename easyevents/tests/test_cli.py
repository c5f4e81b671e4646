"""
Tests for the easyevents CLI.
"""

import json
import logging
import os

import pytest
from typer.testing import CliRunner

from easyevents.cli.main import app
from easyevents.core.registry import EventTypeRegistry
from easyevents.log.file_store import FileEventStore
from easyevents.tests.sample_events import NullEvent, SimpleTextEvent

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def log_path(tmp_path):
    registry = EventTypeRegistry()
    registry.register_event_type(SimpleTextEvent)
    registry.register_event_type(NullEvent)
    path = str(tmp_path / "events.log")
    store = FileEventStore(path, registry)
    store.append(SimpleTextEvent("a"))
    store.append(NullEvent())
    store.append(SimpleTextEvent("b", "Other"))
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "easyevents" in result.output


def test_tail_json(log_path):
    result = runner.invoke(app, ["log", "tail", "--log", log_path, "--lines", "2", "--json"])

    assert result.exit_code == 0
    out = json.loads(result.output)
    assert out["count"] == 2
    assert [r["record"]["position"] for r in out["records"]] == [1, 2]


def test_tail_zero_lines_shows_nothing(log_path):
    result = runner.invoke(app, ["log", "tail", "--log", log_path, "--lines", "0", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"records": [], "count": 0}


def test_tail_more_lines_than_records(log_path):
    result = runner.invoke(app, ["log", "tail", "--log", log_path, "--lines", "10", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["count"] == 3


def test_tail_table(log_path):
    result = runner.invoke(app, ["log", "tail", "--log", log_path])

    assert result.exit_code == 0
    assert "NullEvent" in result.output
    assert "Total records" in result.output


def test_inspect_filters_by_stream(log_path):
    result = runner.invoke(app, ["log", "inspect", "--log", log_path, "--stream", "Other", "--json"])

    assert result.exit_code == 0
    out = json.loads(result.output)
    assert out["count"] == 1
    assert out["records"][0]["payload"]["some_test_value"] == "b"


def test_stats(log_path):
    result = runner.invoke(app, ["log", "stats", "--log", log_path, "--json"])

    assert result.exit_code == 0
    out = json.loads(result.output)
    assert out["count"] == 3
    assert out["streams"] == {"Other": 1, "TestStream": 2}
    assert out["types"] == {"NullEvent": 1, "SimpleTextEvent": 2}


def test_verify_intact_log(log_path):
    result = runner.invoke(app, ["log", "verify", "--log", log_path, "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"valid": True, "records": 3}


def test_verify_tampered_log(log_path):
    with open(log_path) as f:
        lines = [json.loads(line) for line in f]
    lines[1]["record"]["stream"] = "Elsewhere"
    with open(log_path, "w") as f:
        f.writelines(json.dumps(entry) + "\n" for entry in lines)

    result = runner.invoke(app, ["log", "verify", "--log", log_path, "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output.splitlines()[-1])["valid"] is False


def test_missing_log(tmp_path):
    missing = str(tmp_path / "missing.log")

    result = runner.invoke(app, ["log", "tail", "--log", missing, "--json"])

    assert result.exit_code == 2
    assert json.loads(result.output)["error"] == "Log file not found"
    assert not os.path.exists(missing)


def test_warnings_use_configured_json_logging(log_path):
    with open(log_path, "a") as f:
        f.write("not json\n")

    result = runner.invoke(
        app,
        ["log", "tail", "--log", log_path, "--json"],
        env={"EASYEVENTS_LOG_FORMAT": "json", "EASYEVENTS_LOG_LEVEL": "WARNING"},
    )

    assert result.exit_code == 2
    log_line, error_line = result.output.strip().splitlines()[-2:]
    record = json.loads(log_line)
    assert record["level"] == "WARNING"
    assert record["trace_id"] == "cli"
    assert record["logger"] == "easyevents.cli.commands.log"
    assert "corrupt line" in json.loads(error_line)["error"]
