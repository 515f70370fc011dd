"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from sbash.logging_utils import StructuredTextFormatter, log_event, setup_logging


def _record(message: str, name: str = "root") -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)


def test_formatter_orders_known_event_keys() -> None:
    payload = {"event": "shell_exit", "exit_code": 0, "function": "main", "ts": "T"}
    text = StructuredTextFormatter().format(_record(json.dumps(payload)))
    assert text.split("\n") == [
        "=== shell_exit ===",
        "ts: T",
        "level: INFO",
        "function: main",
        "exit_code: 0",
    ]


def test_formatter_handles_plain_messages() -> None:
    text = StructuredTextFormatter().format(_record("hello\nworld", name="sbash.test"))
    lines = text.split("\n")
    assert lines[0] == "=== sbash.test ==="
    assert lines[-1] == "message: hello\\nworld"


def test_formatter_separates_entries_with_blank_line() -> None:
    formatter = StructuredTextFormatter()
    first = formatter.format(_record("one"))
    second = formatter.format(_record("two"))
    assert not first.startswith("\n")
    assert second.startswith("\n===")


def test_log_event_written_to_configured_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "sbash.log"
    setup_logging(log_file)
    log_event("app_start", script_file=Path("/x/y.sb"), argc=2, log_file=None)

    content = log_file.read_text(encoding="utf-8")
    assert "=== app_start ===" in content
    assert "script_file: /x/y.sb" in content
    assert "argc: 2" in content
    assert "log_file" not in content


def test_logging_disabled_without_file(tmp_path: Path) -> None:
    setup_logging(None)
    assert logging.getLogger().isEnabledFor(logging.CRITICAL) is False


def test_event_timestamp_comes_from_payload() -> None:
    payload = {"event": "app_stop", "ts": "2026-01-02T03:04:05+00:00", "exit_code": 0}
    lines = StructuredTextFormatter().format(_record(json.dumps(payload))).split("\n")
    assert [line for line in lines if line.startswith("ts: ")] == [
        "ts: 2026-01-02T03:04:05+00:00"
    ]


def test_plain_record_is_stamped_from_creation_time() -> None:
    record = _record("hi")
    record.created = 0.0
    lines = StructuredTextFormatter().format(record).split("\n")
    expected = datetime.fromtimestamp(0.0).astimezone().isoformat()
    assert lines[1] == f"ts: {expected}"


def test_json_without_event_is_a_plain_message() -> None:
    text = StructuredTextFormatter().format(_record('{"a": 1}', name="sbash"))
    assert text.split("\n")[0] == "=== sbash ==="
    assert 'message: {"a": 1}' in text
