"""Structured event logging for sbash.

Events are emitted as compact JSON payloads through the standard `logging`
module and written as human-readable blocks by `StructuredTextFormatter`.
Logging is disabled unless a log file is configured.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "app_start": ["ts", "level", "script_file", "argc", "shell", "log_file"],
    "script_parsed": ["ts", "level", "script_file", "function_count", "public_count"],
    "parse_failed": ["ts", "level", "script_file", "error_type", "line", "column", "error"],
    "action_resolved": ["ts", "level", "action", "function", "argc"],
    "shell_exit": ["ts", "level", "function", "exit_code", "elapsed_ms"],
    "app_stop": ["ts", "level", "exit_code", "error_type", "error"],
}
DEFAULT_EVENT_KEY_ORDER = ["ts", "level", "message"]


def _to_log_safe(value: Any) -> Any:
    """Reduce a field value to something `json.dumps` accepts.

    Fields are script paths, counts, names and argument tuples; anything
    else is logged by its string form.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_to_log_safe(v) for v in value]
    return str(value)


class StructuredTextFormatter(logging.Formatter):
    """Write each record as an `=== event ===` block of `key: value` lines.

    Records emitted by `log_event` carry their own timestamp and event name
    in a JSON payload. Any other record is stamped from `record.created` and
    named after its logger.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Emit a blank line between entries without adding extra trailing lines.
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    @staticmethod
    def _ordered_keys(event_name: str, data: dict[str, Any]) -> list[str]:
        preferred = EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER)
        preferred_present = [k for k in preferred if data.get(k) is not None]
        remaining = sorted(k for k in data if k not in preferred and data[k] is not None)
        return preferred_present + remaining

    @staticmethod
    def _event_payload(record: logging.LogRecord) -> dict[str, Any] | None:
        message = record.getMessage()
        if not (message.startswith("{") and message.endswith("}")):
            return None
        try:
            payload = json.loads(message)
        except ValueError:
            return None
        return payload if isinstance(payload, dict) and "event" in payload else None

    def format(self, record: logging.LogRecord) -> str:
        payload = self._event_payload(record)
        if payload is None:
            payload = {
                "event": record.name,
                "ts": datetime.fromtimestamp(record.created).astimezone().isoformat(),
                "message": record.getMessage(),
            }
        data = {"level": record.levelname, **payload}

        event_name = str(data.pop("event"))
        lines = [f"=== {event_name} ==="]
        lines.extend(
            f"{key}: {self._format_value(data[key])}"
            for key in self._ordered_keys(event_name, data)
        )
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        payload[key] = _to_log_safe(value)
    logging.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def setup_logging(log_file: Path | None = None) -> None:
    """Route structured events to `log_file`, or disable logging."""
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_file), encoding="utf-8")
        handler.setFormatter(StructuredTextFormatter())
        logging.disable(logging.NOTSET)
        logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
    else:
        logging.disable(logging.CRITICAL)
