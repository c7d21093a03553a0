"""Formatters for the console, file and aggregation outputs.

Three shapes are supported:
- ``detailed``: human-readable lines for local development
- ``structured``: ``key=value`` pairs, readable and grep-friendly
- ``json``: one JSON object per record for log shippers
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Type

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
        "extra",
    }
)


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect the ``extra={...}`` values attached to a record."""
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS}


class DetailedFormatter(logging.Formatter):
    """``YYYY-MM-DD HH:MM:SS [   LEVEL] logger: message``"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class StructuredFormatter(logging.Formatter):
    """Render records as space-separated ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"timestamp={datetime.now(timezone.utc).isoformat()}",
            f"level={record.levelname}",
            f"logger={record.name}",
            f'message="{record.getMessage()}"',
        ]

        for key, value in _record_context(record).items():
            if isinstance(value, (int, float, bool)):
                parts.append(f"{key}={value}")
            else:
                parts.append(f'{key}="{value}"')

        if record.exc_info:
            exc_text = self.formatException(record.exc_info).replace("\n", "\\n")
            parts.append(f'exception="{exc_text}"')

        return " ".join(parts)


class JSONFormatter(logging.Formatter):
    """Render records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line_number": record.lineno,
        }

        for key, value in _record_context(record).items():
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)

        if record.exc_info:
            payload["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(payload, ensure_ascii=False)


FORMATTERS: Dict[str, Type[logging.Formatter]] = {
    "detailed": DetailedFormatter,
    "structured": StructuredFormatter,
    "json": JSONFormatter,
}


def get_formatter(format_type: str) -> logging.Formatter:
    """Build a formatter by name.

    Args:
        format_type: One of ``detailed``, ``structured`` or ``json``.

    Returns:
        A new formatter instance.

    Raises:
        ValueError: If the name is not a known format.
    """
    formatter_class = FORMATTERS.get(format_type.lower())
    if formatter_class is None:
        raise ValueError(f"Unknown format type: {format_type}. Available: {', '.join(FORMATTERS)}")
    return formatter_class()
