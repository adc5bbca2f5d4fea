# src/logging/logger.py — v1
"""JSON and text formatters for the ``infergate`` logger tree.

Package modules log through ``logging.getLogger(__name__)``; every record is
stamped with the current invocation context (model key, category, attempt)
read from ``infergate.logging.context``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from infergate.logging.context import LogContext, get_context

ROOT_LOGGER = "infergate"
NOISY_LOGGERS = ("httpx", "httpcore")


class _ContextFormatter(logging.Formatter):
    """Base for formatters that render the invocation context."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.now(timezone.utc)
        text = self.render(record, get_context(), stamp)
        if record.exc_info and record.exc_info[1] is not None:
            text = self.attach_exception(text, self.formatException(record.exc_info))
        return text

    def render(self, record: logging.LogRecord, ctx: LogContext, stamp: datetime) -> str:
        raise NotImplementedError

    def attach_exception(self, text: str, trace: str) -> str:
        return f"{text}\n{trace}"


class JsonFormatter(_ContextFormatter):
    """One JSON object per line.

    ``extra={"data": {...}}`` on a log call lands under the ``data`` key.
    """

    def render(self, record: logging.LogRecord, ctx: LogContext, stamp: datetime) -> str:
        entry: dict[str, Any] = {
            "timestamp": stamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = ctx.as_dict()
        if context:
            entry["context"] = context
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        return json.dumps(entry, default=str)

    def attach_exception(self, text: str, trace: str) -> str:
        entry = json.loads(text)
        entry["exception"] = trace
        return json.dumps(entry, default=str)


class TextFormatter(_ContextFormatter):
    """``time [LEVEL] logger [model] (attempt n) - message`` for terminals."""

    def render(self, record: logging.LogRecord, ctx: LogContext, stamp: datetime) -> str:
        parts = [stamp.strftime("%Y-%m-%d %H:%M:%S"), f"[{record.levelname:8s}]", record.name]
        if ctx.model_key:
            parts.append(f"[{ctx.model_key}]")
        if ctx.attempt is not None:
            parts.append(f"(attempt {ctx.attempt})")
        parts.append(f"- {record.getMessage()}")
        return " ".join(parts)


_FORMATTERS: dict[str, type[_ContextFormatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
}


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
) -> None:
    """Attach handlers to the ``infergate`` logger, replacing earlier ones.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text"; anything else falls back to text.
        log_file: Also write to this rotating file when given.
        rotation: Size at which the file rotates, e.g. "10MB".
        retention: Rotated files kept.
    """
    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()

    formatter = _FORMATTERS.get(log_format, TextFormatter)()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from infergate.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
