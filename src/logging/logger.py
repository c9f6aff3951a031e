# src/logging/logger.py — v3
"""Formatters and root logger setup for the ``passportscan`` namespace.

Both formatters stamp each line with the batch/item context of the
worker that emitted it, so interleaved output from concurrent scans can
be attributed per file.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Literal

from passportscan.logging.context import LogContext, get_context

ROOT_LOGGER_NAME = "passportscan"
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth")

LogFormat = Literal["json", "text"]


class _ContextFormatter(logging.Formatter):
    """Base formatter rendering record time in UTC plus the scan context."""

    def stamp(self, record: logging.LogRecord) -> datetime:
        return datetime.fromtimestamp(record.created, tz=timezone.utc)

    def render(self, record: logging.LogRecord, ctx: LogContext) -> str:
        raise NotImplementedError

    def format(self, record: logging.LogRecord) -> str:
        return self.render(record, get_context())


class JsonFormatter(_ContextFormatter):
    """One JSON object per line; context fields sit under ``context``."""

    def render(self, record: logging.LogRecord, ctx: LogContext) -> str:
        entry: dict[str, object] = {
            "timestamp": self.stamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = ctx.as_dict()
        if fields:
            entry["context"] = fields
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(_ContextFormatter):
    """``time level logger [batch] <file> (stage): message``"""

    def render(self, record: logging.LogRecord, ctx: LogContext) -> str:
        tags = [
            template.format(value)
            for template, value in (
                ("[{}]", ctx.batch_id),
                ("<{}>", ctx.filename),
                ("({})", ctx.stage),
            )
            if value
        ]
        head = " ".join([
            self.stamp(record).strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname.ljust(8),
            record.name,
            *tags,
        ])
        line = f"{head}: {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "INFO",
    log_format: LogFormat = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """(Re)configure the passportscan logger.

    Output goes to stderr, and additionally to a size-rotated file when
    log_file is given. Calling it again replaces earlier handlers.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from passportscan.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
