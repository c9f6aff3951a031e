# src/logging/context.py — v2
"""Contextual logging support — attach batch_id, item_id, filename, stage to log records.

Each scheduler worker runs in its own asyncio task, and tasks copy the
context on creation, so values set while processing one item never leak
into a sibling worker's log lines.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_batch_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "batch_id", default=None
)
_item_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "item_id", default=None
)
_filename: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "filename", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    batch_id: str | None = None
    item_id: str | None = None
    filename: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        batch_id=_batch_id.get(),
        item_id=_item_id.get(),
        filename=_filename.get(),
        stage=_stage.get(),
    )


def set_batch_context(batch_id: str) -> None:
    """Set batch-level context (called once per batch run)."""
    _batch_id.set(batch_id)


def set_item_context(item_id: str, filename: str, stage: str | None = None) -> None:
    """Set item-level context (called per claimed item)."""
    _item_id.set(item_id)
    _filename.set(filename)
    _stage.set(stage)


def set_stage(stage: str | None) -> None:
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _batch_id.set(None)
    _item_id.set(None)
    _filename.set(None)
    _stage.set(None)
