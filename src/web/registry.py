# src/web/registry.py — v1
"""In-memory batch sessions keyed by batch ID (not persisted)."""

from __future__ import annotations

import threading
from typing import Callable

from passportscan.batch.session import BatchSession


class BatchRegistry:
    """Thread-safe map batch_id -> BatchSession for the web process."""

    def __init__(self, session_factory: Callable[[str | None], BatchSession]) -> None:
        self._factory = session_factory
        self._sessions: dict[str, BatchSession] = {}
        self._lock = threading.Lock()

    def get(self, batch_id: str) -> BatchSession | None:
        with self._lock:
            return self._sessions.get(batch_id)

    def get_or_create(self, batch_id: str | None = None) -> BatchSession:
        with self._lock:
            if batch_id and batch_id in self._sessions:
                return self._sessions[batch_id]
            session = self._factory(batch_id)
            self._sessions[session.batch_id] = session
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
