# src/api/models.py — v2
"""API-level models returned by the facade and serialized by the web layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from passportscan.batch.models import BatchSummary
from passportscan.core.models import NormalizedRecord


class RejectedFile(BaseModel):
    """A file refused at intake, with the reason shown to the user."""

    filename: str
    reason: str


class ScanOutcome(BaseModel):
    """Result of a single-file scan."""

    filename: str
    data: dict[str, str] = Field(default_factory=dict)
    record: NormalizedRecord
    processing_time_ms: int = 0


class BatchOutcome(BaseModel):
    """Result of one batch run: scheduler summary plus intake rejections."""

    summary: BatchSummary
    rejected: list[RejectedFile] = Field(default_factory=list)


class ExportFile(BaseModel):
    """Downloadable export payload."""

    filename: str
    media_type: str
    content: bytes
    row_count: int = 0
