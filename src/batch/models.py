# src/batch/models.py — v2
"""Batch processing models: ScanDocument, ScanItem, BatchSummary.

ScanItem status only moves forward:

    PENDING -> PROCESSING -> COMPLETED | DUPLICATE | ERROR

``transition`` enforces this, so a second claim on the same item is a
loud programming error instead of a silent double scan.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from passportscan.core.errors import InvalidTransitionError
from passportscan.core.models import NormalizedRecord, RawScanResult


class ScanStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    DUPLICATE = "duplicate"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {ScanStatus.COMPLETED, ScanStatus.DUPLICATE, ScanStatus.ERROR}
)

_ALLOWED_TRANSITIONS: dict[ScanStatus, frozenset[ScanStatus]] = {
    ScanStatus.PENDING: frozenset({ScanStatus.PROCESSING}),
    ScanStatus.PROCESSING: TERMINAL_STATUSES,
    ScanStatus.COMPLETED: frozenset(),
    ScanStatus.DUPLICATE: frozenset(),
    ScanStatus.ERROR: frozenset(),
}

DUPLICATE_MESSAGE = "Documento duplicado - ID ya procesado previamente"


class ScanDocument(BaseModel):
    """File payload accepted into a batch."""

    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def _new_item_id() -> str:
    return uuid.uuid4().hex[:12]


class ScanItem(BaseModel):
    """One submitted file and its processing state.

    Identity is ``item_id``; filenames are not guaranteed unique.
    """

    item_id: str = Field(default_factory=_new_item_id)
    document: ScanDocument
    status: ScanStatus = ScanStatus.PENDING
    raw_result: RawScanResult | None = None
    record: NormalizedRecord | None = None
    error: str | None = None
    document_id: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def filename(self) -> str:
        return self.document.filename

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def transition(self, new_status: ScanStatus) -> None:
        """Move to new_status, enforcing the forward-only lifecycle.

        Raises:
            InvalidTransitionError: On any backward or repeated transition.
        """
        if new_status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Item {self.item_id} ({self.filename}): "
                f"{self.status.value} -> {new_status.value} is not allowed"
            )
        now = datetime.now(timezone.utc)
        if new_status is ScanStatus.PROCESSING:
            self.started_at = now
        elif new_status.is_terminal:
            self.finished_at = now
        self.status = new_status

    def mark_processing(self) -> None:
        self.transition(ScanStatus.PROCESSING)

    def mark_completed(self, raw: RawScanResult, record: NormalizedRecord) -> None:
        self.transition(ScanStatus.COMPLETED)
        self.raw_result = raw
        self.record = record
        self.document_id = raw.document_id

    def mark_duplicate(self, raw: RawScanResult) -> None:
        self.transition(ScanStatus.DUPLICATE)
        self.raw_result = raw
        self.document_id = raw.document_id
        self.error = DUPLICATE_MESSAGE

    def mark_error(self, message: str) -> None:
        self.transition(ScanStatus.ERROR)
        self.error = message


class ItemView(BaseModel):
    """Serializable per-row view of a ScanItem."""

    item_id: str
    filename: str
    status: ScanStatus
    document_id: str | None = None
    error: str | None = None
    duration_seconds: float | None = None

    @classmethod
    def from_item(cls, item: ScanItem) -> ItemView:
        return cls(
            item_id=item.item_id,
            filename=item.filename,
            status=item.status,
            document_id=item.document_id,
            error=item.error,
            duration_seconds=item.duration_seconds,
        )


class BatchSummary(BaseModel):
    """Summary result of one scheduler run."""

    batch_id: str
    total: int
    completed: int
    duplicates: int
    errors: int
    pending: int
    processing: int
    duration_seconds: float
    items: list[ItemView] = Field(default_factory=list)
