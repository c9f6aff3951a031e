# src/batch/session.py — v1
"""BatchSession — the per-user aggregate the scheduler mutates.

Counters are derived from item statuses on every read, so they can never
drift from the items they count.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable

from passportscan.batch.dedup import DuplicateDetector
from passportscan.batch.models import (
    BatchSummary,
    ItemView,
    ScanDocument,
    ScanItem,
    ScanStatus,
)
from passportscan.core.errors import BatchInProgressError
from passportscan.core.models import NormalizedRecord, RawScanResult

logger = logging.getLogger(__name__)


class BatchSession:
    """Ordered scan items, duplicate-detector state and the processing flag."""

    def __init__(
        self,
        batch_id: str | None = None,
        detector: DuplicateDetector | None = None,
    ) -> None:
        self.batch_id = batch_id or uuid.uuid4().hex[:12]
        self.detector = detector if detector is not None else DuplicateDetector()
        self.items: list[ScanItem] = []
        self.processing = False
        self.duration_seconds = 0.0
        # Held for a whole intake-and-run cycle; callers on other threads
        # must not add items between intake and the scheduler claiming them.
        self.run_lock = threading.Lock()

    def _count(self, status: ScanStatus) -> int:
        return sum(1 for item in self.items if item.status is status)

    @property
    def completed(self) -> int:
        return self._count(ScanStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(ScanStatus.ERROR)

    @property
    def duplicates(self) -> int:
        return self._count(ScanStatus.DUPLICATE)

    @property
    def pending(self) -> int:
        return self._count(ScanStatus.PENDING)

    @property
    def in_flight(self) -> int:
        return self._count(ScanStatus.PROCESSING)

    def add_items(self, items: Iterable[ScanItem]) -> list[ScanItem]:
        """Append pending items.

        Raises:
            BatchInProgressError: While a run is in progress.
        """
        if self.processing:
            raise BatchInProgressError(
                f"Batch {self.batch_id} is processing; cannot add files"
            )
        added = list(items)
        for item in added:
            if item.status is not ScanStatus.PENDING:
                raise ValueError(f"Item {item.item_id} is not pending")
        self.items.extend(added)
        return added

    def add_documents(self, documents: Iterable[ScanDocument]) -> list[ScanItem]:
        return self.add_items(ScanItem(document=doc) for doc in documents)

    def pending_items(self) -> list[ScanItem]:
        return [item for item in self.items if item.status is ScanStatus.PENDING]

    def get_item(self, item_id: str) -> ScanItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def completed_records(self) -> list[NormalizedRecord]:
        return [
            item.record for item in self.items
            if item.status is ScanStatus.COMPLETED and item.record is not None
        ]

    def completed_raw_results(self) -> list[RawScanResult]:
        return [
            item.raw_result for item in self.items
            if item.status is ScanStatus.COMPLETED and item.raw_result is not None
        ]

    def reset(self) -> None:
        """Drop every item and forget seen document IDs.

        Raises:
            BatchInProgressError: While a run is in progress.
        """
        if self.processing or self.run_lock.locked():
            raise BatchInProgressError(
                f"Batch {self.batch_id} is processing; clear it after it finishes"
            )
        dropped = len(self.items)
        self.items.clear()
        self.detector.reset()
        self.duration_seconds = 0.0
        logger.info("Batch %s reset (%d items dropped)", self.batch_id, dropped)

    def summary(self) -> BatchSummary:
        return BatchSummary(
            batch_id=self.batch_id,
            total=len(self.items),
            completed=self.completed,
            duplicates=self.duplicates,
            errors=self.failed,
            pending=self.pending,
            processing=self.in_flight,
            duration_seconds=round(self.duration_seconds, 3),
            items=[ItemView.from_item(item) for item in self.items],
        )
