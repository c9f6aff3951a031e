# src/batch/scheduler.py — v1
"""Batch scheduler — bounded-concurrency worker pool over pending items.

Runs ``min(K, pending)`` worker tasks that pull from a shared deque.
Popping the next item, deduplicating, normalizing and updating item state
all happen synchronously between awaits, so on a single event loop no
two workers can claim the same item. The only suspension point per item
is the scan call itself, which is bounded by a per-item timeout.

Workers refill themselves: a worker that finishes an item immediately
claims the next one, so K scans stay in flight until the queue drains.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Callable

from passportscan.batch.models import BatchSummary, ScanDocument, ScanItem, ScanStatus
from passportscan.batch.session import BatchSession
from passportscan.core.errors import BatchInProgressError, ScanTimeoutError
from passportscan.core.models import RawScanResult
from passportscan.logging.context import (
    clear_context,
    set_batch_context,
    set_item_context,
    set_stage,
)
from passportscan.normalize.normalizer import Normalizer
from passportscan.ocr.base_client import BaseScanClient

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5

ItemCallback = Callable[[ScanItem], None]


class BatchScheduler:
    """Drive every pending item of a BatchSession to a terminal status.

    Args:
        scan_client: OCR client; one ``scan`` call per item.
        normalizer: Builds the NormalizedRecord for novel results.
        concurrency: Max scans in flight (K >= 1).
        item_timeout_s: Upper bound for one item's scan, retries included.
            None disables the bound.
        on_update: Called synchronously after every item state change.
    """

    def __init__(
        self,
        scan_client: BaseScanClient,
        normalizer: Normalizer,
        concurrency: int = DEFAULT_CONCURRENCY,
        item_timeout_s: float | None = None,
        on_update: ItemCallback | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        if item_timeout_s is not None and item_timeout_s <= 0:
            raise ValueError(f"item_timeout_s must be > 0, got {item_timeout_s}")
        self._client = scan_client
        self._normalizer = normalizer
        self._concurrency = concurrency
        self._item_timeout_s = item_timeout_s
        self._on_update = on_update
        self._in_flight = 0
        self.max_in_flight = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run(self, session: BatchSession) -> BatchSummary:
        """Process all pending items of session and return its summary.

        Raises:
            BatchInProgressError: If session is already being processed.
        """
        if session.processing:
            raise BatchInProgressError(f"Batch {session.batch_id} is already processing")

        queue: deque[ScanItem] = deque(session.pending_items())
        n_workers = min(self._concurrency, len(queue))
        self._in_flight = 0
        self.max_in_flight = 0

        session.processing = True
        set_batch_context(session.batch_id)
        logger.info(
            "Batch %s started: %d pending items, %d workers",
            session.batch_id, len(queue), n_workers,
        )
        t0 = time.monotonic()
        try:
            await asyncio.gather(
                *(self._worker(session, queue) for _ in range(n_workers))
            )
        finally:
            # Items claimed by a cancelled worker must not stay Processing.
            for item in session.items:
                if item.status is ScanStatus.PROCESSING:
                    item.mark_error("Batch cancelled")
                    self._notify(item)
            session.processing = False
            session.duration_seconds += time.monotonic() - t0
            clear_context()

        summary = session.summary()
        logger.info(
            "Batch %s finished in %.1fs: %d completed, %d duplicates, %d errors",
            summary.batch_id, summary.duration_seconds,
            summary.completed, summary.duplicates, summary.errors,
        )
        return summary

    async def _worker(self, session: BatchSession, queue: deque[ScanItem]) -> None:
        while queue:
            item = queue.popleft()
            item.mark_processing()
            set_item_context(item.item_id, item.filename, stage="scan")
            self._notify(item)
            await self._process_item(session, item)
            self._notify(item)

    async def _process_item(self, session: BatchSession, item: ScanItem) -> None:
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            raw = await self._scan_with_timeout(item.document)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            logger.warning("Scan failed for %s: %s", item.filename, message)
            item.mark_error(message)
            return
        finally:
            self._in_flight -= 1

        set_stage("dedup")
        if session.detector.check_and_record(raw):
            item.mark_duplicate(raw)
            logger.info("%s is a duplicate of document %s", item.filename, raw.document_id)
            return

        set_stage("normalize")
        try:
            record = self._normalizer.normalize(raw)
        except Exception as exc:
            logger.warning("Normalization failed for %s: %s", item.filename, exc)
            item.mark_error(f"Normalization failed: {exc}")
            return

        item.mark_completed(raw, record)
        logger.debug("Completed %s (document %s)", item.filename, record.id)

    async def _scan_with_timeout(self, document: ScanDocument) -> RawScanResult:
        if self._item_timeout_s is None:
            return await self._client.scan(document)
        try:
            return await asyncio.wait_for(
                self._client.scan(document), timeout=self._item_timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise ScanTimeoutError(
                f"Scan of {document.filename} timed out after {self._item_timeout_s:.0f}s"
            ) from exc

    def _notify(self, item: ScanItem) -> None:
        if self._on_update is None:
            return
        try:
            self._on_update(item)
        except Exception:
            logger.warning("on_update callback failed for %s", item.filename, exc_info=True)
