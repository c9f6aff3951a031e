# src/export/service.py — v1
"""Build export rows from a finished batch, optionally AI-enhanced.

Completed items already carry a locally normalized record from the
scheduler; enhancement only replaces it when the AI answer is usable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

from passportscan.batch.models import ScanItem, ScanStatus
from passportscan.batch.session import BatchSession
from passportscan.core.errors import BatchInProgressError, NoRecordsToExportError
from passportscan.core.models import NormalizedRecord
from passportscan.enhance.enhancer import PassportEnhancer
from passportscan.normalize.normalizer import Normalizer

logger = logging.getLogger(__name__)

EnhancementMode = Literal["none", "per_record", "bulk"]


def _completed_items(session: BatchSession) -> list[ScanItem]:
    return [
        item for item in session.items
        if item.status is ScanStatus.COMPLETED
        and item.raw_result is not None
        and item.record is not None
    ]


async def _enhance_per_record(
    items: list[ScanItem],
    normalizer: Normalizer,
    enhancer: PassportEnhancer,
    concurrency: int,
) -> list[NormalizedRecord]:
    semaphore = asyncio.Semaphore(concurrency)
    request_address = normalizer.address_strategy.requests_ai_address

    async def enhance_one(item: ScanItem) -> NormalizedRecord:
        async with semaphore:
            enhanced = await enhancer.enhance(item.raw_result, request_address=request_address)
        if enhanced is None:
            return item.record
        return normalizer.normalize(item.raw_result, enhanced)

    return list(await asyncio.gather(*(enhance_one(item) for item in items)))


async def build_export_records(
    session: BatchSession,
    normalizer: Normalizer,
    enhancer: PassportEnhancer | None = None,
    mode: EnhancementMode = "none",
    concurrency: int = 5,
) -> list[NormalizedRecord]:
    """Records for every Completed item, in session order.

    Raises:
        BatchInProgressError: While the batch is still processing.
        NoRecordsToExportError: If no item completed.
    """
    if session.processing:
        raise BatchInProgressError(f"Batch {session.batch_id} is still processing")
    items = _completed_items(session)
    if not items:
        raise NoRecordsToExportError()

    if enhancer is None or mode == "none":
        return [item.record for item in items]

    if mode == "per_record":
        records = await _enhance_per_record(items, normalizer, enhancer, max(concurrency, 1))
    else:
        bulk = await enhancer.normalize_many([item.raw_result for item in items])
        records = [
            enhanced if enhanced is not None else item.record
            for item, enhanced in zip(items, bulk)
        ]

    replaced = sum(
        1 for item, record in zip(items, records) if record is not item.record
    )
    logger.info(
        "Export records for batch %s: %d rows, %d AI-enhanced (%s)",
        session.batch_id, len(records), replaced, mode,
    )
    return records
