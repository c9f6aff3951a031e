# src/api/facade.py — v2
"""Public API facade — entry points wiring settings to clients, scheduler and export.

Usage:
    from passportscan.api.facade import process_batch, export_batch
    session = BatchSession()
    outcome = await process_batch(uploads, session=session)
    export = await export_batch(session, "xlsx")

The CLI and the web layer call only these functions.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any, Iterable, Optional

from passportscan.api.models import (
    BatchOutcome,
    ExportFile,
    RejectedFile,
    ScanOutcome,
)
from passportscan.batch.dedup import DuplicateDetector, NoDuplicateDetection
from passportscan.batch.intake import InputValidator
from passportscan.batch.scheduler import BatchScheduler, ItemCallback
from passportscan.batch.session import BatchSession
from passportscan.config.settings import Settings
from passportscan.core.errors import BatchInProgressError
from passportscan.enhance.enhancer import PassportEnhancer
from passportscan.export.assembler import (
    ExportKind,
    export_filename,
    media_type,
    raw_results_to_csv,
    records_to_csv,
    records_to_xlsx,
)
from passportscan.export.service import build_export_records
from passportscan.llm.base_client import BaseLLMClient
from passportscan.llm.client_factory import create_llm_client_from_settings
from passportscan.normalize.address import create_address_strategy
from passportscan.normalize.normalizer import Normalizer
from passportscan.ocr.base_client import BaseScanClient
from passportscan.ocr.document_ai import DocumentAIScanClient

logger = logging.getLogger(__name__)

# (filename, content, declared MIME type or None)
Upload = tuple[str, bytes, Optional[str]]


def apply_overrides(settings: Settings, **overrides: Any) -> Settings:
    """Return settings with non-None overrides applied and re-validated."""
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return settings
    current = settings.model_dump()
    current.update(updates)
    return Settings(_env_file=None, **current)


def build_scan_client(settings: Settings) -> BaseScanClient:
    return DocumentAIScanClient.from_settings(settings)


def build_normalizer(settings: Settings, rng: random.Random | None = None) -> Normalizer:
    return Normalizer(
        address_strategy=create_address_strategy(settings.address_strategy),
        rng=rng,
        marital_status=settings.default_marital_status,
        profession=settings.default_profession,
    )


def build_detector(settings: Settings) -> DuplicateDetector:
    if settings.duplicate_detection_enabled:
        return DuplicateDetector()
    return NoDuplicateDetection()


def build_session(settings: Settings, batch_id: str | None = None) -> BatchSession:
    return BatchSession(batch_id=batch_id, detector=build_detector(settings))


def build_validator(settings: Settings) -> InputValidator:
    return InputValidator(
        max_size_bytes=settings.max_file_size_bytes,
        allowed_mime_types=settings.allowed_mime_types_list,
    )


def item_timeout_seconds(settings: Settings) -> float:
    """Per-item bound covering every attempt plus backoff headroom."""
    attempts = settings.scan_max_retries + 1
    backoff = settings.scan_retry_base_delay_seconds * (2 ** attempts)
    return settings.request_timeout_seconds * attempts + backoff


def build_scheduler(
    settings: Settings,
    scan_client: BaseScanClient,
    normalizer: Normalizer | None = None,
    on_update: ItemCallback | None = None,
) -> BatchScheduler:
    return BatchScheduler(
        scan_client=scan_client,
        normalizer=normalizer or build_normalizer(settings),
        concurrency=settings.batch_concurrency,
        item_timeout_s=item_timeout_seconds(settings),
        on_update=on_update,
    )


def build_enhancer(
    settings: Settings,
    llm_client: BaseLLMClient | None = None,
) -> PassportEnhancer | None:
    """Enhancer for the configured mode, or None when enhancement is off."""
    if settings.enhancement_mode == "none":
        return None
    client = llm_client or create_llm_client_from_settings(settings)
    return PassportEnhancer.from_settings(settings, client)


async def scan_file(
    filename: str,
    content: bytes,
    mime_type: str | None = None,
    settings: Settings | None = None,
    scan_client: BaseScanClient | None = None,
    normalizer: Normalizer | None = None,
) -> ScanOutcome:
    """Validate and scan one file.

    Raises:
        InputRejectedError: If the file fails intake validation.
        ScanError: If the scan fails.
    """
    settings = settings or Settings()
    document = build_validator(settings).validate(filename, content, mime_type)
    client = scan_client or build_scan_client(settings)
    try:
        raw = await client.scan(document)
    finally:
        if scan_client is None:
            await client.aclose()
    record = (normalizer or build_normalizer(settings)).normalize(raw)
    return ScanOutcome(
        filename=filename,
        data=dict(raw.fields),
        record=record,
        processing_time_ms=raw.processing_ms,
    )


async def process_batch(
    uploads: Iterable[Upload],
    session: BatchSession | None = None,
    settings: Settings | None = None,
    scan_client: BaseScanClient | None = None,
    normalizer: Normalizer | None = None,
    on_update: ItemCallback | None = None,
) -> BatchOutcome:
    """Accept uploads into session and run every pending item to completion.

    Raises:
        BatchInProgressError: If session is already processing. No upload
            is added to session in that case.
    """
    settings = settings or Settings()
    session = session if session is not None else build_session(settings)

    if not session.run_lock.acquire(blocking=False):
        raise BatchInProgressError(f"Batch {session.batch_id} is already processing")
    try:
        intake = build_validator(settings).accept(uploads)
        session.add_items(intake.accepted)

        client = scan_client or build_scan_client(settings)
        scheduler = build_scheduler(settings, client, normalizer, on_update)
        try:
            summary = await scheduler.run(session)
        finally:
            if scan_client is None:
                await client.aclose()
    finally:
        session.run_lock.release()

    return BatchOutcome(
        summary=summary,
        rejected=[
            RejectedFile(filename=exc.filename, reason=exc.reason)
            for exc in intake.rejected
        ],
    )


async def export_batch(
    session: BatchSession,
    kind: ExportKind = "xlsx",
    settings: Settings | None = None,
    normalizer: Normalizer | None = None,
    llm_client: BaseLLMClient | None = None,
    day: date | None = None,
) -> ExportFile:
    """Serialize the completed items of session.

    Raises:
        NoRecordsToExportError: If no item completed.
        BatchInProgressError: While session is processing.
    """
    settings = settings or Settings()
    if session.processing:
        raise BatchInProgressError(f"Batch {session.batch_id} is still processing")

    if kind == "raw":
        records_count = session.completed
        content = raw_results_to_csv(session.completed_raw_results()).encode("utf-8")
    else:
        enhancer = build_enhancer(settings, llm_client)
        try:
            records = await build_export_records(
                session,
                normalizer or build_normalizer(settings),
                enhancer=enhancer,
                mode=settings.enhancement_mode,
                concurrency=settings.batch_concurrency,
            )
        finally:
            if enhancer is not None and llm_client is None:
                await enhancer.aclose()
        records_count = len(records)
        if kind == "xlsx":
            content = records_to_xlsx(records)
        else:
            content = records_to_csv(records).encode("utf-8")

    export = ExportFile(
        filename=export_filename(kind, day),
        media_type=media_type(kind),
        content=content,
        row_count=records_count,
    )
    logger.info(
        "Exported batch %s as %s: %d rows (%s)",
        session.batch_id, kind, export.row_count, export.filename,
    )
    return export
