# src/web/routes.py — v1
"""Scan, batch and export endpoints, plus the minimal page routes.

Views are synchronous; each one runs its async facade call on a fresh
event loop with a scan client created inside that loop.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Awaitable, Callable, TypeVar

from flask import Blueprint, current_app, jsonify, request, send_file

from passportscan.api import facade
from passportscan.core.errors import (
    BatchInProgressError,
    InputRejectedError,
    NoRecordsToExportError,
    ScanError,
)
from passportscan.ocr.base_client import BaseScanClient

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)
pages = Blueprint("pages", __name__)

T = TypeVar("T")

EXPORT_KINDS = ("csv", "xlsx", "raw")


def _ctx():
    return current_app.extensions["passportscan"]


def _run_with_client(call: Callable[[BaseScanClient], Awaitable[T]]) -> T:
    ctx = _ctx()

    async def runner() -> T:
        client = ctx.scan_client_factory()
        try:
            return await call(client)
        finally:
            await client.aclose()

    return asyncio.run(runner())


def _uploads(files) -> list[tuple[str, bytes, str | None]]:
    return [(f.filename or "upload", f.read(), f.mimetype) for f in files]


def _summary_payload(summary) -> dict[str, Any]:
    payload = summary.model_dump(mode="json")
    payload["success"] = True
    return payload


@bp.post("/api/scan")
def scan():
    upload = request.files.get("file")
    if upload is None:
        return jsonify(error="No file provided"), 400
    ctx = _ctx()
    filename, content, mime_type = _uploads([upload])[0]

    try:
        outcome = _run_with_client(
            lambda client: facade.scan_file(
                filename, content, mime_type,
                settings=ctx.settings, scan_client=client, normalizer=ctx.normalizer,
            )
        )
    except InputRejectedError as exc:
        return jsonify(error=str(exc)), 400
    except ScanError as exc:
        logger.warning("Scan of %s failed: %s", filename, exc)
        return jsonify(error="Error processing passport", details=str(exc)), 500

    return jsonify(
        success=True,
        data=outcome.data,
        record=outcome.record.model_dump(by_alias=True),
        processingTime=outcome.processing_time_ms,
    )


@bp.post("/api/batch")
def run_batch():
    files = request.files.getlist("files")
    if not files:
        return jsonify(error="No files provided"), 400
    ctx = _ctx()
    session = ctx.registry.get_or_create(request.form.get("batch_id") or None)
    uploads = _uploads(files)

    try:
        outcome = _run_with_client(
            lambda client: facade.process_batch(
                uploads, session=session, settings=ctx.settings,
                scan_client=client, normalizer=ctx.normalizer,
            )
        )
    except BatchInProgressError as exc:
        return jsonify(error=str(exc)), 409

    payload = _summary_payload(outcome.summary)
    payload["rejected"] = [r.model_dump() for r in outcome.rejected]
    return jsonify(payload)


@bp.get("/api/batch/<batch_id>")
def batch_status(batch_id: str):
    session = _ctx().registry.get(batch_id)
    if session is None:
        return jsonify(error="Batch not found"), 404
    return jsonify(_summary_payload(session.summary()))


@bp.get("/api/batch/<batch_id>/export")
def export(batch_id: str):
    ctx = _ctx()
    session = ctx.registry.get(batch_id)
    if session is None:
        return jsonify(error="Batch not found"), 404
    kind = request.args.get("format", "xlsx").lower()
    if kind not in EXPORT_KINDS:
        return jsonify(error=f"Unsupported export format: {kind}"), 400

    try:
        export_file = asyncio.run(
            facade.export_batch(
                session, kind, settings=ctx.settings,
                normalizer=ctx.normalizer, llm_client=ctx.llm_client,
            )
        )
    except NoRecordsToExportError as exc:
        return jsonify(error=str(exc)), 409
    except BatchInProgressError as exc:
        return jsonify(error=str(exc)), 409

    return send_file(
        io.BytesIO(export_file.content),
        mimetype=export_file.media_type,
        as_attachment=True,
        download_name=export_file.filename,
    )


@bp.delete("/api/batch/<batch_id>")
def clear_batch(batch_id: str):
    session = _ctx().registry.get(batch_id)
    if session is None:
        return jsonify(error="Batch not found"), 404
    try:
        session.reset()
    except BatchInProgressError as exc:
        return jsonify(error=str(exc)), 409
    return jsonify(success=True, batch_id=batch_id)


@pages.get("/")
@pages.get("/dashboard")
def dashboard():
    return "<h1>Passport scanner</h1>"


@pages.get("/scan")
def scan_page():
    return "<h1>Scan passports</h1>"


@pages.get("/login")
@pages.get("/register")
@pages.get("/forgot-password")
def auth_page():
    return "<h1>Sign in</h1>"
