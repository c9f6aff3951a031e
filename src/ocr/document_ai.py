# src/ocr/document_ai.py — v1
"""Google Document AI scan client over httpx.

One ``scan`` call is one ``:process`` request and is the unit of
concurrency the batch scheduler bounds. Retryable failures (429, 5xx,
timeouts, transport errors) are retried with backoff; every failure
surfaces as a ScanError subclass carrying the provider's status and text.
A 401 drops the cached token and the request is repeated once with a
fresh one.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import time
from typing import Any

import httpx

from passportscan.batch.models import ScanDocument
from passportscan.config.settings import Settings
from passportscan.core.errors import (
    InvalidProviderResponseError,
    ProviderError,
    ScanTimeoutError,
)
from passportscan.core.models import RawScanResult
from passportscan.core.retry import RetryConfig, build_retry_configs, with_retry
from passportscan.ocr.base_client import BaseScanClient
from passportscan.ocr.compression import compress_image
from passportscan.ocr.response import parse_process_response
from passportscan.ocr.token_cache import ServiceAccountTokenFetcher, TokenCache

logger = logging.getLogger(__name__)


class DocumentAIScanClient(BaseScanClient):
    """Scan documents with a Document AI passport processor."""

    def __init__(
        self,
        endpoint: str,
        token_cache: TokenCache,
        timeout_s: float = 60.0,
        retry_configs: dict[str, RetryConfig] | None = None,
        http_client: httpx.AsyncClient | None = None,
        compression: dict[str, int] | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._token_cache = token_cache
        self._timeout_s = timeout_s
        self._retry_configs = retry_configs
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)
        self._owns_client = http_client is None
        # None disables compression; otherwise kwargs for compress_image
        self._compression = compression

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> DocumentAIScanClient:
        """Build a client, its token cache and fetcher from settings.

        Raises:
            ValueError: If the service-account credentials are not valid JSON.
        """
        try:
            credentials_info: dict[str, Any] = json.loads(
                settings.ocr_credentials_json or "{}"
            )
        except json.JSONDecodeError as exc:
            raise ValueError("OCR_CREDENTIALS_JSON is not valid JSON") from exc

        if not settings.ocr_project_id and credentials_info.get("project_id"):
            settings = settings.model_copy(
                update={"ocr_project_id": credentials_info["project_id"]}
            )

        token_cache = TokenCache(
            fetcher=ServiceAccountTokenFetcher(credentials_info, settings.ocr_scopes_list),
            ttl_s=settings.token_ttl_seconds,
            refresh_margin_s=settings.token_refresh_margin_seconds,
        )
        compression = None
        if settings.image_compression_enabled:
            compression = {
                "max_dimension": settings.image_max_dimension,
                "quality": settings.image_jpeg_quality,
                "target_size_kb": settings.image_target_size_kb,
            }
        return cls(
            endpoint=settings.ocr_endpoint,
            token_cache=token_cache,
            timeout_s=settings.request_timeout_seconds,
            retry_configs=build_retry_configs(
                settings.scan_max_retries, settings.scan_retry_base_delay_seconds,
            ),
            http_client=http_client,
            compression=compression,
        )

    @property
    def provider_name(self) -> str:
        return "documentai"

    async def scan(self, document: ScanDocument) -> RawScanResult:
        if self._compression is not None:
            # Pillow decode/encode blocks; keep it off the event loop.
            document, _ = await asyncio.to_thread(
                compress_image, document, **self._compression,
            )
        return await with_retry(
            self._process_once,
            document,
            operation=f"scan {document.filename}",
            retry_configs=self._retry_configs,
        )

    async def _process_once(
        self, document: ScanDocument, reauth: bool = True,
    ) -> RawScanResult:
        t0 = time.monotonic()
        token = await self._token_cache.get_token()
        body = {
            "rawDocument": {
                "content": base64.b64encode(document.content).decode("ascii"),
                "mimeType": document.mime_type or "application/pdf",
            }
        }
        logger.debug(
            "Sending %s (%d bytes, %s) to Document AI",
            document.filename, document.size_bytes, document.mime_type,
        )
        try:
            response = await self._client.post(
                self._endpoint,
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise ScanTimeoutError(
                f"Document AI request timed out after {self._timeout_s:.0f}s"
            ) from exc

        if response.status_code == 401:
            self._token_cache.invalidate()
            if reauth:
                logger.info(
                    "Token rejected for %s; retrying with a fresh token", document.filename,
                )
                return await self._process_once(document, reauth=False)
        if response.is_error:
            raise ProviderError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise InvalidProviderResponseError("OCR response is not valid JSON") from exc

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        result = parse_process_response(payload, processing_ms=elapsed_ms)
        logger.info(
            "Scanned %s: %d fields in %dms",
            document.filename, len(result.fields), elapsed_ms,
        )
        return result

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
