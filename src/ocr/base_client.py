# src/ocr/base_client.py — v1
"""Abstract scan client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from passportscan.core.models import RawScanResult

if TYPE_CHECKING:
    from passportscan.batch.models import ScanDocument


class BaseScanClient(ABC):
    """One document in, one flat field map out.

    Implementations raise ScanError subclasses on failure; the batch
    scheduler turns those into per-item Error states.
    """

    @abstractmethod
    async def scan(self, document: ScanDocument) -> RawScanResult:
        """Send one document to the OCR provider."""

    async def aclose(self) -> None:
        """Release network resources held by the client."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier."""
