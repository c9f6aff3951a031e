# src/core/errors.py — v1
"""Exception taxonomy for the scan pipeline.

Per-item failures (ScanError and subclasses) are caught by the batch
scheduler and recorded on the item; they never abort a batch.
EnhancementError is always recovered locally. Only NoRecordsToExportError
reaches the user as a batch-level failure.
"""

from __future__ import annotations


class PassportScanError(Exception):
    """Base class for all package errors."""


class InputRejectedError(PassportScanError):
    """File rejected before entering a batch (oversized or disallowed type)."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")


class ScanError(PassportScanError):
    """A single document scan failed."""


class ProviderError(ScanError):
    """OCR provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        detail = body.strip()[:500]
        super().__init__(
            f"Error calling Document AI API: {status_code} {detail}".rstrip()
        )


class ScanTimeoutError(ScanError):
    """The scan call did not complete within the configured timeout."""


class InvalidProviderResponseError(ScanError):
    """Provider response does not have the expected document/entities shape."""


class RetryExhaustedError(ScanError):
    """All retries exhausted for a retryable failure."""

    def __init__(
        self, operation: str, error_type: str, attempts: int, last_error: Exception,
    ):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation} failed after {attempts} attempts ({error_type}): {last_error}"
        )


class EnhancementError(PassportScanError):
    """AI-enhancement call failed or returned unusable output."""


class InvalidTransitionError(PassportScanError):
    """Illegal ScanItem status transition (a programming error)."""


class BatchInProgressError(PassportScanError):
    """Operation not allowed while a batch is processing."""


class NoRecordsToExportError(PassportScanError):
    """The batch has zero completed items."""

    def __init__(self, message: str = "No completed scans to export"):
        super().__init__(message)
