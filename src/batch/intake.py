# src/batch/intake.py — v1
"""Batch intake — file discovery and input validation.

Files are checked for size and MIME type before they ever become
ScanItems; rejected files are reported back to the caller and never
reach the scheduler.
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from passportscan.batch.models import ScanDocument, ScanItem
from passportscan.core.errors import InputRejectedError

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_MIME_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "application/pdf")
DEFAULT_MAX_SIZE_BYTES = 10 * 1024 * 1024

# Supported file extensions mapped to MIME types
SUPPORTED_EXTENSIONS: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".pdf": "application/pdf",
}


def guess_mime_type(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix in SUPPORTED_EXTENSIONS:
        return SUPPORTED_EXTENSIONS[suffix]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


@dataclass
class IntakeResult:
    """Accepted items and rejected files from one intake pass."""

    accepted: list[ScanItem] = field(default_factory=list)
    rejected: list[InputRejectedError] = field(default_factory=list)


class InputValidator:
    """Validate uploads against the size ceiling and MIME allow-list."""

    def __init__(
        self,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        allowed_mime_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES,
    ) -> None:
        self._max_size_bytes = max_size_bytes
        self._allowed = frozenset(allowed_mime_types)

    def validate(
        self, filename: str, content: bytes, mime_type: str | None = None,
    ) -> ScanDocument:
        """Return a ScanDocument for an acceptable file.

        Raises:
            InputRejectedError: If the file is empty, too large or of a
                disallowed type.
        """
        mime = (mime_type or "").split(";")[0].strip().lower() or guess_mime_type(filename)
        if mime == "image/jpg":
            mime = "image/jpeg"
        if mime not in self._allowed:
            raise InputRejectedError(filename, f"unsupported file type {mime}")
        if not content:
            raise InputRejectedError(filename, "file is empty")
        if len(content) > self._max_size_bytes:
            limit_mb = self._max_size_bytes / (1024 * 1024)
            raise InputRejectedError(
                filename, f"file exceeds the {limit_mb:.0f} MB limit",
            )
        return ScanDocument(filename=filename, mime_type=mime, content=content)

    def accept(
        self, uploads: Iterable[tuple[str, bytes, str | None]],
    ) -> IntakeResult:
        """Validate (filename, content, mime_type) triples into pending items."""
        result = IntakeResult()
        for filename, content, mime_type in uploads:
            try:
                document = self.validate(filename, content, mime_type)
            except InputRejectedError as exc:
                logger.warning("Rejected %s: %s", filename, exc.reason)
                result.rejected.append(exc)
                continue
            result.accepted.append(ScanItem(document=document))
        logger.info(
            "Intake: %d accepted, %d rejected",
            len(result.accepted), len(result.rejected),
        )
        return result

    def accept_paths(self, paths: Iterable[Path]) -> IntakeResult:
        """Validate files on disk into pending items."""
        return self.accept(
            (path.name, path.read_bytes(), None) for path in paths
        )


def discover_files(root: Path, recursive: bool = True) -> list[Path]:
    """List supported passport files under root, sorted by path.

    Raises:
        ValueError: If root is not a directory.
    """
    if not root.is_dir():
        raise ValueError(f"Scan root is not a directory: {root}")

    pattern_fn = root.rglob if recursive else root.glob
    found = [
        path for path in sorted(pattern_fn("*"))
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    ]
    logger.info(
        "Scanned %s: found %d supported files (recursive=%s)",
        root, len(found), recursive,
    )
    return found


def expand_inputs(inputs: Iterable[Path], recursive: bool = True) -> list[Path]:
    """Expand a mix of files and directories into a flat file list."""
    paths: list[Path] = []
    for entry in inputs:
        if entry.is_dir():
            paths.extend(discover_files(entry, recursive=recursive))
        else:
            paths.append(entry)
    return paths
