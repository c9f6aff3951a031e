# src/ocr/compression.py — v1
"""Pre-upload image compression.

Passport photos straight off a phone are several MB; OCR needs roughly
1000px on the long side. Images are downscaled and re-encoded as JPEG,
stepping quality down until the target size is met. PDFs and anything
Pillow cannot open pass through untouched.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from passportscan.batch.models import ScanDocument

logger = logging.getLogger(__name__)

_MIN_QUALITY = 40
_QUALITY_STEP = 10


@dataclass(frozen=True)
class CompressionStats:
    original_size: int
    compressed_size: int

    @property
    def ratio(self) -> float:
        if self.compressed_size == 0:
            return 1.0
        return self.original_size / self.compressed_size


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def compress_image(
    document: ScanDocument,
    max_dimension: int = 1000,
    quality: int = 80,
    target_size_kb: int = 500,
) -> tuple[ScanDocument, CompressionStats]:
    """Return a compressed copy of an image document, or the original.

    The compressed version is only used when it is actually smaller.
    """
    original_size = document.size_bytes
    unchanged = (document, CompressionStats(original_size, original_size))
    if not document.mime_type.startswith("image/"):
        return unchanged

    try:
        with Image.open(io.BytesIO(document.content)) as image:
            image.load()
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            image.thumbnail((max_dimension, max_dimension))

            target_bytes = target_size_kb * 1024
            data = _encode_jpeg(image, quality)
            while len(data) > target_bytes and quality - _QUALITY_STEP >= _MIN_QUALITY:
                quality -= _QUALITY_STEP
                data = _encode_jpeg(image, quality)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("Image compression failed for %s: %s", document.filename, exc)
        return unchanged

    if len(data) >= original_size:
        return unchanged

    stats = CompressionStats(original_size, len(data))
    logger.debug(
        "Compressed %s: %d -> %d bytes (%.1fx, quality=%d)",
        document.filename, original_size, len(data), stats.ratio, quality,
    )
    compressed = ScanDocument(
        filename=document.filename,
        mime_type="image/jpeg",
        content=data,
    )
    return compressed, stats
