# tests/unit/ocr/test_unit_compression.py — v1
"""Tests for ocr/compression.py — Pillow downscale and re-encode."""

from __future__ import annotations

import io
import random

from PIL import Image

from passportscan.batch.models import ScanDocument
from passportscan.ocr.compression import compress_image


def _noisy_png(size: int) -> bytes:
    rng = random.Random(0)
    image = Image.new("RGB", (size, size))
    image.putdata([
        (rng.randrange(256), rng.randrange(256), rng.randrange(256))
        for _ in range(size * size)
    ])
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class TestCompressImage:
    def test_large_image_downscaled_to_jpeg(self):
        document = ScanDocument(filename="big.png", mime_type="image/png", content=_noisy_png(600))
        compressed, stats = compress_image(document, max_dimension=200, quality=80)
        assert compressed.mime_type == "image/jpeg"
        assert stats.compressed_size < stats.original_size
        assert stats.ratio > 1
        with Image.open(io.BytesIO(compressed.content)) as image:
            assert max(image.size) <= 200

    def test_pdf_untouched(self):
        document = ScanDocument(filename="a.pdf", mime_type="application/pdf", content=b"%PDF")
        compressed, stats = compress_image(document)
        assert compressed is document
        assert stats.ratio == 1.0

    def test_corrupt_image_returns_original(self):
        document = ScanDocument(filename="bad.jpg", mime_type="image/jpeg", content=b"not an image")
        compressed, _ = compress_image(document)
        assert compressed is document
