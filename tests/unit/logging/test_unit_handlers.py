# tests/unit/logging/test_unit_handlers.py — v2
"""Tests for logging/handlers.py — size parsing and rotating handler."""

from __future__ import annotations

import pytest

from passportscan.logging.handlers import create_rotating_handler, parse_size


class TestParseSize:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1 GB", 1024**3), ("2048", 2048)],
    )
    def test_valid(self, text, expected):
        assert parse_size(text) == expected

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid size"):
            parse_size("ten megs")


class TestRotatingHandler:
    def test_creates_parent_dirs(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "scan.log"
        handler = create_rotating_handler(target, rotation="1KB", retention=3)
        try:
            assert target.parent.is_dir()
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
        finally:
            handler.close()
