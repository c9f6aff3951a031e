# tests/unit/ocr/test_unit_response.py — v1
"""Tests for ocr/response.py — provider payload validation."""

from __future__ import annotations

import pytest

from passportscan.core.errors import InvalidProviderResponseError
from passportscan.ocr.response import parse_process_response


class TestParseProcessResponse:
    def test_flattens_entities(self):
        payload = {
            "document": {
                "text": "...",
                "entities": [
                    {"type": "surname", "mentionText": "DOE", "confidence": 0.98},
                    {"type": "document_id", "mentionText": "X123"},
                ],
            }
        }
        raw = parse_process_response(payload, processing_ms=42)
        assert raw.fields == {"surname": "DOE", "document_id": "X123"}
        assert raw.processing_ms == 42

    def test_last_entity_of_a_type_wins(self):
        payload = {"document": {"entities": [
            {"type": "surname", "mentionText": "A"},
            {"type": "surname", "mentionText": "B"},
        ]}}
        assert parse_process_response(payload).fields["surname"] == "B"

    def test_skips_empty_entities(self):
        payload = {"document": {"entities": [
            {"type": "", "mentionText": "A"},
            {"type": "sex"},
        ]}}
        assert parse_process_response(payload).fields == {}

    def test_document_without_entities(self):
        assert parse_process_response({"document": {}}).fields == {}

    @pytest.mark.parametrize("payload", [{}, {"error": "x"}, [], None, {"document": "x"}])
    def test_rejects_wrong_shape(self, payload):
        with pytest.raises(InvalidProviderResponseError):
            parse_process_response(payload)
