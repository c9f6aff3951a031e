# src/ocr/response.py — v1
"""Boundary validation of the Document AI ``:process`` response.

Only ``document.entities[].type`` / ``mentionText`` are read; everything
else in the payload is ignored. A response without a ``document`` object
is rejected rather than silently producing an empty result.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from passportscan.core.errors import InvalidProviderResponseError
from passportscan.core.models import RawScanResult


class ProviderEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = ""
    mention_text: str = Field(default="", alias="mentionText")
    confidence: float = 0.0


class ProviderDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entities: list[ProviderEntity] = Field(default_factory=list)


class ProcessResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    document: ProviderDocument


def parse_process_response(payload: Any, processing_ms: int = 0) -> RawScanResult:
    """Validate a provider payload and flatten its entities.

    Later entities of the same type overwrite earlier ones; entities
    without a type or text are skipped.

    Raises:
        InvalidProviderResponseError: If the payload lacks the document shape.
    """
    try:
        response = ProcessResponse.model_validate(payload)
    except ValidationError as exc:
        raise InvalidProviderResponseError(
            f"Unexpected OCR response shape: {exc.error_count()} validation error(s)"
        ) from exc

    fields: dict[str, str] = {}
    for entity in response.document.entities:
        if entity.type and entity.mention_text:
            fields[entity.type] = entity.mention_text
    return RawScanResult(fields=fields, processing_ms=processing_ms)
