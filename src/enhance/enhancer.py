# src/enhance/enhancer.py — v1
"""AI enhancement of scan results.

The LLM is an unreliable collaborator: call failures, markdown-wrapped or
malformed JSON and wrong shapes are all expected. Every public method
here returns None (or None per record) on failure instead of raising, so
callers fall back to local normalization.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from passportscan.config.settings import Settings
from passportscan.core.errors import EnhancementError
from passportscan.core.models import (
    EXPORT_COLUMNS,
    EnhancedFields,
    NormalizedRecord,
    RawScanResult,
)
from passportscan.enhance.prompts import (
    SYSTEM_PROMPT,
    build_bulk_prompt,
    build_record_prompt,
)
from passportscan.llm.base_client import BaseLLMClient
from passportscan.llm.models import Message
from passportscan.normalize.address import ADDRESS_SENTINEL
from passportscan.normalize.normalizer import DEFAULT_MARITAL_STATUS, DEFAULT_PROFESSION

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def parse_json_content(content: str) -> Any:
    """Decode an LLM answer, tolerating markdown code fences.

    Raises:
        EnhancementError: If no JSON document can be decoded.
    """
    cleaned = strip_code_fences(content)
    if not cleaned:
        raise EnhancementError("Empty AI response")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise EnhancementError(f"AI response is not valid JSON: {exc}") from exc


def parse_enhanced_fields(content: str) -> EnhancedFields:
    """Validate a single-record answer into EnhancedFields.

    Raises:
        EnhancementError: On invalid JSON or a non-object payload.
    """
    data = parse_json_content(content)
    if not isinstance(data, dict):
        raise EnhancementError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    try:
        return EnhancedFields.model_validate(data)
    except ValidationError as exc:
        raise EnhancementError(f"Unexpected AI response shape: {exc}") from exc


def parse_bulk_records(content: str, expected: int) -> list[NormalizedRecord | None]:
    """Validate a bulk answer into records aligned with the input order.

    Entries that fail validation come back as None.

    Raises:
        EnhancementError: On invalid JSON, a missing array or a count mismatch.
    """
    data = parse_json_content(content)
    if isinstance(data, dict):
        data = data.get("records")
    if not isinstance(data, list):
        raise EnhancementError("Expected a JSON array of records")
    if len(data) != expected:
        raise EnhancementError(
            f"Expected {expected} records, AI returned {len(data)}"
        )

    records: list[NormalizedRecord | None] = []
    for index, entry in enumerate(data):
        try:
            records.append(NormalizedRecord.model_validate(entry))
        except ValidationError as exc:
            logger.warning(
                "Bulk record %d has an unexpected shape (%d errors); using local normalization",
                index, exc.error_count(),
            )
            records.append(None)
    return records


class PassportEnhancer:
    """Ask an LLM to fill gaps in scan results."""

    def __init__(
        self,
        client: BaseLLMClient,
        temperature: float = 0.3,
        max_tokens: int = 4096,
        marital_status: str = DEFAULT_MARITAL_STATUS,
        profession: str = DEFAULT_PROFESSION,
    ) -> None:
        self._client = client
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._marital_status = marital_status
        self._profession = profession

    @classmethod
    def from_settings(cls, settings: Settings, client: BaseLLMClient) -> PassportEnhancer:
        return cls(
            client=client,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            marital_status=settings.default_marital_status,
            profession=settings.default_profession,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _ask(self, prompt: str) -> str:
        response = await self._client.complete(
            [Message(role="user", content=prompt)],
            system=SYSTEM_PROMPT,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            json_mode=True,
        )
        logger.debug(
            "AI enhancement answered in %dms (%d output tokens)",
            response.latency_ms, response.output_tokens,
        )
        return response.content

    async def enhance(
        self, raw: RawScanResult, request_address: bool = False,
    ) -> EnhancedFields | None:
        """Enhance one scan result; None when the AI path fails."""
        prompt = build_record_prompt(dict(raw.fields), request_address)
        try:
            content = await self._ask(prompt)
            return parse_enhanced_fields(content)
        except EnhancementError as exc:
            logger.warning("AI enhancement unusable for %s: %s", raw.document_id, exc)
        except Exception as exc:
            logger.warning("AI enhancement call failed for %s: %s", raw.document_id, exc)
        return None

    async def normalize_many(
        self, raws: list[RawScanResult],
    ) -> list[NormalizedRecord | None]:
        """One call for all results; None entries need local normalization."""
        if not raws:
            return []
        prompt = build_bulk_prompt(
            [dict(raw.fields) for raw in raws],
            list(EXPORT_COLUMNS),
            marital_status=self._marital_status,
            profession=self._profession,
            address_sentinel=ADDRESS_SENTINEL,
        )
        try:
            content = await self._ask(prompt)
            return parse_bulk_records(content, expected=len(raws))
        except EnhancementError as exc:
            logger.warning("Bulk AI normalization unusable: %s", exc)
        except Exception as exc:
            logger.warning("Bulk AI normalization call failed: %s", exc)
        return [None] * len(raws)
