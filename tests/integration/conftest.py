# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests.

The OCR provider is replaced at the HTTP boundary: a real
DocumentAIScanClient talks to an httpx.MockTransport that decodes each
request body and answers from a script keyed by document content.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging

import httpx
import pytest

from passportscan.core.retry import build_retry_configs
from passportscan.ocr.document_ai import DocumentAIScanClient
from passportscan.ocr.token_cache import AccessToken, TokenCache

logger = logging.getLogger(__name__)

ENDPOINT = "https://us-documentai.googleapis.com/v1/projects/p/locations/us/processors/x:process"


def entities_payload(fields: dict[str, str]) -> dict:
    return {
        "document": {
            "entities": [
                {"type": key, "mentionText": value} for key, value in fields.items()
            ]
        }
    }


class FakeDocumentAI:
    """Scripted Document AI endpoint with in-flight accounting."""

    def __init__(self, delay_s: float = 0.01) -> None:
        self.delay_s = delay_s
        self.answers: dict[bytes, httpx.Response] = {}
        self.requests = 0
        self.in_flight = 0
        self.max_in_flight = 0

    def passport(self, content: bytes, document_id: str, **fields: str) -> None:
        base = {
            "document_id": document_id,
            "surname": "PEREZ",
            "given_name": "ANA",
            "nationality": "ARGENTINA",
            "date_of_birth": "01/02/1985",
            "date_of_expiry": "2030-06-15",
            "sex": "F",
        }
        base.update(fields)
        self.answers[content] = httpx.Response(200, json=entities_payload(base))

    def fail(self, content: bytes, status: int = 400, text: str = "Invalid document") -> None:
        self.answers[content] = httpx.Response(status, text=text)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay_s)
            body = json.loads(request.content)
            content = base64.b64decode(body["rawDocument"]["content"])
            scripted = self.answers.get(content)
            if scripted is None:
                return httpx.Response(404, text="unscripted document")
            return httpx.Response(
                scripted.status_code, content=scripted.content, headers=scripted.headers,
            )
        finally:
            self.in_flight -= 1


async def _fetch_token() -> AccessToken:
    return AccessToken(token="integration-token")


@pytest.fixture
def document_ai() -> FakeDocumentAI:
    return FakeDocumentAI()


@pytest.fixture
def scan_client(document_ai: FakeDocumentAI) -> DocumentAIScanClient:
    return DocumentAIScanClient(
        endpoint=ENDPOINT,
        token_cache=TokenCache(_fetch_token),
        timeout_s=5.0,
        retry_configs=build_retry_configs(1, 0.0),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(document_ai.handler)),
    )
