# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides raw scan results, a scripted fake scan client, seeded
normalizers and mock LLM clients. No external services: all I/O is faked.
"""

from __future__ import annotations

import asyncio
import random
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from passportscan.batch.models import ScanDocument
from passportscan.config.settings import Settings
from passportscan.core.errors import ProviderError
from passportscan.core.models import RawScanResult
from passportscan.llm.models import LLMResponse
from passportscan.normalize.normalizer import Normalizer
from passportscan.ocr.base_client import BaseScanClient


# === Helpers ===


def make_raw(document_id: str | None = "X1234567", **overrides: str) -> RawScanResult:
    """Raw scan result for a Chilean passport with optional field overrides."""
    fields = {
        "surname": "GONZALEZ",
        "given_name": "MARIA JOSE",
        "nationality": "CHILENA",
        "place_of_birth": "CHILE",
        "date_of_birth": "14/05/1990",
        "date_of_expiry": "2031-03-02",
        "sex": "F",
    }
    if document_id is not None:
        fields["document_id"] = document_id
    fields.update(overrides)
    return RawScanResult(fields=fields, processing_ms=120)


def make_document(filename: str = "p1.jpg", content: bytes = b"img") -> ScanDocument:
    return ScanDocument(filename=filename, mime_type="image/jpeg", content=content)


class FakeScanClient(BaseScanClient):
    """Scan client answering from a filename -> result/exception script.

    Tracks concurrent in-flight calls; ``delays`` lets tests control which
    call resolves first.
    """

    def __init__(
        self,
        results: dict[str, RawScanResult | Exception] | None = None,
        delays: dict[str, float] | None = None,
        default: RawScanResult | None = None,
    ) -> None:
        self.results = results or {}
        self.delays = delays or {}
        self.default = default
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def scan(self, document: ScanDocument) -> RawScanResult:
        self.calls.append(document.filename)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(document.filename, 0.001))
            outcome = self.results.get(document.filename, self.default)
            if outcome is None:
                outcome = make_raw(document_id=f"ID-{document.filename}")
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True

    @property
    def provider_name(self) -> str:
        return "fake"


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def raw_result() -> RawScanResult:
    return make_raw()


@pytest.fixture
def seeded_normalizer() -> Normalizer:
    return Normalizer(rng=random.Random(42))


@pytest.fixture
def fake_client() -> FakeScanClient:
    return FakeScanClient()


@pytest.fixture
def provider_error() -> ProviderError:
    return ProviderError(500, "internal error")


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    return LLMResponse(
        content='{"street_address": "Avenida Providencia", "address_number": "42"}',
        input_tokens=100,
        output_tokens=20,
        model="gpt-4o",
        provider="openai",
        latency_ms=300,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.aclose = AsyncMock()
    client.provider_name = "mock"
    return client


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def raw_factory():
    """The make_raw helper, for tests that need several raw results."""
    return make_raw


@pytest.fixture
def document_factory():
    return make_document


@pytest.fixture
def fake_client_cls() -> type[FakeScanClient]:
    return FakeScanClient
