# tests/unit/llm/test_unit_client_factory.py — v1
"""Tests for llm/client_factory.py and the OpenAI adapter."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from passportscan.llm.adapters.openai_adapter import OpenAIAdapter
from passportscan.llm.client_factory import (
    UnsupportedProviderError,
    create_llm_client,
    create_llm_client_from_settings,
)
from passportscan.llm.models import Message


def _fake_openai(content: str | None = '{"ok": true}') -> MagicMock:
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=11, completion_tokens=7),
    )
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    client.close = AsyncMock()
    return client


class TestFactory:
    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError, match="openai"):
            create_llm_client("anthropic", "claude")

    def test_from_settings(self, settings):
        settings = settings.model_copy(update={"openai_api_key": "sk-test", "llm_model": "gpt-4o-mini"})
        client = create_llm_client_from_settings(settings)
        assert isinstance(client, OpenAIAdapter)
        assert client.provider_name == "openai"
        assert client._model == "gpt-4o-mini"
        assert client._api_key == "sk-test"


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete_json_mode(self):
        fake = _fake_openai()
        adapter = OpenAIAdapter(model="gpt-4o", client=fake)
        resp = await adapter.complete(
            [Message(role="user", content="datos")],
            system="sistema",
            max_tokens=256,
            temperature=0.1,
            json_mode=True,
        )
        kwargs = fake.chat.completions.create.await_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "sistema"}
        assert kwargs["messages"][1] == {"role": "user", "content": "datos"}
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 256
        assert resp.content == '{"ok": true}'
        assert resp.input_tokens == 11
        assert resp.output_tokens == 7

    @pytest.mark.asyncio
    async def test_plain_mode_and_empty_content(self):
        fake = _fake_openai(content=None)
        adapter = OpenAIAdapter(client=fake)
        resp = await adapter.complete([Message(role="user", content="x")])
        assert "response_format" not in fake.chat.completions.create.await_args.kwargs
        assert resp.content == ""

    @pytest.mark.asyncio
    async def test_aclose(self):
        fake = _fake_openai()
        await OpenAIAdapter(client=fake).aclose()
        fake.close.assert_awaited_once()
