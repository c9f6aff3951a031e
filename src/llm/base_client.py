# src/llm/base_client.py — v2
"""Abstract LLM client interface used by the enhancement stage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from passportscan.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.3,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Text completion.

        With ``json_mode`` the provider is asked to answer with a JSON
        document; callers must still validate what comes back.
        """

    async def aclose(self) -> None:
        """Release provider connections (no-op by default)."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, ...)."""
