# src/core/retry.py — v2
"""Retry policy with exponential backoff for outbound provider calls.

Failures are classified first; only rate limits, server errors, timeouts
and transport errors are retried. Anything else is re-raised untouched
so the caller sees the provider's own message.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from passportscan.core.errors import (
    InvalidProviderResponseError,
    ProviderError,
    RetryExhaustedError,
    ScanTimeoutError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=3, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=2, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=3, base_delay_s=2.0),
    "transport": RetryConfig(max_retries=2, base_delay_s=1.0),
}


def build_retry_configs(max_retries: int, base_delay_s: float) -> dict[str, RetryConfig]:
    """Uniform retry configs for every retryable error type."""
    return {
        error_type: RetryConfig(
            max_retries=max_retries,
            base_delay_s=base_delay_s,
            backoff_factor=cfg.backoff_factor,
            jitter=cfg.jitter,
        )
        for error_type, cfg in DEFAULT_RETRY_CONFIGS.items()
    }


def classify_error(error: BaseException) -> str:
    """Classify an exception into a retry error type."""
    if isinstance(error, ProviderError):
        if error.status_code == 429:
            return "rate_limit"
        if error.status_code >= 500:
            return "server_error"
        return "client_error"
    if isinstance(error, (ScanTimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return "timeout"
    if isinstance(error, httpx.TransportError):
        return "transport"
    if isinstance(error, InvalidProviderResponseError):
        return "invalid_response"

    # SDK exceptions (openai etc.) only expose their status in the message.
    msg = str(error).lower()
    name = type(error).__name__.lower()
    if "429" in msg or "rate limit" in msg or "ratelimit" in name:
        return "rate_limit"
    if "timeout" in name or "timed out" in msg:
        return "timeout"
    if any(code in msg for code in ("500", "502", "503", "504")):
        return "server_error"
    if "connection" in name:
        return "transport"
    return "unknown"


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "call",
    retry_configs: dict[str, RetryConfig] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **kwargs: Any,
) -> Any:
    """Execute an async function with retry logic.

    Raises:
        RetryExhaustedError: A retryable failure persisted past its budget.
        Exception: Non-retryable failures propagate unchanged.
    """
    configs = DEFAULT_RETRY_CONFIGS if retry_configs is None else retry_configs
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1
            config = configs.get(error_type)

            if config is None or config.max_retries == 0:
                raise
            if attempts > config.max_retries:
                raise RetryExhaustedError(operation, error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "%s — %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await sleep(delay)
