# tests/unit/core/test_unit_retry.py — v1
"""Tests for core/retry.py — classification and backoff loop."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from passportscan.core.errors import (
    InvalidProviderResponseError,
    ProviderError,
    RetryExhaustedError,
    ScanTimeoutError,
)
from passportscan.core.retry import (
    RetryConfig,
    _compute_delay,
    build_retry_configs,
    classify_error,
    with_retry,
)

FAST = build_retry_configs(max_retries=2, base_delay_s=0.0)


class TestClassifyError:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (ProviderError(429, ""), "rate_limit"),
            (ProviderError(503, ""), "server_error"),
            (ProviderError(400, ""), "client_error"),
            (ScanTimeoutError("t"), "timeout"),
            (asyncio.TimeoutError(), "timeout"),
            (httpx.ConnectError("boom"), "transport"),
            (InvalidProviderResponseError("bad"), "invalid_response"),
            (RuntimeError("rate limit exceeded"), "rate_limit"),
            (RuntimeError("something else"), "unknown"),
        ],
    )
    def test_classify(self, error, expected):
        assert classify_error(error) == expected


class TestComputeDelay:
    def test_exponential_without_jitter(self):
        config = RetryConfig(max_retries=3, base_delay_s=1.0, jitter=False)
        assert [_compute_delay(config, i) for i in range(3)] == [1.0, 2.0, 4.0]

    def test_jitter_bounds(self):
        config = RetryConfig(max_retries=3, base_delay_s=1.0)
        for _ in range(20):
            assert 0.5 <= _compute_delay(config, 0) <= 1.5


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        fn = AsyncMock(return_value="ok")
        assert await with_retry(fn, retry_configs=FAST) == "ok"
        fn.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        fn = AsyncMock(side_effect=[ProviderError(503, ""), "ok"])
        sleep = AsyncMock()
        assert await with_retry(fn, retry_configs=FAST, sleep=sleep) == "ok"
        assert fn.await_count == 2
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exhausted(self):
        fn = AsyncMock(side_effect=ProviderError(429, "slow down"))
        with pytest.raises(RetryExhaustedError) as exc_info:
            await with_retry(fn, operation="scan", retry_configs=FAST, sleep=AsyncMock())
        assert exc_info.value.attempts == 3
        assert exc_info.value.error_type == "rate_limit"
        assert fn.await_count == 3

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        fn = AsyncMock(side_effect=ProviderError(400, "bad request"))
        with pytest.raises(ProviderError):
            await with_retry(fn, retry_configs=FAST)
        fn.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_zero_retries_reraises_original(self):
        fn = AsyncMock(side_effect=ProviderError(500, "down"))
        configs = build_retry_configs(max_retries=0, base_delay_s=0.0)
        with pytest.raises(ProviderError):
            await with_retry(fn, retry_configs=configs)
        fn.assert_awaited_once()
