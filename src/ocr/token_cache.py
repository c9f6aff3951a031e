# src/ocr/token_cache.py — v1
"""Bearer-token cache for the OCR provider.

The provider needs a short-lived OAuth token. Fetching one is a separate
credential exchange, so the token is cached and reused until it is within
``refresh_margin_s`` of expiring. The clock and the fetcher are injected,
which keeps the TTL policy testable without real credentials.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import timezone
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    """A bearer token and its absolute expiry (epoch seconds), if known."""

    token: str
    expires_at: float | None = None


TokenFetcher = Callable[[], Awaitable[AccessToken]]


class TokenCache:
    """Owns the cached token, its TTL, and the refresh policy.

    Concurrent callers share one in-flight refresh.
    """

    def __init__(
        self,
        fetcher: TokenFetcher,
        ttl_s: float = 3600.0,
        refresh_margin_s: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if refresh_margin_s >= ttl_s:
            raise ValueError("refresh_margin_s must be smaller than ttl_s")
        self._fetcher = fetcher
        self._ttl_s = ttl_s
        self._refresh_margin_s = refresh_margin_s
        self._clock = clock
        self._token: str | None = None
        self._expires_at: float = 0.0
        self._lock = asyncio.Lock()

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def is_fresh(self) -> bool:
        return (
            self._token is not None
            and self._expires_at > self._clock() + self._refresh_margin_s
        )

    async def get_token(self) -> str:
        if self.is_fresh():
            return self._token  # type: ignore[return-value]

        async with self._lock:
            # Another waiter may have refreshed while we queued on the lock.
            if self.is_fresh():
                return self._token  # type: ignore[return-value]

            fetched = await self._fetcher()
            now = self._clock()
            self._token = fetched.token
            self._expires_at = fetched.expires_at or (now + self._ttl_s)
            logger.info(
                "Fetched OCR access token (valid for %.0fs)", self._expires_at - now,
            )
            return self._token

    def invalidate(self) -> None:
        """Drop the cached token (e.g. after the provider answered 401)."""
        self._token = None
        self._expires_at = 0.0


class ServiceAccountTokenFetcher:
    """Fetch tokens for a Google service account via google-auth."""

    def __init__(self, credentials_info: dict[str, Any], scopes: list[str]) -> None:
        self._credentials_info = credentials_info
        self._scopes = scopes

    async def __call__(self) -> AccessToken:
        return await asyncio.to_thread(self._refresh)

    def _refresh(self) -> AccessToken:
        from google.auth.transport.requests import Request
        from google.oauth2 import service_account

        credentials = service_account.Credentials.from_service_account_info(
            self._credentials_info, scopes=self._scopes,
        )
        credentials.refresh(Request())
        expires_at = None
        if credentials.expiry is not None:
            # google-auth reports expiry as a naive UTC datetime
            expires_at = credentials.expiry.replace(tzinfo=timezone.utc).timestamp()
        return AccessToken(token=credentials.token or "", expires_at=expires_at)
