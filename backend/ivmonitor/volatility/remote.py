"""Reading source backed by the caching data proxy."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any

import httpx

from ..errors import UpstreamFetchError
from .interface import ReadingSource
from .models import Reading
from .seed_volatility import SERIES_ENDPOINTS, fallback_volatility

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = "http://localhost:3000/api"


class RemoteReadingSource(ReadingSource):
    """ReadingSource that reads the latest QVIX point for each symbol.

    Each symbol maps to one proxy endpoint through SERIES_ENDPOINTS. The
    proxy returns the full series as a JSON array of {date, close, ...}
    records; the last record is the current reading.

    Partial failure is expected: an unmapped symbol, a transport error, a
    non-2xx status or an unusable payload only affects that symbol, which
    gets the fixed fallback reading instead.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PROXY_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        endpoints: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._endpoints = dict(SERIES_ENDPOINTS if endpoints is None else endpoints)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch(self, symbols: list[str]) -> list[Reading]:
        results = await asyncio.gather(*(self._fetch_or_fallback(s) for s in symbols))
        fallbacks = sum(1 for r in results if r.is_default)
        logger.info(
            "Remote readings fetched: %d symbols, %d fallback", len(results), fallbacks
        )
        return list(results)

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # --- Internal ---

    async def _fetch_or_fallback(self, symbol: str) -> Reading:
        try:
            return await self._fetch_symbol(symbol)
        except UpstreamFetchError as e:
            logger.warning("Using fallback volatility for %s: %s", symbol, e.reason)
            return Reading(
                symbol=symbol,
                implied_volatility=fallback_volatility(symbol),
                is_default=True,
            )

    async def _fetch_symbol(self, symbol: str) -> Reading:
        endpoint = self._endpoints.get(symbol)
        if endpoint is None:
            raise UpstreamFetchError(symbol, "no series mapping")

        try:
            response = await self._client.get(f"{self._base_url}{endpoint}")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(symbol, f"HTTP {e.response.status_code}") from e
        except Exception as e:
            raise UpstreamFetchError(symbol, str(e) or type(e).__name__) from e

        latest = self._latest_point(symbol, payload)
        iv = latest["close"]
        logger.debug("Fetched %s: IV=%s (%s)", symbol, iv, latest.get("date"))
        return Reading(
            symbol=symbol,
            implied_volatility=iv,
            price=0.0,  # The QVIX series carries no underlying price
            date=str(latest["date"]) if latest.get("date") is not None else None,
        )

    @staticmethod
    def _latest_point(symbol: str, payload: Any) -> dict[str, Any]:
        if not isinstance(payload, list) or not payload:
            raise UpstreamFetchError(symbol, "empty series")
        latest = payload[-1]
        if not isinstance(latest, dict) or "close" not in latest:
            raise UpstreamFetchError(symbol, "malformed series record")
        try:
            close = float(latest["close"])
        except (TypeError, ValueError):
            raise UpstreamFetchError(symbol, f"non-numeric close {latest['close']!r}") from None
        if not math.isfinite(close):
            raise UpstreamFetchError(symbol, "non-finite close")
        return {**latest, "close": close}
