"""HTTP client for the public volatility data API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..errors import ProxyUpstreamError

logger = logging.getLogger(__name__)

# Example AKShare HTTP service; point IV_UPSTREAM_URL at a real deployment
DEFAULT_UPSTREAM_URL = "http://api.akshare.akfamily.xyz"


class UpstreamClient:
    """Thin async wrapper over httpx for GET requests to the data API."""

    def __init__(
        self,
        base_url: str = DEFAULT_UPSTREAM_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET `endpoint` and return the decoded JSON body.

        Raises ProxyUpstreamError on transport errors, non-2xx responses and
        undecodable bodies.
        """
        url = f"{self._base_url}{endpoint}"
        logger.info("Requesting upstream %s", endpoint)
        try:
            response = await self._client.get(url, params=dict(params or {}))
        except httpx.HTTPError as e:
            logger.error("Upstream request failed: %s: %s", endpoint, e)
            raise ProxyUpstreamError(f"upstream request failed: {e}") from e

        if response.status_code != 200:
            logger.error("Upstream %s responded %d", endpoint, response.status_code)
            raise ProxyUpstreamError(f"upstream responded with status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise ProxyUpstreamError(f"upstream returned invalid JSON: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()
