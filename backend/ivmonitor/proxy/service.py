"""Cache-in-front-of-upstream lookup used by every proxy endpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .cache import TTLCache, make_cache_key
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)


class CachingDataProxy:
    """Deduplicates upstream calls per (endpoint, params) within the cache TTL.

    Upstream failures propagate as ProxyUpstreamError and nothing is cached
    for them; falling back to a default value is the caller's job.
    """

    def __init__(self, upstream: UpstreamClient, cache: TTLCache | None = None) -> None:
        self._upstream = upstream
        self._cache = cache or TTLCache()

    @property
    def cache(self) -> TTLCache:
        return self._cache

    async def get(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        key = make_cache_key(endpoint, params)
        entry = self._cache.get(key)
        if entry is not None:
            logger.debug("Cache hit: %s", key)
            return entry.value

        purged = self._cache.purge_expired()
        if purged:
            logger.debug("Purged %d expired cache entries", purged)

        value = await self._upstream.fetch(endpoint, params)
        self._cache.set(key, value)
        logger.debug("Cached %s for %.0fs", key, self._cache.ttl)
        return value

    async def aclose(self) -> None:
        await self._upstream.aclose()
