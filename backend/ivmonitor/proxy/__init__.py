"""Caching HTTP proxy in front of the public volatility data API.

Public API:
    TTLCache            - In-memory cache with per-entry expiry
    make_cache_key      - Composite (endpoint, params) cache key
    UpstreamClient      - httpx client for the data API
    CachingDataProxy    - Cache-or-fetch lookup shared by all endpoints
    create_proxy_app    - FastAPI application factory
"""

from .cache import CacheEntry, TTLCache, make_cache_key
from .server import SERIES_PATHS, create_proxy_app, create_proxy_from_env
from .service import CachingDataProxy
from .upstream import UpstreamClient

__all__ = [
    "CacheEntry",
    "CachingDataProxy",
    "SERIES_PATHS",
    "TTLCache",
    "UpstreamClient",
    "create_proxy_app",
    "create_proxy_from_env",
    "make_cache_key",
]
