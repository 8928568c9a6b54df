"""FastAPI app exposing the cached volatility series endpoints."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import ProxyUpstreamError
from .cache import DEFAULT_TTL, TTLCache
from .service import CachingDataProxy
from .upstream import DEFAULT_UPSTREAM_URL, UpstreamClient

logger = logging.getLogger(__name__)

# One proxied GET endpoint per QVIX series; the path is passed upstream as-is
SERIES_PATHS: tuple[str, ...] = (
    "/index_option_50etf_qvix",  # SSE 50 ETF options
    "/index_option_300index_qvix",  # CSI 300 index options
    "/index_option_1000index_qvix",  # CSI 1000 index options
    "/index_option_50index_qvix",  # SSE 50 index options
    "/index_option_500index_qvix",  # CSI 500 index options
)

API_PREFIX = "/api"


def create_proxy_from_env() -> CachingDataProxy:
    """Build the proxy from IV_UPSTREAM_URL and IV_CACHE_TTL."""
    base_url = os.environ.get("IV_UPSTREAM_URL", "").strip() or DEFAULT_UPSTREAM_URL
    ttl_raw = os.environ.get("IV_CACHE_TTL", "").strip()
    ttl = float(ttl_raw) if ttl_raw else DEFAULT_TTL
    logger.info("Proxy upstream %s, cache TTL %.0fs", base_url, ttl)
    return CachingDataProxy(UpstreamClient(base_url=base_url), TTLCache(ttl=ttl))


def create_proxy_app(proxy: CachingDataProxy | None = None) -> FastAPI:
    """Create the proxy application.

    Every series endpoint shares one cache and TTL. Upstream failures become
    500 {"error": ...}; unknown paths become 404 {"error": ...}.
    """
    proxy = proxy or create_proxy_from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await proxy.aclose()
        logger.info("Proxy shut down")

    app = FastAPI(title="ivmonitor-proxy", lifespan=lifespan)
    app.state.proxy = proxy
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "API endpoint not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    for path in SERIES_PATHS:
        app.add_api_route(
            f"{API_PREFIX}{path}",
            _series_handler(proxy, path),
            methods=["GET"],
            name=path.strip("/"),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def _series_handler(proxy: CachingDataProxy, endpoint: str):
    async def handler() -> JSONResponse:
        try:
            data = await proxy.get(endpoint)
        except ProxyUpstreamError as e:
            return JSONResponse(status_code=500, content={"error": str(e)})
        except Exception as e:
            logger.exception("Unexpected proxy failure for %s", endpoint)
            return JSONResponse(status_code=500, content={"error": str(e)})
        return JSONResponse(content=data)

    return handler
