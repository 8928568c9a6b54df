"""ASGI application factories.

Serve with any ASGI server, e.g.:

    uvicorn ivmonitor.main:create_app --factory --port 8000
    uvicorn ivmonitor.main:create_proxy --factory --port 3000
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .logs import configure_logging
from .proxy.server import create_proxy_app
from .volatility.api import create_monitor_router, health_payload
from .volatility.bus import MessageBus
from .volatility.factory import create_scheduler
from .volatility.notifier import FanOutNotificationSink, LoggingNotificationSink, MemoryNotificationSink
from .volatility.scheduler import RefreshScheduler
from .volatility.stream import create_stream_router

logger = logging.getLogger(__name__)

__all__ = ["create_app", "create_proxy"]


def create_app(
    scheduler: RefreshScheduler | None = None,
    bus: MessageBus | None = None,
    notifications: MemoryNotificationSink | None = None,
) -> FastAPI:
    """Create the monitor application.

    The scheduler starts with the app (defaults installed, trigger scheduled,
    first cycle run) and stops with it.
    """
    log_handler = configure_logging()
    bus = bus or MessageBus()
    notifications = notifications if notifications is not None else MemoryNotificationSink()
    if scheduler is None:
        sink = FanOutNotificationSink(LoggingNotificationSink(), notifications)
        scheduler = create_scheduler(bus, sink=sink)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        config = await scheduler.start()
        logger.info("IV monitor started for %s", ", ".join(config.symbols))
        yield
        await scheduler.stop()

    app = FastAPI(title="ivmonitor", lifespan=lifespan)
    app.state.scheduler = scheduler
    app.state.bus = bus
    app.include_router(create_monitor_router(scheduler, notifications, log_handler))
    app.include_router(create_stream_router(bus))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return health_payload()

    return app


def create_proxy() -> FastAPI:
    """Create the caching data proxy application configured from the environment."""
    configure_logging()
    return create_proxy_app()
