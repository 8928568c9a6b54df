"""SSE streaming endpoint for DATA_UPDATED broadcasts."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .bus import DATA_UPDATED, MessageBus

logger = logging.getLogger(__name__)


def create_stream_router(bus: MessageBus) -> APIRouter:
    """Create the SSE streaming router bound to a message bus.

    This factory pattern lets us inject the bus without globals.
    """
    router = APIRouter(prefix="/api/stream", tags=["streaming"])

    @router.get("/iv")
    async def stream_iv(request: Request) -> StreamingResponse:
        """SSE endpoint for refresh results.

        Every completed cycle is pushed as one event:

            data: {"type": "DATA_UPDATED", "data": [{"symbol": "IF", ...}, ...]}

        Includes a retry directive so the browser auto-reconnects on
        disconnection (EventSource built-in behavior).
        """
        return StreamingResponse(
            _generate_events(bus, request),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering if proxied
            },
        )

    return router


def format_event(payload: Any) -> str:
    return f"data: {json.dumps({'type': DATA_UPDATED, 'data': payload})}\n\n"


async def _generate_events(
    bus: MessageBus,
    request: Request,
    poll_interval: float = 1.0,
) -> AsyncGenerator[str, None]:
    """Async generator that yields one SSE event per DATA_UPDATED message.

    Wakes at least every `poll_interval` seconds to notice a disconnected
    client (request.is_disconnected()).
    """
    yield "retry: 1000\n\n"

    queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=100)

    def enqueue(payload: Any) -> None:
        if queue.full():
            queue.get_nowait()  # Slow client: drop the oldest update
        queue.put_nowait(payload)

    unsubscribe = bus.subscribe(DATA_UPDATED, enqueue)
    client_ip = request.client.host if request.client else "unknown"
    logger.info("SSE client connected: %s", client_ip)

    try:
        while True:
            if await request.is_disconnected():
                logger.info("SSE client disconnected: %s", client_ip)
                break
            try:
                payload = await asyncio.wait_for(queue.get(), timeout=poll_interval)
            except asyncio.TimeoutError:
                continue
            yield format_event(payload)
    except asyncio.CancelledError:
        logger.info("SSE stream cancelled for: %s", client_ip)
    finally:
        unsubscribe()
