"""Tests for the SSE streaming generator."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from ivmonitor.volatility.bus import DATA_UPDATED, MessageBus
from ivmonitor.volatility.stream import _generate_events, create_stream_router, format_event


def _fake_request(disconnect_after: int) -> MagicMock:
    """Request whose is_disconnected() turns True after N checks."""
    request = MagicMock()
    request.client.host = "127.0.0.1"
    checks = {"n": 0}

    async def is_disconnected():
        checks["n"] += 1
        return checks["n"] > disconnect_after

    request.is_disconnected = is_disconnected
    return request


def test_format_event():
    event = format_event([{"symbol": "IF"}])
    assert event.startswith("data: ")
    assert event.endswith("\n\n")
    assert json.loads(event[len("data: "):]) == {"type": DATA_UPDATED, "data": [{"symbol": "IF"}]}


def test_router_path():
    router = create_stream_router(MessageBus())
    assert [route.path for route in router.routes] == ["/api/stream/iv"]


@pytest.mark.asyncio
class TestGenerateEvents:
    async def test_retry_directive_first(self):
        gen = _generate_events(MessageBus(), _fake_request(0), poll_interval=0.01)
        assert await gen.__anext__() == "retry: 1000\n\n"
        await gen.aclose()

    async def test_streams_published_updates(self):
        bus = MessageBus()
        gen = _generate_events(bus, _fake_request(100), poll_interval=0.01)
        await gen.__anext__()  # retry directive, subscribes on the next step

        next_event = asyncio.ensure_future(gen.__anext__())
        await asyncio.sleep(0.02)
        assert bus.listener_count(DATA_UPDATED) == 1

        await bus.publish(DATA_UPDATED, [{"symbol": "IF", "impliedVolatility": 18.0}])
        event = await asyncio.wait_for(next_event, timeout=1.0)

        assert json.loads(event[len("data: "):])["data"][0]["symbol"] == "IF"
        await gen.aclose()
        assert bus.listener_count(DATA_UPDATED) == 0

    async def test_disconnect_ends_stream_and_unsubscribes(self):
        bus = MessageBus()
        events = [e async for e in _generate_events(bus, _fake_request(2), poll_interval=0.01)]
        assert events == ["retry: 1000\n\n"]
        assert bus.listener_count(DATA_UPDATED) == 0
