"""Pytest configuration and shared fixtures."""

import pytest

from ivmonitor.volatility.bus import MessageBus
from ivmonitor.volatility.interface import ReadingSource
from ivmonitor.volatility.models import Reading
from ivmonitor.volatility.notifier import MemoryNotificationSink
from ivmonitor.volatility.store import MemoryStore


class StaticSource(ReadingSource):
    """ReadingSource returning preset volatilities, one batch per fetch()."""

    def __init__(self, *batches: dict[str, float]) -> None:
        self.batches = list(batches)
        self.calls: list[list[str]] = []
        self.closed = False

    async def fetch(self, symbols: list[str]) -> list[Reading]:
        self.calls.append(list(symbols))
        batch = self.batches.pop(0) if len(self.batches) > 1 else self.batches[0]
        return [Reading(symbol=s, implied_volatility=iv) for s, iv in batch.items()]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def static_source():
    """Factory for StaticSource instances."""
    return StaticSource


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def sink():
    return MemoryNotificationSink()
