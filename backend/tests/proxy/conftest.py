"""Fixtures for proxy tests."""

import httpx
import pytest


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream_calls():
    """Paths requested from the mocked upstream, in order."""
    return []


@pytest.fixture
def mock_transport(upstream_calls):
    """Upstream that serves a two-point QVIX series on every known path.

    /broken returns 502, /invalid returns a non-JSON body.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        upstream_calls.append((request.url.path, dict(request.url.params)))
        if request.url.path == "/broken":
            return httpx.Response(502, text="bad gateway")
        if request.url.path == "/invalid":
            return httpx.Response(200, text="<html>")
        return httpx.Response(
            200,
            json=[
                {"date": "2024-05-09", "open": 17.0, "high": 18.0, "low": 16.5, "close": 17.5},
                {"date": "2024-05-10", "open": 17.5, "high": 18.9, "low": 17.1, "close": 18.4},
            ],
        )

    return httpx.MockTransport(handler)
