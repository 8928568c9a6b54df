"""Tests for UpstreamClient (mocked HTTP)."""

import httpx
import pytest

from ivmonitor.errors import ProxyUpstreamError
from ivmonitor.proxy.upstream import DEFAULT_UPSTREAM_URL, UpstreamClient


@pytest.mark.asyncio
class TestUpstreamClient:
    async def test_fetch_returns_json(self, mock_transport, upstream_calls):
        client = UpstreamClient("http://upstream.test/", client=httpx.AsyncClient(transport=mock_transport))
        data = await client.fetch("/index_option_50etf_qvix", {"limit": 2})
        assert data[-1]["close"] == 18.4
        assert upstream_calls == [("/index_option_50etf_qvix", {"limit": "2"})]

    async def test_non_200_raises(self, mock_transport):
        client = UpstreamClient("http://upstream.test", client=httpx.AsyncClient(transport=mock_transport))
        with pytest.raises(ProxyUpstreamError, match="502"):
            await client.fetch("/broken")

    async def test_invalid_json_raises(self, mock_transport):
        client = UpstreamClient("http://upstream.test", client=httpx.AsyncClient(transport=mock_transport))
        with pytest.raises(ProxyUpstreamError, match="invalid JSON"):
            await client.fetch("/invalid")

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out")

        client = UpstreamClient("http://upstream.test", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(ProxyUpstreamError):
            await client.fetch("/index_option_50etf_qvix")

    async def test_defaults(self):
        client = UpstreamClient()
        assert client.base_url == DEFAULT_UPSTREAM_URL
        await client.aclose()
        await client.aclose()
