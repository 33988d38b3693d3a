from __future__ import annotations

import asyncio

import httpx
import pytest

from monitoring.prober import Prober


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_probe_success_is_reachable_with_ttl_placeholder() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        return httpx.Response(200, content=b"\x00" * 16)

    async with _client(handler) as client:
        record = await Prober(client=client).probe("https://example.com/favicon.ico", 1.0)

    assert record.reachable is True
    assert record.ttl == 64
    assert record.latency_ms >= 0
    assert record.timestamp.tzinfo is not None
    assert "no-cache" in seen["headers"]["Cache-Control"]
    assert seen["headers"]["Pragma"] == "no-cache"


@pytest.mark.asyncio
async def test_any_http_response_counts_as_reachable() -> None:
    async with _client(lambda request: httpx.Response(404)) as client:
        record = await Prober(client=client).probe("https://example.com/missing", 1.0)
    assert record.reachable is True


@pytest.mark.asyncio
async def test_server_error_still_counts_as_reachable() -> None:
    async with _client(lambda request: httpx.Response(503)) as client:
        record = await Prober(client=client).probe("https://example.com/", 1.0)
    assert record.reachable is True


@pytest.mark.asyncio
async def test_connection_error_is_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        record = await Prober(client=client).probe("https://example.com/", 1.0)

    assert record.reachable is False
    assert record.ttl is None


@pytest.mark.asyncio
async def test_timeout_is_unreachable_and_bounded() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(2)
        return httpx.Response(200)

    async with _client(handler) as client:
        loop = asyncio.get_running_loop()
        started = loop.time()
        record = await Prober(client=client).probe("https://example.com/", 0.1)
        elapsed = loop.time() - started

    assert record.reachable is False
    assert record.ttl is None
    assert elapsed < 1.0
    assert record.latency_ms >= 90


@pytest.mark.asyncio
async def test_ttl_placeholder_can_be_disabled() -> None:
    async with _client(lambda request: httpx.Response(200)) as client:
        record = await Prober(client=client, ttl_sentinel=None).probe("https://example.com/", 1.0)
    assert record.reachable is True
    assert record.ttl is None


@pytest.mark.asyncio
async def test_cancellation_propagates() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(10)
        return httpx.Response(200)

    async with _client(handler) as client:
        task = asyncio.create_task(Prober(client=client).probe("https://example.com/", 5.0))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
