"""Tests for HttpxTransport."""

from __future__ import annotations

import httpx
import pytest

from nsapi.exceptions import ApiError
from nsapi.transport import DEFAULT_TIMEOUT, HttpxTransport

BASE_URL = "https://api.test/cgi-bin/api.cgi"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_init_defaults():
    transport = HttpxTransport(BASE_URL, "agent")
    try:
        assert transport.base_url == BASE_URL
        assert transport.timeout == DEFAULT_TIMEOUT
        assert transport.get_headers() == {"User-Agent": "agent"}
    finally:
        await transport.aclose()
    assert transport._client.is_closed


def test_url_for():
    transport = HttpxTransport(BASE_URL, "agent", client=_client(lambda r: httpx.Response(200)))
    assert transport.url_for("q=name&v=7") == f"{BASE_URL}?q=name&v=7"
    assert transport.url_for("") == BASE_URL


# ---------------------------------------------------------------------------
# fetch()
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_fetch_success():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="<NATION/>", headers={"X-Pin": "1234"})

    async with _client(handler) as client:
        transport = HttpxTransport(BASE_URL, "agent", client=client)
        raw = await transport.fetch(
            "nation=testlandia&q=name+region&v=7", {"X-Password": "pw"}
        )

    assert raw.text == "<NATION/>"
    assert raw.metadata.status_code == 200
    assert raw.metadata.header("X-Pin") == "1234"

    request = captured[0]
    assert request.method == "GET"
    assert request.url.path == "/cgi-bin/api.cgi"
    assert request.url.query == b"nation=testlandia&q=name+region&v=7"
    assert request.headers["user-agent"] == "agent"
    assert request.headers["x-password"] == "pw"


@pytest.mark.asyncio
async def test_fetch_non_200_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="Unknown nation")

    async with _client(handler) as client:
        transport = HttpxTransport(BASE_URL, "agent", client=client)
        with pytest.raises(ApiError) as exc_info:
            await transport.fetch("nation=nobody&q=&v=7")

    assert exc_info.value.status_code == 404
    assert "404" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_connection_error_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        transport = HttpxTransport(BASE_URL, "agent", client=client)
        with pytest.raises(ApiError) as exc_info:
            await transport.fetch("q=numnations&v=7")

    assert exc_info.value.response_metadata is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open():
    client = _client(lambda r: httpx.Response(200))
    transport = HttpxTransport(BASE_URL, "agent", client=client)

    await transport.aclose()

    assert not client.is_closed
    await client.aclose()
