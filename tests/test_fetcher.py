# File: tests/test_fetcher.py
from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from link_scout.config import DEFAULT_USER_AGENT, ScannerConfig
from link_scout.crawler.fetcher import Fetcher
from link_scout.errors import (
    BodyReadError,
    FetchError,
    NonOKStatus,
    RequestConstructionError,
    TransportError,
)

from .conftest import APP_JS, SLOW_SLEEP, _serve_app


@pytest_asyncio.fixture
async def agent_server(unused_tcp_port: int) -> AsyncIterator[tuple[str, list[str]]]:
    """Server that records the User-Agent of every request."""
    seen: list[str] = []
    app = web.Application()

    async def handle(request: web.Request):
        seen.extend(request.headers.getall("User-Agent", []))
        return web.Response(text="ok")

    app.router.add_get("/", handle)
    async for url in _serve_app(app, unused_tcp_port):
        yield url, seen


@pytest.mark.asyncio()
async def test_fetch_returns_raw_body(basic_config, endpoint_server):
    async with Fetcher(basic_config) as fetcher:
        body = await fetcher.fetch(f"{endpoint_server}/static/app.js")
    assert isinstance(body, bytes)
    assert body.decode() == APP_JS


@pytest.mark.asyncio()
async def test_fetch_sends_configured_user_agent(agent_server):
    url, seen = agent_server
    async with Fetcher(ScannerConfig()) as fetcher:
        await fetcher.fetch(url)
    assert seen == [DEFAULT_USER_AGENT]


@pytest.mark.asyncio()
@pytest.mark.parametrize("path,status", [("/missing", 404), ("/error", 500), ("/forbidden", 403)])
async def test_non_200_is_error(basic_config, endpoint_server, path, status):
    async with Fetcher(basic_config) as fetcher:
        with pytest.raises(NonOKStatus) as info:
            await fetcher.fetch(endpoint_server + path)
    assert info.value.status == status
    assert str(status) in str(info.value)


@pytest.mark.asyncio()
async def test_redirect_followed_by_default(basic_config, endpoint_server):
    async with Fetcher(basic_config) as fetcher:
        body = await fetcher.fetch(f"{endpoint_server}/redirect")
    assert b"/static/app.js" in body


@pytest.mark.asyncio()
async def test_redirect_is_error_when_not_following(endpoint_server):
    config = ScannerConfig(timeout=2.0, follow_redirects=False)
    async with Fetcher(config) as fetcher:
        with pytest.raises(NonOKStatus) as info:
            await fetcher.fetch(f"{endpoint_server}/redirect")
    assert info.value.status == 302


@pytest.mark.asyncio()
@pytest.mark.parametrize("url", ["not a url", "/relative/path", "ftp://example.com/file", "http:///no-host"])
async def test_malformed_url_is_request_error(basic_config, url):
    async with Fetcher(basic_config) as fetcher:
        with pytest.raises(RequestConstructionError):
            await fetcher.fetch(url)


@pytest.mark.asyncio()
async def test_connection_refused_is_transport_error(basic_config, closed_port_url):
    async with Fetcher(basic_config) as fetcher:
        with pytest.raises(TransportError):
            await fetcher.fetch(closed_port_url)


@pytest.mark.asyncio()
async def test_timeout_is_transport_error(endpoint_server):
    config = ScannerConfig(timeout=SLOW_SLEEP / 5)
    async with Fetcher(config) as fetcher:
        with pytest.raises(TransportError):
            await fetcher.fetch(f"{endpoint_server}/slow")


@pytest_asyncio.fixture
async def truncated_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """Server that promises 1000 bytes, sends a few and drops the connection."""
    app = web.Application()

    async def handle(request: web.Request):
        resp = web.StreamResponse(headers={"Content-Length": "1000"})
        await resp.prepare(request)
        await resp.write(b'"/partial"')
        request.transport.close()
        return resp

    app.router.add_get("/", handle)
    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_truncated_body_is_body_read_error(basic_config, truncated_server):
    async with Fetcher(basic_config) as fetcher:
        with pytest.raises(BodyReadError) as info:
            await fetcher.fetch(truncated_server)
    assert "could not read response body" in str(info.value)


@pytest.mark.asyncio()
async def test_self_signed_tls_accepted_by_default(tls_server):
    async with Fetcher(ScannerConfig(timeout=2.0)) as fetcher:
        body = await fetcher.fetch(f"{tls_server}/static/app.js")
    assert body.decode() == APP_JS


@pytest.mark.asyncio()
async def test_self_signed_tls_rejected_when_verifying(tls_server):
    config = ScannerConfig(timeout=2.0, verify_tls=True)
    async with Fetcher(config) as fetcher:
        with pytest.raises(TransportError):
            await fetcher.fetch(f"{tls_server}/static/app.js")


@pytest.mark.asyncio()
async def test_fetch_result_never_raises(basic_config, endpoint_server):
    async with Fetcher(basic_config) as fetcher:
        ok = await fetcher.fetch_result(f"{endpoint_server}/shared.js")
        bad = await fetcher.fetch_result(f"{endpoint_server}/missing")
    assert ok.ok and ok.body and ok.error is None
    assert not bad.ok and bad.body is None
    assert isinstance(bad.error, FetchError)
    assert bad.source_url.endswith("/missing")


@pytest.mark.asyncio()
async def test_session_closed_on_exit(basic_config):
    fetcher = Fetcher(basic_config)
    async with fetcher:
        assert fetcher.session is not None and not fetcher.session.closed
    assert fetcher.session.closed


@pytest.mark.asyncio()
async def test_fetch_without_session_fails(basic_config):
    with pytest.raises(RuntimeError):
        await Fetcher(basic_config).fetch("http://example.com/")
