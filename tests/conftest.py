# File: tests/conftest.py
from __future__ import annotations

import asyncio
import ssl
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
import trustme
from aiohttp import web

from link_scout.config import ScannerConfig
from link_scout.logger import init_logging

#: number of seconds the "slow" handler sleeps
SLOW_SLEEP: float = 0.5

ROOT_HTML = """<html><head>
<script src="/static/app.js"></script>
</head><body>
<a href='/api/v1/users?id=1'>users</a>
<img src="https://cdn.example.com/logo.png">
</body></html>"""

APP_JS = """
fetch("/api/v1/users?id=1").then(r => r.json());
const asset = '/static/app.js';
axios.get("/api/v2/items#top");
"""

SHARED_JS = 'import("/static/app.js"); const t = "/api/(token)";'


async def _serve_app(
    app: web.Application, port: int, ssl_context: ssl.SSLContext | None = None
) -> AsyncIterator[str]:
    """Start *app* on *port* (HTTPS when *ssl_context* is given), yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port, ssl_context=ssl_context)
    await site.start()
    scheme = "https" if ssl_context is not None else "http"
    try:
        yield f"{scheme}://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def build_app() -> web.Application:
    app = web.Application()

    async def handle_root(_):
        return web.Response(text=ROOT_HTML, content_type="text/html")

    async def handle_app_js(_):
        return web.Response(text=APP_JS, content_type="application/javascript")

    async def handle_shared_js(_):
        return web.Response(text=SHARED_JS, content_type="application/javascript")

    async def handle_empty(_):
        return web.Response(text="<html><body>nothing here</body></html>", content_type="text/html")

    async def handle_binary(_):
        return web.Response(body=b"\xff\xfe\x00'/bin/data.json'\x80", content_type="application/octet-stream")

    async def handle_error(_):
        return web.Response(status=500, text="boom")

    async def handle_forbidden(_):
        return web.Response(status=403, text='"/secret/path"')

    async def handle_redirect(_):
        raise web.HTTPFound("/shared.js")

    async def handle_slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(text='"/slow/endpoint"', content_type="application/javascript")

    app.router.add_get("/", handle_root)
    app.router.add_get("/static/app.js", handle_app_js)
    app.router.add_get("/shared.js", handle_shared_js)
    app.router.add_get("/empty", handle_empty)
    app.router.add_get("/binary", handle_binary)
    app.router.add_get("/error", handle_error)
    app.router.add_get("/forbidden", handle_forbidden)
    app.router.add_get("/redirect", handle_redirect)
    app.router.add_get("/slow", handle_slow)
    return app


@pytest_asyncio.fixture
async def endpoint_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """Local server with a handful of pages containing known endpoints."""
    async for url in _serve_app(build_app(), unused_tcp_port):
        yield url


@pytest.fixture()
def basic_config() -> ScannerConfig:
    """Return a basic valid ScannerConfig for crawler tests."""
    return ScannerConfig(threads=4, timeout=2.0, user_agent="TestAgent/1.0")


@pytest.fixture()
def closed_port_url(unused_tcp_port_factory) -> str:
    """URL pointing at a port nothing listens on."""
    return f"http://127.0.0.1:{unused_tcp_port_factory()}/"


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests rebind the project logger to CliRunner streams; restore it for every test."""
    init_logging()
    yield
    init_logging()


@pytest_asyncio.fixture
async def tls_server(unused_tcp_port: int) -> AsyncIterator[str]:
    """Same pages over HTTPS with a throwaway certificate no client trusts."""
    ca = trustme.CA()
    ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ca.issue_cert("127.0.0.1").configure_cert(ctx)
    async for url in _serve_app(build_app(), unused_tcp_port, ssl_context=ctx):
        yield url
