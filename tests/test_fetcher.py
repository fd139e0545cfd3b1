# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import ClientSession, ClientTimeout, web

from conftest import HOST, serve_app, static_page
from site_crawler.crawler.fetcher import Fetcher
from site_crawler.errors import FetchFailure, MalformedURLError


@pytest_asyncio.fixture
async def server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def redirect(_):
        raise web.HTTPFound("/page")

    async def binary(_):
        return web.Response(body=b"\x89PNG\r\n\x1a\n\xff\xfe\x00", content_type="application/octet-stream")

    async def no_content(_):
        return web.Response(status=204)

    async def broken(_):
        return web.Response(status=500, text="oops")

    async def slow(_):
        await asyncio.sleep(1)
        return web.Response(text="late", content_type="text/html")

    app.router.add_get("/page", static_page('<a href="http://x.test/">x</a>'))
    app.router.add_get("/redirect", redirect)
    app.router.add_get("/binary", binary)
    app.router.add_get("/empty", no_content)
    app.router.add_get("/broken", broken)
    app.router.add_get("/slow", slow)

    async for url in serve_app(app, unused_tcp_port):
        yield url


@pytest_asyncio.fixture
async def fetcher() -> AsyncIterator[Fetcher]:
    async with ClientSession(timeout=ClientTimeout(total=0.3)) as session:
        yield Fetcher(session)


@pytest.mark.asyncio()
async def test_ok_page(server, fetcher):
    page = await fetcher.fetch(f"{server}/page")
    assert page.url == f"{server}/page"
    assert page.content == '<a href="http://x.test/">x</a>'
    assert page.content_type.startswith("text/html")


@pytest.mark.asyncio()
async def test_redirect_is_followed_by_transport(server, fetcher):
    page = await fetcher.fetch(f"{server}/redirect")
    assert "http://x.test/" in page.content


@pytest.mark.asyncio()
async def test_binary_body_is_read_as_text(server, fetcher):
    page = await fetcher.fetch(f"{server}/binary")
    assert isinstance(page.content, str)
    assert "PNG" in page.content
    assert page.content_type == "application/octet-stream"


@pytest.mark.asyncio()
@pytest.mark.parametrize("path,message", [("/missing", "HTTP 404"), ("/broken", "HTTP 500"), ("/empty", "HTTP 204")])
async def test_non_200_is_a_failure(server, fetcher, path, message):
    with pytest.raises(FetchFailure) as excinfo:
        await fetcher.fetch(server + path)
    assert excinfo.value.url == server + path
    assert excinfo.value.message == message


@pytest.mark.asyncio()
async def test_timeout_is_a_failure(server, fetcher):
    with pytest.raises(FetchFailure, match="timed out"):
        await fetcher.fetch(f"{server}/slow")


@pytest.mark.asyncio()
async def test_connection_refused_is_a_failure(fetcher, unused_tcp_port):
    with pytest.raises(FetchFailure) as excinfo:
        await fetcher.fetch(f"http://{HOST}:{unused_tcp_port}/")
    assert not isinstance(excinfo.value, MalformedURLError)


@pytest.mark.asyncio()
@pytest.mark.parametrize("url", ["ftp://x.test/file", "not a url", "http://", "/relative/path"])
async def test_malformed_urls(fetcher, url):
    with pytest.raises(MalformedURLError):
        await fetcher.fetch(url)
