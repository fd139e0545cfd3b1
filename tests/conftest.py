# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Dict, List

import pytest
import pytest_asyncio
from aiohttp import web

from site_crawler.config import CrawlerConfig
from site_crawler.events import CrawlEvent, FetchError, PageCrawled, ProgressTick

HOST = "127.0.0.1"


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


# --------------------------------------------------------------------------- #
#                               Helper utilities                              #
# --------------------------------------------------------------------------- #


def html_links(*urls: str) -> str:
    """Page body with one double-quoted anchor per URL."""
    return "<html><body>" + "".join(f'<a href="{u}">{u}</a>' for u in urls) + "</body></html>"


def static_page(body: str, content_type: str = "text/html"):
    async def handler(_):
        return web.Response(text=body, content_type=content_type)

    return handler


def hit_counter(hits: Counter) -> web.middleware:
    @web.middleware
    async def count(request, handler):
        hits[request.path] += 1
        return await handler(request)

    return count


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, HOST, port)
    await site.start()
    try:
        yield f"http://{HOST}:{port}"
    finally:
        await runner.cleanup()


class EventLog(list):
    """Listener that keeps every event, with typed views."""

    def __call__(self, event: CrawlEvent) -> None:
        self.append(event)

    @property
    def crawled(self) -> List[PageCrawled]:
        return [e for e in self if isinstance(e, PageCrawled)]

    @property
    def errors(self) -> List[FetchError]:
        return [e for e in self if isinstance(e, FetchError)]

    @property
    def ticks(self) -> List[ProgressTick]:
        return [e for e in self if isinstance(e, ProgressTick)]


@dataclass
class Site:
    """A running test site: base URL plus per-path request counts."""

    base: str
    hits: Counter = field(default_factory=Counter)

    def url(self, path: str = "/") -> str:
        return self.base + path


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Engine config with short poll/progress intervals for quick tests."""
    return CrawlerConfig(
        workers=4,
        poll_timeout=0.1,
        request_timeout=2.0,
        progress_interval=0.05,
        stop_timeout=2.0,
        user_agent="TestAgent/1.0",
    )


@pytest.fixture()
def event_log() -> EventLog:
    return EventLog()


@pytest_asyncio.fixture
async def site(unused_tcp_port: int) -> AsyncIterator[Site]:
    """
    Small link graph (depth from "/" in brackets)::

        / [0]  -> /a, /b, /a
        /a [1] -> /c, /            (back link)
        /b [1] -> /c, /missing, http://elsewhere.test/x
        /c [2] -> /d
        /d [3] leaf
    """
    result = Site(f"http://{HOST}:{unused_tcp_port}")
    u = result.url
    pages: Dict[str, str] = {
        "/": html_links(u("/a"), u("/b"), u("/a")),
        "/a": html_links(u("/c"), u("/")),
        "/b": html_links(u("/c"), u("/missing"), "http://elsewhere.test/x"),
        "/c": html_links(u("/d")),
        "/d": "<h1>leaf</h1>",
    }
    app = web.Application(middlewares=[hit_counter(result.hits)])
    for path, body in pages.items():
        app.router.add_get(path, static_page(body))

    async for _ in serve_app(app, unused_tcp_port):
        yield result
