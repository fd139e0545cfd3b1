# File: tests/test_worker.py
"""WorkerPool task processing with an in-memory fetcher (no network)."""
from __future__ import annotations

import asyncio
from typing import Dict, List

import pytest

from conftest import EventLog, html_links
from site_crawler.config import CrawlParams
from site_crawler.crawler.link_extractor import extract_links
from site_crawler.crawler.models import CrawlTask, PageData
from site_crawler.crawler.session import CrawlSession
from site_crawler.crawler.worker import WorkerPool
from site_crawler.errors import FetchFailure, MalformedURLError
from site_crawler.events import EventBus, FetchError, PageCrawled


class FakeFetcher:
    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str) -> PageData:
        self.calls.append(url)
        if url.startswith("bad:"):
            raise MalformedURLError(url, "not an absolute http(s) URL")
        if url not in self.pages:
            raise FetchFailure(url, "HTTP 404")
        return PageData(url, self.pages[url], "text/html")


def make_pool(pages: Dict[str, str], max_depth: int = 2, extractor=extract_links, size: int = 2):
    session = CrawlSession(CrawlParams.build("http://x.test/", "x.test", max_depth))
    bus = EventBus()
    log = EventLog()
    bus.subscribe(log)
    fetcher = FakeFetcher(pages)
    pool = WorkerPool(session, fetcher, extractor, bus, size=size, poll_timeout=0.05)
    return pool, session, fetcher, log


@pytest.mark.asyncio()
async def test_children_are_pushed_unconditionally():
    body = html_links("http://x.test/a", "http://x.test/a", "http://other.test/", "http://x.test/")
    pool, session, fetcher, log = make_pool({"http://x.test/": body})

    assert await pool.process(CrawlTask("http://x.test/", 0))
    assert log == [PageCrawled("http://x.test/", 0)]
    assert session.queue.qsize() == 4
    children = [await session.queue.pop(0.1) for _ in range(4)]
    assert [c.url for c in children] == [
        "http://x.test/a", "http://x.test/a", "http://other.test/", "http://x.test/",
    ]
    assert {c.depth for c in children} == {1}
    assert session.pages_crawled.value == len(session.results) == 1


@pytest.mark.asyncio()
@pytest.mark.parametrize(
    "task",
    [
        CrawlTask("http://x.test/deep", 3),
        CrawlTask("http://other.test/", 0),
    ],
)
async def test_rejected_tasks_have_no_side_effects(task):
    pool, session, fetcher, log = make_pool({task.url: "<p></p>"})
    assert not await pool.process(task)
    assert fetcher.calls == []
    assert len(session.visited) == 0
    assert list(log) == []


@pytest.mark.asyncio()
async def test_already_claimed_url_is_skipped():
    pool, session, fetcher, log = make_pool({"http://x.test/": "<p></p>"})
    assert session.claim("http://x.test/")
    assert not await pool.process(CrawlTask("http://x.test/", 0))
    assert fetcher.calls == []


@pytest.mark.asyncio()
async def test_fetch_failures_become_events():
    pool, session, fetcher, log = make_pool({})
    assert not await pool.process(CrawlTask("http://x.test/gone", 1))
    session.queue.push(CrawlTask("bad:x.test", 0))
    assert not await pool.process(await session.queue.pop(0.1))

    assert log == [
        FetchError("http://x.test/gone", "HTTP 404"),
        FetchError("bad:x.test", "not an absolute http(s) URL"),
    ]
    assert session.results == {}
    assert session.queue.qsize() == 0


@pytest.mark.asyncio()
async def test_unexpected_error_does_not_kill_worker():
    calls = []

    def flaky_extractor(content: str):
        calls.append(content)
        if len(calls) == 1:
            raise RuntimeError("extractor bug")
        return []

    pages = {"http://x.test/1": "one", "http://x.test/2": "two"}
    pool, session, fetcher, log = make_pool(pages, extractor=flaky_extractor, size=1)
    pool.start()
    try:
        session.queue.push(CrawlTask("http://x.test/1", 0))
        session.queue.push(CrawlTask("http://x.test/2", 0))
        await asyncio.wait_for(session.queue.join(), timeout=2)
        assert pool.alive == 1
        assert log.crawled == [PageCrawled("http://x.test/2", 0)]
        assert log.errors == [FetchError("http://x.test/1", "extractor bug")]
        assert "http://x.test/1" not in session.results
    finally:
        session.stop()
        assert await pool.shutdown(timeout=1)


@pytest.mark.asyncio()
async def test_unexpected_error_without_message_uses_type_name():
    def broken_extractor(content: str):
        raise KeyError()

    pool, session, fetcher, log = make_pool({"http://x.test/": "<p></p>"}, extractor=broken_extractor, size=1)
    pool.start()
    try:
        session.queue.push(CrawlTask("http://x.test/", 0))
        await asyncio.wait_for(session.queue.join(), timeout=2)
        assert log.errors == [FetchError("http://x.test/", "KeyError")]
    finally:
        session.stop()
        assert await pool.shutdown(timeout=1)


@pytest.mark.asyncio()
async def test_workers_exit_after_running_flag_cleared():
    pool, session, fetcher, log = make_pool({}, size=3)
    pool.start()
    with pytest.raises(RuntimeError):
        pool.start()
    await asyncio.sleep(0.01)
    session.stop()
    await asyncio.sleep(pool.poll_timeout * 3)
    assert pool.alive == 0
    assert await pool.shutdown(timeout=1)
