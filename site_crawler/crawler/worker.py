# site_crawler/crawler/worker.py
"""
Fixed-size pool of asyncio workers draining a session's task queue.
"""
from __future__ import annotations

import asyncio
from typing import List

from site_crawler.crawler.fetcher import Fetcher
from site_crawler.crawler.link_extractor import LinkExtractor
from site_crawler.crawler.models import CrawlTask, PageResult
from site_crawler.crawler.session import CrawlSession
from site_crawler.errors import FetchFailure
from site_crawler.events import EventBus, FetchError, PageCrawled
from site_crawler.logger import logger

DEFAULT_WORKERS = 10


class WorkerPool:
    """Runs ``size`` identical task loops for the lifetime of one session."""

    def __init__(
        self,
        session: CrawlSession,
        fetcher: Fetcher,
        extractor: LinkExtractor,
        bus: EventBus,
        *,
        size: int = DEFAULT_WORKERS,
        poll_timeout: float = 1.0,
    ) -> None:
        self.session = session
        self.fetcher = fetcher
        self.extractor = extractor
        self.bus = bus
        self.size = size
        self.poll_timeout = poll_timeout
        self._tasks: List[asyncio.Task[None]] = []

    @property
    def alive(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    def start(self) -> None:
        if self._tasks:
            raise RuntimeError("worker pool already started")
        self._tasks = [
            asyncio.create_task(self._worker(i), name=f"crawl-worker-{i}") for i in range(self.size)
        ]

    async def shutdown(self, timeout: float) -> bool:
        """Hard-cancel every worker and wait up to *timeout* seconds.

        Returns False if some worker was still running when the wait expired.
        """
        for t in self._tasks:
            t.cancel()
        if not self._tasks:
            return True
        _, pending = await asyncio.wait(self._tasks, timeout=timeout)
        if pending:
            logger.warning("%d worker(s) did not exit within %.1f s", len(pending), timeout)
        self._tasks = []
        return not pending

    async def _worker(self, worker_id: int) -> None:
        session = self.session
        while session.running:
            task = await session.queue.pop(self.poll_timeout)
            if task is None:
                continue
            try:
                await self.process(task)
            except Exception as exc:
                logger.exception("Worker %d: unexpected error on %s", worker_id, task.url)
                self.bus.emit(FetchError(task.url, str(exc) or type(exc).__name__))
            finally:
                session.queue.task_done()
        logger.debug("Worker %d exiting", worker_id)

    async def process(self, task: CrawlTask) -> bool:
        """Run one task through gate → claim → fetch → extract → record → emit → enqueue.

        Returns True when the page was crawled.
        """
        session = self.session
        if not session.accepts(task) or not session.claim(task.url):
            return False

        try:
            page = await self.fetcher.fetch(task.url)
        except FetchFailure as exc:
            logger.info("Error fetching %s: %s", task.url, exc.message)
            self.bus.emit(FetchError(task.url, exc.message))
            return False

        links = list(self.extractor(page.content))
        session.record(PageResult.from_page(page, links))
        logger.debug("Crawled: %s (Depth: %d, links: %d)", task.url, task.depth, len(links))
        self.bus.emit(PageCrawled(task.url, task.depth))

        for link in links:
            session.queue.push(task.child(link))
        return True
