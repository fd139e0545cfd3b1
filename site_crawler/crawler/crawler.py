# === FILE: site_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import enum
from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from site_crawler.aggregator import CrawlReport, EventCollector, aggregate_results
from site_crawler.config import CrawlerConfig, CrawlParams
from site_crawler.crawler.fetcher import Fetcher
from site_crawler.crawler.link_extractor import LinkExtractor, extract_links
from site_crawler.crawler.progress import ProgressReporter
from site_crawler.crawler.session import CrawlSession, CrawlSnapshot
from site_crawler.crawler.worker import WorkerPool
from site_crawler.errors import CrawlerBusyError
from site_crawler.events import EventBus, Listener
from site_crawler.logger import logger

__all__ = ("CrawlState", "Crawler")


class CrawlState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class Crawler:
    """Start/stop controller for depth-limited crawl sessions.

    One crawler holds at most one live :class:`CrawlSession`. ``start`` and
    ``stop`` are serialised, so a ``start`` issued while a stop is tearing the
    previous session down waits for the teardown to finish.
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        *,
        extractor: LinkExtractor = extract_links,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.extractor = extractor
        self.bus = bus or EventBus()
        self._state = CrawlState.IDLE
        self._lifecycle = asyncio.Lock()
        self._session: Optional[CrawlSession] = None
        self._http: Optional[ClientSession] = None
        self._pool: Optional[WorkerPool] = None
        self._reporter: Optional[ProgressReporter] = None

    async def __aenter__(self) -> Crawler:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    @property
    def state(self) -> CrawlState:
        return self._state

    @property
    def session(self) -> Optional[CrawlSession]:
        return self._session

    def subscribe(self, listener: Listener):
        return self.bus.subscribe(listener)

    async def start(self, seed_url: str, domain_filter: str, max_depth: int = 3) -> CrawlSession:
        """Validate parameters, build a fresh session and launch workers and reporter.

        Raises CrawlValidationError for an empty seed/filter or out-of-range
        depth, CrawlerBusyError if a session is already running.
        """
        params = CrawlParams.build(seed_url, domain_filter, max_depth)
        async with self._lifecycle:
            if self._state is not CrawlState.IDLE:
                raise CrawlerBusyError("a crawl session is already running")

            session = CrawlSession(params)
            self._http = ClientSession(
                timeout=ClientTimeout(total=self.config.request_timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self._pool = WorkerPool(
                session,
                Fetcher(self._http),
                self.extractor,
                self.bus,
                size=self.config.workers,
                poll_timeout=self.config.poll_timeout,
            )
            self._reporter = ProgressReporter(session, self.bus, self.config.progress_interval)
            self._session = session
            self._state = CrawlState.RUNNING

            session.seed()
            self._pool.start()
            self._reporter.start()
            logger.info(
                "Crawl started: %s (filter=%r, max_depth=%d, workers=%d)",
                params.seed_url, params.domain_filter, params.max_depth, self.config.workers,
            )
            return session

    async def stop(self) -> None:
        """End the current session; a no-op when idle."""
        async with self._lifecycle:
            if self._state is CrawlState.IDLE:
                return
            self._state = CrawlState.STOPPING
            session = self._session
            try:
                if session is not None:
                    session.stop()
                if self._pool is not None:
                    await self._pool.shutdown(self.config.stop_timeout)
                if self._reporter is not None:
                    await self._reporter.stop()
                if self._http is not None and not self._http.closed:
                    await self._http.close()
            finally:
                if session is not None:
                    logger.info(
                        "Crawl stopped: %d pages in %.2f s",
                        session.pages_crawled.value, session.elapsed(),
                    )
                    session.discard()
                self._session = None
                self._http = None
                self._pool = None
                self._reporter = None
                self._state = CrawlState.IDLE

    async def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait until the queue is drained and no task is in flight.

        Returns False if *timeout* expired first or no session is running.
        """
        session = self._session
        if session is None:
            return False
        try:
            await asyncio.wait_for(session.queue.join(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    def snapshot(self) -> Optional[CrawlSnapshot]:
        return self._session.snapshot() if self._session is not None else None

    async def run(
        self,
        seed_url: str,
        domain_filter: str,
        max_depth: int = 3,
        *,
        duration: Optional[float] = None,
    ) -> CrawlReport:
        """Crawl until the frontier is exhausted (or *duration* elapses), then stop."""
        collector = EventCollector()
        unsubscribe = self.subscribe(collector)
        try:
            session = await self.start(seed_url, domain_filter, max_depth)
            finished = await self.wait_until_idle(duration)
            if not finished:
                logger.info("Crawl time limit reached after %.2f s", session.elapsed())
            snapshot = session.snapshot()
        finally:
            await self.stop()
            unsubscribe()
        return aggregate_results(snapshot, collector)
