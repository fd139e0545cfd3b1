# site_crawler/crawler/progress.py
"""Periodic ``ProgressTick`` emitter running beside the worker pool."""
from __future__ import annotations

import asyncio
from typing import Optional

from site_crawler.crawler.session import CrawlSession
from site_crawler.events import EventBus, ProgressTick


class ProgressReporter:
    """Emits elapsed time and pages crawled every *interval* seconds.

    Reads the counter without further synchronisation, so a tick may lag a
    page or two behind.
    """

    def __init__(self, session: CrawlSession, bus: EventBus, interval: float = 1.0) -> None:
        self.session = session
        self.bus = bus
        self.interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="crawl-progress")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None

    def tick(self) -> ProgressTick:
        event = ProgressTick(self.session.elapsed(), self.session.pages_crawled.value)
        self.bus.emit(event)
        return event

    async def _run(self) -> None:
        while self.session.running:
            try:
                await asyncio.wait_for(self.session.wait_stopped(), timeout=self.interval)
            except asyncio.TimeoutError:
                self.tick()
            else:
                return
