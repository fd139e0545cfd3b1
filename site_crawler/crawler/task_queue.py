# site_crawler/crawler/task_queue.py
"""
Unbounded work queue of :class:`CrawlTask` items shared by all workers of a session.

The queue never rejects a push. Wide or deep crawls can therefore grow it
without limit; bounding it would change crawl behaviour under load.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from site_crawler.crawler.models import CrawlTask


class TaskQueue:
    """asyncio-backed FIFO with a time-boxed ``pop``."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[CrawlTask] = asyncio.Queue()

    def push(self, task: CrawlTask) -> None:
        self._queue.put_nowait(task)

    async def pop(self, timeout: float) -> Optional[CrawlTask]:
        """Wait up to *timeout* seconds for a task; ``None`` when nothing arrived."""
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None

    def task_done(self) -> None:
        """Mark a popped task as fully processed (children already pushed)."""
        self._queue.task_done()

    async def join(self) -> None:
        """Block until every pushed task has been popped and marked done."""
        await self._queue.join()

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()

    def clear(self) -> int:
        """Drop all pending tasks; returns how many were discarded."""
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._queue.task_done()
            dropped += 1
        return dropped

    def __len__(self) -> int:
        return self._queue.qsize()
