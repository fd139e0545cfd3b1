# site_crawler/crawler/session.py
"""
Per-run crawl state.

A :class:`CrawlSession` is built on every ``Crawler.start()`` and handed to
the workers and the progress reporter explicitly; nothing crawl-related lives
in module or class attributes, so consecutive runs cannot see each other.
"""
from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping

from site_crawler.config import CrawlParams
from site_crawler.crawler.models import CrawlTask, PageResult
from site_crawler.crawler.task_queue import TaskQueue
from site_crawler.crawler.visited import VisitedSet
from site_crawler.utils import matches_domain, normalize_url


class AtomicCounter:
    """Integer counter with lock-protected updates."""

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    def reset(self) -> int:
        with self._lock:
            old, self._value = self._value, 0
            return old

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.value})"


@dataclass(frozen=True)
class CrawlSnapshot:
    """Immutable copy of a session's results taken before teardown."""

    params: CrawlParams
    results: Mapping[str, PageResult] = field(default_factory=dict)
    pages_crawled: int = 0
    elapsed_seconds: float = 0.0


class CrawlSession:
    """Owns the queue, dedup set, results map, counter and running flag of one run."""

    def __init__(self, params: CrawlParams) -> None:
        self.params = params
        self.queue = TaskQueue()
        self.visited = VisitedSet()
        self.results: Dict[str, PageResult] = {}
        self.pages_crawled = AtomicCounter()
        self.started_at = time.monotonic()
        self._stopped = asyncio.Event()

    # ------------------------------------------------------------------ #
    # running flag
    # ------------------------------------------------------------------ #
    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def stop(self) -> None:
        """Clear the running flag; workers and reporter wind down."""
        self._stopped.set()

    async def wait_stopped(self) -> None:
        await self._stopped.wait()

    # ------------------------------------------------------------------ #
    # crawl bookkeeping
    # ------------------------------------------------------------------ #
    def seed(self) -> CrawlTask:
        task = CrawlTask(self.params.seed_url, 0)
        self.queue.push(task)
        return task

    def accepts(self, task: CrawlTask) -> bool:
        """Depth and domain gate, applied before the dedup claim."""
        return task.depth <= self.params.max_depth and matches_domain(task.url, self.params.domain_filter)

    def claim(self, url: str) -> bool:
        return self.visited.try_claim(url)

    def record(self, result: PageResult) -> int:
        """Store *result* and bump the counter; returns the new page count."""
        self.results[normalize_url(result.url)] = result
        return self.pages_crawled.increment()

    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def snapshot(self) -> CrawlSnapshot:
        return CrawlSnapshot(
            params=self.params,
            results=dict(self.results),
            pages_crawled=self.pages_crawled.value,
            elapsed_seconds=self.elapsed(),
        )

    def discard(self) -> None:
        """Drop every piece of mutable state; the session is unusable afterwards."""
        self.stop()
        self.queue.clear()
        self.visited.clear()
        self.results.clear()
        self.pages_crawled.reset()
