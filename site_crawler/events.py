# site_crawler/events.py
"""
Events emitted by a running crawl and the bus that delivers them.

Listeners are plain callables invoked synchronously from the crawl's event
loop. A listener that raises is logged and skipped; it never reaches the
worker that emitted the event.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Union

from site_crawler.logger import logger


@dataclass(frozen=True, slots=True)
class PageCrawled:
    """A claimed page was fetched successfully."""
    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class FetchError:
    """A fetch attempt failed; the task was dropped."""
    url: str
    message: str


@dataclass(frozen=True, slots=True)
class ProgressTick:
    """Periodic snapshot of the running session."""
    elapsed_seconds: float
    pages_crawled: int


CrawlEvent = Union[PageCrawled, FetchError, ProgressTick]
Listener = Callable[[CrawlEvent], None]


class EventBus:
    """Fan-out of crawl events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def emit(self, event: CrawlEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener %r failed on %s", listener, type(event).__name__)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


__all__ = ["PageCrawled", "FetchError", "ProgressTick", "CrawlEvent", "Listener", "EventBus"]
