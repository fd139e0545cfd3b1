# site_crawler/errors.py
"""
Exception hierarchy for the SiteCrawler engine.

Only :class:`CrawlValidationError` and :class:`CrawlerBusyError` ever reach
the caller of ``Crawler.start()``. Fetch failures stay inside the worker that
hit them and are surfaced as ``FetchError`` events.
"""
from __future__ import annotations


class CrawlerError(Exception):
    """Base class for all crawler errors."""


class CrawlValidationError(CrawlerError, ValueError):
    """Invalid crawl parameters (empty seed URL or domain filter, bad depth)."""


class CrawlerBusyError(CrawlerError, RuntimeError):
    """``start()`` was called while a session is already running."""


class FetchFailure(CrawlerError):
    """A single URL could not be fetched (I/O failure or non-200 status)."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


class MalformedURLError(FetchFailure):
    """The candidate URL cannot be used as a request target."""


__all__ = [
    "CrawlerError",
    "CrawlValidationError",
    "CrawlerBusyError",
    "FetchFailure",
    "MalformedURLError",
]
