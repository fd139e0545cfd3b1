# site_crawler/crawler/models.py
"""
Data models for the SiteCrawler engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """A URL paired with its discovery depth (link hops from the seed)."""

    url: str
    depth: int = 0

    def child(self, link: str) -> CrawlTask:
        return CrawlTask(link, self.depth + 1)


@dataclass(frozen=True, slots=True)
class PageData:
    """Raw page as returned by the fetcher: body decoded as text plus Content-Type."""

    url: str
    content: str
    content_type: str = ""


@dataclass(frozen=True, slots=True)
class PageResult:
    """A crawled page together with the links discovered in it."""

    url: str
    content: str
    links: Tuple[str, ...] = field(default_factory=tuple)
    content_type: str = ""

    @classmethod
    def from_page(cls, page: PageData, links) -> PageResult:
        return cls(page.url, page.content, tuple(links), page.content_type)
