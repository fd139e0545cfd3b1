# site_crawler/crawler/link_extractor.py
"""
Link extraction strategies for SiteCrawler.

A strategy is any callable ``str -> Sequence[str]``. Workers only see that
capability, so the default regex scanner can be swapped for the HTML-aware
:class:`SoupLinkExtractor` without touching the worker loop.
"""
from __future__ import annotations

import re
from typing import Callable, List, Pattern, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

LinkExtractor = Callable[[str], Sequence[str]]

#: literal ``href="http(s)://…"``; double quotes only, absolute URLs only.
#: Bodies keep their line breaks and ``.`` does not cross them, so a value
#: split over two lines is not matched.
HREF_PATTERN: Pattern[str] = re.compile(r'href="(https?://.*?)"')


class RegexLinkExtractor:
    """Naive scanner for double-quoted absolute ``href`` attributes.

    Relative URLs, single-quoted attributes and ``src`` links are not found.
    Captures are returned in order of appearance, duplicates included.
    """

    def __init__(self, pattern: Pattern[str] = HREF_PATTERN) -> None:
        self.pattern = pattern

    def __call__(self, content: str) -> List[str]:
        return [m.group(1) for m in self.pattern.finditer(content)]


class SoupLinkExtractor:
    """HTML-aware alternative: absolute http(s) ``<a href>`` values in document order."""

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def __call__(self, content: str) -> List[str]:
        soup = BeautifulSoup(content, self.parser)
        links: List[str] = []
        for tag in soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href_val = tag.get("href")
            if not isinstance(href_val, str):
                continue
            raw = href_val.strip()
            if raw.startswith(("http://", "https://")):
                links.append(raw)
        return links


extract_links: LinkExtractor = RegexLinkExtractor()

__all__ = ["LinkExtractor", "RegexLinkExtractor", "SoupLinkExtractor", "extract_links", "HREF_PATTERN"]
