# File: site_crawler/utils.py
"""site_crawler.utils: URL helpers shared by the fetcher and the dedup gate."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urldefrag, urlparse

__all__: Sequence[str] = ("normalize_url", "is_http_url", "matches_domain")


def normalize_url(url: str) -> str:
    """Strip the ``#fragment``; everything else is kept verbatim.

    Fragments never reach the server, so ``/a#x`` and ``/a#y`` are the same page.
    """
    return urldefrag(url).url


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs that carry a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def matches_domain(url: str, domain_filter: str) -> bool:
    """Substring gate: the URL's string form must contain *domain_filter*."""
    return domain_filter in url
