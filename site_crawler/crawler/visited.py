# site_crawler/crawler/visited.py
"""
Dedup gate: the set of URLs already claimed for processing in a session.
"""
from __future__ import annotations

import threading
from typing import Iterator, Set

from site_crawler.utils import normalize_url


class VisitedSet:
    """Thread-safe set with an atomic check-and-insert.

    ``try_claim`` is the only way URLs enter the set, so exactly one caller
    wins a given (normalized) URL even under concurrent attempts.
    """

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = threading.Lock()

    def try_claim(self, url: str) -> bool:
        """Insert *url* if absent; True only for the caller that inserted it."""
        key = normalize_url(url)
        with self._lock:
            if key in self._urls:
                return False
            self._urls.add(key)
            return True

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        with self._lock:
            return normalize_url(url) in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._urls))

    def clear(self) -> None:
        with self._lock:
            self._urls.clear()
