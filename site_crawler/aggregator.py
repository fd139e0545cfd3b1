# File: site_crawler/aggregator.py
"""site_crawler.aggregator: сборка итогового отчёта по сессии обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, TypedDict

from site_crawler.events import CrawlEvent, FetchError, PageCrawled

if TYPE_CHECKING:
    from site_crawler.crawler.session import CrawlSnapshot


class PageInfo(TypedDict):
    """Информация о загруженной странице."""

    url: str
    depth: Optional[int]
    content_type: str
    size: int
    links: List[str]


class ErrorInfo(TypedDict):
    """Неудачная попытка загрузки."""

    url: str
    message: str


class EventCollector:
    """Слушатель событий: запоминает глубины страниц и ошибки; тики прогресса игнорируются."""

    def __init__(self) -> None:
        self.depths: Dict[str, int] = {}
        self.errors: List[ErrorInfo] = []

    def __call__(self, event: CrawlEvent) -> None:
        if isinstance(event, PageCrawled):
            self.depths[event.url] = event.depth
        elif isinstance(event, FetchError):
            self.errors.append({"url": event.url, "message": event.message})


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода: параметры запуска, страницы и ошибки."""

    seed_url: str
    domain_filter: str
    max_depth: int
    pages_crawled: int = 0
    elapsed_seconds: float = 0.0
    pages: List[PageInfo] = field(default_factory=list)
    errors: List[ErrorInfo] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(snapshot: CrawlSnapshot, collector: Optional[EventCollector] = None) -> CrawlReport:
    """Собирает CrawlReport из снимка сессии и (необязательно) собранных событий."""
    depths = collector.depths if collector else {}
    pages: List[PageInfo] = [
        {
            "url": result.url,
            "depth": depths.get(result.url),
            "content_type": result.content_type,
            "size": len(result.content),
            "links": list(result.links),
        }
        for result in snapshot.results.values()
    ]
    pages.sort(key=lambda p: (p["depth"] if p["depth"] is not None else -1, p["url"]))
    return CrawlReport(
        seed_url=snapshot.params.seed_url,
        domain_filter=snapshot.params.domain_filter,
        max_depth=snapshot.params.max_depth,
        pages_crawled=snapshot.pages_crawled,
        elapsed_seconds=round(snapshot.elapsed_seconds, 3),
        pages=pages,
        errors=list(collector.errors) if collector else [],
    )


__all__ = ["PageInfo", "ErrorInfo", "EventCollector", "CrawlReport", "aggregate_results"]
