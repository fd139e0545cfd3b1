# File: site_crawler/engine.py
"""site_crawler.engine: оркестрация одного запуска обхода для CLI и тестов."""

from __future__ import annotations

from typing import Iterable, Optional

from site_crawler.aggregator import CrawlReport
from site_crawler.config import CrawlerConfig
from site_crawler.crawler.crawler import Crawler
from site_crawler.events import Listener
from site_crawler.logger import logger

__all__ = ["run_crawl"]


async def run_crawl(
    config: CrawlerConfig,
    seed_url: str,
    domain_filter: str,
    max_depth: int = 3,
    *,
    duration: Optional[float] = None,
    listeners: Iterable[Listener] = (),
) -> CrawlReport:
    """
    Запускает обход до исчерпания очереди (или истечения duration) и возвращает отчёт.

    Parameters
    ----------
    config : CrawlerConfig
        Настройки движка.
    seed_url, domain_filter, max_depth
        Параметры запуска; пустые значения дают CrawlValidationError.
    duration : float, optional
        Ограничение времени обхода в секундах.
    listeners
        Дополнительные подписчики на события обхода.
    """
    async with Crawler(config) as crawler:
        for listener in listeners:
            crawler.subscribe(listener)
        report = await crawler.run(seed_url, domain_filter, max_depth, duration=duration)
    logger.info("Crawl finished: %d pages, %d errors", report.pages_crawled, len(report.errors))
    return report
