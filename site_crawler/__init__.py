# site_crawler/__init__.py
"""
SiteCrawler package initializer.
Defines package version and exposes the crawler.
The CLI lives in :mod:`site_crawler.cli` (console script ``site-crawler``).
"""
__version__ = "0.1.0"

from site_crawler.crawler.crawler import Crawler, CrawlState  # noqa: E402

__all__ = ["__version__", "Crawler", "CrawlState"]
