# File: site_crawler/report/__init__.py
"""site_crawler.report: генерация отчётов (JSON и HTML), используемая CLI."""

from site_crawler.report.html_report import render_html
from site_crawler.report.json_report import render_json

__all__ = ["render_json", "render_html"]
