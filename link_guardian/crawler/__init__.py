# File: link_guardian/crawler/__init__.py
"""link_guardian.crawler: Обход сайта в ширину и загрузка страниц."""

from .crawler import FrontierCrawler
from .fetcher import Fetcher
from .models import CrawlResult, Link, PageData

__all__ = ["FrontierCrawler", "Fetcher", "CrawlResult", "Link", "PageData"]
