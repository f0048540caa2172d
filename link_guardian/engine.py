# File: link_guardian/engine.py
"""link_guardian.engine: Orchestration layer: выбор режима, обход, проверка, отчёт."""

from __future__ import annotations

from typing import List, Optional

from aiohttp import ClientSession, ClientTimeout

from link_guardian.aggregator import ScanReport
from link_guardian.checker.verifier import LinkVerifier
from link_guardian.config import ScannerConfig
from link_guardian.crawler.crawler import FrontierCrawler
from link_guardian.crawler.models import Link
from link_guardian.errors import ConfigurationError
from link_guardian.logger import logger
from link_guardian.parser.markdown_parser import extract_markdown_links
from link_guardian.sources.github import fetch_repository_document
from link_guardian.utils import remove_duplicates

__all__ = ["scan_site", "scan_repository", "links_from_document"]


async def scan_site(config: ScannerConfig, url: Optional[str] = None) -> ScanReport:
    """Обходит сайт в ширину и проверяет все найденные ссылки."""
    start_url = url or (str(config.base_url) if config.base_url else None)
    if not start_url:
        raise ConfigurationError("Start URL is required for a site scan")
    logger.info("Starting site scan: %s (max depth %d)", start_url, config.max_depth)

    async with FrontierCrawler(config) as crawler:
        crawl = await crawler.crawl(start_url, config.max_depth)

    report = ScanReport(
        source=start_url,
        mode="site",
        pages_visited=crawl.pages_visited,
        page_errors=list(crawl.errors),
    )
    if not crawl.links:
        logger.info("No links found to check")
        return report

    async with LinkVerifier(config) as verifier:
        report.results = await verifier.check_all(crawl.links, config.concurrency)
    return report


def links_from_document(text: str, source_url: str) -> List[Link]:
    """Ссылки README в виде Link (глубина 0, referrer — адрес документа), без повторов."""
    raw_links = remove_duplicates(extract_markdown_links(text))
    return [Link.create(raw, depth=0, referrer=source_url) for raw in raw_links]


async def scan_repository(config: ScannerConfig, repo_url: str) -> ScanReport:
    """Загружает README репозитория и проверяет ссылки из него (без обхода)."""
    logger.info("Starting repository scan: %s", repo_url)
    async with ClientSession(
        timeout=ClientTimeout(total=config.page_timeout),
        headers={"User-Agent": config.user_agent},
    ) as session:
        document = await fetch_repository_document(
            repo_url,
            session,
            raw_base=str(config.github_raw_base),
            branches=config.github_branches,
        )

    links = links_from_document(document.text, document.source_url)
    logger.info("%d links found in %s", len(links), document.name)
    report = ScanReport(source=repo_url, mode="github")
    if not links:
        logger.info("No links found to check")
        return report

    async with LinkVerifier(config) as verifier:
        report.results = await verifier.check_all(links, config.concurrency)
    return report
