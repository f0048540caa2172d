# === FILE: link_guardian/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Dict, Iterable, Optional, Set, Tuple

from aiohttp import ClientSession

from link_guardian.config import ScannerConfig
from link_guardian.crawler.fetcher import Fetcher
from link_guardian.crawler.models import CrawlResult, Link, PageData
from link_guardian.errors import ConfigurationError, PageFetchError
from link_guardian.logger import get_logger
from link_guardian.parser.html_parser import extract_html_links
from link_guardian.utils import is_http_url, normalize_url, same_host

__all__ = ("FrontierCrawler", "FetchPage", "ExtractLinks")

FetchPage = Callable[[str], Awaitable[PageData]]
ExtractLinks = Callable[[str, str], Iterable[str]]


class FrontierCrawler:
    """Обход сайта в ширину с ограничением глубины и паузой между страницами.

    Обход последовательный: параллельна только проверка ссылок. Состояние
    (очередь, посещённые страницы) живёт внутри одного вызова :meth:`crawl`.
    Загрузка и разбор страниц подставляются извне (``fetch_page``,
    ``extract_links``); по умолчанию используются :class:`Fetcher` и
    :func:`extract_html_links`.
    """

    def __init__(
        self,
        config: ScannerConfig,
        fetch_page: Optional[FetchPage] = None,
        extract_links: ExtractLinks = extract_html_links,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config
        self.extract_links = extract_links
        self._fetcher: Optional[Fetcher] = None
        if fetch_page is None:
            self._fetcher = Fetcher(config, session=session)
            fetch_page = self._fetcher.fetch_page
        self.fetch_page: FetchPage = fetch_page
        self.logger = get_logger("crawler")
        self._last_fetch_ts: Optional[float] = None

    async def __aenter__(self) -> FrontierCrawler:
        if self._fetcher is not None:
            await self._fetcher.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._fetcher is not None:
            await self._fetcher.__aexit__(exc_type, exc, tb)

    async def crawl(self, start_url: Optional[str] = None, max_depth: Optional[int] = None) -> CrawlResult:
        """Returns every link discovered within *max_depth* and the number of pages fetched."""
        start_url = start_url or (str(self.config.base_url) if self.config.base_url else None)
        max_depth = self.config.max_depth if max_depth is None else max_depth
        self._validate(start_url, max_depth)

        root = normalize_url(start_url)
        self.logger.info("Старт обхода: %s (глубина %d)", root, max_depth)
        started = time.monotonic()

        queue: Deque[Tuple[str, int]] = deque([(root, 0)])
        visited_pages: Set[str] = {root}
        discovered: Dict[str, Link] = {}
        result = CrawlResult()
        self._last_fetch_ts = None

        while queue:
            page_url, depth = queue.popleft()
            if depth >= max_depth:
                break
            await self._wait_politeness()
            try:
                page = await self.fetch_page(page_url)
            except PageFetchError as exc:
                self.logger.warning("Страница пропущена %s: %s", page_url, exc.reason)
                result.errors.append(exc)
                continue
            result.pages_visited += 1

            raw_links = list(self.extract_links(page.content, page.url))
            self.logger.info("[глубина %d] %s: %d ссылок", depth, page_url, len(raw_links))
            for raw in raw_links:
                if not is_http_url(raw):
                    continue
                link = Link.create(raw, depth=depth + 1, referrer=page.url)
                discovered.setdefault(link.url, link)
                if (
                    depth + 1 < max_depth
                    and link.url not in visited_pages
                    and same_host(link.url, root)
                ):
                    # mark at enqueue time so two referrers cannot queue the same page
                    visited_pages.add(link.url)
                    queue.append((link.url, depth + 1))

        result.links = set(discovered.values())
        duration = time.monotonic() - started
        self.logger.info(
            "Обход завершён: %d страниц, %d ссылок, %d ошибок за %.2f с",
            result.pages_visited, len(result.links), len(result.errors), duration,
        )
        return result

    async def _wait_politeness(self) -> None:
        delay = self.config.crawl_delay
        now = time.monotonic()
        if self._last_fetch_ts is not None and delay > 0:
            wait = delay - (now - self._last_fetch_ts)
            if wait > 0:
                await asyncio.sleep(wait)
        self._last_fetch_ts = time.monotonic()

    @staticmethod
    def _validate(start_url: Optional[str], max_depth: int) -> None:
        if not start_url or not is_http_url(start_url):
            raise ConfigurationError(f"Invalid start URL: {start_url!r}")
        if max_depth < 1:
            raise ConfigurationError(f"max_depth must be >= 1, got {max_depth}")

