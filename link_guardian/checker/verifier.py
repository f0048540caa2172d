# === FILE: link_guardian/checker/verifier.py ===
from __future__ import annotations

import asyncio
import time
from typing import Iterable, List, Optional, Set, Union
from urllib.parse import urljoin

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from link_guardian.checker.classify import TOO_MANY_REDIRECTS, classify_error, classify_status, describe
from link_guardian.checker.outcome import CheckOutcome, LinkResult, Other, Redirect
from link_guardian.config import ScannerConfig
from link_guardian.crawler.models import Link
from link_guardian.logger import get_logger

__all__ = ("LinkVerifier", "FALLBACK_TO_GET")

# servers that refuse HEAD are asked again with GET (body is never read)
FALLBACK_TO_GET = frozenset({405, 501})


class LinkVerifier:
    """Параллельная проверка набора ссылок с ограничением одновременных запросов.

    Каждая ссылка получает ровно один :class:`LinkResult`; сбой одной
    проверки становится её исходом и не прерывает остальные.
    """

    def __init__(self, config: ScannerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = get_logger("verifier")

    async def __aenter__(self) -> LinkVerifier:
        if self.session is None:
            self.session = ClientSession(
                connector=TCPConnector(limit=self.config.concurrency),
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def check_all(
        self,
        links: Iterable[Union[Link, str]],
        concurrency_limit: Optional[int] = None,
    ) -> List[LinkResult]:
        """Проверяет ссылки, не более *concurrency_limit* одновременно.

        Повторяющиеся (после нормализации) ссылки проверяются один раз.
        Порядок результата не совпадает с порядком входа.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        limit = self.config.concurrency if concurrency_limit is None else concurrency_limit
        if limit < 1:
            raise ValueError("concurrency_limit must be >= 1")

        probed: Set[str] = set()
        unique: List[Link] = []
        for item in links:
            link = Link.create(item) if isinstance(item, str) else item
            if link.url in probed:
                continue
            probed.add(link.url)
            unique.append(link)

        self.logger.info("Проверка %d ссылок (параллельно до %d)", len(unique), limit)
        started = time.monotonic()
        semaphore = asyncio.Semaphore(limit)

        async def bounded(link: Link) -> LinkResult:
            async with semaphore:
                return await self.check_link(link)

        results = await asyncio.gather(*(bounded(link) for link in unique))
        self.logger.info("Проверено %d ссылок за %.2f с", len(results), time.monotonic() - started)
        return list(results)

    async def check_link(self, link: Link) -> LinkResult:
        """Один зонд: HEAD, редиректы вручную, общий таймаут на всю цепочку."""
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            outcome = await asyncio.wait_for(self._probe(link.url), timeout=self.config.timeout)
        except Exception as exc:
            outcome = classify_error(exc)
            self.logger.debug("Ошибка проверки %s: %r", link.url, exc)
        result = LinkResult(link=link, outcome=outcome, message=describe(outcome))
        self.logger.debug("%s -> %s (%s)", link.url, outcome.kind.value, result.message)
        return result

    async def _probe(self, url: str) -> CheckOutcome:
        current = url
        first_redirect: Optional[int] = None
        hops = 0
        while True:
            status, location = await self._request(current)
            if 300 <= status < 400:
                target = urljoin(current, location) if location else None
                if not self.config.follow_redirects or target is None:
                    return Redirect(first_redirect or status, target or current)
                if hops >= self.config.max_redirects:
                    return Other(TOO_MANY_REDIRECTS, http_status=status)
                hops += 1
                first_redirect = first_redirect or status
                current = target
                continue
            if first_redirect is not None and 200 <= status < 300:
                return Redirect(first_redirect, current)
            return classify_status(status)

    async def _request(self, url: str) -> tuple[int, Optional[str]]:
        async with self.session.request("HEAD", url, allow_redirects=False) as resp:
            status, location = resp.status, resp.headers.get("Location")
        if status in FALLBACK_TO_GET:
            async with self.session.request("GET", url, allow_redirects=False) as resp:
                status, location = resp.status, resp.headers.get("Location")
        return status, location
