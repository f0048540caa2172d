# link_guardian/crawler/fetcher.py
"""
Fetcher module: loads HTML pages for the crawler with retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from link_guardian.config import ScannerConfig
from link_guardian.crawler.models import PageData
from link_guardian.errors import PageFetchError
from link_guardian.logger import get_logger

__all__ = ("Fetcher", "RETRY_STATUS", "HTML_TYPES")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
HTML_TYPES = ("text/html", "application/xhtml+xml")

logger = get_logger("fetcher")


class Fetcher:
    """Fetches pages; every failure surfaces as :class:`PageFetchError`.

    Can own its aiohttp session (``async with Fetcher(cfg) as f``) or borrow
    one passed in by the caller.
    """

    def __init__(
        self,
        config: ScannerConfig,
        session: Optional[ClientSession] = None,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._retry_status = retry_status

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.page_timeout),
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

    async def fetch_page(self, url: str) -> PageData:
        """
        Fetch *url* following redirects.

        Returns PageData with the final URL; raises PageFetchError on
        non-2xx status, non-HTML content or network failure.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        attempts = 0
        while True:
            try:
                async with self.session.get(url, allow_redirects=True) as resp:
                    status = resp.status
                    if status in self._retry_status and attempts < self.config.retry_times:
                        raise _RetryableStatus(status)
                    if not 200 <= status < 300:
                        raise PageFetchError(url, f"HTTP {status}", status=status)
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    if mime not in HTML_TYPES:
                        raise PageFetchError(url, f"not HTML ({mime or 'no content type'})", status=status)
                    text = await resp.text(errors="replace")
                    return PageData(str(resp.url), text)
            except _RetryableStatus as exc:
                reason = f"retryable status {exc.status}"
            except asyncio.TimeoutError:
                # no retry on timeout
                raise PageFetchError(url, "timed out") from None
            except ClientError as exc:
                if attempts >= self.config.retry_times:
                    raise PageFetchError(url, str(exc) or type(exc).__name__) from exc
                reason = str(exc) or type(exc).__name__
            attempts += 1
            # exponential backoff, cap at 60s
            backoff = min(self.config.retry_backoff * 2 ** attempts, 60.0)
            logger.debug("Retry %d/%d for %s after %.2f s (%s)", attempts, self.config.retry_times, url, backoff, reason)
            await asyncio.sleep(backoff)


class _RetryableStatus(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status
