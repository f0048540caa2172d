# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

import pytest
from aiohttp import web

from link_guardian.config import ScannerConfig


async def serve_app(app: web.Application, port: int, host: str = "localhost") -> AsyncIterator[str]:
    """Start *app* on *host*:*port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    netloc = f"[{host}]" if ":" in host else host
    try:
        yield f"http://{netloc}:{port}"
    finally:
        await runner.cleanup()


def html_page(*hrefs: str) -> str:
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


@pytest.fixture()
def make_config() -> Callable[..., ScannerConfig]:
    """Factory for fast test configs: no politeness delay, no retries."""

    def _make(**overrides) -> ScannerConfig:
        params = dict(
            timeout=2.0,
            page_timeout=2.0,
            user_agent="TestAgent/1.0",
            crawl_delay=0.0,
            retry_times=0,
            retry_backoff=0.0,
        )
        params.update(overrides)
        return ScannerConfig(**params)

    return _make


# --------------------------------------------------------------------------- #
#                         Stub aiohttp session                                #
# --------------------------------------------------------------------------- #


class FakeResponse:
    def __init__(self, status: int, headers: Optional[Dict[str, str]] = None) -> None:
        self.status = status
        self.headers = headers or {}


Handler = Callable[[str, str], Awaitable[FakeResponse]]


class _RequestContext:
    def __init__(self, session: FakeSession, method: str, url: str) -> None:
        self._session = session
        self._method = method
        self._url = url

    async def __aenter__(self) -> FakeResponse:
        self._session.calls.append((self._method, self._url))
        return await self._session.handler(self._method, self._url)

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSession:
    """Minimal stand-in for ``aiohttp.ClientSession.request`` used by the verifier."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.calls: List[Tuple[str, str]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs) -> _RequestContext:
        return _RequestContext(self, method, url)

    async def close(self) -> None:
        self.closed = True


def status_handler(table: Dict[str, Tuple[int, Optional[str]]], delay: float = 0.0) -> Handler:
    """Handler answering from ``{url: (status, location)}``; unknown URLs → 404."""

    async def handler(method: str, url: str) -> FakeResponse:
        if delay:
            await asyncio.sleep(delay)
        status, location = table.get(url, (404, None))
        return FakeResponse(status, {"Location": location} if location else {})

    return handler
