"""Загрузка README репозитория GitHub через raw.githubusercontent.com."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Sequence, Tuple
from urllib.parse import urlparse

from aiohttp import ClientError, ClientSession

from link_guardian.errors import ConfigurationError, RepositoryDocumentNotFound
from link_guardian.logger import get_logger

__all__ = ("RepositoryDocument", "parse_repo_url", "fetch_repository_document")

DEFAULT_RAW_BASE = "https://raw.githubusercontent.com"
DEFAULT_BRANCHES: Tuple[str, ...] = ("main", "master")
DOCUMENT_NAME = "README.md"

logger = get_logger("github")


@dataclass(slots=True, frozen=True)
class RepositoryDocument:
    """Содержимое основного документа и URL, с которого оно получено."""

    repo_url: str
    source_url: str
    name: str
    text: str


def parse_repo_url(repo_url: str) -> Tuple[str, str]:
    """``https://github.com/owner/repo[.git]`` → ``(owner, repo)``."""
    raw = repo_url.strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    parsed = urlparse(raw)
    host = (parsed.hostname or "").lower()
    if host not in ("github.com", "www.github.com"):
        raise ConfigurationError(f"Not a GitHub URL: {repo_url}")
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        raise ConfigurationError(f"Invalid GitHub URL format: {repo_url}")
    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        raise ConfigurationError(f"Invalid GitHub URL format: {repo_url}")
    return owner, repo


async def fetch_repository_document(
    repo_url: str,
    session: ClientSession,
    *,
    raw_base: str = DEFAULT_RAW_BASE,
    branches: Sequence[str] = DEFAULT_BRANCHES,
) -> RepositoryDocument:
    """
    Пробует README.md на ветках по порядку (по умолчанию main, затем master).

    Raises
    ------
    ConfigurationError
        URL не является адресом репозитория GitHub.
    RepositoryDocumentNotFound
        Ни одна ветка не отдала документ.
    """
    owner, repo = parse_repo_url(repo_url)
    base = raw_base.rstrip("/")
    tried: List[str] = []
    for branch in branches:
        url = f"{base}/{owner}/{repo}/{branch}/{DOCUMENT_NAME}"
        tried.append(url)
        try:
            async with session.get(url) as resp:
                if resp.status == 200:
                    text = await resp.text(errors="replace")
                    logger.info("Загружен %s (%d байт)", url, len(text))
                    return RepositoryDocument(repo_url, url, DOCUMENT_NAME, text)
                logger.debug("%s -> HTTP %s", url, resp.status)
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Не удалось загрузить %s: %s", url, exc)
    raise RepositoryDocumentNotFound(repo_url, tried)
