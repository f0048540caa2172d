# File: link_guardian/utils.py
"""link_guardian.utils: Нормализация URL и проверки происхождения ссылок."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from link_guardian.logger import get_logger

__all__: Sequence[str] = (
    "HTTP_SCHEMES",
    "SKIP_PREFIXES",
    "normalize_url",
    "is_http_url",
    "resolve_href",
    "extract_host",
    "same_host",
    "remove_duplicates",
)

logger = get_logger("utils")

HTTP_SCHEMES = ("http", "https")
SKIP_PREFIXES = ("#", "mailto:", "tel:", "javascript:", "data:")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Ключ уникальности ссылки: scheme+host+path+query без фрагмента.

    Схема и хост приводятся к нижнему регистру, порт по умолчанию убирается,
    пустой путь становится ``/``. Повторная нормализация ничего не меняет.
    """
    without_fragment, _ = urldefrag(url.strip())
    parsed = urlparse(without_fragment)
    scheme = parsed.scheme.lower()
    hostname = (parsed.hostname or "").lower()
    if ":" in hostname:
        # IPv6 literal
        hostname = f"[{hostname}]"
    try:
        port = parsed.port
    except ValueError:
        port = None
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        netloc = hostname
    else:
        netloc = f"{hostname}:{port}"
    if parsed.username:
        auth = parsed.username + (f":{parsed.password}" if parsed.password else "")
        netloc = f"{auth}@{netloc}"
    return urlunparse((scheme, netloc, parsed.path or "/", parsed.params, parsed.query, ""))


def is_http_url(url: str) -> bool:
    """Абсолютный http(s)-URL с непустым хостом."""
    parsed = urlparse(url)
    return parsed.scheme.lower() in HTTP_SCHEMES and bool(parsed.netloc)


def resolve_href(base_url: str, href: str) -> Optional[str]:
    """Разрешает href относительно base_url; None для якорей и не-http схем."""
    raw = href.strip()
    if not raw or raw.lower().startswith(SKIP_PREFIXES):
        return None
    try:
        absolute = urljoin(base_url, raw)
    except ValueError:
        logger.debug("Unparsable href %r on %s", raw, base_url)
        return None
    return absolute if is_http_url(absolute) else None


def extract_host(url: str) -> str:
    """Хост (с нестандартным портом) нормализованного URL."""
    return urlparse(normalize_url(url)).netloc


def same_host(url: str, other: str) -> bool:
    return extract_host(url) == extract_host(other)


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты (по нормализованному ключу), сохраняя порядок."""
    seen: set[str] = set()
    unique: List[str] = []
    for url in urls:
        key = normalize_url(url)
        if key not in seen:
            seen.add(key)
            unique.append(url)
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
