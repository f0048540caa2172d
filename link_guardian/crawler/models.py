# link_guardian/crawler/models.py
"""
Data models for the link-guardian crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from link_guardian.errors import PageFetchError
from link_guardian.utils import normalize_url


@dataclass(slots=True, frozen=True)
class PageData:
    """Fetched HTML page: final URL (after redirects) and its markup."""

    url: str
    content: str


@dataclass(slots=True, frozen=True)
class Link:
    """A discovered link.

    Equality and hashing use the normalized ``url`` only, so a set of links
    never holds the same target twice regardless of depth or referrer.
    """

    url: str
    depth: int = field(default=0, compare=False)
    referrer: Optional[str] = field(default=None, compare=False)

    @classmethod
    def create(cls, url: str, depth: int = 0, referrer: Optional[str] = None) -> Link:
        return cls(url=normalize_url(url), depth=depth, referrer=referrer)


@dataclass(slots=True)
class CrawlResult:
    """Output of one crawl: discovered links, fetched page count, skipped pages."""

    links: Set[Link] = field(default_factory=set)
    pages_visited: int = 0
    errors: List[PageFetchError] = field(default_factory=list)
