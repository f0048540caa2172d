# === FILE: link_guardian/parser/html_parser.py ===
"""HTML link extraction for link-guardian.

:func:`extract_html_links` is the ``extract_links`` collaborator of the
crawler: it returns absolute http(s) URLs found in ``<a href="…">`` tags,
resolved against the page URL. Links to other hosts are kept; deciding what
to traverse is the crawler's job, not the parser's.

* fragment-only references (``#top``) and ``mailto:``, ``tel:``,
  ``javascript:``, ``data:`` links are skipped;
* a ``<base href>`` element, when present, overrides the page URL;
* the order of first appearance is preserved, exact duplicates are dropped.
"""
from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup, SoupStrainer
from bs4.element import Tag

from link_guardian.utils import is_http_url, resolve_href

__all__: Sequence[str] = ("extract_html_links",)

# parse only the tags we need
_LINK_STRAINER = SoupStrainer(["a", "base"])


def _effective_base(soup: BeautifulSoup, page_url: str) -> str:
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = base_tag.get("href")
        if isinstance(href, str):
            resolved = resolve_href(page_url, href)
            if resolved and is_http_url(resolved):
                return resolved
    return page_url


def extract_html_links(html: str, base_url: str) -> list[str]:
    """Return absolute http(s) URLs referenced by ``<a href>`` in *html*."""
    soup = BeautifulSoup(html, "html.parser", parse_only=_LINK_STRAINER)
    base = _effective_base(soup, base_url)

    seen: set[str] = set()
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        absolute = resolve_href(base, href_val)
        if absolute and absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links
