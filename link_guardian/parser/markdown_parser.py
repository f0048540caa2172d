# File: link_guardian/parser/markdown_parser.py
"""Извлечение ссылок из Markdown (README и документация репозитория).

Поддерживаются inline-ссылки ``[text](url "title")`` и картинки,
reference-определения ``[id]: url``, автоссылки ``<https://…>`` и сырые
``<a href>``. Код в блоках ``` и `inline` пропускается.
"""
from __future__ import annotations

import re
from typing import List, Optional

from link_guardian.parser.html_parser import extract_html_links
from link_guardian.utils import is_http_url, resolve_href

__all__ = ["extract_markdown_links"]

_FENCE_RE = re.compile(r"^(```|~~~).*?^\1[^\n]*$", re.MULTILINE | re.DOTALL)
_CODE_SPAN_RE = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)", re.DOTALL)
_INLINE_RE = re.compile(r"!?\[(?:[^\[\]]|\[[^\[\]]*\])*\]\(\s*<?((?:[^()\s<>]|\([^()\s]*\))+)>?(?:\s+[\"'(][^)]*[\"')])?\s*\)")
_REFERENCE_RE = re.compile(r"^\s{0,3}\[[^\]]+\]:\s*<?(\S+?)>?(?:\s+[\"'(].*[\"')])?\s*$", re.MULTILINE)
_AUTOLINK_RE = re.compile(r"<(https?://[^>\s]+)>", re.IGNORECASE)


def _strip_code(text: str) -> str:
    return _CODE_SPAN_RE.sub("", _FENCE_RE.sub("", text))


def _accept(url: str, base_url: Optional[str]) -> Optional[str]:
    if is_http_url(url):
        return url
    if base_url:
        return resolve_href(base_url, url)
    return None


def extract_markdown_links(text: str, base_url: Optional[str] = None) -> List[str]:
    """
    Возвращает http(s)-ссылки из Markdown в порядке появления, без повторов.

    Относительные ссылки отбрасываются, если не задан ``base_url``.
    """
    body = _strip_code(text)
    found: List[tuple[int, str]] = []
    for regex in (_INLINE_RE, _REFERENCE_RE, _AUTOLINK_RE):
        for match in regex.finditer(body):
            found.append((match.start(), match.group(1).strip()))
    found.sort(key=lambda item: item[0])

    links: List[str] = []
    seen: set[str] = set()
    candidates = [url for _, url in found]
    if "<a" in body.lower():
        candidates.extend(extract_html_links(body, base_url or ""))
    for raw in candidates:
        url = _accept(raw, base_url)
        if url and url not in seen:
            seen.add(url)
            links.append(url)
    return links
