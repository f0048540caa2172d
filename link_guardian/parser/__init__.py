# File: link_guardian/parser/__init__.py
"""link_guardian.parser: Извлечение ссылок из HTML и Markdown."""

from .html_parser import extract_html_links
from .markdown_parser import extract_markdown_links

__all__ = ["extract_html_links", "extract_markdown_links"]
