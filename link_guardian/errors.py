# File: link_guardian/errors.py
"""link_guardian.errors: Иерархия исключений сканера ссылок.

Ошибки отдельных страниц и ссылок не выходят за пределы одного элемента
(страница пропускается, ссылка получает классифицированный результат).
Наружу поднимаются только ошибки предусловий всего сканирования.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

__all__ = (
    "LinkGuardianError",
    "ConfigurationError",
    "PageFetchError",
    "RepositoryDocumentNotFound",
)


class LinkGuardianError(Exception):
    """Базовое исключение пакета."""


class ConfigurationError(LinkGuardianError, ValueError):
    """Неверный стартовый URL, глубина или иной параметр; сеть не трогаем."""


class PageFetchError(LinkGuardianError):
    """Страницу не удалось загрузить: сеть, статус или тип содержимого."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class RepositoryDocumentNotFound(LinkGuardianError):
    """В репозитории не найден основной документ (README)."""

    def __init__(self, repo_url: str, tried: Sequence[str] = ()) -> None:
        self.repo_url = repo_url
        self.tried: List[str] = list(tried)
        detail = ", ".join(self.tried) if self.tried else "no candidates"
        super().__init__(f"README not found for {repo_url} (tried: {detail})")
