# File: link_guardian/config.py
"""
Конфигурация link-guardian: схема pydantic и загрузка из YAML/JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
)

from link_guardian import __version__
from link_guardian.errors import ConfigurationError

__all__ = ("ScannerConfig", "load_config", "DEFAULT_CONFIG_FILE")


class ScannerConfig(BaseModel):
    """Параметры одного запуска: обход сайта и проверка ссылок."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: Optional[HttpUrl] = Field(None, description="Стартовый URL (режим site).")
    max_depth: int = Field(1, ge=1, description="Глубина обхода: 1 = только стартовая страница.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на проверку одной ссылки (секунд).")
    page_timeout: float = Field(10.0, gt=0, description="Таймаут загрузки страницы краулером.")
    user_agent: str = Field(f"link-guardian/{__version__}", min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(50, ge=1, description="Максимум одновременных проверок.")
    crawl_delay: float = Field(0.1, ge=0, description="Пауза между загрузками страниц (секунд).")
    max_redirects: int = Field(5, ge=0, description="Максимум переходов по редиректам.")
    follow_redirects: bool = Field(True, description="Следовать ли редиректам при проверке.")
    retry_times: int = Field(2, ge=0, description="Повторы загрузки страницы при 5xx/429.")
    retry_backoff: float = Field(0.5, ge=0, description="Базовая задержка экспоненциального backoff.")
    github_raw_base: HttpUrl = Field(
        "https://raw.githubusercontent.com", validate_default=True, description="Хост сырых файлов GitHub."
    )
    github_branches: List[str] = Field(
        default_factory=lambda: ["main", "master"], min_length=1, description="Ветки для поиска README."
    )

    def with_overrides(self, **overrides: Any) -> ScannerConfig:
        """Возвращает новую проверенную конфигурацию; значения None пропускаются."""
        data = self.model_dump(mode="json")
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return ScannerConfig(**data)
        except ValidationError as exc:
            raise ConfigurationError(_format_validation_error(exc)) from exc


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


DEFAULT_CONFIG_FILE = Path("link-guardian.yaml")

# suffix -> (parser, its error type, format name)
_PARSERS: Dict[str, Tuple[Callable[[str], Any], Type[Exception], str]] = {
    ".yaml": (yaml.safe_load, yaml.YAMLError, "YAML"),
    ".yml": (yaml.safe_load, yaml.YAMLError, "YAML"),
    ".json": (json.loads, json.JSONDecodeError, "JSON"),
}


def _read_mapping(path: Path) -> Dict[str, Any]:
    try:
        parse, parse_error, fmt = _PARSERS[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Неподдерживаемый формат конфига: {path.suffix or path.name}") from None

    text = path.read_text(encoding="utf-8")
    try:
        data = parse(text) if text.strip() else {}
    except parse_error as exc:
        raise ValueError(f"Не удалось разобрать {fmt} в {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"{path}: ожидался mapping на верхнем уровне, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> ScannerConfig:
    """
    YAML/JSON → :class:`ScannerConfig`.

    Без *path* используется ``link-guardian.yaml`` из текущего каталога,
    а при его отсутствии — значения по умолчанию. Явный путь к
    несуществующему файлу даёт FileNotFoundError; ошибки схемы
    поднимаются как pydantic.ValidationError.
    """
    if path is None:
        if not DEFAULT_CONFIG_FILE.is_file():
            return ScannerConfig()
        source = DEFAULT_CONFIG_FILE
    else:
        source = Path(path).expanduser()
        if not source.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(source))

    return ScannerConfig.model_validate(_read_mapping(source))
