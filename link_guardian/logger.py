# File: link_guardian/logger.py
"""Логирование **link-guardian**.

Все модули пишут в дерево логгеров ``LinkGuardian`` (``LinkGuardian.crawler``,
``LinkGuardian.verifier`` …). Консольный вывод идёт в *stderr*: stdout занят
таблицей или JSON-отчётом. Файл логов, если задан, ротируется (5 МБ × 3).

Уровень и формат меняются на лету через :func:`configure`; CLI вызывает
:func:`init_logging` один раз при старте.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, TextIO, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_ROOT_NAME: Final[str] = "LinkGuardian"
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _console_handler(stream: TextIO, fmt: str) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_handler(path: Union[Path, str], fmt: str) -> logging.Handler:
    handler = RotatingFileHandler(str(path), maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """``get_logger("crawler")`` → ``LinkGuardian.crawler``; без имени — корневой логгер проекта."""
    return logging.getLogger(f"{_ROOT_NAME}.{name}" if name else _ROOT_NAME)


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает корневой логгер проекта и возвращает его.

    ``replace_handlers=False`` добавляет обработчики к уже существующим.
    """
    root = get_logger()
    root.setLevel(level)

    if replace_handlers:
        old: List[logging.Handler] = list(root.handlers)
        for handler in old:
            root.removeHandler(handler)
            handler.close()

    root.addHandler(_console_handler(sys.stderr, log_format))
    if log_file is not None:
        root.addHandler(_rotating_handler(log_file, log_format))

    # records must not reach the root logger (stdout may carry a JSON report)
    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging(level="WARNING")

__all__ = ["logger", "configure", "init_logging", "get_logger"]
