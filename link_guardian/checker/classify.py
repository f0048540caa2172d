# File: link_guardian/checker/classify.py
"""link_guardian.checker.classify: Отображение статуса или ошибки транспорта в исход.

Только 404 и 410 считаются «сломанными»; прочие 4xx/5xx (403, 429, 500 …)
отдаются как :class:`Other` — они бывают временными или закрытыми доступом.
"""
from __future__ import annotations

import asyncio
import socket
import ssl
from typing import Optional

import aiohttp

from link_guardian.checker.outcome import (
    Broken,
    CheckOutcome,
    DnsError,
    Ok,
    Other,
    OutcomeKind,
    Redirect,
    Timeout,
    TlsError,
)

__all__ = (
    "BROKEN_STATUSES",
    "TOO_MANY_REDIRECTS",
    "classify_status",
    "classify_error",
    "describe",
)

BROKEN_STATUSES = frozenset({404, 410})
TOO_MANY_REDIRECTS = "too many redirects"


def classify_status(status: int, location: Optional[str] = None) -> CheckOutcome:
    """Исход по коду ответа; *location* — итоговая цель для 3xx."""
    if 200 <= status < 300:
        return Ok(status)
    if 300 <= status < 400:
        return Redirect(status, location or "")
    if status in BROKEN_STATUSES:
        return Broken(status)
    return Other(f"HTTP {status}", http_status=status)


def _error_text(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _is_dns_failure(exc: BaseException) -> bool:
    if isinstance(exc, socket.gaierror):
        return True
    os_error = getattr(exc, "os_error", None)
    if isinstance(os_error, socket.gaierror):
        return True
    cause = exc.__cause__ or exc.__context__
    return isinstance(cause, socket.gaierror)


def classify_error(exc: BaseException) -> CheckOutcome:
    """Исход для сбоя до получения статуса. Порядок проверок важен:
    aiohttp-таймауты одновременно являются ClientError."""
    if isinstance(exc, asyncio.TimeoutError):
        return Timeout()
    if isinstance(exc, (aiohttp.ClientSSLError, ssl.SSLError, ssl.CertificateError)):
        return TlsError(_error_text(exc))
    if _is_dns_failure(exc):
        return DnsError(_error_text(exc))
    if isinstance(exc, aiohttp.TooManyRedirects):
        return Other(TOO_MANY_REDIRECTS)
    return Other(_error_text(exc))


def describe(outcome: CheckOutcome) -> str:
    """Короткое сообщение для таблицы и JSON."""
    kind = outcome.kind
    if kind is OutcomeKind.OK:
        return f"HTTP {outcome.http_status}"
    if kind is OutcomeKind.REDIRECT:
        return f"HTTP {outcome.http_status} -> {outcome.final_location}"
    if kind is OutcomeKind.BROKEN:
        return f"HTTP {outcome.http_status}"
    if kind is OutcomeKind.TIMEOUT:
        return "Request timed out"
    if kind is OutcomeKind.TLS_ERROR:
        return f"TLS error: {outcome.detail}"
    if kind is OutcomeKind.DNS_ERROR:
        return f"Could not resolve hostname: {outcome.detail}"
    if kind is OutcomeKind.OTHER:
        return outcome.detail
    raise ValueError(f"Unknown outcome kind: {kind!r}")
