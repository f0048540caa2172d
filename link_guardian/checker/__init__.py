# File: link_guardian/checker/__init__.py
"""link_guardian.checker: Проверка ссылок и классификация исходов."""

from .classify import classify_error, classify_status, describe
from .outcome import (
    Broken,
    CheckOutcome,
    DnsError,
    LinkResult,
    Ok,
    Other,
    OutcomeKind,
    Redirect,
    Timeout,
    TlsError,
)
from .verifier import LinkVerifier

__all__ = [
    "LinkVerifier",
    "LinkResult",
    "CheckOutcome",
    "OutcomeKind",
    "Ok",
    "Redirect",
    "Broken",
    "Timeout",
    "TlsError",
    "DnsError",
    "Other",
    "classify_status",
    "classify_error",
    "describe",
]
