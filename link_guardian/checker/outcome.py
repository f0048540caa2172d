# File: link_guardian/checker/outcome.py
"""link_guardian.checker.outcome: Закрытый набор исходов проверки ссылки.

Каждый вариант — неизменяемый dataclass с тегом :class:`OutcomeKind`;
потребители (форматтер, код возврата) сопоставляют исход по ``kind``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union

from link_guardian.crawler.models import Link

__all__ = (
    "OutcomeKind",
    "Ok",
    "Redirect",
    "Broken",
    "Timeout",
    "TlsError",
    "DnsError",
    "Other",
    "CheckOutcome",
    "LinkResult",
)


class OutcomeKind(str, Enum):
    OK = "ok"
    REDIRECT = "redirect"
    BROKEN = "broken"
    TIMEOUT = "timeout"
    TLS_ERROR = "tls_error"
    DNS_ERROR = "dns_error"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class Ok:
    http_status: int
    kind: ClassVar[OutcomeKind] = OutcomeKind.OK


@dataclass(slots=True, frozen=True)
class Redirect:
    http_status: int
    final_location: str
    kind: ClassVar[OutcomeKind] = OutcomeKind.REDIRECT


@dataclass(slots=True, frozen=True)
class Broken:
    http_status: int
    kind: ClassVar[OutcomeKind] = OutcomeKind.BROKEN


@dataclass(slots=True, frozen=True)
class Timeout:
    kind: ClassVar[OutcomeKind] = OutcomeKind.TIMEOUT


@dataclass(slots=True, frozen=True)
class TlsError:
    detail: str
    kind: ClassVar[OutcomeKind] = OutcomeKind.TLS_ERROR


@dataclass(slots=True, frozen=True)
class DnsError:
    detail: str
    kind: ClassVar[OutcomeKind] = OutcomeKind.DNS_ERROR


@dataclass(slots=True, frozen=True)
class Other:
    """Любой иной исход; ``http_status`` задан, если ответ всё же был получен."""

    detail: str
    http_status: Optional[int] = None
    kind: ClassVar[OutcomeKind] = OutcomeKind.OTHER


CheckOutcome = Union[Ok, Redirect, Broken, Timeout, TlsError, DnsError, Other]


@dataclass(slots=True, frozen=True)
class LinkResult:
    """Проверенная ссылка, её исход и сообщение для человека."""

    link: Link
    outcome: CheckOutcome
    message: str = field(default="")

    @property
    def url(self) -> str:
        return self.link.url

    @property
    def kind(self) -> OutcomeKind:
        return self.outcome.kind

    @property
    def is_broken(self) -> bool:
        return self.outcome.kind is OutcomeKind.BROKEN
