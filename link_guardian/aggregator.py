# File: link_guardian/aggregator.py
"""link_guardian.aggregator: Итоговый отчёт сканирования и сводка по исходам."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal

from link_guardian.checker.outcome import LinkResult, OutcomeKind
from link_guardian.errors import PageFetchError

__all__ = ("ScanSummary", "ScanReport", "EXIT_OK", "EXIT_BROKEN", "EXIT_ERROR")

EXIT_OK = 0
EXIT_BROKEN = 1
EXIT_ERROR = 2

ScanMode = Literal["github", "site"]


@dataclass(slots=True, frozen=True)
class ScanSummary:
    """Число результатов каждой категории; всегда пересчитывается из результатов."""

    counts: Dict[OutcomeKind, int]
    total: int

    @classmethod
    def from_results(cls, results: Iterable[LinkResult]) -> ScanSummary:
        tally = Counter(r.outcome.kind for r in results)
        counts = {kind: tally.get(kind, 0) for kind in OutcomeKind}
        return cls(counts=counts, total=sum(counts.values()))

    def __getitem__(self, kind: OutcomeKind) -> int:
        return self.counts[kind]

    @property
    def ok(self) -> int:
        return self.counts[OutcomeKind.OK]

    @property
    def redirect(self) -> int:
        return self.counts[OutcomeKind.REDIRECT]

    @property
    def broken(self) -> int:
        return self.counts[OutcomeKind.BROKEN]

    def as_dict(self) -> Dict[str, int]:
        data = {kind.value: count for kind, count in self.counts.items()}
        data["total"] = self.total
        return data


@dataclass(slots=True)
class ScanReport:
    """Результаты одного сканирования (репозиторий или сайт)."""

    source: str
    mode: ScanMode
    results: List[LinkResult] = field(default_factory=list)
    pages_visited: int = 0
    page_errors: List[PageFetchError] = field(default_factory=list)

    @property
    def summary(self) -> ScanSummary:
        return ScanSummary.from_results(self.results)

    @property
    def has_broken(self) -> bool:
        return any(r.is_broken for r in self.results)

    @property
    def exit_code(self) -> int:
        """0 — битых ссылок нет, 1 — есть хотя бы одна ``Broken``."""
        return EXIT_BROKEN if self.has_broken else EXIT_OK

    def sorted_results(self) -> List[LinkResult]:
        """Результаты в стабильном порядке (по URL) для вывода."""
        return sorted(self.results, key=lambda r: r.url)
