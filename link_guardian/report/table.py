# File: link_guardian/report/table.py
"""link_guardian.report.table: Текстовая таблица результатов для терминала."""

from __future__ import annotations

from typing import List

from link_guardian.aggregator import ScanReport
from link_guardian.checker.outcome import OutcomeKind

__all__ = ["render_table", "STATUS_LABELS"]

URL_WIDTH = 60
STATUS_WIDTH = 15
MESSAGE_WIDTH = 30

STATUS_LABELS = {
    OutcomeKind.OK: "OK",
    OutcomeKind.REDIRECT: "REDIRECT",
    OutcomeKind.BROKEN: "BROKEN",
    OutcomeKind.TIMEOUT: "TIMEOUT",
    OutcomeKind.TLS_ERROR: "TLS ERROR",
    OutcomeKind.DNS_ERROR: "DNS ERROR",
    OutcomeKind.OTHER: "ERROR",
}


def _truncate(url: str, width: int = URL_WIDTH - 3) -> str:
    return f"{url[:width]}..." if len(url) > width else url


def render_table(report: ScanReport) -> str:
    """Таблица URL / STATUS / MESSAGE и сводка по категориям."""
    lines: List[str] = [
        f"{'URL':<{URL_WIDTH}} {'STATUS':<{STATUS_WIDTH}} {'MESSAGE':<{MESSAGE_WIDTH}}",
        "=" * (URL_WIDTH + STATUS_WIDTH + MESSAGE_WIDTH),
    ]
    for result in report.sorted_results():
        label = STATUS_LABELS[result.kind]
        lines.append(f"{_truncate(result.url):<{URL_WIDTH}} {label:<{STATUS_WIDTH}} {result.message}")

    summary = report.summary
    lines.append("")
    lines.append("Summary:")
    for kind in OutcomeKind:
        lines.append(f"  {STATUS_LABELS[kind]:<{STATUS_WIDTH}} {summary[kind]}")
    lines.append(f"  {'TOTAL':<{STATUS_WIDTH}} {summary.total}")
    if report.mode == "site":
        lines.append(f"  Pages crawled: {report.pages_visited} (skipped: {len(report.page_errors)})")
    return "\n".join(lines)
