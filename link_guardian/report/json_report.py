# link_guardian/report/json_report.py

"""
Генерация JSON-отчёта для link-guardian.

Сериализация объекта ScanReport в строку или файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from link_guardian.aggregator import ScanReport
from link_guardian.checker.outcome import LinkResult


def result_to_dict(result: LinkResult) -> Dict[str, Any]:
    """Один результат проверки в виде плоского словаря."""
    outcome = result.outcome
    return {
        "url": result.url,
        "status": outcome.kind.value,
        "http_status": getattr(outcome, "http_status", None),
        "location": getattr(outcome, "final_location", None),
        "detail": getattr(outcome, "detail", None),
        "message": result.message,
        "depth": result.link.depth,
        "referrer": result.link.referrer,
    }


def report_to_dict(report: ScanReport) -> Dict[str, Any]:
    return {
        "source": report.source,
        "mode": report.mode,
        "pages_visited": report.pages_visited,
        "page_errors": [{"url": e.url, "reason": e.reason} for e in report.page_errors],
        "summary": report.summary.as_dict(),
        "results": [result_to_dict(r) for r in report.sorted_results()],
    }


def render_json(
    report: ScanReport,
    output_path: Optional[Union[Path, str]] = None,
    *,
    pretty: bool = False,
) -> Union[str, Path]:
    """
    Сериализует report в JSON.

    :param report: объект ScanReport с результатами проверки
    :param output_path: путь к JSON-файлу; без него возвращается строка
    :param pretty: отступ 2 пробела
    :return: строка JSON или Path сохранённого файла

    Пример:
    ```python
    from link_guardian.report.json_report import render_json
    report_path = render_json(report, 'reports/links.json', pretty=True)
    ```
    """
    text = json.dumps(report_to_dict(report), ensure_ascii=False, indent=2 if pretty else None)
    if output_path is None:
        return text

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    return output
