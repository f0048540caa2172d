# File: link_guardian/report/__init__.py
"""link_guardian.report: Вывод результатов — таблица, JSON и HTML."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json, report_to_dict, result_to_dict
from .table import render_table

__all__ = ["render_html", "render_json", "render_table", "report_to_dict", "result_to_dict"]
