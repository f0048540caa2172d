# File: link_guardian/report/html_report.py
"""link_guardian.report.html_report: HTML-отчёт по шаблону Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from link_guardian.aggregator import ScanReport
from link_guardian.report.json_report import report_to_dict

TEMPLATE_NAME = "report.html.j2"
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def _environment(template_dir: Path) -> Environment:
    # .j2 templates are autoescaped too
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html(
    report: ScanReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Сохраняет отчёт в *output_path* и возвращает этот путь.

    Шаблону передаётся тот же словарь, что уходит в JSON
    (``source``, ``summary``, ``results``, ``page_errors`` …), поэтому
    свой шаблон из *template_dir* видит те же поля.
    """
    env = _environment(Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR)
    html = env.get_template(TEMPLATE_NAME).render(**report_to_dict(report))

    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding="utf-8")
    return target
