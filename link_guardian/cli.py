# === FILE: link_guardian/cli.py ===
#!/usr/bin/env python3
"""
Точка входа link-guardian: поиск битых ссылок в репозитории GitHub или на сайте.

Команды:
  github REPO_URL   Проверить ссылки из README.md репозитория
  site URL          Обойти сайт в ширину и проверить все найденные ссылки
  config            Показать действующую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: link-guardian.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Опции github/site:
  --json              Вывести результат в JSON вместо таблицы
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --html PATH         Дополнительно сохранить HTML-отчёт
  --concurrency N     Максимум одновременных проверок
  --timeout SEC       Таймаут проверки одной ссылки
  --scan-timeout SEC  Таймаут всего сканирования
  --max-depth N       (только site) глубина обхода, 1 = только стартовая страница

Коды возврата: 0 — битых ссылок нет, 1 — найдены битые ссылки, 2 — ошибка.

Пример:
  link-guardian site https://example.com --max-depth 2 --json --pretty
"""
import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable, NoReturn, Optional

import click

from link_guardian import __version__
from link_guardian.aggregator import EXIT_ERROR, ScanReport
from link_guardian.config import ScannerConfig, load_config
from link_guardian.engine import scan_repository, scan_site
from link_guardian.errors import ConfigurationError, RepositoryDocumentNotFound
from link_guardian.logger import init_logging
from link_guardian.report.html_report import render_html
from link_guardian.report.json_report import render_json
from link_guardian.report.table import render_table

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str) -> NoReturn:
    click.secho(message, fg='red', err=True)
    sys.exit(EXIT_ERROR)


def _scan_options(func):
    """Опции вывода и проверки, общие для github и site."""
    options = [
        click.option('--json', 'as_json', is_flag=True, help='Вывести результат в JSON'),
        click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)'),
        click.option(
            '--html', 'html_output',
            default=None,
            type=click.Path(writable=True, dir_okay=False, path_type=Path),
            help='Сохранить HTML-отчёт в файл'
        ),
        click.option('--concurrency', type=int, default=None, help='Максимум одновременных проверок'),
        click.option('--timeout', type=float, default=None, help='Таймаут проверки одной ссылки (секунд)'),
        click.option('--scan-timeout', 'scan_timeout', type=float, default=None,
                     help='Таймаут всего сканирования (секунд)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='link-guardian, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """link-guardian: поиск битых ссылок в репозиториях GitHub и на сайтах."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


def _run_scan(
    scan: Callable[[], Awaitable[ScanReport]],
    scan_timeout: Optional[float],
) -> ScanReport:
    try:
        if scan_timeout:
            return asyncio.run(asyncio.wait_for(scan(), timeout=scan_timeout))
        return asyncio.run(scan())
    except asyncio.TimeoutError:
        print_error(f'Сканирование не завершено за {scan_timeout} секунд')
    except RepositoryDocumentNotFound as e:
        print_error(f'Документ не найден: {e}')
    except ConfigurationError as e:
        print_error(f'Ошибка конфигурации: {e}')
    except Exception as e:
        print_error(f'Ошибка при сканировании: {e}')


def _emit(report: ScanReport, as_json: bool, pretty: bool, html_output: Optional[Path]) -> NoReturn:
    if as_json:
        click.echo(render_json(report, pretty=pretty))
    else:
        click.echo(render_table(report))

    if html_output:
        try:
            saved_html = render_html(report, html_output)
            click.echo(f'HTML report: {saved_html}', err=True)
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')

    sys.exit(report.exit_code)


def _with_overrides(cfg: ScannerConfig, **overrides) -> ScannerConfig:
    try:
        return cfg.with_overrides(**overrides)
    except ConfigurationError as e:
        print_error(f'Ошибка конфигурации: {e}')


@cli.command('github', context_settings=CONTEXT_SETTINGS)
@click.argument('repo_url')
@_scan_options
@click.pass_context
def github(ctx, repo_url, as_json, pretty, html_output, concurrency, timeout, scan_timeout):
    """Проверить ссылки из README.md репозитория GitHub."""
    cfg = _with_overrides(ctx.obj['config'], concurrency=concurrency, timeout=timeout)
    if not as_json:
        click.echo(f'Scanning GitHub repository: {repo_url}')
    report = _run_scan(lambda: scan_repository(cfg, repo_url), scan_timeout)
    _emit(report, as_json, pretty, html_output)


@cli.command('site', context_settings=CONTEXT_SETTINGS)
@click.argument('website_url')
@click.option('--max-depth', 'max_depth', type=int, default=None,
              help='Глубина обхода (1 = только ссылки стартовой страницы)')
@_scan_options
@click.pass_context
def site(ctx, website_url, max_depth, as_json, pretty, html_output, concurrency, timeout, scan_timeout):
    """Обойти сайт и проверить все найденные ссылки."""
    cfg = _with_overrides(
        ctx.obj['config'],
        base_url=website_url,
        max_depth=max_depth,
        concurrency=concurrency,
        timeout=timeout,
    )
    if not as_json:
        click.echo(f'Scanning website: {cfg.base_url} (max depth {cfg.max_depth})')
    report = _run_scan(lambda: scan_site(cfg, website_url), scan_timeout)
    _emit(report, as_json, pretty, html_output)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
