# === FILE: link_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска LinkScout через командную строку.

Источники URL (по приоритету):
  -u, --url URL       Один URL
  -l, --list PATH     Файл со списком URL (по одному на строку)
  stdin               URL из пайпа, если stdin не терминал

Опции:
  -o, --output PATH   Сохранить отсортированный список уникальных эндпоинтов
  -t, --threads INT   Число воркеров (default: 20)
  -r, --resolve       Разрешать пути в абсолютные URL относительно источника
  -q, --quiet         Печатать только итоговый список эндпоинтов
  -no-color           Без ANSI-цветов
  --timeout SEC       Таймаут одного запроса (default: 10)
  --config PATH       YAML/JSON конфиг
  --json PATH         Дополнительно сохранить JSON-отчёт
  --html PATH         Дополнительно сохранить HTML-отчёт
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов
  --version, -v       Показать версию LinkScout

Пример:
  cat js_urls.txt | link-scout -r -q -o endpoints.txt
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from link_scout import __version__
from link_scout.config import load_config
from link_scout.engine import start_scan
from link_scout.errors import InputFileMissing, InputUnavailable, OutputFileError
from link_scout.logger import DEFAULT_FORMAT, init_logging
from link_scout.report.console import ConsoleReporter, OutputStyle
from link_scout.report.html_report import render_html
from link_scout.report.json_report import render_json
from link_scout.report.text_report import prepare_output, write_endpoints
from link_scout.utils import collect_targets

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
BANNER = "LinkScout - A fast, concurrent endpoint finder for JavaScript files."


def print_error(message: str, style: OutputStyle = OutputStyle(), code: int = 1):
    click.echo(style.paint(message, style.error), err=True)
    sys.exit(code)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='LinkScout, version %(version)s')
@click.option('-u', '--url', 'target_url', default=None, help='Single URL to scan.')
@click.option(
    '-l', '--list', 'url_list',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='File containing a list of URLs to scan.'
)
@click.option(
    '-o', '--output', 'output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='File to save the final output of unique endpoints.'
)
@click.option(
    '-t', '--threads', 'threads',
    type=click.IntRange(min=1),
    default=None,
    help='Number of concurrent workers to use.  [default: 20]'
)
@click.option('-r', '--resolve', is_flag=True, help='Resolve found paths to full URLs.')
@click.option('-q', '--quiet', is_flag=True, help='Silent mode. Only output the final list of unique endpoints.')
@click.option('-no-color', '--no-color', 'no_color', is_flag=True, help='Disable colorized output.')
@click.option(
    '--timeout', 'timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Per-request timeout in seconds.  [default: 10]'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к YAML/JSON конфигу.'
)
@click.option(
    '--json', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
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
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, target_url, url_list, output, threads, resolve, quiet, no_color, timeout,
        config_path, json_output, html_output, log_level, log_file, log_format):
    """Find endpoints in JavaScript files and web pages."""
    if quiet and log_level == 'WARNING':
        log_level = 'ERROR'
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )

    try:
        cfg = load_config(config_path).merged(
            threads=threads,
            timeout=timeout,
            resolve=True if resolve else None,
            quiet=True if quiet else None,
            color=False if no_color else None,
        )
    except (ValidationError, ValueError, TypeError, OSError) as e:
        print_error(f'[!] Error loading configuration: {e}')

    style = OutputStyle(enabled=cfg.color)
    reporter = ConsoleReporter(style, quiet=cfg.quiet)

    stdin = sys.stdin
    try:
        urls = collect_targets(target_url, url_list, None if stdin.isatty() else stdin)
    except InputUnavailable as e:
        click.echo(style.paint(BANNER, bold=True), err=True)
        click.echo(ctx.get_usage(), err=True)
        click.echo(err=True)
        print_error(f'[!] {e}', style)
    except InputFileMissing as e:
        print_error(f'[!] Error: {e}', style)

    if output:
        try:
            prepare_output(output)
        except OutputFileError as e:
            print_error(f'[!] {e}', style)

    try:
        report = asyncio.run(start_scan(cfg, urls, reporter))
    except KeyboardInterrupt:
        print_error('[!] Interrupted', style, code=130)
    except Exception as e:
        print_error(f'[!] Error while scanning: {e}', style)

    if output:
        reporter.saving(report.total, output)
        try:
            write_endpoints(report.endpoints, output)
        except OutputFileError as e:
            print_error(f'[!] {e}', style)

    if json_output:
        try:
            reporter.report_saved('JSON', render_json(report, json_output))
        except OSError as e:
            print_error(f'[!] Error saving JSON report: {e}', style)

    if html_output:
        try:
            reporter.report_saved('HTML', render_html(report, html_output))
        except OSError as e:
            print_error(f'[!] Error saving HTML report: {e}', style)

    reporter.finished(report.endpoints)


if __name__ == "__main__":
    cli()
