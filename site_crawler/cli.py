# === FILE: site_crawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteCrawler через командную строку.

Команды:
  crawl     Обойти сайт от SEED_URL и вывести/сохранить отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (в дополнение к stderr)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --filter TEXT       Подстрока, которую должен содержать каждый URL (обязательно)
  --depth INT         Максимальная глубина 0..10 (default: 3)
  --workers INT       Число воркеров (override workers)
  --duration SEC      Остановить обход через SEC секунд
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --quiet             Не печатать события обхода

Пример:
  site-crawler crawl https://example.com/ --filter example.com --depth 2 --json report.json
"""
import asyncio
import sys
from pathlib import Path

import click

from site_crawler import __version__
from site_crawler.config import MAX_DEPTH_LIMIT, load_config
from site_crawler.engine import run_crawl
from site_crawler.errors import CrawlValidationError
from site_crawler.events import CrawlEvent, FetchError, PageCrawled, ProgressTick
from site_crawler.logger import DEFAULT_FORMAT, init_logging
from site_crawler.report.html_report import render_html
from site_crawler.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def print_event(event: CrawlEvent) -> None:
    """Печатает события обхода в stderr, чтобы stdout оставался чистым JSON."""
    if isinstance(event, PageCrawled):
        click.echo(f'Crawled: {event.url} (Depth: {event.depth})', err=True)
    elif isinstance(event, FetchError):
        click.secho(f'Error fetching {event.url}: {event.message}', fg='yellow', err=True)
    elif isinstance(event, ProgressTick):
        click.echo(f'[{event.elapsed_seconds:6.1f}s] pages crawled: {event.pages_crawled}', err=True)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteCrawler, version %(version)s')
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
    help='Путь к файлу логов (в дополнение к stderr)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteCrawler CLI."""
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


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed_url')
@click.option(
    '--filter', '-f', 'domain_filter',
    required=True,
    help='Подстрока, которую должен содержать каждый URL'
)
@click.option(
    '--depth', '-d', 'max_depth',
    type=click.IntRange(0, MAX_DEPTH_LIMIT),
    default=3, show_default=True,
    help='Максимальная глубина обхода'
)
@click.option(
    '--workers', '-w', 'workers',
    type=click.IntRange(min=1),
    default=None,
    help='Число параллельных воркеров (override workers)'
)
@click.option(
    '--duration', 'duration',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Остановить обход через указанное число секунд'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с шаблоном report.html.j2 (по умолчанию встроенный)'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--quiet', '-q', is_flag=True,
    help='Не печатать события обхода'
)
@click.pass_context
def crawl(ctx, seed_url, domain_filter, max_depth, workers, duration,
          json_output, html_output, template_dir, pretty, quiet):
    """Обойти сайт от SEED_URL и сгенерировать отчёт."""
    cfg = ctx.obj['config']
    if workers is not None:
        cfg = cfg.model_copy(update={'workers': workers})
    listeners = () if quiet else (print_event,)
    try:
        report = asyncio.run(
            run_crawl(cfg, seed_url, domain_filter, max_depth, duration=duration, listeners=listeners)
        )
    except CrawlValidationError as e:
        print_error(f'Неверные параметры обхода: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output, template_dir)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
