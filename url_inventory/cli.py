# === FILE: url_inventory/cli.py ===
#!/usr/bin/env python3
"""
Точка входа URL Inventory для командной строки.

Команды:
  crawl     Обойти домен и вывести найденные URL
  check     Проверить статусы URL (аргументы, файл TXT/CSV или результат обхода)
  config    Показать текущую конфигурацию
  serve     Запустить HTTP API

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Дополнительно:
  --version, -v       Показать версию

Пример:
  url-inventory check --crawl https://example.com --csv url-inventory.csv
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from aiohttp import web
from pydantic import ValidationError

from url_inventory import __version__
from url_inventory.api import create_app
from url_inventory.config import InventoryConfig, load_config
from url_inventory.crawler.models import InvalidSeed
from url_inventory.engine import start_crawl, start_inventory
from url_inventory.logger import DEFAULT_FORMAT, init_logging
from url_inventory.report import render_csv, render_html, render_json
from url_inventory.utils import read_url_list

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _override(cfg: InventoryConfig, **updates: Any) -> InventoryConfig:
    """Возвращает новую конфигурацию с непустыми переопределениями (с повторной валидацией)."""
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates:
        return cfg
    try:
        return InventoryConfig(**{**cfg.model_dump(), **updates})
    except ValidationError as e:
        print_error(f'Некорректные параметры: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='URL Inventory, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """URL Inventory: обход домена, проверка статусов и экспорт."""
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
@click.argument('seed')
@click.option('--depth', '-d', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Максимальная глубина обхода (override max_depth)')
@click.option('--max-urls', '-m', 'max_urls', type=click.IntRange(min=1), default=None,
              help='Макс. число URL (override max_urls)')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Общий таймаут обхода (секунд)')
@click.option('--external', is_flag=True,
              help='Сохранять внешние ссылки отдельным списком')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить результат обхода в JSON-файл')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl(ctx, seed, max_depth, max_urls, crawl_timeout, external, json_output, pretty):
    """Обойти домен SEED и вывести найденные URL."""
    cfg = _override(ctx.obj['config'], crawl_timeout=crawl_timeout, record_external=external or None)
    try:
        result = asyncio.run(start_crawl(cfg, seed, max_depth=max_depth, max_urls=max_urls))
    except InvalidSeed as e:
        print_error(f'Некорректный URL: {e.raw_url}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    text = json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
    if json_output:
        json_output.parent.mkdir(parents=True, exist_ok=True)
        json_output.write_text(text, encoding='utf-8')
        click.echo(f'JSON report: {json_output}')
    else:
        click.echo(text)


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.argument('urls', nargs=-1)
@click.option('--file', '-f', 'url_file', default=None,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Файл со списком URL (TXT или CSV)')
@click.option('--crawl', 'crawl_seed', default=None,
              help='Сначала обойти домен и проверить найденные URL')
@click.option('--proxy', 'proxy', default=None,
              help='Префикс прокси для каждого проверяемого URL')
@click.option('--concurrency', 'concurrency', type=click.IntRange(min=1), default=None,
              help='Число одновременных проверок')
@click.option('--csv', 'csv_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить CSV-отчёт в файл')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--html', '-h', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить HTML-отчёт в файл')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с Jinja2-шаблоном report.html.j2')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def check(ctx, urls, url_file, crawl_seed, proxy, concurrency, csv_output, json_output,
          html_output, template_dir, pretty):
    """Проверить статусы URL и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    targets = list(urls)
    if url_file:
        try:
            targets.extend(read_url_list(url_file))
        except (OSError, UnicodeDecodeError) as e:
            print_error(f'Ошибка чтения списка URL: {e}')
    if not targets and not crawl_seed:
        print_error('Нет URL для проверки: передайте URL, --file или --crawl')

    try:
        results = asyncio.run(
            start_inventory(cfg, targets, seed=crawl_seed, proxy_prefix=proxy, concurrency=concurrency)
        )
    except InvalidSeed as e:
        print_error(f'Некорректный URL: {e.raw_url}')
    except Exception as e:
        print_error(f'Ошибка при проверке: {e}')

    if not (csv_output or json_output or html_output):
        indent = 2 if pretty else None
        click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=indent))
        return

    if csv_output:
        try:
            click.echo(f'CSV report: {render_csv(results, csv_output)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении CSV: {e}')

    if json_output:
        try:
            click.echo(f'JSON report: {render_json(results, json_output, pretty=pretty)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            click.echo(f'HTML report: {render_html(results, html_output, template_dir)}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='127.0.0.1', show_default=True, help='Адрес для HTTP API')
@click.option('--port', default=8080, show_default=True, type=click.IntRange(1, 65535),
              help='Порт для HTTP API')
@click.pass_context
def serve(ctx, host: str, port: int):
    """Запустить HTTP API (/api/crawl, /api/status)."""
    web.run_app(create_app(ctx.obj['config']), host=host, port=port)


if __name__ == "__main__":
    cli()
