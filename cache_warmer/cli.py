# === FILE: cache_warmer/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска cache_warmer через командную строку.

  cache-warmer [OPTIONS] URI_FILE

Опции прогрева:
  --threads, -t N         Число воркеров (default: 4)
  --delay, -d MS          Пауза воркера между запросами, мс (default: 0)
  --base-uri, -b URI      Префикс для каждой строки файла
  --no-keep-alive, -n     Не переиспользовать соединения
  --no-gzip, -g           Не отправлять 'Accept-Encoding: br, gzip, deflate'
  --user-agent, -u STR    Свой User-Agent (взаимоисключается с --mobile/--desktop)
  --mobile / --desktop    Пресеты User-Agent (default: desktop)
  --captcha-string STR    Остановиться, если STR найдена в теле ответа
  --cookie, -c KEY=VALUE  Кука для каждого запроса (можно несколько)
  --bypass                Добавить куку cacheupdate=true (обновить кеш)

Вывод:
  --no-progress-bar       Без прогресс-бара
  --quiet                 Только ошибки, без статистики (implies --no-progress-bar)
  --json PATH             Сохранить JSON-отчёт в файл
  --log-level LEVEL       Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH         Файл для логов (только stderr, если не указан)

Дополнительно:
  --config PATH           YAML/JSON со значениями по умолчанию; явные опции важнее
  --version, -v           Показать версию

Пример:
  cache-warmer -t 16 -b https://www.example.com --bypass --captcha-string "captcha" uris.txt
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click.core import ParameterSource
from pydantic import ValidationError

from cache_warmer import __version__
from cache_warmer.config import (
    MOBILE_USER_AGENT,
    DESKTOP_USER_AGENT,
    WarmerConfig,
    read_config_file,
)
from cache_warmer.engine import start_warm
from cache_warmer.errors import ConfigError, WarmerError
from cache_warmer.logger import init_logging
from cache_warmer.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

# CLI parameter -> (config field, converter)
_OPTION_FIELDS = {
    "threads": ("threads", None),
    "delay": ("delay", None),
    "base_uri": ("base_uri", None),
    "no_keep_alive": ("keep_alive", lambda v: not v),
    "no_gzip": ("content_encoding", lambda v: not v),
    "captcha_string": ("captcha_string", None),
    "no_progress_bar": ("progress_bar", lambda v: not v),
    "quiet": ("quiet", None),
    "cookies": ("cookies", tuple),
    "bypass": ("bypass", None),
}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _resolve_user_agent(user_agent: Optional[str], mobile: bool, desktop: bool) -> Optional[str]:
    flags = {"--user-agent": user_agent is not None, "--mobile": mobile, "--desktop": desktop}
    chosen = [flag for flag, on in flags.items() if on]
    if len(chosen) > 1:
        raise click.UsageError(f"{' and '.join(chosen)} are mutually exclusive")
    if user_agent is not None:
        return user_agent
    if mobile:
        return MOBILE_USER_AGENT
    if desktop:
        return DESKTOP_USER_AGENT
    return None


def build_config(
    ctx: click.Context,
    uri_file: Path,
    config_path: Optional[Path],
    user_agent: Optional[str],
) -> WarmerConfig:
    """Собирает WarmerConfig: файл конфига (если есть), поверх него явно заданные опции."""
    data: Dict[str, Any] = {}
    try:
        if config_path is not None:
            data.update(read_config_file(config_path))
        for param, (field_name, convert) in _OPTION_FIELDS.items():
            if config_path is not None and ctx.get_parameter_source(param) == ParameterSource.DEFAULT:
                continue
            value = ctx.params[param]
            data[field_name] = convert(value) if convert else value
        if user_agent is not None:
            data["user_agent"] = user_agent
        data["uri_file"] = uri_file
        return WarmerConfig(**data)
    except (ValidationError, ValueError, TypeError, OSError) as exc:
        raise ConfigError(str(exc)) from exc


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='cache_warmer, version %(version)s')
@click.argument('uri_file', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--threads', '-t', type=click.IntRange(min=1), default=4, show_default=True,
              metavar='N', help='Число параллельных воркеров')
@click.option('--delay', '-d', type=click.IntRange(min=0), default=0, show_default=True,
              metavar='MS', help='Пауза между запросами одного воркера (мс)')
@click.option('--base-uri', '-b', 'base_uri', default='', help='Префикс для каждой строки файла')
@click.option('--no-keep-alive', '-n', is_flag=True, help='Не использовать keep-alive')
@click.option('--no-gzip', '-g', is_flag=True,
              help="Не отправлять заголовок 'Accept-Encoding: br, gzip, deflate'")
@click.option('--user-agent', '-u', 'user_agent', default=None, metavar='STRING',
              help='Свой User-Agent')
@click.option('--mobile', is_flag=True, help='Мобильный User-Agent')
@click.option('--desktop', is_flag=True, help='Десктопный User-Agent (по умолчанию)')
@click.option('--captcha-string', 'captcha_string', default='', metavar='STRING',
              help='Остановить обработку, если STRING найдена в теле ответа')
@click.option('--no-progress-bar', is_flag=True, help='Отключить прогресс-бар')
@click.option('--quiet', is_flag=True,
              help='Только ошибки, без статистики (implies --no-progress-bar)')
@click.option('--cookie', '-c', 'cookies', multiple=True, metavar='KEY=VALUE',
              help='Установить куку (можно повторять)')
@click.option('--bypass', is_flag=True, help='Кука cacheupdate=true: обновить кеш вместо отдачи из него')
@click.option('--config', 'config_path', default=None,
              type=click.Path(dir_okay=False, path_type=Path),
              help='YAML/JSON файл со значениями по умолчанию')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить JSON-отчёт в файл')
@click.option('--log-level', 'log_level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              help='Уровень логирования')
@click.option('--log-file', 'log_file', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Путь к файлу логов (только stderr, если не указан)')
@click.pass_context
def cli(ctx, uri_file, threads, delay, base_uri, no_keep_alive, no_gzip, user_agent, mobile,
        desktop, captcha_string, no_progress_bar, quiet, cookies, bypass, config_path,
        json_output, log_level, log_file):
    """Прогревает кеш nginx/CDN массовыми GET-запросами по списку URI_FILE."""
    if quiet and no_progress_bar:
        raise click.UsageError("--quiet and --no-progress-bar are mutually exclusive")
    ua = _resolve_user_agent(user_agent, mobile, desktop)

    init_logging(level=log_level, log_file=log_file)
    try:
        cfg = build_config(ctx, uri_file, config_path, ua)
    except ConfigError as e:
        print_error(f'Ошибка конфигурации: {e}')

    try:
        report = asyncio.run(start_warm(cfg))
    except WarmerError as e:
        print_error(f'Ошибка: {e}')
    except Exception as e:
        print_error(f'Ошибка при прогреве: {e}')

    if not cfg.quiet:
        click.echo(report.text())

    if json_output:
        try:
            saved_json = render_json(report, json_output, include_resources=True)
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        if not cfg.quiet:
            click.echo(f'JSON report: {saved_json}')


# expose these names at module level for test monkey-patching
cli.start_warm = start_warm
cli.render_json = render_json

if __name__ == "__main__":
    cli()
