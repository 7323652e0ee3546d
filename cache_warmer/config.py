# === FILE: cache_warmer/config.py ===
"""
Модуль для загрузки и валидации конфигурации cache_warmer.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# Default user agents are adapted from https://support.google.com/webmasters/answer/1061943
DESKTOP_USER_AGENT = "Mozilla/5.0 (compatible; Googlebot/cache_warmer; +https://example.com)"
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0.1; Nexus 5X Build/MMB29P) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/41.0.2272.96 Mobile Safari/537.36 "
    "(compatible; Googlebot/cache_warmer; +https://example.com)"
)

BYPASS_COOKIE: Tuple[str, str] = ("cacheupdate", "true")

Cookie = Tuple[str, str]


_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")


def _reject_control_chars(value: str, what: str) -> str:
    # CR/LF would end up inside request headers
    if _CONTROL_CHARS_RE.search(value):
        raise ValueError(f"{what} {value!r} contains control characters")
    return value


def parse_cookie(raw: str) -> Cookie:
    """Разбирает строку ``key=value`` в пару (key, value)."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise ValueError(f"Invalid cookie '{raw}'. Correct syntax is key=val")
    return key, value


class WarmerConfig(BaseModel):
    """Конфигурация одного прогона прогрева кеша."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    uri_file: Path = Field(..., description="Файл со списком путей/URI, по одному на строку.")
    threads: int = Field(4, ge=1, description="Число параллельных воркеров.")
    delay: int = Field(0, ge=0, description="Пауза воркера между запросами (мс).")
    base_uri: str = Field("", description="Префикс, к которому дописывается каждая строка файла.")
    user_agent: str = Field(DESKTOP_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    keep_alive: bool = Field(True, description="Переиспользовать соединения.")
    content_encoding: bool = Field(True, description="Отправлять Accept-Encoding: br, gzip, deflate.")
    quiet: bool = Field(False, description="Без отчёта и прогресс-бара.")
    progress_bar: bool = Field(True, description="Показывать прогресс-бар.")
    captcha_string: str = Field("", description="Остановиться, если строка найдена в теле ответа.")
    cookies: Tuple[Cookie, ...] = Field(default_factory=tuple, description="Куки для каждого запроса.")
    bypass: bool = Field(False, description="Добавить куку cacheupdate=true.")

    @model_validator(mode="before")
    @classmethod
    def _quiet_disables_progress(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("quiet"):
            data = {**data, "progress_bar": False}
        return data

    @field_validator("cookies", mode="before")
    @classmethod
    def _parse_cookies(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, dict):
            return tuple((str(k), str(val)) for k, val in v.items())
        if isinstance(v, (list, tuple)):
            return tuple(parse_cookie(item) if isinstance(item, str) else item for item in v)
        return v

    @field_validator("user_agent")
    @classmethod
    def _check_user_agent(cls, v: str) -> str:
        return _reject_control_chars(v, "user_agent")

    @field_validator("cookies")
    @classmethod
    def _check_cookies(cls, v: Tuple[Cookie, ...]) -> Tuple[Cookie, ...]:
        for key, value in v:
            _reject_control_chars(key, "cookie name")
            _reject_control_chars(value, "cookie value")
        return v

    @property
    def cookie_jar(self) -> Tuple[Cookie, ...]:
        """Configured cookies plus the bypass cookie when requested."""
        if self.bypass:
            return self.cookies + (BYPASS_COOKIE,)
        return self.cookies

    @property
    def cookie_header(self) -> str:
        return "; ".join(f"{k}={v}" for k, v in self.cookie_jar)

    @property
    def delay_seconds(self) -> float:
        return self.delay / 1000.0


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON файл и возвращает сырой mapping без валидации."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path], **overrides: Any) -> WarmerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект WarmerConfig.
    Значения из ``overrides`` имеют приоритет над файлом.
    """
    data = read_config_file(path)
    data.update(overrides)
    return WarmerConfig(**data)


__all__ = [
    "BYPASS_COOKIE",
    "DESKTOP_USER_AGENT",
    "MOBILE_USER_AGENT",
    "WarmerConfig",
    "load_config",
    "parse_cookie",
    "read_config_file",
]
