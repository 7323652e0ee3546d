"""Logging setup for cache_warmer.

Every module logs through a child of the ``cache_warmer`` logger
(``logging.getLogger(__name__)``). The CLI calls :func:`init_logging` once;
records go to stderr and, with ``--log-file``, to a rotating file as well.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "cache_warmer"

_LevelT = Union[int, str]


def _stderr_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the ``cache_warmer`` logger.

    ``log_file=None`` keeps output on stderr only. With ``replace_handlers``
    off, new handlers are appended to the existing ones.
    """
    lg = logging.getLogger(_LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        lg.handlers.clear()

    lg.addHandler(_stderr_handler(log_format))

    if log_file is not None:
        lg.addHandler(_file_handler(log_file, log_format))

    return lg


def init_logging(level: _LevelT = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Shortcut used by the CLI: replace handlers, stderr plus optional file."""
    return configure(level=level, log_file=log_file, replace_handlers=True)


logger: logging.Logger = logging.getLogger(_LOGGER_NAME)

__all__ = ["logger", "configure", "init_logging"]
