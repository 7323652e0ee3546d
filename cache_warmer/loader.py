"""cache_warmer.loader: чтение файла со списком путей и сборка абсолютных URI."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Sequence, Union

from yarl import URL

from cache_warmer.errors import UriFileError, UriParseError

__all__: Sequence[str] = ("parse_uri", "read_uris")

logger = logging.getLogger(__name__)

_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def parse_uri(base_uri: str, line: str) -> str:
    """Дописывает строку к base_uri и проверяет, что получился абсолютный http(s) URI."""
    candidate = f"{base_uri}{line}"
    if _FORBIDDEN_RE.search(candidate):
        raise UriParseError(candidate, "contains whitespace or control characters")
    try:
        url = URL(candidate)
    except (ValueError, TypeError) as exc:
        raise UriParseError(candidate, str(exc)) from exc
    if url.scheme not in ("http", "https"):
        raise UriParseError(candidate, "scheme must be http or https")
    if not url.host:
        raise UriParseError(candidate, "missing host")
    return candidate


def read_uris(base_uri: str, path: Union[str, Path]) -> List[str]:
    """Читает файл построчно (UTF-8), возвращает валидные URI в порядке файла.

    Каждая строка, включая пустую, дописывается к base_uri. Строки, которые не
    декодируются как UTF-8 или не дают валидный URI, логируются как warning и
    пропускаются; UriFileError только если файл нельзя открыть или прочитать.
    """
    p = Path(path).expanduser()
    try:
        raw = p.read_bytes()
    except OSError as exc:
        logger.error("Cannot read URI file %s: %s", p, exc)
        raise UriFileError(f"Cannot read URI file {p}: {exc}") from exc

    uris: List[str] = []
    for lineno, raw_line in enumerate(raw.splitlines(), start=1):
        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Error reading line %d of %s: %s", lineno, p, exc)
            continue
        try:
            uris.append(parse_uri(base_uri, line))
        except UriParseError as exc:
            logger.warning("Skipping line %d of %s: %s", lineno, p, exc)
    logger.debug("Loaded %d URIs from %s", len(uris), p)
    return uris
