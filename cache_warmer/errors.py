"""cache_warmer.errors: исключения, которые пересекают границы модулей."""

from __future__ import annotations


class WarmerError(Exception):
    """Base class for cache_warmer failures."""


class ConfigError(WarmerError):
    """Invalid configuration value. Fatal, raised before any worker starts."""


class UriFileError(WarmerError):
    """The URI list file cannot be opened or read. Fatal."""


class UriParseError(WarmerError, ValueError):
    """One input line does not form a valid absolute URI."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Invalid URI {line!r}: {reason}")
        self.line = line
        self.reason = reason


__all__ = ["WarmerError", "ConfigError", "UriFileError", "UriParseError"]
