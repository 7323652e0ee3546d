# cache_warmer/warmer/models.py
"""
Data models for the cache warmer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

UNSET_HTTP_STATUS = 0


class CacheStatus(str, Enum):
    """Outcome reported by the cache layer in ``X-Cache-Status``."""

    HIT = "HIT"
    MISS = "MISS"
    BYPASS = "BYPASS"
    UNSET = "UNSET"
    # request never produced a response
    ERROR = "ERROR"


class Classification(NamedTuple):
    cache_status: CacheStatus
    http_status: int
    captcha_found: bool


@dataclass(slots=True, eq=False)
class CacheResource:
    """One URI under test and what the warm-up request learned about it.

    Identity semantics (``eq=False``): two resources with the same URI are
    still different work items.
    """

    uri: str
    cache_status: CacheStatus = CacheStatus.UNSET
    http_status: int = UNSET_HTTP_STATUS
    captcha_found: bool = False
    error: Optional[str] = None
    _finalized: bool = field(default=False, repr=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def apply(self, result: Classification) -> None:
        """Record the classification of a received response."""
        self._finalize()
        self.cache_status = result.cache_status
        self.http_status = result.http_status
        self.captcha_found = result.captcha_found

    def fail(self, message: str) -> None:
        """Record a transport failure; the resource keeps no HTTP status."""
        self._finalize()
        self.cache_status = CacheStatus.ERROR
        self.error = message

    def _finalize(self) -> None:
        if self._finalized:
            raise RuntimeError(f"Resource {self.uri} is already classified")
        self._finalized = True


__all__ = ["CacheResource", "CacheStatus", "Classification", "UNSET_HTTP_STATUS"]
