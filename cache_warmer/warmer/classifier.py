# cache_warmer/warmer/classifier.py
"""
Maps a response onto (cache status, HTTP status, captcha flag).
"""
from __future__ import annotations

from typing import Mapping

from cache_warmer.warmer.models import CacheStatus, Classification

CACHE_STATUS_HEADER = "X-Cache-Status"

_CACHE_STATUSES: Mapping[str, CacheStatus] = {
    "HIT": CacheStatus.HIT,
    "MISS": CacheStatus.MISS,
    "BYPASS": CacheStatus.BYPASS,
}


def lookup_cache_status(value: str | None) -> CacheStatus:
    """Header value → CacheStatus. Absent or unknown values are UNSET."""
    if value is None:
        return CacheStatus.UNSET
    return _CACHE_STATUSES.get(value, CacheStatus.UNSET)


def contains_captcha(body: str, captcha_string: str) -> bool:
    return bool(captcha_string) and captcha_string in body


def classify(
    headers: Mapping[str, str],
    status: int,
    body: str,
    captcha_string: str = "",
) -> Classification:
    """Classify one response.

    ``headers`` should be case-insensitive on names (aiohttp's
    ``CIMultiDictProxy``); the header *value* is matched case-sensitively.
    """
    return Classification(
        cache_status=lookup_cache_status(headers.get(CACHE_STATUS_HEADER)),
        http_status=int(status),
        captcha_found=contains_captcha(body, captcha_string),
    )


__all__ = ["CACHE_STATUS_HEADER", "classify", "contains_captcha", "lookup_cache_status"]
