"""cache_warmer.aggregator: Модуль агрегатора итогов прогрева кеша."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from cache_warmer.warmer.models import UNSET_HTTP_STATUS, CacheResource, CacheStatus


@dataclass(slots=True)
class WarmReport:
    """Итоги прогона: счётчики по статусам кеша и HTTP, ошибки, время и капча."""

    total: int = 0
    cache_status: Dict[str, int] = field(default_factory=dict)
    http_status: Dict[int, int] = field(default_factory=dict)
    errors: int = 0
    elapsed: float = 0.0
    captcha_uri: Optional[str] = None

    resources: Optional[List[CacheResource]] = None

    def as_dict(self) -> Dict[str, Any]:
        """Сериализуемое представление без сырых ресурсов."""
        return {
            "total": self.total,
            "cache_status": dict(self.cache_status),
            "http_status": {str(code): n for code, n in self.http_status.items()},
            "errors": self.errors,
            "elapsed": round(self.elapsed, 3),
            "captcha_uri": self.captcha_uri,
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление WarmReport без сырых данных."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)

    def text(self) -> str:
        """Текстовый отчёт для вывода в терминал."""
        lines = [f"Done. Warmed up {self.total} URIs in {self.elapsed:.2f} seconds."]
        lines.append("Cache status:")
        lines.extend(f"  {name:<7} {count}" for name, count in self.cache_status.items())
        lines.append("HTTP status:")
        if self.http_status:
            lines.extend(f"  {code:<7} {count}" for code, count in self.http_status.items())
        else:
            lines.append("  (none)")
        if self.errors:
            lines.append(f"Transport errors: {self.errors}")
        if self.captcha_uri:
            lines.append(f"Captcha found at {self.captcha_uri}")
        return "\n".join(lines)


def _count_cache_status(resources: Sequence[CacheResource]) -> Dict[str, int]:
    """Гистограмма по всем вариантам CacheStatus, в порядке перечисления."""
    counts = Counter(r.cache_status for r in resources)
    return {status.value: counts.get(status, 0) for status in CacheStatus}


def _count_http_status(resources: Sequence[CacheResource]) -> Dict[int, int]:
    """Гистограмма по HTTP-кодам; ресурсы без ответа не учитываются."""
    counts = Counter(r.http_status for r in resources if r.http_status != UNSET_HTTP_STATUS)
    return dict(sorted(counts.items()))


def aggregate_results(resources: Sequence[CacheResource], elapsed: float) -> WarmReport:
    """Собирает все части отчёта в WarmReport."""
    report = WarmReport(resources=list(resources), elapsed=elapsed)
    report.total = len(resources)
    report.cache_status = _count_cache_status(resources)
    report.http_status = _count_http_status(resources)
    report.errors = report.cache_status[CacheStatus.ERROR.value]
    report.captcha_uri = next((r.uri for r in resources if r.captcha_found), None)
    return report


__all__ = ["WarmReport", "aggregate_results"]
