"""cache_warmer.report: сохранение отчётов прогрева, используемое CLI и тестами."""

from .json_report import render_json

__all__ = ["render_json"]
