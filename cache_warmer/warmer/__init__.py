"""cache_warmer.warmer: реестр ресурсов, классификатор ответов и пул воркеров."""

from .classifier import classify
from .models import CacheResource, CacheStatus, Classification
from .registry import Registry
from .worker import Worker, open_session

__all__ = [
    "CacheResource",
    "CacheStatus",
    "Classification",
    "Registry",
    "Worker",
    "classify",
    "open_session",
]
