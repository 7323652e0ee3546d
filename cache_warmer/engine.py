# File: cache_warmer/engine.py
"""cache_warmer.engine: Orchestration layer: засев реестра, пул воркеров, агрегация результатов."""

from __future__ import annotations

import asyncio
import contextlib
import time
from typing import Optional, Sequence

from cache_warmer.aggregator import WarmReport, aggregate_results
from cache_warmer.config import WarmerConfig
from cache_warmer.loader import read_uris
from cache_warmer.logger import logger
from cache_warmer.warmer.progress import monitor
from cache_warmer.warmer.registry import Registry
from cache_warmer.warmer.worker import Worker, open_session

__all__ = ["Engine", "start_warm", "run_pool"]


async def run_pool(config: WarmerConfig, registry: Registry) -> float:
    """Run ``config.threads`` workers over ``registry`` until they all exit.

    Returns the elapsed wall-clock time in seconds.
    """
    total = registry.todo_count()
    start = time.monotonic()
    stopped = asyncio.Event()

    async with open_session(config) as session:
        progress: Optional[asyncio.Task[int]] = None
        if config.progress_bar:
            progress = asyncio.create_task(monitor(registry, total, stopped))
        workers = [
            asyncio.create_task(Worker(wid, session, registry, config).run())
            for wid in range(config.threads)
        ]
        try:
            # every worker runs to its end before the shared session is closed
            results = await asyncio.gather(*workers, return_exceptions=True)
        finally:
            stopped.set()
            if progress is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await progress

    failures = [r for r in results if isinstance(r, BaseException)]
    for failure in failures:
        logger.error("Worker failed: %r", failure)
    if failures:
        raise failures[0]
    return time.monotonic() - start


async def start_warm(config: WarmerConfig, uris: Optional[Sequence[str]] = None) -> WarmReport:
    """Засевает реестр из файла (или переданного списка), прогревает кеш и возвращает отчёт.

    Raises UriFileError before any worker starts if the URI file cannot be read.
    """
    if uris is None:
        uris = read_uris(config.base_uri, config.uri_file)
    registry = Registry.from_uris(uris)

    if not config.quiet:
        logger.info(
            "Spawning %d workers to warm cache with %d URIs", config.threads, registry.todo_count()
        )

    elapsed = await run_pool(config, registry)

    if registry.captcha_detected():
        logger.warning(
            "Captcha detected, stopped early: %d of %d URIs processed",
            registry.done_count(),
            len(uris),
        )
    return aggregate_results(registry.completed(), elapsed)


class Engine:
    """Фасад для CLI и тестов: синхронный запуск прогрева по готовой конфигурации."""

    def __init__(self, config: WarmerConfig) -> None:
        self.config = config

    def run(self, uris: Optional[Sequence[str]] = None) -> WarmReport:
        """Запускает асинхронный прогрев и возвращает агрегированный отчёт."""
        try:
            return asyncio.run(start_warm(self.config, uris))
        except Exception as exc:
            logger.error("Warm-up failed: %s", exc)
            raise
