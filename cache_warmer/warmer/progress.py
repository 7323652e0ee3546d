# cache_warmer/warmer/progress.py
"""
Progress monitor: samples the registry and drives a tqdm bar on stderr.
"""
from __future__ import annotations

import asyncio
import sys

from tqdm import tqdm

from cache_warmer.warmer.registry import Registry


async def monitor(
    registry: Registry,
    total: int,
    stopped: asyncio.Event,
    interval: float = 1.0,
) -> int:
    """Update the bar every ``interval`` seconds until ``stopped`` is set or a captcha was seen.

    Only reads the registry. Returns the last sampled ``done`` count.
    """
    with tqdm(total=total, desc="Warming", unit=" uri", file=sys.stderr) as pbar:
        while True:
            done = registry.done_count()
            pbar.update(done - pbar.n)
            if stopped.is_set() or registry.captcha_detected():
                return done
            try:
                await asyncio.wait_for(stopped.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass


__all__ = ["monitor"]
