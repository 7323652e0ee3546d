# File: tests/conftest.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable

import pytest
from aiohttp import web

from cache_warmer.config import WarmerConfig


@pytest.fixture()
def uri_file(tmp_path) -> Path:
    """
    Create a temporary URI list file for tests.
    """
    path = tmp_path / "uris.txt"
    path.write_text("/a\n/b\n", encoding="utf-8")
    return path


@pytest.fixture()
def make_config(uri_file) -> Callable[..., WarmerConfig]:
    """
    Return a factory for WarmerConfig with the progress bar off by default.
    """

    def _make(**overrides) -> WarmerConfig:
        overrides.setdefault("uri_file", uri_file)
        overrides.setdefault("progress_bar", False)
        return WarmerConfig(**overrides)

    return _make


@pytest.fixture(autouse=True)
def reset_project_logger():
    """CLI tests attach handlers bound to CliRunner streams; drop them afterwards."""
    lg = logging.getLogger("cache_warmer")
    yield
    lg.handlers.clear()
    lg.setLevel(logging.NOTSET)


@asynccontextmanager
async def _serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free local port, yield its base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve_app():
    """
    Provide the async context manager that serves an aiohttp app for one test.
    """
    return _serve_app
