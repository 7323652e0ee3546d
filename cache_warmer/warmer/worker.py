# cache_warmer/warmer/worker.py
"""
Worker module: drains the registry, one GET per resource, classifies responses.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict

from aiohttp import ClientError, ClientSession, DummyCookieJar, TCPConnector, hdrs

from cache_warmer.config import WarmerConfig
from cache_warmer.warmer.classifier import classify
from cache_warmer.warmer.models import CacheResource
from cache_warmer.warmer.registry import Registry

ACCEPT_ENCODING = "br, gzip, deflate"

logger = logging.getLogger(__name__)


def open_session(config: WarmerConfig) -> ClientSession:
    """One client shared by every worker of a run.

    The connector pool is sized to the worker count; ``force_close`` turns
    keep-alive off. Cookies set by the server are ignored so every request
    carries exactly the configured jar.
    """
    connector = TCPConnector(limit=config.threads, force_close=not config.keep_alive)
    headers: Dict[str, str] = {hdrs.USER_AGENT: config.user_agent}
    skip_auto_headers = []
    if config.content_encoding:
        headers[hdrs.ACCEPT_ENCODING] = ACCEPT_ENCODING
    else:
        skip_auto_headers.append(hdrs.ACCEPT_ENCODING)
    return ClientSession(
        connector=connector,
        headers=headers,
        skip_auto_headers=skip_auto_headers,
        cookie_jar=DummyCookieJar(),
        raise_for_status=False,
    )


class Worker:
    """Handles the fetch loop of one worker: stop check, pop, GET, classify, record."""

    def __init__(
        self,
        wid: int,
        session: ClientSession,
        registry: Registry,
        config: WarmerConfig,
    ) -> None:
        self.wid = wid
        self.session = session
        self.registry = registry
        self.config = config
        self.processed = 0
        self._headers: Dict[str, str] = {}
        if config.cookie_header:
            self._headers[hdrs.COOKIE] = config.cookie_header

    async def run(self) -> int:
        """Loop until the registry is empty or a captcha was seen. Returns the processed count."""
        while True:
            if self.registry.captcha_detected():
                logger.debug("Worker %d stops: captcha signalled", self.wid)
                break
            resource = self.registry.pop()
            if resource is None:
                break

            try:
                await self.fetch(resource)
                if resource.captcha_found:
                    self.registry.signal_captcha()
                    logger.warning(
                        "Found '%s' in response body of %s. Stopping workers.",
                        self.config.captcha_string,
                        resource.uri,
                    )
            except Exception as exc:
                logger.exception("Unexpected error while warming %s", resource.uri)
                if not resource.finalized:
                    resource.fail(str(exc) or exc.__class__.__name__)
            finally:
                # a popped resource always ends up in done, even on cancellation
                if not resource.finalized:
                    resource.fail("cancelled")
                self.registry.complete(resource)
            self.processed += 1

            if self.config.delay:
                await asyncio.sleep(self.config.delay_seconds)

        logger.debug("Worker %d finished after %d resources", self.wid, self.processed)
        return self.processed

    async def fetch(self, resource: CacheResource) -> None:
        """Request ``resource.uri`` and finalize the resource in place.

        Transport failures are not retried; the resource is marked as ERROR.
        """
        try:
            async with self.session.get(resource.uri, headers=self._headers) as resp:
                # the whole body has to be consumed before the connection is reused
                raw = await resp.read()
                headers, status = resp.headers, resp.status
        except (ClientError, asyncio.TimeoutError, OSError) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Failed %s: %s", resource.uri, message)
            resource.fail(message)
            return

        body = raw.decode("utf-8", errors="replace")
        resource.apply(classify(headers, status, body, self.config.captcha_string))
        logger.debug("%s: %s %s", resource.uri, resource.http_status, resource.cache_status.value)


__all__ = ["ACCEPT_ENCODING", "Worker", "open_session"]
