# cache_warmer/warmer/registry.py
"""
Shared todo/done container the workers drain concurrently.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from cache_warmer.warmer.models import CacheResource


class Registry:
    """Owns every resource of a run plus the captcha stop signal.

    A resource is always in exactly one of three places: ``todo``, in flight
    with the worker that popped it, or ``done``. All operations are short
    critical sections under one lock, so the registry is safe to share
    between asyncio tasks and OS threads alike.
    """

    def __init__(self, resources: Iterable[CacheResource] = ()) -> None:
        self._lock = threading.Lock()
        self._todo: List[CacheResource] = list(resources)
        self._in_flight: Dict[int, CacheResource] = {}
        self._done: List[CacheResource] = []
        self._captcha = False

    @classmethod
    def from_uris(cls, uris: Iterable[str]) -> Registry:
        return cls(CacheResource(uri) for uri in uris)

    def pop(self) -> Optional[CacheResource]:
        """Take one resource out of ``todo``; None once it is empty.

        Retrieval order is unspecified.
        """
        with self._lock:
            if not self._todo:
                return None
            resource = self._todo.pop()
            self._in_flight[id(resource)] = resource
            return resource

    def complete(self, resource: CacheResource) -> None:
        """Move a popped resource to ``done``."""
        with self._lock:
            if self._in_flight.pop(id(resource), None) is None:
                raise ValueError(f"Resource {resource.uri} is not in flight")
            self._done.append(resource)

    def todo_count(self) -> int:
        with self._lock:
            return len(self._todo)

    def in_flight_count(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def done_count(self) -> int:
        with self._lock:
            return len(self._done)

    def completed(self) -> List[CacheResource]:
        """Snapshot of ``done`` in completion order."""
        with self._lock:
            return list(self._done)

    def captcha_detected(self) -> bool:
        with self._lock:
            return self._captcha

    def signal_captcha(self) -> None:
        # monotonic: never reset
        with self._lock:
            self._captcha = True

    def __repr__(self) -> str:
        return (
            f"<Registry todo={self.todo_count()} in_flight={self.in_flight_count()} "
            f"done={self.done_count()} captcha={self.captcha_detected()}>"
        )


__all__ = ["Registry"]
