import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from cache_warmer.warmer.models import CacheResource, CacheStatus, Classification
from cache_warmer.warmer.registry import Registry

URIS = [f"http://example.com/{i}" for i in range(5)]


def test_seeded_resources_start_unclassified():
    registry = Registry.from_uris(URIS)
    assert registry.todo_count() == 5
    assert registry.done_count() == 0

    resource = registry.pop()
    assert resource.cache_status is CacheStatus.UNSET
    assert resource.http_status == 0
    assert resource.captcha_found is False
    assert not resource.finalized


def test_conservation_and_no_duplicates():
    registry = Registry.from_uris(URIS)
    seen = []
    while True:
        resource = registry.pop()
        if resource is None:
            break
        assert registry.todo_count() + registry.in_flight_count() + registry.done_count() == len(URIS)
        resource.apply(Classification(CacheStatus.MISS, 200, False))
        registry.complete(resource)
        seen.append(resource.uri)
        assert registry.todo_count() + registry.in_flight_count() + registry.done_count() == len(URIS)

    assert sorted(seen) == sorted(URIS)
    assert registry.in_flight_count() == 0
    assert [r.uri for r in registry.completed()] == seen


def test_complete_rejects_unpopped_and_repeated():
    registry = Registry.from_uris(URIS[:1])
    stranger = CacheResource("http://example.com/x")
    with pytest.raises(ValueError):
        registry.complete(stranger)

    resource = registry.pop()
    registry.complete(resource)
    with pytest.raises(ValueError):
        registry.complete(resource)
    assert registry.done_count() == 1


def test_pop_empty_returns_none():
    assert Registry().pop() is None


@pytest.mark.parametrize("callers,items", [(8, 5), (5, 8), (16, 16)])
def test_pop_is_linearizable_under_threads(callers, items):
    registry = Registry.from_uris(f"http://example.com/{i}" for i in range(items))
    barrier = threading.Barrier(callers)

    def _pop():
        barrier.wait()
        return registry.pop()

    with ThreadPoolExecutor(max_workers=callers) as pool:
        results = list(pool.map(lambda _: _pop(), range(callers)))

    popped = [r for r in results if r is not None]
    assert len(popped) == min(callers, items)
    assert len({id(r) for r in popped}) == len(popped)
    assert registry.todo_count() == items - len(popped)
    assert registry.in_flight_count() == len(popped)


def test_captcha_signal_is_monotonic():
    registry = Registry()
    assert registry.captcha_detected() is False
    registry.signal_captcha()
    registry.signal_captcha()
    assert registry.captcha_detected() is True


def test_completed_returns_a_copy():
    registry = Registry.from_uris(URIS[:1])
    resource = registry.pop()
    registry.complete(resource)
    snapshot = registry.completed()
    snapshot.clear()
    assert registry.done_count() == 1


def test_resource_is_finalized_once():
    resource = CacheResource("http://example.com/")
    resource.apply(Classification(CacheStatus.HIT, 200, False))
    with pytest.raises(RuntimeError):
        resource.apply(Classification(CacheStatus.MISS, 200, False))
    with pytest.raises(RuntimeError):
        resource.fail("boom")
    assert resource.cache_status is CacheStatus.HIT
