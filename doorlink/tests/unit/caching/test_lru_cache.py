"""
Unit tests for LRU cache expiration and eviction.

Time is driven by a fake clock so TTL boundaries are exact.
"""

import pytest

from doorlink.caching.lru_cache import LRUCache

# pylint: disable=redefined-outer-name  # Reason: pytest fixtures are used as function parameters, which triggers this warning


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_with_ttl(clock):
    """Create an LRUCache with a 2 second TTL."""
    return LRUCache[str, str](max_size=3, ttl_seconds=2.0, clock=clock)


def test_entry_is_served_within_ttl(cache_with_ttl, clock):
    cache_with_ttl.put("a", "1")
    clock.advance(1.999)
    assert cache_with_ttl.get("a") == "1"


def test_entry_aged_exactly_ttl_is_expired(cache_with_ttl, clock):
    cache_with_ttl.put("a", "1")
    clock.advance(2.0)

    assert "a" not in cache_with_ttl
    assert cache_with_ttl.get("a") is None
    assert cache_with_ttl.get_stats()["expired_count"] == 1


def test_ttl_runs_from_insertion_not_last_access(cache_with_ttl, clock):
    cache_with_ttl.put("a", "1")
    clock.advance(1.5)
    assert cache_with_ttl.get("a") == "1"
    clock.advance(0.5)
    assert cache_with_ttl.get("a") is None


def test_least_recently_used_entry_is_evicted():
    cache = LRUCache[str, int](max_size=2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get("a")
    cache.put("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.get_stats()["evictions"] == 1


def test_get_or_set_builds_once_within_ttl(cache_with_ttl, clock):
    calls = []

    def factory():
        calls.append(clock())
        return f"built-{len(calls)}"

    assert cache_with_ttl.get_or_set("k", factory) == "built-1"
    assert cache_with_ttl.get_or_set("k", factory) == "built-1"
    clock.advance(2.0)
    assert cache_with_ttl.get_or_set("k", factory) == "built-2"
    assert len(calls) == 2


def test_clear_and_stats():
    cache = LRUCache[str, int](max_size=5)
    cache.put("a", 1)
    cache.get("a")
    cache.get("missing")

    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5

    cache.clear()
    assert len(cache) == 0
    assert cache.delete("a") is False
