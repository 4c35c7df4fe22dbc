"""Tests for cache implementations."""

from datetime import UTC, datetime, timedelta

from product_health.services.cache import InMemoryCache, InMemoryMemoCache


def test_in_memory_cache_returns_value_before_expiry() -> None:
    cache = InMemoryCache()
    cache.set("off:product:1", {"name": "Oats"}, ttl_seconds=60)

    assert cache.get("off:product:1") == {"name": "Oats"}
    assert cache.get("missing") is None


def test_in_memory_cache_expires_entries() -> None:
    cache = InMemoryCache()
    cache.set("key", "value", ttl_seconds=60)
    cache._entries["key"].expires_at = datetime.now(tz=UTC) - timedelta(seconds=1)

    assert cache.get("key") is None
    assert "key" not in cache._entries


def test_memo_cache_computes_once() -> None:
    cache = InMemoryMemoCache()
    calls: list[int] = []

    def compute() -> int:
        calls.append(1)
        return 42

    assert cache.get_or_compute("answer", compute) == 42
    assert cache.get_or_compute("answer", compute) == 42
    assert len(calls) == 1

    cache.clear()
    assert len(cache) == 0
    assert cache.get_or_compute("answer", compute) == 42
    assert len(calls) == 2
