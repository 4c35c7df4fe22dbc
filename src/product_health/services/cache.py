"""Simple cache abstractions."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol, TypeVar

T = TypeVar("T")


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """In-memory TTL cache."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)


class MemoCache(Protocol):
    """Keyed memo of derived values with no expiry."""

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the memoised value for a key, computing it on first use."""

    def clear(self) -> None:
        """Drop every memoised value."""


@dataclass
class InMemoryMemoCache(MemoCache):
    """Dictionary-backed memo cache."""

    _values: dict[str, object]

    def __init__(self) -> None:
        self._values = {}

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the memoised value, computing and storing it if missing."""
        if key in self._values:
            return self._values[key]  # type: ignore[return-value]
        value = compute()
        self._values[key] = value
        return value

    def clear(self) -> None:
        """Drop every memoised value."""
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)
