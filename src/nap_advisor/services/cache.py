"""In-memory TTL cache for computed advisories.

Bounds how often the Oura API is called: one entry per subject, held for a
few minutes. Safe to share between concurrent request handlers and the
background refresh job.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and when it stops being valid (monotonic seconds)."""

    key: str
    value: T
    expires_at: float


class AdvisoryCache(Generic[T]):
    """Thread-safe key/value cache with per-entry TTL.

    Expired entries are dropped on access, so an expired key looks exactly
    like one that was never set.

    Usage:
        cache = AdvisoryCache(default_ttl_seconds=300)
        advisory = cache.get_or_compute("subject", compute_advisory_now)
    """

    def __init__(
        self,
        default_ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            default_ttl_seconds: TTL used when ``set`` is called without one
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self.logger = logger.bind(component="advisory_cache")

    def _resolve_ttl(self, ttl_seconds: int | None) -> int:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}")
        return ttl

    def _live_entry(self, key: str) -> CacheEntry[T] | None:
        # Caller must hold the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            self.logger.debug("Cache entry expired", key=key)
            return None
        return entry

    def get(self, key: str) -> T | None:
        """Get a cached value, or None if absent or expired."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: T, ttl_seconds: int | None = None) -> None:
        """Store a value for ``ttl_seconds`` (default TTL if omitted).

        Raises:
            ValueError: If the TTL is not positive
        """
        ttl = self._resolve_ttl(ttl_seconds)
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        self.logger.debug("Cache set", key=key, ttl_seconds=ttl)

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if a live entry was removed."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return False
            del self._entries[key]
            return True

    def flush(self) -> None:
        """Remove every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        self.logger.info("Cache flushed", entries=count)

    def ttl_remaining(self, key: str) -> float | None:
        """Seconds until ``key`` expires, or None if absent."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            return entry.expires_at - self._clock()

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T],
        ttl_seconds: int | None = None,
    ) -> T:
        """Get a cached value or compute, store and return a fresh one.

        The lock is held while computing so concurrent callers for the same
        key compute at most once.

        Raises:
            ValueError: If the TTL is not positive
        """
        ttl = self._resolve_ttl(ttl_seconds)
        with self._lock:
            entry = self._live_entry(key)
            if entry is not None:
                self._hits += 1
                self.logger.debug("Cache hit", key=key)
                return entry.value

            self._misses += 1
            self.logger.debug("Cache miss", key=key)
            value = compute()
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
            return value

    def stats(self) -> dict[str, float | int]:
        """Get hit/miss statistics.

        Returns:
            Dict with keys, hits, misses and hit_rate
        """
        with self._lock:
            now = self._clock()
            live = sum(1 for e in self._entries.values() if now < e.expires_at)
            total = self._hits + self._misses
            return {
                "keys": live,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
            }
