"""Cache manager — TTL defaults, hit/miss accounting and invalidation."""

from __future__ import annotations

import logging
import threading
import time
from typing import Generic, TypeVar

from people_dao.cache.keys import derive_key, key_prefix
from people_dao.cache.memory import Clock, MemoryCache
from people_dao.cache.stats import CacheStats

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_TTL_SECONDS = 60.0


class CacheManager(Generic[V]):
    """Single-process, in-memory, time-expiring cache keyed by content digests.

    Not a source of truth: callers must fall back to storage on a miss, and
    every write path must call invalidate_all() before reporting success.
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
        enabled: bool = True,
    ) -> None:
        if default_ttl_seconds <= 0:
            raise ValueError(f"default_ttl_seconds must be positive, got {default_ttl_seconds}")
        self._default_ttl = float(default_ttl_seconds)
        self._enabled = enabled
        self._store: MemoryCache[V] = MemoryCache(clock=clock)
        self._counter_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        logger.debug("Cache initialised (ttl=%.1fs, enabled=%s)", self._default_ttl, enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def default_ttl_seconds(self) -> float:
        return self._default_ttl

    @property
    def generation(self) -> int:
        """Bumped by every invalidate_all(). Pass to set(if_generation=...)."""
        return self._store.generation

    @staticmethod
    def derive_key(query_descriptor: str) -> str:
        return derive_key(query_descriptor)

    def get(self, key: str) -> V | None:
        """Return the cached value, or None on a miss or an expired entry."""
        if not self._enabled:
            self._count(hit=False)
            return None

        entry = self._store.get(key)
        if entry is None:
            logger.debug("Cache MISS %s", key_prefix(key))
            self._count(hit=False)
            return None

        logger.debug(
            "Cache HIT %s (age %.3fs)", key_prefix(key), entry.age(self._store.now())
        )
        self._count(hit=True)
        return entry.value

    def set(
        self,
        key: str,
        value: V,
        ttl_seconds: float | None = None,
        if_generation: int | None = None,
    ) -> bool:
        """Store value under key, replacing any existing entry.

        With if_generation, the value is dropped if invalidate_all() ran since
        that generation was read. Returns whether the value was stored.
        """
        if not self._enabled:
            return False
        ttl = self._default_ttl if ttl_seconds is None else float(ttl_seconds)
        if ttl <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl}")
        if self._store.set(key, value, ttl, if_generation=if_generation) is None:
            logger.debug("Cache SET %s skipped: invalidated since read", key_prefix(key))
            return False
        logger.debug("Cache SET %s (ttl %.1fs)", key_prefix(key), ttl)
        return True

    def evict(self, key: str) -> bool:
        """Remove one entry. Returns whether it was present."""
        existed = self._store.delete(key)
        if existed:
            logger.debug("Cache EVICT %s", key_prefix(key))
        return existed

    def invalidate_all(self) -> int:
        """Drop every entry. Returns how many were removed."""
        count = self._store.clear()
        logger.debug("Cache INVALIDATE ALL: %d entries", count)
        return count

    def sweep_expired(self) -> int:
        """Remove entries past expiry. Housekeeping only; get() re-validates anyway."""
        removed = self._store.remove_expired()
        if removed:
            logger.debug("Cache SWEEP: removed %d expired entries", removed)
        return removed

    def stats(self) -> CacheStats:
        with self._counter_lock:
            hits, misses = self._hits, self._misses
        size, keys = self._store.snapshot()
        return CacheStats(
            size=size,
            keys=[key_prefix(k) for k in keys],
            hits=hits,
            misses=misses,
        )

    def reset_stats(self) -> None:
        with self._counter_lock:
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        return len(self._store)

    def _count(self, hit: bool) -> None:
        with self._counter_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1
