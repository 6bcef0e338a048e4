"""In-memory TTL store guarded by a single lock."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from people_dao.cache.stats import CacheEntry

V = TypeVar("V")

Clock = Callable[[], float]


class MemoryCache(Generic[V]):
    """Dict-backed cache with lazy expiry.

    Every public method holds the lock for its whole body, so a reader sees
    either the state before or after any set/clear, never a partial one.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._store: dict[str, CacheEntry[V]] = {}
        self._clock = clock
        self._lock = threading.RLock()
        self._generation = 0

    def now(self) -> float:
        return self._clock()

    @property
    def generation(self) -> int:
        """Incremented by every clear()."""
        with self._lock:
            return self._generation

    def get(self, key: str) -> CacheEntry[V] | None:
        """Return the live entry for key, dropping it if it has expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                return None
            return entry

    def set(
        self,
        key: str,
        value: V,
        ttl_seconds: float,
        if_generation: int | None = None,
    ) -> CacheEntry[V] | None:
        """Store value. With if_generation, only if no clear() happened since."""
        with self._lock:
            if if_generation is not None and if_generation != self._generation:
                return None
            now = self._clock()
            entry: CacheEntry[V] = CacheEntry(
                key=key,
                value=value,
                created_at=now,
                expires_at=now + ttl_seconds,
            )
            self._store[key] = entry
            return entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._generation += 1
            return count

    def remove_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
            for key in expired:
                del self._store[key]
            return len(expired)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)

    def snapshot(self) -> tuple[int, list[str]]:
        """Size and keys read under one lock acquisition."""
        with self._lock:
            return len(self._store), list(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store
