"""Background sweep of expired cache entries."""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import Any

from people_dao.cache.manager import CacheManager

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Calls cache.sweep_expired() every interval on a daemon thread.

    Bounds memory growth between reads. Correctness never depends on it.
    """

    def __init__(self, cache: CacheManager[Any], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._cache = cache
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="people-dao-cache-sweeper", daemon=True
        )
        self._thread.start()
        logger.debug("Cache sweeper started (every %.1fs)", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.debug("Cache sweeper stopped")

    def __enter__(self) -> CacheSweeper:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._cache.sweep_expired()
            except Exception:
                logger.exception("Cache sweep failed")
