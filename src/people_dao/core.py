"""Top-level composition: PeopleService wires store, cache and DAO."""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType

from people_dao.cache.manager import CacheManager
from people_dao.cache.memory import Clock
from people_dao.cache.sweeper import CacheSweeper
from people_dao.config.schema import Settings
from people_dao.dao import PersonDAO
from people_dao.router import Router
from people_dao.storage.sqlite import SQLitePersonStore
from people_dao.types import Person

logger = logging.getLogger(__name__)


class PeopleService:
    """Owns one store, one cache and the DAO and router built on them.

    Each instance has its own cache; nothing is shared at module level.
    """

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        cache_ttl_seconds: float = 60.0,
        cache_disabled: bool = False,
        sweep_interval_seconds: float = 0.0,
        clock: Clock | None = None,
    ) -> None:
        self._store = SQLitePersonStore(db_path)
        cache_kwargs = {"clock": clock} if clock is not None else {}
        self._cache: CacheManager[Person] = CacheManager(
            default_ttl_seconds=cache_ttl_seconds,
            enabled=not cache_disabled,
            **cache_kwargs,
        )
        self._dao = PersonDAO(self._store, self._cache)
        self._router = Router(self._dao)
        self._sweeper: CacheSweeper | None = None
        if sweep_interval_seconds > 0:
            self._sweeper = CacheSweeper(self._cache, sweep_interval_seconds)
            self._sweeper.start()
        logger.debug("People service ready (db=%s)", self._store.db_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> PeopleService:
        return cls(
            db_path=settings.db_path,
            cache_ttl_seconds=settings.cache_ttl_seconds,
            cache_disabled=settings.cache_disabled,
            sweep_interval_seconds=settings.sweep_interval_seconds,
        )

    @property
    def store(self) -> SQLitePersonStore:
        return self._store

    @property
    def cache(self) -> CacheManager[Person]:
        return self._cache

    @property
    def dao(self) -> PersonDAO:
        return self._dao

    @property
    def router(self) -> Router:
        return self._router

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        self._store.close()

    def __enter__(self) -> PeopleService:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
