"""Person data-access object — CRUD plus cached exact-match lookups."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from people_dao.cache.keys import describe_query
from people_dao.cache.manager import CacheManager
from people_dao.cache.stats import CacheStats
from people_dao.errors import RecordNotFoundError, RecordValidationError
from people_dao.storage.sqlite import TABLE, SQLitePersonStore
from people_dao.types import Person, PersonCreate, PersonUpdate

logger = logging.getLogger(__name__)

_M = TypeVar("_M", PersonCreate, PersonUpdate)


class PersonDAO:
    """Mediates all reads and writes of person records.

    Only find_by_email and find_by_phone go through the cache. Every write
    clears the whole cache before returning, so no read after a completed
    write can observe pre-write data.
    """

    def __init__(self, store: SQLitePersonStore, cache: CacheManager[Person]) -> None:
        self._store = store
        self._cache = cache

    @property
    def cache(self) -> CacheManager[Person]:
        return self._cache

    # ── Writes ──

    def create(self, data: PersonCreate | Mapping[str, Any]) -> Person:
        payload = _validate(PersonCreate, data)
        logger.info("Creating person '%s'", payload.name)
        person = self._store.insert(payload.model_dump())
        self._invalidate("create")
        return person

    def update(self, record_id: str, data: PersonUpdate | Mapping[str, Any]) -> Person:
        payload = _validate(PersonUpdate, data)
        changes = payload.changes()
        if not changes:
            raise RecordValidationError("Update has no fields to change")
        logger.info("Updating person %s (%s)", record_id, ", ".join(sorted(changes)))
        person = self._store.update(record_id, changes)
        if person is None:
            raise RecordNotFoundError(f"Person {record_id} not found", record_id=record_id)
        self._invalidate("update")
        return person

    def delete(self, record_id: str) -> bool:
        logger.info("Deleting person %s", record_id)
        if not self._store.delete(record_id):
            raise RecordNotFoundError(f"Person {record_id} not found", record_id=record_id)
        self._invalidate("delete")
        return True

    # ── Reads ──

    def get_by_id(self, record_id: str) -> Person | None:
        logger.debug("Get person by id %s", record_id)
        return self._store.get(record_id)

    def find_by_name(self, substring: str) -> list[Person]:
        logger.debug("Find people by name containing '%s'", substring)
        return self._store.select_where_name_contains(substring)

    def find_by_email(self, email: str) -> Person | None:
        # Stored values are stripped on write, so lookups are too.
        return self._cached_lookup("email", email.strip())

    def find_by_phone(self, phone: str) -> Person | None:
        return self._cached_lookup("phone", phone.strip())

    def list_all(self) -> list[Person]:
        logger.debug("List all people")
        return self._store.select_all()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    # ── Internals ──

    def _cached_lookup(self, column: str, value: str) -> Person | None:
        """Read-through exact match. Misses are never cached."""
        key = self._cache_key(column, value)
        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        # Read before the storage query: a write that lands in between bumps
        # it, and the now-stale row is not cached.
        generation = self._cache.generation
        logger.debug("Find person by %s from storage", column)
        person = self._store.select_one(column, value)
        if person is not None and key is not None:
            self._cache.set(key, person, if_generation=generation)
        return person

    def _cache_key(self, column: str, value: str) -> str | None:
        try:
            return self._cache.derive_key(describe_query(TABLE, column, value))
        except (TypeError, ValueError) as e:
            # UnicodeEncodeError is a ValueError; treat as a plain miss.
            logger.warning("Cannot derive cache key for %s lookup, bypassing cache: %s", column, e)
            return None

    def _invalidate(self, operation: str) -> None:
        removed = self._cache.invalidate_all()
        logger.debug("Invalidated %d cache entries after %s", removed, operation)


def _validate(model: type[_M], data: _M | Mapping[str, Any]) -> _M:
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise RecordValidationError(
            f"Expected a mapping of person fields, got {type(data).__name__}"
        )
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise RecordValidationError.from_pydantic(e) from e
