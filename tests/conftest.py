import pytest

from people_dao.cache.manager import CacheManager
from people_dao.dao import PersonDAO
from people_dao.router import Router
from people_dao.storage.sqlite import SQLitePersonStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(SQLitePersonStore):
    """SQLite store that counts exact-match lookups."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.select_one_calls = 0

    def select_one(self, column, value):
        self.select_one_calls += 1
        return super().select_one(column, value)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheManager(default_ttl_seconds=60, clock=clock)


@pytest.fixture
def store():
    s = CountingStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def dao(store, cache):
    return PersonDAO(store, cache)


@pytest.fixture
def router(dao):
    return Router(dao)


@pytest.fixture
def ana(dao):
    """A stored person with email ana@x.com."""
    return dao.create({"name": "Ana", "email": "ana@x.com", "phone": "11900000001"})
