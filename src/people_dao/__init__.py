"""people_dao — person records behind a time-boxed, invalidate-on-write cache."""

from people_dao.cache.manager import CacheManager
from people_dao.core import PeopleService
from people_dao.dao import PersonDAO
from people_dao.router import Response, Router
from people_dao.storage.sqlite import SQLitePersonStore
from people_dao.types import Person, PersonCreate, PersonUpdate

__version__ = "0.1.0"

__all__ = [
    "CacheManager",
    "PeopleService",
    "Person",
    "PersonCreate",
    "PersonDAO",
    "PersonUpdate",
    "Response",
    "Router",
    "SQLitePersonStore",
]
