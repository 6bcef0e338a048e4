"""Cache subsystem — in-memory, TTL-expiring, content-addressed keys."""

from people_dao.cache.keys import derive_key, describe_query
from people_dao.cache.manager import CacheManager
from people_dao.cache.stats import CacheEntry, CacheStats
from people_dao.cache.sweeper import CacheSweeper

__all__ = [
    "CacheManager",
    "CacheEntry",
    "CacheStats",
    "CacheSweeper",
    "derive_key",
    "describe_query",
]
