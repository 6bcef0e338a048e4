"""Tests for CacheManager."""

import pytest

from people_dao.cache.manager import DEFAULT_TTL_SECONDS, CacheManager


class TestCacheManager:
    def test_default_ttl_is_sixty_seconds(self):
        assert DEFAULT_TTL_SECONDS == 60.0
        assert CacheManager().default_ttl_seconds == 60.0

    def test_set_and_get(self, cache):
        cache.set("k1", {"name": "Ana"})
        assert cache.get("k1") == {"name": "Ana"}

    def test_get_miss_is_none(self, cache):
        assert cache.get("missing") is None

    def test_ttl_boundary(self, cache, clock):
        cache.set("k1", "v", ttl_seconds=30)
        clock.advance(29.999)
        assert cache.get("k1") == "v"
        clock.advance(0.002)
        assert cache.get("k1") is None
        assert len(cache) == 0

    def test_default_ttl_boundary(self, cache, clock):
        cache.set("k1", "v")
        clock.advance(59.5)
        assert cache.get("k1") == "v"
        clock.advance(1)
        assert cache.get("k1") is None

    def test_set_overwrites(self, cache):
        cache.set("k1", "first")
        cache.set("k1", "second")
        assert cache.get("k1") == "second"
        assert len(cache) == 1

    def test_non_positive_ttl_rejected(self, cache):
        with pytest.raises(ValueError):
            cache.set("k1", "v", ttl_seconds=0)
        with pytest.raises(ValueError):
            CacheManager(default_ttl_seconds=-1)

    def test_evict(self, cache):
        cache.set("k1", "v")
        assert cache.evict("k1") is True
        assert cache.evict("k1") is False
        assert cache.get("k1") is None

    def test_invalidate_all_returns_count(self, cache):
        for i in range(3):
            cache.set(f"k{i}", i)
        assert cache.invalidate_all() == 3
        assert cache.stats().size == 0
        assert cache.invalidate_all() == 0

    def test_sweep_expired(self, cache, clock):
        cache.set("old", 1, ttl_seconds=10)
        cache.set("new", 2, ttl_seconds=100)
        clock.advance(50)
        assert cache.sweep_expired() == 1
        assert cache.stats().size == 1
        assert cache.get("new") == 2

    def test_stats_keys_are_prefixes(self, cache):
        key = cache.derive_key("select by email = a@b.com")
        cache.set(key, "v")
        stats = cache.stats()
        assert stats.size == 1
        assert stats.keys == [key[:16]]

    def test_stats_tracks_hits_and_misses(self, cache):
        cache.set("k1", "v")
        cache.get("k1")
        cache.get("k1")
        cache.get("k2")
        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        cache.reset_stats()
        assert cache.stats().hits == 0

    def test_set_dropped_after_invalidate(self, cache):
        generation = cache.generation
        cache.invalidate_all()
        assert cache.set("k", "v", if_generation=generation) is False
        assert cache.get("k") is None

    def test_set_kept_when_generation_current(self, cache):
        assert cache.set("k", "v", if_generation=cache.generation) is True
        assert cache.get("k") == "v"

    def test_stats_size_matches_keys(self, cache):
        for i in range(3):
            cache.set(f"k{i}", i)
        stats = cache.stats()
        assert stats.size == len(stats.keys) == 3

    def test_derive_key_matches_keys_module(self, cache):
        from people_dao.cache.keys import derive_key

        assert cache.derive_key("q") == derive_key("q")


class TestDisabledCache:
    def test_get_always_misses(self, clock):
        cache = CacheManager(clock=clock, enabled=False)
        cache.set("k1", "v")
        assert cache.get("k1") is None
        assert cache.stats().size == 0
        assert cache.stats().misses == 1

    def test_enabled_property(self):
        assert CacheManager().enabled is True
        assert CacheManager(enabled=False).enabled is False
