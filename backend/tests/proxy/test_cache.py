"""Tests for TTLCache."""

import pytest

from ivmonitor.proxy.cache import DEFAULT_TTL, TTLCache, make_cache_key


class TestMakeCacheKey:
    def test_endpoint_and_params(self):
        assert make_cache_key("/x", {"a": 1}) == '/x-{"a":1}'

    def test_no_params(self):
        assert make_cache_key("/x") == make_cache_key("/x", {}) == "/x-{}"

    def test_param_order_ignored(self):
        assert make_cache_key("/x", {"a": 1, "b": 2}) == make_cache_key("/x", {"b": 2, "a": 1})

    def test_distinct_requests_distinct_keys(self):
        assert make_cache_key("/x", {"a": 1}) != make_cache_key("/x", {"a": 2})
        assert make_cache_key("/x") != make_cache_key("/y")


class TestTTLCache:
    """Unit tests for the TTL cache."""

    def test_default_ttl(self):
        assert TTLCache().ttl == DEFAULT_TTL == 600

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            TTLCache(ttl=0)

    def test_set_and_get(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        entry = cache.set("k", [1, 2])
        assert entry.expires_at == clock.now + 10
        assert cache.get("k") == entry
        assert cache.get("k").value == [1, 2]

    def test_get_missing(self, clock):
        assert TTLCache(clock=clock).get("nope") is None

    def test_live_just_before_expiry(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("k", "v")
        clock.advance(9.999)
        assert cache.get("k") is not None

    def test_never_returned_at_expiry(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("k", "v")
        clock.advance(10)
        assert cache.get("k") is None
        assert len(cache) == 0  # Evicted on read

    def test_set_replaces_entry_with_fresh_expiry(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        first = cache.set("k", "old")
        clock.advance(5)
        second = cache.set("k", "new")
        assert second is not first
        assert first.value == "old"  # Entries are never updated in place
        clock.advance(7)
        assert cache.get("k").value == "new"

    def test_falsy_values_are_cached(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("k", [])
        assert cache.get("k") is not None
        assert "k" in cache

    def test_purge_expired(self, clock):
        cache = TTLCache(ttl=10, clock=clock)
        cache.set("old", 1)
        clock.advance(6)
        cache.set("new", 2)
        clock.advance(5)
        assert cache.purge_expired() == 1
        assert len(cache) == 1
        assert "new" in cache

    def test_clear(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0
