"""Tests for apod.cache: TTL semantics and key namespacing."""

from __future__ import annotations

from apod.cache import TTLCache, asset_key, resolution_key, snapshot_key


class TestTTLCache:
    def test_get_missing_returns_none(self, cache):
        assert cache.get("resolution:2025-10-01") is None

    def test_set_then_get(self, cache):
        cache.set("k", {"a": 1}, ttl=60)
        assert cache.get("k") == {"a": 1}

    def test_entry_live_until_expiry(self, cache, clock):
        cache.set("k", "v", ttl=10)
        clock.advance(9.999)
        assert cache.get("k") == "v"

    def test_expired_entry_returns_none_and_is_purged(self, cache, clock):
        cache.set("k", "v", ttl=1)
        clock.advance(1.5)
        assert len(cache) == 1  # purge is lazy
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_entry_at_exact_expiry_is_stale(self, cache, clock):
        cache.set("k", "v", ttl=5)
        clock.advance(5)
        assert cache.get("k") is None

    def test_default_ttl_used_when_omitted(self, clock):
        cache = TTLCache(default_ttl=30, clock=clock)
        cache.set("k", "v")
        clock.advance(29)
        assert cache.get("k") == "v"
        clock.advance(2)
        assert cache.get("k") is None

    def test_last_write_wins(self, cache):
        cache.set("k", "first", ttl=60)
        cache.set("k", "second", ttl=60)
        assert cache.get("k") == "second"

    def test_rewrite_extends_expiry(self, cache, clock):
        cache.set("k", "v", ttl=10)
        clock.advance(8)
        cache.set("k", "v", ttl=10)
        clock.advance(8)
        assert cache.get("k") == "v"

    def test_instances_are_isolated(self, clock):
        a = TTLCache(clock=clock)
        b = TTLCache(clock=clock)
        a.set("k", "v", ttl=60)
        assert b.get("k") is None


class TestCacheKeys:
    def test_namespaces_do_not_collide(self):
        keys = {resolution_key("x"), asset_key("x"), snapshot_key("x")}
        assert len(keys) == 3

    def test_key_shapes(self):
        assert resolution_key("2025-10-01") == "resolution:2025-10-01"
        assert asset_key("PIA12345") == "asset:PIA12345"
