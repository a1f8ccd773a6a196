"""Tests for the in-memory TTL cache."""

import pytest

from sitestandard.cache import TTLCache
from tests.fakes import FakeClock


class TestTTLCache:
    """Test TTLCache get/set/expiry semantics."""

    def test_get_missing_returns_none(self, cache: TTLCache) -> None:
        assert cache.get("nope") is None

    def test_set_then_get(self, cache: TTLCache) -> None:
        cache.set("k", {"a": 1})
        assert cache.get("k") == {"a": 1}

    def test_returns_same_object(self, cache: TTLCache) -> None:
        """Values are not copied."""
        value = [1, 2, 3]
        cache.set("k", value)
        assert cache.get("k") is value

    def test_zero_ttl_is_already_expired(self, cache: TTLCache) -> None:
        cache.set("k", "v", ttl=0)
        assert cache.get("k") is None

    def test_entry_expires_after_default_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "v")
        clock.advance(299)
        assert cache.get("k") == "v"
        clock.advance(1)
        assert cache.get("k") is None

    def test_expired_entry_is_evicted_on_read(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "v", ttl=1)
        clock.advance(2)
        assert len(cache) == 1
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_explicit_ttl_overrides_default(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("short", "v", ttl=10)
        cache.set("long", "v")
        clock.advance(11)
        assert cache.get("short") is None
        assert cache.get("long") == "v"

    def test_overwrite_resets_expiry(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "old", ttl=10)
        clock.advance(8)
        cache.set("k", "new", ttl=10)
        clock.advance(8)
        assert cache.get("k") == "new"

    def test_set_default_ttl_affects_only_future_writes(
        self, cache: TTLCache, clock: FakeClock
    ) -> None:
        cache.set("before", "v")
        cache.set_default_ttl(5)
        cache.set("after", "v")
        clock.advance(6)
        assert cache.default_ttl == 5
        assert cache.get("after") is None
        assert cache.get("before") == "v"

    def test_delete(self, cache: TTLCache) -> None:
        cache.set("k", "v")
        cache.delete("k")
        cache.delete("missing")
        assert cache.get("k") is None

    def test_clear(self, cache: TTLCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_contains_honours_expiry(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("k", "v", ttl=1)
        assert "k" in cache
        clock.advance(1)
        assert "k" not in cache

    def test_purge_expired(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=1)
        cache.set("c", 3, ttl=100)
        clock.advance(5)
        assert cache.purge_expired() == 2
        assert len(cache) == 1
        assert cache.get("c") == 3

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ValueError):
            TTLCache(default_ttl=-1)
        with pytest.raises(ValueError):
            TTLCache().set_default_ttl(-5)

    def test_instances_do_not_share_state(self) -> None:
        first = TTLCache(default_ttl=60)
        second = TTLCache(default_ttl=1)
        first.set("k", "v")
        assert second.get("k") is None
        assert first.default_ttl == 60
