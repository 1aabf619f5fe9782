"""Unit tests for the TTL cache."""

from swapengine.cache import TTLCache
from tests.conftest import FakeClock


class TestTTLCache:
    """Tests for TTLCache."""

    def test_get_before_expiry(self):
        clock = FakeClock()
        cache = TTLCache(30, clock)
        cache.set("a", 1)
        clock.advance(29.9)
        assert cache.get("a") == 1

    def test_expires_at_ttl(self):
        """An entry is gone once ttl seconds have elapsed."""
        clock = FakeClock()
        cache = TTLCache(30, clock)
        cache.set("a", 1)
        clock.advance(30)
        assert cache.get("a") is None
        assert len(cache) == 0

    def test_discard_where(self):
        """discard_where drops matching keys and reports the count."""
        cache = TTLCache(30)
        cache.set(("x", 1), "one")
        cache.set(("x", 2), "two")
        cache.set(("y", 1), "three")
        assert cache.discard_where(lambda key: key[0] == "x") == 2
        assert len(cache) == 1

    def test_clear(self):
        cache = TTLCache(30)
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None
