"""
Unit tests for the in-process TTL cache
"""

import time

import pytest

from smartkisan.config import settings
from smartkisan.utils.cache import TTLCache, cache, get_json, set_json


class TestTTLCache:

    def test_hit_and_miss(self):
        c = TTLCache(default_ttl=60)
        assert c.get("k") is None
        c.set("k", {"a": 1})
        assert c.get("k") == {"a": 1}
        assert c.stats() == {"entries": 1, "hits": 1, "misses": 1}

    def test_expired_entry_is_dropped(self):
        c = TTLCache()
        c.set("k", 1, ttl=0)
        assert c.get("k") is None
        assert len(c) == 0

    def test_sweep(self):
        c = TTLCache()
        c.set("old", 1, ttl=-1)
        c.set("new", 2, ttl=60)
        assert c.sweep() == 1
        assert c.get("new") == 2

    def test_clear_returns_count(self):
        c = TTLCache()
        c.set("a", 1)
        c.set("b", 2)
        assert c.clear() == 2
        assert len(c) == 0


class TestJsonHelpers:

    async def test_round_trip_through_shared_cache(self):
        await set_json("wx:1:2:7", {"current": {}}, "weather")
        assert await get_json("wx:1:2:7", "weather") == {"current": {}}
        assert await get_json("wx:missing", "weather") is None

    async def test_weather_entries_use_configured_ttl(self):
        await set_json("wx:3:4:7", {"current": {}})
        remaining = cache._entries["wx:3:4:7"].expires_at - time.monotonic()
        assert settings.WX_CACHE_TTL_SEC - 5 < remaining <= settings.WX_CACHE_TTL_SEC

    async def test_unknown_cache_type_rejected(self):
        with pytest.raises(KeyError):
            await set_json("k", 1, "completion")
