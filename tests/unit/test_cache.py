# =============================================================================
# TESTES - Cache Module
# =============================================================================
# LRU com TTL e invalidacao por quiz / dashboard
# =============================================================================

from unittest.mock import patch

import pytest

from core.cache import AnalyticsCache, CacheEntry, LRUCache


class TestCacheEntry:
    """Expiracao de entradas."""

    def test_not_expired(self):
        assert CacheEntry(value=1, ttl_seconds=60).is_expired() is False

    def test_expired(self):
        entry = CacheEntry(value=1, ttl_seconds=60)
        with patch("core.cache.time.time", return_value=entry.created_at + 61):
            assert entry.is_expired() is True


class TestLRUCache:
    """Operacoes basicas do LRU."""

    @pytest.mark.asyncio
    async def test_set_and_get(self):
        cache = LRUCache()
        await cache.set("a", {"x": 1})

        assert await cache.get("a") == {"x": 1}
        assert await cache.get("b") is None

        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    @pytest.mark.asyncio
    async def test_evicts_least_recently_used(self):
        cache = LRUCache(max_size=2)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.get("a")
        await cache.set("c", 3)

        assert await cache.get("b") is None
        assert await cache.get("a") == 1
        assert await cache.get("c") == 3

    @pytest.mark.asyncio
    async def test_ttl_expiry(self):
        cache = LRUCache(default_ttl=10)
        await cache.set("a", 1)

        with patch("core.cache.time.time", return_value=10**12):
            assert await cache.get("a") is None

    @pytest.mark.asyncio
    async def test_invalidate_prefix(self):
        cache = LRUCache()
        await cache.set("quiz:1:stats", 1)
        await cache.set("quiz:1:other", 2)
        await cache.set("quiz:2:stats", 3)

        assert await cache.invalidate_prefix("quiz:1:") == 2
        assert await cache.get("quiz:2:stats") == 3


class TestAnalyticsCache:
    """Fachada de analytics."""

    def test_key_format(self):
        assert AnalyticsCache.quiz_key("abc", "stats") == "quiz:abc:stats"
        assert AnalyticsCache.dashboard_key("u1", "history") == "dashboard:u1:history"

    @pytest.mark.asyncio
    async def test_invalidate_quiz_keeps_others(self):
        cache = AnalyticsCache()
        await cache.set(cache.quiz_key("1", "stats"), "a")
        await cache.set(cache.quiz_key("10", "stats"), "b")

        assert await cache.invalidate("1") == 1
        assert await cache.get(cache.quiz_key("1", "stats")) is None
        assert await cache.get(cache.quiz_key("10", "stats")) == "b"

    @pytest.mark.asyncio
    async def test_invalidate_dashboard(self):
        cache = AnalyticsCache()
        await cache.set(cache.dashboard_key("u1", "history:*:10"), [])
        await cache.set(cache.dashboard_key("u2", "history:*:10"), [])

        assert await cache.invalidate_dashboard("u1") == 1
        assert await cache.get(cache.dashboard_key("u2", "history:*:10")) == []
        assert cache.get_stats()["invalidations"] == 1
