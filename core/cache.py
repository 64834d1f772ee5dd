"""Cache de views de analytics com TTL.

Este módulo fornece:
- LRUCache assíncrono com TTL por entrada
- AnalyticsCache: fachada com invalidação por quiz e por dashboard de usuário
"""

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any

from .logger import get_logger

logger = get_logger("cache")


@dataclass
class CacheEntry:
    """Entrada no cache com TTL."""

    value: Any
    created_at: float = field(default_factory=time.time)
    ttl_seconds: float = 300

    def is_expired(self) -> bool:
        return time.time() - self.created_at > self.ttl_seconds


@dataclass
class CacheStats:
    """Estatísticas do cache."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0


class LRUCache:
    """Cache LRU assíncrono com TTL."""

    def __init__(self, max_size: int = 500, default_ttl: float = 300):
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._default_ttl = default_ttl
        self._stats = CacheStats()
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            if entry.is_expired():
                del self._cache[key]
                self._stats.misses += 1
                self._stats.evictions += 1
                return None

            self._cache.move_to_end(key)
            self._stats.hits += 1
            return entry.value

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
            while len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
                self._stats.evictions += 1

            self._cache[key] = CacheEntry(value=value, ttl_seconds=ttl or self._default_ttl)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    async def invalidate_prefix(self, prefix: str) -> int:
        """Remove todas as chaves que começam com o prefixo."""
        async with self._lock:
            keys = [k for k in self._cache if k.startswith(prefix)]
            for key in keys:
                del self._cache[key]
            self._stats.invalidations += len(keys)
            return len(keys)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()

    def get_stats(self) -> dict:
        return {
            "size": len(self._cache),
            "max_size": self._max_size,
            "hits": self._stats.hits,
            "misses": self._stats.misses,
            "evictions": self._stats.evictions,
            "invalidations": self._stats.invalidations,
            "hit_rate": round(self._stats.hit_rate, 4),
        }


class AnalyticsCache:
    """Views cacheadas de resultados de quiz e dashboards.

    Estrutura de chaves:
        - quiz:{quiz_id}:{view} -> agregados de um quiz (ex: stats)
        - dashboard:{user_id}:{view} -> histórico do usuário
    """

    def __init__(self, max_size: int = 500, ttl_seconds: float = 300):
        self._cache = LRUCache(max_size=max_size, default_ttl=ttl_seconds)

    @staticmethod
    def quiz_key(quiz_id: str, view: str) -> str:
        return f"quiz:{quiz_id}:{view}"

    @staticmethod
    def dashboard_key(user_id: str, view: str) -> str:
        return f"dashboard:{user_id}:{view}"

    async def get(self, key: str) -> Any | None:
        return await self._cache.get(key)

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        await self._cache.set(key, value, ttl)

    async def invalidate(self, quiz_id: str) -> int:
        """Invalida todas as views do quiz."""
        removed = await self._cache.invalidate_prefix(f"quiz:{quiz_id}:")
        logger.debug("Cache do quiz invalidado", quiz_id=quiz_id, removed=removed)
        return removed

    async def invalidate_dashboard(self, user_id: str) -> int:
        """Invalida as views de dashboard do usuário."""
        removed = await self._cache.invalidate_prefix(f"dashboard:{user_id}:")
        logger.debug("Cache de dashboard invalidado", user_id=user_id, removed=removed)
        return removed

    async def clear(self) -> None:
        await self._cache.clear()

    def get_stats(self) -> dict:
        return self._cache.get_stats()
