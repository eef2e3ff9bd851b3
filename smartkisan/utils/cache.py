# smartkisan/utils/cache.py
"""
In-process TTL cache for upstream data that changes slowly.

Only successful weather lookups are stored (5 minutes by default, matching
the Cache-Control header on /weather). Completions and fallbacks are never
cached.
"""
import time
import threading
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

from smartkisan.config import settings
from smartkisan.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class _Entry:
    value: Any
    expires_at: float


class TTLCache:
    def __init__(self, default_ttl: float = 300):
        self._entries: Dict[str, _Entry] = {}
        self._default_ttl = default_ttl
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.expires_at <= now:
                self._entries.pop(key, None)
                self.misses += 1
                return None
            self.hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = _Entry(value, time.monotonic() + ttl)

    def clear(self) -> int:
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
            self.hits = self.misses = 0
            return n

    def sweep(self) -> int:
        """Drop expired entries; returns how many were removed."""
        now = time.monotonic()
        with self._lock:
            stale = [k for k, e in self._entries.items() if e.expires_at <= now]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


cache = TTLCache(default_ttl=settings.WX_CACHE_TTL_SEC)

CACHE_TTL = {
    "weather": settings.WX_CACHE_TTL_SEC,
}

SWEEP_INTERVAL_SEC = 600

_sweeper: Optional[asyncio.Task] = None


async def init_cache():
    """Start the periodic sweeper for expired keys."""
    global _sweeper
    if _sweeper is None:
        _sweeper = asyncio.create_task(_sweep_forever())
    log.info("💾 Cache initialized (in-memory, weather TTL %ds)", CACHE_TTL["weather"])


async def close_cache():
    global _sweeper
    if _sweeper is not None:
        _sweeper.cancel()
        _sweeper = None


async def _sweep_forever():
    while True:
        await asyncio.sleep(SWEEP_INTERVAL_SEC)
        n = cache.sweep()
        if n:
            log.info("🧹 Cache sweep removed %d expired keys", n)


async def get_json(key: str, cache_type: str = "weather") -> Optional[Any]:
    val = cache.get(key)
    if val is not None:
        log.debug("💾 %s cache hit: %s", cache_type, key)
    return val


async def set_json(key: str, val: Any, cache_type: str = "weather"):
    ttl = CACHE_TTL[cache_type]
    cache.set(key, val, ttl=ttl)
    log.debug("💾 %s cached for %ds: %s", cache_type, ttl, key)


def flush_all() -> int:
    """Clear entire cache; returns count of keys flushed."""
    return cache.clear()
