"""Cache manager — Response cache for the HTTP layer.

Stores successful search envelopes keyed by endpoint and query.  The search
core never reads from it; a cache fault is logged and treated as a miss.
"""

from __future__ import annotations

import json
import logging
from time import monotonic
from typing import Any

import redis.asyncio as aioredis

from catalogsearch.config.settings import CacheSettings

logger = logging.getLogger(__name__)


def search_cache_key(endpoint: str, query: str) -> str:
    """Cache key for one search endpoint and query string."""
    return f"search:{endpoint}:{query}"


class CacheManager:
    """Memory- or Redis-backed cache with a single configured TTL.

    The memory backend is per process and holds at most
    ``settings.memory_max_entries`` entries; the oldest are evicted first.

    Attributes:
        settings: Cache configuration.
    """

    def __init__(self, settings: CacheSettings) -> None:
        self.settings = settings
        self._client: aioredis.Redis | None = None
        self._memory_cache: dict[str, tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    async def initialize(self) -> None:
        """Connect to Redis when configured; otherwise use the memory backend."""
        if not self.enabled:
            return
        if self.settings.backend != "redis":
            logger.info("Using in-memory response cache")
            return

        self._client = aioredis.from_url(self.settings.redis_url, decode_responses=True)
        try:
            await self._client.ping()
            logger.info("Connected to Redis cache at %s", self.settings.redis_url)
        except Exception:
            logger.warning("Failed to connect to Redis, falling back to memory cache", exc_info=True)
            await self._client.aclose()
            self._client = None

    async def shutdown(self) -> None:
        """Close cache connections."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Any | None:
        """Return the cached value for ``key``, or ``None`` on a miss."""
        if not self.enabled:
            return None
        try:
            if self._client:
                value = await self._client.get(key)
                return json.loads(value) if value else None
            return self._memory_get(key)
        except Exception:
            logger.debug("Cache get failed for key: %s", key, exc_info=True)
            return None

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under ``key`` with the configured TTL."""
        if not self.enabled:
            return
        try:
            if self._client:
                await self._client.setex(key, self.settings.ttl, json.dumps(value))
            else:
                self._memory_set(key, value)
        except Exception:
            logger.debug("Cache set failed for key: %s", key, exc_info=True)

    # ── Memory backend ───────────────────────────────────────────────────

    def _memory_get(self, key: str) -> Any | None:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if monotonic() >= expires_at:
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: Any) -> None:
        now = monotonic()
        self._memory_cache.pop(key, None)
        if len(self._memory_cache) >= self.settings.memory_max_entries:
            self._memory_cache = {k: entry for k, entry in self._memory_cache.items() if entry[0] > now}
        while len(self._memory_cache) >= self.settings.memory_max_entries:
            del self._memory_cache[next(iter(self._memory_cache))]
        self._memory_cache[key] = (now + self.settings.ttl, value)
