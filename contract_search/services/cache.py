"""Suggestion cache with Redis backend and in-memory fallback.

Owned by the API layer, never by the search engine. Entries expire after
settings.suggestion_cache_ttl_seconds.

Graceful degradation: if Redis is unavailable, uses cachetools.TTLCache in-memory.
"""

import hashlib
import json
import logging
import time
from typing import Callable

from cachetools import TTLCache

from contract_search.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async cache with Redis primary and in-memory fallback."""

    def __init__(
        self,
        ttl: int | None = None,
        maxsize: int = 512,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl or settings.suggestion_cache_ttl_seconds
        self._redis = None
        self._fallback = TTLCache(maxsize=maxsize, ttl=self.ttl, timer=timer)
        self._available = False

    async def connect(self) -> bool:
        """Connect to Redis. Returns True on success."""
        try:
            import redis.asyncio as aioredis

            self._redis = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=3,
            )
            await self._redis.ping()
            self._available = True
            return True
        except Exception as e:
            logger.warning("Redis connection failed, using in-memory fallback: %s", str(e)[:100])
            self._redis = None
            self._available = False
            return False

    async def disconnect(self):
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            self._available = False

    def make_key(self, namespace: str, query: str) -> str:
        """Deterministic key: suggestions are case-insensitive, so is the key."""
        content = f"{namespace}:{query.lower()}"
        return f"cs:{namespace}:{hashlib.sha256(content.encode()).hexdigest()[:32]}"

    async def get(self, key: str) -> list[str] | None:
        """Read from cache. Returns None on miss."""
        if self._available and self._redis:
            try:
                data = await self._redis.get(key)
                if data is not None:
                    logger.debug("Cache HIT (Redis) | key=%s", key[:24])
                    return json.loads(data)
            except Exception as e:
                logger.debug("Redis GET error: %s", str(e)[:100])

        data = self._fallback.get(key)
        if data is not None:
            logger.debug("Cache HIT (memory) | key=%s", key[:24])
            return list(data)

        return None

    async def set(self, key: str, data: list[str]):
        """Write to cache with the configured TTL."""
        if self._available and self._redis:
            try:
                await self._redis.setex(key, self.ttl, json.dumps(data, ensure_ascii=False))
            except Exception as e:
                logger.debug("Redis SET error: %s", str(e)[:100])

        # Always write to in-memory fallback too
        self._fallback[key] = list(data)
