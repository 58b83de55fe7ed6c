# src/cache/redis_store.py — v1
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one result cache.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.cache.models import CacheEntry
from imgresizer.core.models import TransformResult

logger = logging.getLogger(__name__)

_KEY_PREFIX = "imgresizer:"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store. ttl_s=0 keeps entries until evicted by Redis."""

    def __init__(self, redis_url: str, ttl_s: int = 0) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._ttl_s = ttl_s

    async def get(self, key: str) -> TransformResult | None:
        data = self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry(**json.loads(data)).to_result()
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def set(self, key: str, result: TransformResult) -> None:
        payload = CacheEntry.from_result(key, result).model_dump_json()
        if self._ttl_s:
            self._client.set(f"{_KEY_PREFIX}{key}", payload, ex=self._ttl_s)
        else:
            self._client.set(f"{_KEY_PREFIX}{key}", payload)

    async def delete(self, key: str) -> None:
        self._client.delete(f"{_KEY_PREFIX}{key}")

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
