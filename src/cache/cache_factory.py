# src/cache/cache_factory.py — v1
"""Factory for result cache store instantiation."""

from __future__ import annotations

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from imgresizer.cache.memory_store import MemoryCacheStore
        max_entries = 1000 if settings is None else settings.cache_memory_max_entries
        return MemoryCacheStore(max_entries=max_entries)

    if backend == "json":
        from imgresizer.cache.json_store import JsonCacheStore
        return JsonCacheStore(cache_root=settings.cache_root)

    if backend == "sqlite":
        from imgresizer.cache.sqlite_store import SqliteCacheStore
        return SqliteCacheStore(db_path=settings.cache_root / "imgresizer_cache.db")

    if backend == "redis":
        from imgresizer.cache.redis_store import RedisCacheStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisCacheStore(
            redis_url=settings.cache_redis_url,
            ttl_s=settings.cache_redis_ttl_s,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
