# tests/unit/cache/test_cache_factory.py — v1
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from imgresizer.cache.cache_factory import create_cache_store
from imgresizer.cache.json_store import JsonCacheStore
from imgresizer.cache.memory_store import MemoryCacheStore
from imgresizer.cache.sqlite_store import SqliteCacheStore
from imgresizer.config.settings import Settings


class TestCreateCacheStore:
    def test_default_memory(self):
        store = create_cache_store()
        assert isinstance(store, MemoryCacheStore)

    def test_memory_size_from_settings(self):
        s = Settings(_env_file=None, cache_memory_max_entries=3)
        store = create_cache_store(s)
        assert isinstance(store, MemoryCacheStore)
        assert store._max_entries == 3

    def test_json_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_cache_store(s), JsonCacheStore)

    def test_sqlite_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        store = create_cache_store(s)
        assert isinstance(store, SqliteCacheStore)
        assert (tmp_path / "imgresizer_cache.db").exists()
        store.close()

    def test_redis_missing_url(self):
        s = Settings(_env_file=None, cache_backend="redis", cache_redis_url="")
        with pytest.raises(ValueError, match="CACHE_REDIS_URL"):
            create_cache_store(s)

    def test_unsupported_backend(self):
        """Settings validation rejects invalid backends before factory is reached."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache_backend="nonexistent")
