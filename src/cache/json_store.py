# src/cache/json_store.py — v1
"""JSON file-based cache store (CACHE_BACKEND=json).

Stores one JSON file per cache key under CACHE_ROOT. File names are the
SHA-256 of the key since keys embed arbitrary image ids.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.cache.models import CacheEntry
from imgresizer.core.models import TransformResult

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str) -> TransformResult | None:
        """Retrieve a result by key. Corrupt entries count as misses."""
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            entry = CacheEntry(**json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None
        if entry.key != key:
            logger.warning("Cache entry %s holds foreign key %s", path.name, entry.key)
            return None
        return entry.to_result()

    async def set(self, key: str, result: TransformResult) -> None:
        """Store a result, replacing the file atomically."""
        path = self._entry_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(
            CacheEntry.from_result(key, result).model_dump_json(), encoding="utf-8"
        )
        tmp_path.replace(path)

    async def delete(self, key: str) -> None:
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._root / f"{digest}.json"
