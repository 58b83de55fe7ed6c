# src/cache/memory_store.py — v1
"""In-process LRU cache store (default CACHE_BACKEND=memory).

Single event loop only: no locking, entries are swapped whole.
"""

from __future__ import annotations

from collections import OrderedDict

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.core.models import TransformResult


class MemoryCacheStore(BaseCacheStore):
    """LRU cache keeping at most max_entries results."""

    def __init__(self, max_entries: int = 1000) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._entries: OrderedDict[str, TransformResult] = OrderedDict()
        self._max_entries = max_entries

    async def get(self, key: str) -> TransformResult | None:
        result = self._entries.get(key)
        if result is not None:
            self._entries.move_to_end(key)
        return result

    async def set(self, key: str, result: TransformResult) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = result

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
