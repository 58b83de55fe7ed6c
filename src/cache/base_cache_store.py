# src/cache/base_cache_store.py — v1
"""Abstract result cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from imgresizer.core.models import TransformResult


class BaseCacheStore(ABC):
    """Unified interface for result cache backends.

    No TTL or eviction policy is implied; each backend owns its own.
    """

    @abstractmethod
    async def get(self, key: str) -> TransformResult | None:
        """Retrieve a cached result, None when absent."""

    @abstractmethod
    async def set(self, key: str, result: TransformResult) -> None:
        """Store a result (overwrites)."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a cached result."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
