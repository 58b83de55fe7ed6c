# src/sources/base_adapter.py — v1
"""Abstract source image adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from imgresizer.core.models import AdapterKind


class BaseImageAdapter(ABC):
    """Reads original image bytes from one origin.

    ``kind`` namespaces cache keys so the same id fetched from two origins
    never shares a cached result.
    """

    kind: ClassVar[AdapterKind]

    @abstractmethod
    async def fetch(self, image_id: str) -> bytes | None:
        """Return the image bytes, or None when the origin has no such image.

        Transient origin failures are raised, not mapped to None.
        """

    async def aclose(self) -> None:
        """Release connections. No-op by default."""
