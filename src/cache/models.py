# src/cache/models.py — v1
"""Persisted form of a TransformResult for the file, SQLite and Redis backends."""

from __future__ import annotations

import base64
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from imgresizer.core.models import ImageFormat, TransformResult


class CacheEntry(BaseModel):
    """Single cache entry. Image bytes are stored base64-encoded."""

    key: str
    format: ImageFormat | None = None
    image_b64: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(cls, key: str, result: TransformResult) -> CacheEntry:
        image_b64 = None
        if result.image is not None:
            image_b64 = base64.b64encode(result.image).decode("ascii")
        return cls(key=key, format=result.format, image_b64=image_b64)

    def to_result(self) -> TransformResult:
        image = None
        if self.image_b64 is not None:
            image = base64.b64decode(self.image_b64)
        return TransformResult(format=self.format, image=image)
