# src/imaging/base_engine.py — v1
"""Abstract pixel engine and smartcrop engine interfaces.

Image handles are opaque to the transformer; only the engine that created
a handle may operate on it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from imgresizer.core.models import CropRegion, Gravity, ImageFormat


class BaseImageEngine(ABC):
    """Pixel-level operations used by the transformer."""

    @abstractmethod
    def load(self, data: bytes) -> Any:
        """Decode bytes into an image handle."""

    @abstractmethod
    def native_format(self, image: Any) -> ImageFormat:
        """Format the handle was decoded from."""

    @abstractmethod
    def auto_rotate(self, image: Any) -> Any:
        """Apply the embedded orientation and drop it."""

    @abstractmethod
    def blur(self, image: Any, sigma: float) -> Any:
        """Gaussian blur."""

    @abstractmethod
    def extract(self, image: Any, region: CropRegion) -> Any:
        """Cut out a region."""

    @abstractmethod
    def resize_inside(self, image: Any, width: int | None, height: int | None) -> Any:
        """Fit inside width x height, keeping aspect ratio, never enlarging."""

    @abstractmethod
    def resize_cover(self, image: Any, width: int, height: int, gravity: Gravity = "center") -> Any:
        """Cover width x height exactly, cropping the overflow around gravity."""

    @abstractmethod
    def contain(self, image: Any, width: int, height: int) -> Any:
        """Fit inside width x height on a transparent canvas of exactly that size."""

    @abstractmethod
    def flatten(self, image: Any, background: tuple[int, int, int]) -> Any:
        """Merge alpha onto an opaque background color."""

    @abstractmethod
    def composite(self, base: Any, overlay: Any, left: int, top: int) -> Any:
        """Draw overlay onto base with its top-left corner at (left, top)."""

    @abstractmethod
    def encode(
        self,
        image: Any,
        fmt: ImageFormat,
        quality: int | None = None,
        progressive: bool | None = None,
    ) -> bytes:
        """Encode to bytes."""


class BaseSmartcropEngine(ABC):
    """Saliency-based crop region selection."""

    @abstractmethod
    async def crop(self, data: bytes, width: int, height: int) -> CropRegion:
        """Best region of the source for a width x height target."""
