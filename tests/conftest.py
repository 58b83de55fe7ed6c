# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides generated images, a counting in-memory adapter, a mock smartcrop
engine and a transformer factory. No external services — all I/O is local.
"""

from __future__ import annotations

from io import BytesIO
from typing import Callable
from unittest.mock import AsyncMock

import pytest
from PIL import Image

from imgresizer.cache.memory_store import MemoryCacheStore
from imgresizer.core.models import AdapterKind, CropRegion
from imgresizer.imaging.engine import PillowImageEngine
from imgresizer.sources.base_adapter import BaseImageAdapter
from imgresizer.sources.cached_image import CachedImage
from imgresizer.sources.retry import RetryConfig
from imgresizer.transform.transformer import Transformer


class FakeAdapter(BaseImageAdapter):
    """In-memory adapter recording every fetch."""

    kind = AdapterKind.LOCAL

    def __init__(self, images: dict[str, bytes] | None = None) -> None:
        self.images: dict[str, bytes] = dict(images or {})
        self.calls: list[str] = []

    async def fetch(self, image_id: str) -> bytes | None:
        self.calls.append(image_id)
        return self.images.get(image_id)


def _make_image_bytes(
    width: int = 64,
    height: int = 48,
    color: tuple[int, ...] = (200, 30, 30),
    fmt: str = "PNG",
    mode: str = "RGB",
    exif_orientation: int | None = None,
) -> bytes:
    image = Image.new(mode, (width, height), color)
    buffer = BytesIO()
    params: dict = {}
    if exif_orientation is not None:
        exif = Image.Exif()
        exif[0x0112] = exif_orientation
        params["exif"] = exif
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def _split_image_bytes(
    width: int = 200,
    height: int = 100,
    left: tuple[int, int, int] = (255, 0, 0),
    right: tuple[int, int, int] = (0, 0, 255),
) -> bytes:
    """PNG with the left half one color and the right half another."""
    image = Image.new("RGB", (width, height), right)
    image.paste(Image.new("RGB", (width // 2, height), left), (0, 0))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


# === FIXTURES: Images ===


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory for encoded solid-color images."""
    return _make_image_bytes


@pytest.fixture
def split_image_bytes() -> Callable[..., bytes]:
    """Factory for two-color PNGs (left/right halves)."""
    return _split_image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    """64x48 red PNG."""
    return _make_image_bytes()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """64x48 red JPEG."""
    return _make_image_bytes(fmt="JPEG")


def open_image(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image


@pytest.fixture
def decode() -> Callable[[bytes], Image.Image]:
    """Decode encoded bytes back into a PIL image."""
    return open_image


# === FIXTURES: Collaborators ===


@pytest.fixture
def make_adapter() -> Callable[..., FakeAdapter]:
    """Factory for FakeAdapter instances."""
    return FakeAdapter


@pytest.fixture
def fake_adapter(png_bytes: bytes, jpeg_bytes: bytes) -> FakeAdapter:
    """Adapter serving a.png and b.jpg."""
    return FakeAdapter({"a.png": png_bytes, "b.jpg": jpeg_bytes})


@pytest.fixture
def mock_smartcrop() -> AsyncMock:
    """Smartcrop engine returning a fixed 20x20 region at (4, 4)."""
    engine = AsyncMock()
    engine.crop = AsyncMock(return_value=CropRegion(x=4, y=4, width=20, height=20))
    return engine


@pytest.fixture
def memory_cache() -> MemoryCacheStore:
    return MemoryCacheStore(max_entries=100)


@pytest.fixture
def make_transformer(
    memory_cache: MemoryCacheStore, mock_smartcrop: AsyncMock
) -> Callable[..., Transformer]:
    """Factory for a Transformer on the Pillow engine with no retry delays."""

    def _factory(**overrides) -> Transformer:
        no_retry = RetryConfig(max_retries=0, base_delay_s=0.0, jitter=False)
        kwargs = dict(
            cache=memory_cache,
            original_fetcher=CachedImage(max_entries=10, retry_config=no_retry),
            overlay_fetcher=CachedImage(max_entries=10, retry_config=no_retry, name="overlay"),
            engine=PillowImageEngine(),
            smartcrop_engine=mock_smartcrop,
        )
        kwargs.update(overrides)
        return Transformer(**kwargs)

    return _factory
