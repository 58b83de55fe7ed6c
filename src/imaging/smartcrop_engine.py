# src/imaging/smartcrop_engine.py — v1
"""Smartcrop engine backed by the smartcrop package.

Requires 'smartcrop' package: pip install smartcrop.
Analysis is CPU-bound and runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from imgresizer.core.errors import ImageDecodeError
from imgresizer.core.models import CropRegion
from imgresizer.imaging.base_engine import BaseSmartcropEngine

logger = logging.getLogger(__name__)


class SmartcropEngine(BaseSmartcropEngine):
    """Pick the most salient region with smartcrop.SmartCrop."""

    def __init__(self) -> None:
        try:
            import smartcrop
        except ImportError as e:
            raise ImportError(
                "smartcrop package required: pip install smartcrop"
            ) from e

        self._cropper = smartcrop.SmartCrop()

    async def crop(self, data: bytes, width: int, height: int) -> CropRegion:
        return await asyncio.to_thread(self._crop_sync, data, width, height)

    def _crop_sync(self, data: bytes, width: int, height: int) -> CropRegion:
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise ImageDecodeError(f"Cannot decode image: {e}") from e

        # Coordinates must match the auto-rotated image the transformer extracts from.
        image = ImageOps.exif_transpose(image)
        if image.mode != "RGB":
            image = image.convert("RGB")

        top = self._cropper.crop(image, width, height)["top_crop"]
        x = max(0, int(top["x"]))
        y = max(0, int(top["y"]))
        region = CropRegion(
            x=x,
            y=y,
            width=max(1, min(int(top["width"]), image.width - x)),
            height=max(1, min(int(top["height"]), image.height - y)),
        )
        logger.debug("Smartcrop %dx%d -> %s", width, height, region.model_dump())
        return region
