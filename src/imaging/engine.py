# src/imaging/engine.py — v1
"""Pillow implementation of the pixel engine."""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

from imgresizer.core.errors import (
    ImageDecodeError,
    ImageEncodeError,
    ImageProcessingError,
    UnsupportedFormatError,
)
from imgresizer.core.models import CropRegion, Gravity, ImageFormat
from imgresizer.imaging.base_engine import BaseImageEngine

logger = logging.getLogger(__name__)

# Pillow format name -> ImageFormat. MPO is what Pillow reports for
# multi-picture JPEGs written by many cameras.
_NATIVE_FORMATS: dict[str, ImageFormat] = {
    "JPEG": "jpeg",
    "MPO": "jpeg",
    "PNG": "png",
    "WEBP": "webp",
    "GIF": "gif",
    "TIFF": "tiff",
}

_PIL_FORMATS: dict[str, str] = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "tiff": "TIFF",
}

# Modes each encoder writes as-is. Anything else is converted to RGB or RGBA.
# JPEG is handled separately since it keeps CMYK.
_WRITABLE_MODES: dict[str, frozenset[str]] = {
    "png": frozenset({"1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"}),
    "gif": frozenset({"1", "L", "P", "RGB", "RGBA", "I"}),
    "webp": frozenset({"RGB", "RGBA"}),
}

_CENTERING: dict[str, tuple[float, float]] = {
    "center": (0.5, 0.5),
    "north": (0.5, 0.0),
    "northeast": (1.0, 0.0),
    "east": (1.0, 0.5),
    "southeast": (1.0, 1.0),
    "south": (0.5, 1.0),
    "southwest": (0.0, 1.0),
    "west": (0.0, 0.5),
    "northwest": (0.0, 0.0),
}

_RESAMPLE = Image.Resampling.LANCZOS


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )


def _to_rgb_or_rgba(image: Image.Image) -> Image.Image:
    """Normalize palette/bilevel/16-bit modes for filtering and compositing."""
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


class PillowImageEngine(BaseImageEngine):
    """Pixel engine backed by Pillow. Handles are PIL images."""

    def load(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageDecodeError(f"Cannot decode image: {e}") from e
        return image

    def native_format(self, image: Image.Image) -> ImageFormat:
        fmt = _NATIVE_FORMATS.get(image.format or "")
        if fmt is None:
            raise UnsupportedFormatError(image.format)
        return fmt

    def auto_rotate(self, image: Image.Image) -> Image.Image:
        return ImageOps.exif_transpose(image)

    def blur(self, image: Image.Image, sigma: float) -> Image.Image:
        return _to_rgb_or_rgba(image).filter(ImageFilter.GaussianBlur(radius=sigma))

    def extract(self, image: Image.Image, region: CropRegion) -> Image.Image:
        right = region.x + region.width
        bottom = region.y + region.height
        if right > image.width or bottom > image.height:
            raise ImageProcessingError(
                f"Extract area {region.model_dump()} outside image {image.size}"
            )
        return image.crop((region.x, region.y, right, bottom))

    def resize_inside(
        self, image: Image.Image, width: int | None, height: int | None
    ) -> Image.Image:
        scales = []
        if width:
            scales.append(width / image.width)
        if height:
            scales.append(height / image.height)
        if not scales:
            return image

        scale = min(scales)
        if scale >= 1:
            return image

        size = (
            max(1, round(image.width * scale)),
            max(1, round(image.height * scale)),
        )
        return image.resize(size, _RESAMPLE)

    def resize_cover(
        self, image: Image.Image, width: int, height: int, gravity: Gravity = "center"
    ) -> Image.Image:
        return ImageOps.fit(
            image, (width, height), method=_RESAMPLE, centering=_CENTERING[gravity]
        )

    def contain(self, image: Image.Image, width: int, height: int) -> Image.Image:
        fitted = ImageOps.contain(image.convert("RGBA"), (width, height), method=_RESAMPLE)
        canvas = Image.new("RGBA", (width, height), (255, 255, 255, 0))
        left = (width - fitted.width) // 2
        top = (height - fitted.height) // 2
        canvas.paste(fitted, (left, top), fitted)
        return canvas

    def flatten(
        self, image: Image.Image, background: tuple[int, int, int]
    ) -> Image.Image:
        if not _has_alpha(image):
            return image.convert("RGB")
        rgba = image.convert("RGBA")
        flat = Image.new("RGB", rgba.size, background)
        flat.paste(rgba, mask=rgba.getchannel("A"))
        return flat

    def composite(
        self, base: Image.Image, overlay: Image.Image, left: int, top: int
    ) -> Image.Image:
        result = _to_rgb_or_rgba(base).copy()
        mask = None
        if _has_alpha(overlay):
            overlay = overlay.convert("RGBA")
            mask = overlay.getchannel("A")
        result.paste(overlay, (left, top), mask)
        return result

    def encode(
        self,
        image: Image.Image,
        fmt: ImageFormat,
        quality: int | None = None,
        progressive: bool | None = None,
    ) -> bytes:
        pil_format = _PIL_FORMATS.get(fmt)
        if pil_format is None:
            raise UnsupportedFormatError(fmt)

        params: dict[str, object] = {}
        if fmt == "jpeg":
            if image.mode not in ("RGB", "L", "CMYK"):
                image = image.convert("RGB")
            if quality is not None:
                params["quality"] = quality
            if progressive:
                params["progressive"] = True
        else:
            writable = _WRITABLE_MODES.get(fmt)
            if writable is not None and image.mode not in writable:
                image = image.convert("RGBA" if _has_alpha(image) else "RGB")
            if fmt == "webp" and quality is not None:
                params["quality"] = quality
            elif fmt == "png":
                params["optimize"] = True
            elif fmt == "gif" and progressive is not None:
                params["interlace"] = progressive

        buffer = BytesIO()
        try:
            image.save(buffer, format=pil_format, **params)
        except (OSError, ValueError, KeyError) as e:
            raise ImageEncodeError(f"Cannot encode {fmt}: {e}") from e
        return buffer.getvalue()
