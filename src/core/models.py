# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ImageFormat = Literal["jpeg", "png", "webp", "gif", "tiff"]

Gravity = Literal[
    "center",
    "north",
    "northeast",
    "east",
    "southeast",
    "south",
    "southwest",
    "west",
    "northwest",
]


class AdapterKind(str, Enum):
    """Origin a source image is fetched from. Part of every cache key."""

    LOCAL = "local"
    S3 = "s3"
    HTTP = "http"


# === REQUEST ===


class TransformOptions(BaseModel):
    """Transform request for a single image.

    Frozen: the format resolved from the source is carried in a copy
    (see Transformer), never written back into the caller's record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    format: ImageFormat | None = None
    quality: int | None = Field(default=None, ge=1, le=100)
    progressive: bool | None = None
    blur: bool = False
    blur_sigma: float = Field(default=1.0, ge=0.3, le=1000.0)
    crop: bool = False
    smartcrop: bool = False
    gravity: Gravity = "center"
    overlay: bool = False
    overlay_image: str | None = None

    @model_validator(mode="after")
    def validate_crop_width(self) -> TransformOptions:
        """Crop and smartcrop derive their target from width."""
        if (self.crop or self.smartcrop) and self.width is None:
            raise ValueError("width is required when crop or smartcrop is set")
        return self


# === RESULTS ===


class TransformResult(BaseModel):
    """Encoded output of a transform. image is None for a source fetch miss."""

    model_config = ConfigDict(frozen=True)

    format: ImageFormat | None = None
    image: bytes | None = None


class CropRegion(BaseModel):
    """Salient region picked by the smartcrop engine, in source pixels."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
