# src/core/geometry.py — v1
"""Crop target geometry.

Clamps the long edge of a requested crop to the configured working size
while keeping the requested aspect ratio. Shared by the crop and smartcrop
branches of the transformer.
"""

from __future__ import annotations

import math

DEFAULT_CROP_MAX_SIZE = 2000


def _round_half_up(value: float) -> int:
    """Round .5 away from zero (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def crop_dimensions(
    max_size: int, width: int, height: int | None = None
) -> tuple[int, int]:
    """Compute the crop target for a requested width/height.

    Args:
        max_size: Longest edge allowed for the crop target.
        width: Requested width.
        height: Requested height. Defaults to width (square target).

    Returns:
        (width, height) unchanged when both fit under max_size, otherwise
        the long edge clamped to max_size with the ratio preserved.
    """
    height = height or width

    if width <= max_size and height <= max_size:
        return width, height

    aspect_ratio = width / height

    if width > height:
        return max_size, _round_half_up(max_size / aspect_ratio)

    return _round_half_up(max_size * aspect_ratio), max_size
