# src/core/errors.py — v1
"""Exception hierarchy.

Fetch misses are not exceptions: adapters and fetchers return None.
Everything below propagates to the caller of Transformer.transform.
"""

from __future__ import annotations


class ImgResizerError(Exception):
    """Base class for all imgresizer errors."""


class ImageProcessingError(ImgResizerError):
    """Pixel engine failure."""


class ImageDecodeError(ImageProcessingError):
    """Source bytes could not be decoded as an image."""


class UnsupportedFormatError(ImageProcessingError):
    """Source or target format is not one the engine can encode."""

    def __init__(self, fmt: str | None) -> None:
        self.format = fmt
        super().__init__(f"Unsupported image format: {fmt!r}")


class ImageEncodeError(ImageProcessingError):
    """Encoding to the target format failed."""


class InvalidImageIdError(ImgResizerError):
    """Image id resolves outside the adapter's origin."""


class FetchRetryExhausted(ImgResizerError):
    """All retries exhausted for a source fetch."""

    def __init__(self, image_id: str, error_type: str, attempts: int, last_error: Exception):
        self.image_id = image_id
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Fetch of '{image_id}' failed after {attempts} attempts ({error_type}): {last_error}"
        )
