# src/transform/transformer.py — v1
"""Transform orchestrator: cache lookup, source fetch, pipeline, encode, store.

One call runs a fixed sequence:
  1. Build the cache key from the requested options and adapter kind
  2. Return the cached result on a hit
  3. Fetch the original (a miss returns an empty result, not cached)
  4. Auto-rotate, then blur if requested
  5. Resolve the output format from the source when none was requested
  6. Smartcrop, crop or fit-inside resize (first match wins)
  7. Composite the overlay if requested and available
  8. Encode, store under the key from step 1, return

The key is built from the options as requested. A request without a format
is therefore cached under "no format", and the stored result carries the
format resolved from the source.

Decode, pixel operations and encode run in worker threads so concurrent
transforms keep the event loop free.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.cache.fingerprint import build_cache_key
from imgresizer.core.geometry import DEFAULT_CROP_MAX_SIZE, crop_dimensions
from imgresizer.core.models import TransformOptions, TransformResult
from imgresizer.imaging.base_engine import BaseImageEngine, BaseSmartcropEngine
from imgresizer.logging.context import set_request_context, set_stage
from imgresizer.sources.base_adapter import BaseImageAdapter
from imgresizer.sources.cached_image import CachedImage

logger = logging.getLogger(__name__)

DEFAULT_OVERLAY_SIZE = 200
DEFAULT_OVERLAY_OFFSET = 35
DEFAULT_OVERLAY_BACKGROUND = (0xFF, 0x66, 0x00)


async def _offload(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a CPU-bound engine call in a worker thread."""
    return await asyncio.to_thread(fn, *args, **kwargs)


class Transformer:
    """Produces and memoizes transformed images.

    Collaborators are injected once and shared by all calls. The only state
    owned here is configuration and, with dedupe_inflight, the map of
    transforms currently running.
    """

    def __init__(
        self,
        cache: BaseCacheStore,
        original_fetcher: CachedImage,
        overlay_fetcher: CachedImage,
        engine: BaseImageEngine,
        smartcrop_engine: BaseSmartcropEngine | None = None,
        crop_max_size: int = DEFAULT_CROP_MAX_SIZE,
        overlay_size: int = DEFAULT_OVERLAY_SIZE,
        overlay_offset: int = DEFAULT_OVERLAY_OFFSET,
        overlay_background: tuple[int, int, int] = DEFAULT_OVERLAY_BACKGROUND,
        dedupe_inflight: bool = False,
    ) -> None:
        self._cache = cache
        self._original = original_fetcher
        self._overlay = overlay_fetcher
        self._engine = engine
        self._smartcrop = smartcrop_engine
        self.crop_max_size = crop_max_size
        self._overlay_size = overlay_size
        self._overlay_offset = overlay_offset
        self._overlay_background = overlay_background
        self._dedupe_inflight = dedupe_inflight
        self._inflight: dict[str, asyncio.Task[TransformResult]] = {}

    async def transform(
        self,
        image_id: str,
        options: TransformOptions,
        adapter: BaseImageAdapter,
    ) -> TransformResult:
        """Return the transformed image for (image_id, options, adapter).

        Raises:
            ImageProcessingError: Decode, geometry or encode failure.
            InvalidImageIdError: The adapter rejected the id.
        """
        cache_key = build_cache_key(image_id, options, adapter.kind)
        set_request_context(image_id, cache_key)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.info("Serving %s from cache", image_id)
            return cached

        if not self._dedupe_inflight:
            return await self._transform_and_store(cache_key, image_id, options, adapter)

        task = self._inflight.get(cache_key)
        if task is None:
            task = asyncio.create_task(
                self._transform_and_store(cache_key, image_id, options, adapter)
            )
            self._inflight[cache_key] = task
            task.add_done_callback(lambda t: self._forget_inflight(cache_key, t))
        else:
            logger.debug("Joining in-flight transform %s", cache_key)
        # Shielded so one cancelled caller does not cancel the shared work.
        return await asyncio.shield(task)

    def _forget_inflight(self, cache_key: str, task: asyncio.Task[TransformResult]) -> None:
        self._inflight.pop(cache_key, None)
        # Mark a failure retrieved even when every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def _transform_and_store(
        self,
        cache_key: str,
        image_id: str,
        options: TransformOptions,
        adapter: BaseImageAdapter,
    ) -> TransformResult:
        logger.info(
            "Resizing %s with options: %s",
            image_id, options.model_dump_json(exclude_defaults=True),
        )

        set_stage("fetch")
        original = await self._original.fetch(image_id, adapter)
        if original is None:
            set_stage(None)
            return TransformResult(format=options.format, image=None)

        try:
            result = await self._run_pipeline(original, options, adapter)
        finally:
            set_stage(None)

        logger.info("Caching %s", cache_key)
        await self._cache.set(cache_key, result)
        return result

    async def _run_pipeline(
        self,
        original: bytes,
        options: TransformOptions,
        adapter: BaseImageAdapter,
    ) -> TransformResult:
        engine = self._engine

        set_stage("decode")
        source = await _offload(engine.load, original)
        image = await _offload(engine.auto_rotate, source)

        if options.blur:
            set_stage("blur")
            logger.debug("Applying blur: sigma=%s", options.blur_sigma)
            image = await _offload(engine.blur, image, options.blur_sigma)

        resolved = options
        if resolved.format is None:
            resolved = options.model_copy(update={"format": engine.native_format(source)})

        set_stage("geometry")
        image = await self._apply_geometry(image, original, resolved)

        if resolved.overlay:
            set_stage("overlay")
            image = await self._apply_overlay(image, resolved, adapter)

        set_stage("encode")
        data = await _offload(
            engine.encode,
            image,
            resolved.format,
            quality=resolved.quality,
            progressive=resolved.progressive,
        )
        logger.info("Resizing done (%d bytes, %s)", len(data), resolved.format)
        return TransformResult(format=resolved.format, image=data)

    async def _apply_geometry(
        self, image: Any, original: bytes, options: TransformOptions
    ) -> Any:
        if options.smartcrop:
            if self._smartcrop is None:
                raise RuntimeError("smartcrop requested but no smartcrop engine configured")
            crop_width, crop_height = crop_dimensions(
                self.crop_max_size, options.width, options.height
            )
            region = await self._smartcrop.crop(original, crop_width, crop_height)
            image = await _offload(self._engine.extract, image, region)
            # Square output from the crop width.
            return await _offload(self._engine.resize_cover, image, crop_width, crop_width)

        if options.crop:
            crop_width, crop_height = crop_dimensions(
                self.crop_max_size, options.width, options.height
            )
            return await _offload(
                self._engine.resize_cover,
                image, crop_width, crop_height, gravity=options.gravity,
            )

        return await _offload(
            self._engine.resize_inside, image, options.width, options.height
        )

    async def _apply_overlay(
        self, image: Any, options: TransformOptions, adapter: BaseImageAdapter
    ) -> Any:
        overlay_bytes = await self._overlay.fetch(options.overlay_image, adapter)
        if overlay_bytes is None:
            logger.debug("Overlay %r unavailable, skipping", options.overlay_image)
            return image

        logger.debug("Overlay image retrieved")
        return await _offload(self._composite_overlay, image, overlay_bytes)

    def _composite_overlay(self, image: Any, overlay_bytes: bytes) -> Any:
        engine = self._engine
        size = self._overlay_size
        overlay = engine.contain(engine.load(overlay_bytes), size, size)
        overlay = engine.flatten(overlay, self._overlay_background)
        return engine.composite(image, overlay, self._overlay_offset, self._overlay_offset)
