# src/api/facade.py — v1
"""Public API facade — wires collaborators once and exposes transform().

Usage:
    from imgresizer.api.facade import transform
    result = await transform("photos/cat.jpg", TransformOptions(width=300))

Or, to own the lifecycle explicitly:
    context = create_context(settings)
    result = await context.transformer.transform(image_id, options, context.adapter)
    await context.aclose()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.cache.cache_factory import create_cache_store
from imgresizer.config.settings import Settings
from imgresizer.core.models import TransformOptions, TransformResult
from imgresizer.imaging.engine import PillowImageEngine
from imgresizer.imaging.smartcrop_engine import SmartcropEngine
from imgresizer.logging.logger import setup_logging
from imgresizer.sources.adapter_factory import create_adapter
from imgresizer.sources.base_adapter import BaseImageAdapter
from imgresizer.sources.cached_image import CachedImage
from imgresizer.sources.retry import RetryConfig
from imgresizer.transform.transformer import Transformer

logger = logging.getLogger(__name__)


@dataclass
class TransformerContext:
    """Everything a request handler needs, built once at startup."""

    settings: Settings
    cache: BaseCacheStore
    adapter: BaseImageAdapter
    transformer: Transformer

    async def aclose(self) -> None:
        """Release adapter connections and cache handles."""
        await self.adapter.aclose()
        self.cache.close()


def build_transformer(
    settings: Settings | None = None,
    cache: BaseCacheStore | None = None,
) -> Transformer:
    """Create a Transformer with collaborators configured from settings.

    Args:
        settings: Application settings. Loaded from .env if None.
        cache: Result cache to use instead of the configured backend.

    Returns:
        Ready Transformer.
    """
    settings = settings or Settings()
    retry_config = RetryConfig(
        max_retries=settings.fetch_max_retries,
        base_delay_s=settings.fetch_retry_base_delay_s,
    )
    return Transformer(
        cache=cache if cache is not None else create_cache_store(settings),
        original_fetcher=CachedImage(
            max_entries=settings.source_cache_max_entries,
            retry_config=retry_config,
            name="original",
        ),
        overlay_fetcher=CachedImage(
            max_entries=settings.overlay_cache_max_entries,
            retry_config=retry_config,
            name="overlay",
        ),
        engine=PillowImageEngine(),
        smartcrop_engine=SmartcropEngine(),
        crop_max_size=settings.crop_max_size,
        overlay_size=settings.overlay_size,
        overlay_offset=settings.overlay_offset,
        overlay_background=settings.overlay_background_rgb,
        dedupe_inflight=settings.dedupe_inflight,
    )


def create_context(
    settings: Settings | None = None, configure_logging: bool = True
) -> TransformerContext:
    """Build cache, adapter and transformer from settings.

    With configure_logging, the imgresizer logger tree is set up from the
    LOG_* settings first.
    """
    settings = settings or Settings()
    if configure_logging:
        setup_logging(
            level=settings.log_level,
            log_format=settings.log_format,
            log_file=str(settings.log_file) if settings.log_file else None,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
        )
    cache = create_cache_store(settings)
    context = TransformerContext(
        settings=settings,
        cache=cache,
        adapter=create_adapter(settings),
        transformer=build_transformer(settings, cache=cache),
    )
    logger.info(
        "Transformer ready: cache=%s, source=%s, crop_max_size=%d",
        settings.cache_backend, settings.source_adapter, settings.crop_max_size,
    )
    return context


_default_context: TransformerContext | None = None


async def transform(
    image_id: str,
    options: TransformOptions,
    settings: Settings | None = None,
) -> TransformResult:
    """Transform through the process-wide context (created on first use).

    settings only applies to the first call; later calls reuse the context.
    The context is built synchronously between the check and the assignment,
    so concurrent first calls on one event loop share a single context.
    """
    global _default_context
    if _default_context is None:
        _default_context = create_context(settings)
    return await _default_context.transformer.transform(
        image_id, options, _default_context.adapter
    )


async def reset_default_context() -> None:
    """Close and drop the process-wide context."""
    global _default_context
    if _default_context is not None:
        await _default_context.aclose()
        _default_context = None
