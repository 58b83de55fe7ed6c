# src/sources/adapter_factory.py — v1
"""Factory: instantiate the source adapter from configuration."""

from __future__ import annotations

from imgresizer.config.settings import Settings
from imgresizer.sources.base_adapter import BaseImageAdapter
from imgresizer.sources.local_adapter import LocalImageAdapter


def create_adapter(settings: Settings) -> BaseImageAdapter:
    """Create the source adapter selected by SOURCE_ADAPTER.

    Raises:
        ValueError: If the adapter type is not supported or misconfigured.
    """
    if settings.source_adapter == "local":
        return LocalImageAdapter(root=settings.source_local_root)

    if settings.source_adapter == "s3":
        from imgresizer.sources.s3_adapter import S3ImageAdapter
        if not settings.source_s3_bucket:
            raise ValueError(
                "SOURCE_S3_BUCKET must be set when SOURCE_ADAPTER=s3"
            )
        return S3ImageAdapter(
            bucket=settings.source_s3_bucket,
            prefix=settings.source_s3_prefix,
            region=settings.source_s3_region or None,
            endpoint_url=settings.source_s3_endpoint_url or None,
        )

    if settings.source_adapter == "http":
        from imgresizer.sources.http_adapter import HttpImageAdapter
        if not settings.source_http_base_url:
            raise ValueError(
                "SOURCE_HTTP_BASE_URL must be set when SOURCE_ADAPTER=http"
            )
        return HttpImageAdapter(
            base_url=settings.source_http_base_url,
            timeout_s=settings.source_http_timeout_s,
        )

    raise ValueError(f"Unsupported source adapter: {settings.source_adapter!r}")
