# src/sources/s3_adapter.py — v1
"""S3-compatible source adapter (SOURCE_ADAPTER=s3).

Supports AWS S3, MinIO, and other S3-compatible storage.
Requires 'boto3' package: pip install boto3.
"""

from __future__ import annotations

import logging

from imgresizer.core.models import AdapterKind
from imgresizer.sources.base_adapter import BaseImageAdapter

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3ImageAdapter(BaseImageAdapter):
    """Read images from an S3 bucket. Ids are object keys below prefix."""

    kind = AdapterKind.S3

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize S3 adapter.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix prepended to every image id (e.g. "originals/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
        """
        try:
            import boto3
        except ImportError as e:
            raise ImportError(
                "boto3 package required for S3 adapter: pip install boto3"
            ) from e

        kwargs: dict = {}
        if region:
            kwargs["region_name"] = region
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._s3 = boto3.client("s3", **kwargs)
        self._bucket = bucket
        self._prefix = prefix.rstrip("/") + "/" if prefix else ""

    def _full_key(self, image_id: str) -> str:
        """Build the full S3 key from an image id."""
        return f"{self._prefix}{image_id.lstrip('/')}"

    async def fetch(self, image_id: str) -> bytes | None:
        key = self._full_key(image_id)
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=key)
        except self._s3.exceptions.ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                logger.debug("S3 source missing: s3://%s/%s", self._bucket, key)
                return None
            raise
        body = response["Body"].read()
        logger.debug("S3 read: s3://%s/%s (%d bytes)", self._bucket, key, len(body))
        return body
