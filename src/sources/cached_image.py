# src/sources/cached_image.py — v1
"""Source fetcher: adapter reads behind a bounded byte cache and retries.

The transformer holds two of these, one for originals and one for overlay
images, so each can be sized independently.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from imgresizer.core.errors import FetchRetryExhausted
from imgresizer.sources.base_adapter import BaseImageAdapter
from imgresizer.sources.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class CachedImage:
    """Fetch image bytes through an adapter, caching hits in an LRU."""

    def __init__(
        self,
        max_entries: int = 100,
        retry_config: RetryConfig | None = None,
        name: str = "original",
    ) -> None:
        self._entries: OrderedDict[str, bytes] = OrderedDict()
        self._max_entries = max_entries
        self._retry_config = retry_config or RetryConfig()
        self.name = name

    async def fetch(
        self, image_id: str | None, adapter: BaseImageAdapter
    ) -> bytes | None:
        """Return image bytes or None on a miss.

        Misses (origin has no image, or retries exhausted) are not cached.

        Raises:
            InvalidImageIdError: The id is rejected by the adapter.
        """
        if not image_id:
            return None

        key = f"{adapter.kind.value}:{image_id}"
        cached = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            logger.debug("Serving %s image %s from memory", self.name, image_id)
            return cached

        try:
            data = await with_retry(
                adapter.fetch, image_id, image_id=image_id, config=self._retry_config
            )
        except FetchRetryExhausted as e:
            logger.warning("Could not fetch %s image %s: %s", self.name, image_id, e)
            return None

        if not data:
            logger.info("No %s image found for %s", self.name, image_id)
            return None

        self._remember(key, data)
        return data

    def _remember(self, key: str, data: bytes) -> None:
        if self._max_entries <= 0:
            return
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = data

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
