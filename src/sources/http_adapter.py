# src/sources/http_adapter.py — v1
"""HTTP origin source adapter (SOURCE_ADAPTER=http)."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from imgresizer.core.models import AdapterKind
from imgresizer.sources.base_adapter import BaseImageAdapter

logger = logging.getLogger(__name__)


class HttpImageAdapter(BaseImageAdapter):
    """GET images from ``{base_url}/{image_id}``.

    404 is a miss; any other error status is raised so the fetcher can
    decide whether to retry.
    """

    kind = AdapterKind.HTTP

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout_s, follow_redirects=True
        )

    def url_for(self, image_id: str) -> str:
        return f"{self._base_url}/{quote(image_id.lstrip('/'))}"

    async def fetch(self, image_id: str) -> bytes | None:
        url = self.url_for(image_id)
        response = await self._client.get(url)
        if response.status_code == 404:
            logger.debug("HTTP source missing: %s", url)
            return None
        response.raise_for_status()
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()
