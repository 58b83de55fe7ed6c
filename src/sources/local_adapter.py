# src/sources/local_adapter.py — v1
"""Local filesystem source adapter (default SOURCE_ADAPTER=local)."""

from __future__ import annotations

import logging
from pathlib import Path

from imgresizer.core.errors import InvalidImageIdError
from imgresizer.core.models import AdapterKind
from imgresizer.sources.base_adapter import BaseImageAdapter

logger = logging.getLogger(__name__)


class LocalImageAdapter(BaseImageAdapter):
    """Read images from files under a root directory. Ids are relative paths."""

    kind = AdapterKind.LOCAL

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser().resolve()

    def _resolve(self, image_id: str) -> Path:
        """Resolve an id to a path, rejecting ids that escape the root."""
        path = (self._root / image_id).resolve()
        if not path.is_relative_to(self._root):
            raise InvalidImageIdError(f"Image id escapes source root: {image_id!r}")
        return path

    async def fetch(self, image_id: str) -> bytes | None:
        path = self._resolve(image_id)
        if not path.is_file():
            logger.debug("Local source missing: %s", path)
            return None
        return path.read_bytes()
