# src/cache/sqlite_store.py — v1
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency. Image bytes are stored as a
BLOB next to the format, so no base64 round trip is needed here.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from imgresizer.cache.base_cache_store import BaseCacheStore
from imgresizer.core.models import TransformResult

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS transform_results (
    key TEXT PRIMARY KEY,
    format TEXT,
    image BLOB,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> TransformResult | None:
        cursor = self._conn.execute(
            "SELECT format, image FROM transform_results WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        image = bytes(row[1]) if row[1] is not None else None
        return TransformResult(format=row[0], image=image)

    async def set(self, key: str, result: TransformResult) -> None:
        """Store a result (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO transform_results (key, format, image)
               VALUES (?, ?, ?)""",
            (key, result.format, result.image),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM transform_results WHERE key = ?", (key,))
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
