# src/cache/sqlite_store.py - v2
"""SQLite-based deploy cache (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Faster than the JSON backend
for sites with tens of thousands of files.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from sitesync.cache.base_cache_store import BaseDeployCache
from sitesync.cache.models import DeployCacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS deploy_cache (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    fingerprint TEXT,
    deployed_at TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
);
"""


class SqliteDeployCache(BaseDeployCache):
    """SQLite-backed deploy cache."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str, namespace: str) -> DeployCacheEntry | None:
        """Retrieve the entry for a key."""
        cursor = self._conn.execute(
            "SELECT fingerprint, deployed_at FROM deploy_cache"
            " WHERE namespace = ? AND key = ?",
            (namespace, key),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return DeployCacheEntry(
            key=key,
            namespace=namespace,
            fingerprint=row[0],
            deployed_at=datetime.fromisoformat(row[1]),
        )

    async def mark_cached(
        self, key: str, namespace: str, fingerprint: str | None = None
    ) -> None:
        """Store an entry (upsert)."""
        self._conn.execute(
            """INSERT OR REPLACE INTO deploy_cache
               (namespace, key, fingerprint, deployed_at)
               VALUES (?, ?, ?, ?)""",
            (namespace, key, fingerprint, datetime.now(timezone.utc).isoformat()),
        )
        self._conn.commit()

    async def list_keys(self, namespace: str) -> list[str]:
        """List all keys cached in a namespace."""
        cursor = self._conn.execute(
            "SELECT key FROM deploy_cache WHERE namespace = ? ORDER BY key",
            (namespace,),
        )
        return [row[0] for row in cursor.fetchall()]

    async def clear(self, namespace: str) -> int:
        """Remove every entry of a namespace."""
        cursor = self._conn.execute(
            "DELETE FROM deploy_cache WHERE namespace = ?", (namespace,)
        )
        self._conn.commit()
        logger.info(
            "Cleared %d cache entries from namespace %s", cursor.rowcount, namespace
        )
        return cursor.rowcount

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
