# src/cache/json_store.py - v2
"""JSON file-based deploy cache (default CACHE_BACKEND=json).

One directory per namespace under CACHE_ROOT, one JSON file per key.
Keys and namespaces are hashed into file names so any path is safe.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from sitesync.cache.base_cache_store import BaseDeployCache
from sitesync.cache.fingerprint import key_digest
from sitesync.cache.models import DeployCacheEntry

logger = logging.getLogger(__name__)


class JsonDeployCache(BaseDeployCache):
    """File-based deploy cache using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str, namespace: str) -> DeployCacheEntry | None:
        """Retrieve the entry for a key, None if absent or unreadable."""
        path = self._entry_path(key, namespace)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return DeployCacheEntry(**data)
        except Exception as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def mark_cached(
        self, key: str, namespace: str, fingerprint: str | None = None
    ) -> None:
        """Write the entry file, replacing a previous one."""
        entry = DeployCacheEntry(key=key, namespace=namespace, fingerprint=fingerprint)
        path = self._entry_path(key, namespace)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(entry.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(path)

    async def list_keys(self, namespace: str) -> list[str]:
        """List all keys cached in a namespace."""
        keys: list[str] = []
        ns_dir = self._namespace_dir(namespace)
        if not ns_dir.is_dir():
            return keys

        for path in ns_dir.glob("*.json"):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                keys.append(DeployCacheEntry(**data).key)
            except Exception:
                continue

        return sorted(keys)

    async def clear(self, namespace: str) -> int:
        """Delete every entry file of a namespace."""
        ns_dir = self._namespace_dir(namespace)
        if not ns_dir.is_dir():
            return 0
        removed = 0
        for path in ns_dir.glob("*.json"):
            path.unlink()
            removed += 1
        logger.info("Cleared %d cache entries from namespace %s", removed, namespace)
        return removed

    def _namespace_dir(self, namespace: str) -> Path:
        return self._root / key_digest(namespace)

    def _entry_path(self, key: str, namespace: str) -> Path:
        """Return file path for a cache key."""
        return self._namespace_dir(namespace) / f"{key_digest(key)}.json"
