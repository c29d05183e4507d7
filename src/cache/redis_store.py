# src/cache/redis_store.py - v2
"""Redis-based deploy cache (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Lets several CI runners share one deploy ledger (still one run at a time
per namespace). Each namespace is a single Redis hash: field = key.
"""

from __future__ import annotations

import json
import logging

from sitesync.cache.base_cache_store import BaseDeployCache
from sitesync.cache.models import DeployCacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "sitesync:deploy:"


class RedisDeployCache(BaseDeployCache):
    """Redis-backed deploy cache."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str, namespace: str) -> DeployCacheEntry | None:
        """Retrieve the entry for a key."""
        data = self._client.hget(self._hash_name(namespace), key)
        if data is None:
            return None
        try:
            return DeployCacheEntry(**json.loads(data))
        except Exception as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def mark_cached(
        self, key: str, namespace: str, fingerprint: str | None = None
    ) -> None:
        """Store an entry (HSET overwrites)."""
        entry = DeployCacheEntry(key=key, namespace=namespace, fingerprint=fingerprint)
        self._client.hset(self._hash_name(namespace), key, entry.model_dump_json())

    async def list_keys(self, namespace: str) -> list[str]:
        """List all keys cached in a namespace."""
        return sorted(self._client.hkeys(self._hash_name(namespace)))

    async def clear(self, namespace: str) -> int:
        """Drop the namespace hash."""
        name = self._hash_name(namespace)
        removed = self._client.hlen(name)
        self._client.delete(name)
        logger.info("Cleared %d cache entries from namespace %s", removed, namespace)
        return removed

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()

    @staticmethod
    def _hash_name(namespace: str) -> str:
        return f"{_KEY_PREFIX}{namespace}"
