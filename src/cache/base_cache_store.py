# src/cache/base_cache_store.py - v2
"""Abstract deploy cache interface.

Records which keys have already been deployed, per namespace, so a re-run
only touches what never got confirmed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sitesync.cache.models import DeployCacheEntry


class BaseDeployCache(ABC):
    """Unified interface for deploy cache backends."""

    @abstractmethod
    async def get(self, key: str, namespace: str) -> DeployCacheEntry | None:
        """Return the entry for ``key`` in ``namespace``, if any."""

    @abstractmethod
    async def mark_cached(
        self, key: str, namespace: str, fingerprint: str | None = None
    ) -> None:
        """Record ``key`` as deployed (upsert, replaces any fingerprint)."""

    @abstractmethod
    async def list_keys(self, namespace: str) -> list[str]:
        """List all cached keys in a namespace, sorted."""

    @abstractmethod
    async def clear(self, namespace: str) -> int:
        """Drop every entry of a namespace. Returns the number removed."""

    async def is_cached(
        self, key: str, namespace: str, fingerprint: str | None = None
    ) -> bool:
        """True if ``key`` was deployed in ``namespace``.

        With a fingerprint, the stored fingerprint must match as well.
        """
        entry = await self.get(key, namespace)
        return entry is not None and entry.matches(fingerprint)

    def close(self) -> None:
        """Release backend resources. No-op by default."""
