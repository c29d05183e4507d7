# src/deploy/stale_paths.py - v1
"""Bounded set of CDN paths changed during one deploy run."""

from __future__ import annotations

from collections.abc import Iterator

from sitesync.deploy.paths import invalidation_path
from sitesync.storage.edge_invalidator import INVALIDATE_ALL


class StalePathSet:
    """Ordered, append-only, bounded collection of invalidation paths.

    Paths are accepted while the count is still ``<= cap``, so the set holds
    at most ``cap + 1`` entries: enough to know the cap was exceeded without
    tracking every changed path. Duplicates are ignored.

    ``add`` has no await point, so on the event loop the cap check and the
    append happen atomically.
    """

    def __init__(self, cap: int) -> None:
        if cap < 0:
            raise ValueError("cap must be >= 0")
        self._cap = cap
        self._paths: list[str] = []
        self._seen: set[str] = set()

    @property
    def cap(self) -> int:
        return self._cap

    @property
    def overflowed(self) -> bool:
        """True once more distinct paths changed than the cap allows."""
        return len(self._paths) > self._cap

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def add(self, cache_key: str) -> bool:
        """Track the invalidation path of ``cache_key``.

        Returns:
            False if the path was dropped because the cap is already exceeded.
        """
        path = invalidation_path(cache_key)
        if path in self._seen:
            return True
        if self.overflowed:
            return False
        self._paths.append(path)
        self._seen.add(path)
        return True

    def invalidation_batch(self) -> list[str]:
        """Paths to send: none, the explicit list, or the wildcard."""
        if not self._paths:
            return []
        if self.overflowed:
            return [INVALIDATE_ALL]
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def __contains__(self, path: object) -> bool:
        return path in self._seen
