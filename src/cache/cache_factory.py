# src/cache/cache_factory.py - v3
"""Factory for deploy cache instantiation."""

from __future__ import annotations

from sitesync.cache.base_cache_store import BaseDeployCache
from sitesync.config.settings import Settings

_DEFAULT_ROOT = "~/.sitesync/cache"


def create_deploy_cache(settings: Settings | None = None) -> BaseDeployCache:
    """Instantiate the configured deploy cache backend.

    Args:
        settings: Application settings. Defaults to the JSON backend.

    Returns:
        Configured BaseDeployCache implementation.
    """
    backend = "json" if settings is None else settings.cache_backend
    cache_root = _DEFAULT_ROOT if settings is None else str(settings.cache_root)

    if backend == "json":
        from sitesync.cache.json_store import JsonDeployCache
        return JsonDeployCache(cache_root=cache_root)

    if backend == "sqlite":
        from sitesync.cache.sqlite_store import SqliteDeployCache
        return SqliteDeployCache(db_path=f"{cache_root}/deploy_cache.db")

    if backend == "redis":
        from sitesync.cache.redis_store import RedisDeployCache
        if settings is None or not settings.cache_redis_url:
            raise ValueError(
                "SITESYNC_CACHE_REDIS_URL must be set when SITESYNC_CACHE_BACKEND=redis"
            )
        return RedisDeployCache(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
