# tests/unit/cache/test_unit_redis_store.py - v1
"""Tests for cache/redis_store.py with a mocked Redis client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from sitesync.cache.redis_store import RedisDeployCache


def _fake_redis() -> MagicMock:
    hashes: dict[str, dict[str, str]] = {}

    mock_redis = MagicMock()
    mock_redis.hget = lambda name, key: hashes.get(name, {}).get(key)
    mock_redis.hset = lambda name, key, value: hashes.setdefault(name, {}).__setitem__(key, value)
    mock_redis.hkeys = lambda name: list(hashes.get(name, {}))
    mock_redis.hlen = lambda name: len(hashes.get(name, {}))
    mock_redis.delete = lambda name: hashes.pop(name, None)
    mock_redis.hashes = hashes
    return mock_redis


@pytest.fixture
def cache() -> RedisDeployCache:
    with patch("sitesync.cache.redis_store.RedisDeployCache.__init__", return_value=None):
        store = RedisDeployCache(redis_url="redis://localhost:6379/0")
    store._client = _fake_redis()
    return store


class TestRedisDeployCache:
    def test_import_error_without_redis(self):
        """Clear ImportError when redis is not available."""
        import sys
        redis_mod = sys.modules.get("redis")
        sys.modules["redis"] = None  # type: ignore[assignment]
        try:
            with pytest.raises(ImportError, match="redis"):
                RedisDeployCache(redis_url="redis://localhost")
        finally:
            if redis_mod is not None:
                sys.modules["redis"] = redis_mod
            else:
                sys.modules.pop("redis", None)

    @pytest.mark.asyncio
    async def test_mark_and_get(self, cache):
        await cache.mark_cached("/old/index.html", "prod", "f1")
        entry = await cache.get("/old/index.html", "prod")
        assert entry.fingerprint == "f1"
        assert "sitesync:deploy:prod" in cache._client.hashes

    @pytest.mark.asyncio
    async def test_fingerprint_qualified_lookup(self, cache):
        await cache.mark_cached("/r", "prod", "f1")
        assert not await cache.is_cached("/r", "prod", "f2")

    @pytest.mark.asyncio
    async def test_list_and_clear(self, cache):
        await cache.mark_cached("/b", "prod")
        await cache.mark_cached("/a", "prod")
        await cache.mark_cached("/a", "staging")

        assert await cache.list_keys("prod") == ["/a", "/b"]
        assert await cache.clear("prod") == 2
        assert await cache.list_keys("prod") == []
        assert await cache.list_keys("staging") == ["/a"]

    @pytest.mark.asyncio
    async def test_bad_payload_is_a_miss(self, cache):
        cache._client.hashes["sitesync:deploy:prod"] = {"/a": "garbage"}
        assert await cache.get("/a", "prod") is None

    def test_close(self, cache):
        cache.close()
        assert cache._client.close.called
