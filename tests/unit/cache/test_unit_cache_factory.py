# tests/unit/cache/test_unit_cache_factory.py - v1
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from sitesync.cache.cache_factory import create_deploy_cache
from sitesync.cache.json_store import JsonDeployCache
from sitesync.cache.sqlite_store import SqliteDeployCache
from sitesync.config.settings import Settings


class TestCacheFactory:
    def test_json_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="json", cache_root=tmp_path)
        assert isinstance(create_deploy_cache(s), JsonDeployCache)

    def test_sqlite_backend(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)
        cache = create_deploy_cache(s)
        try:
            assert isinstance(cache, SqliteDeployCache)
            assert (tmp_path / "deploy_cache.db").exists()
        finally:
            cache.close()

    def test_redis_requires_url(self, tmp_path):
        s = Settings(_env_file=None, cache_backend="redis", cache_root=tmp_path)
        with pytest.raises(ValueError, match="SITESYNC_CACHE_REDIS_URL"):
            create_deploy_cache(s)

    def test_redis_backend(self, tmp_path):
        s = Settings(
            _env_file=None,
            cache_backend="redis",
            cache_redis_url="redis://localhost:6379/1",
        )
        with patch("sitesync.cache.redis_store.RedisDeployCache.__init__", return_value=None) as init:
            create_deploy_cache(s)
        init.assert_called_once_with(redis_url="redis://localhost:6379/1")

    def test_default_is_json(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert isinstance(create_deploy_cache(), JsonDeployCache)
