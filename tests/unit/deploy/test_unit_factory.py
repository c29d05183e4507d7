# tests/unit/deploy/test_unit_factory.py - v1
"""Tests for deploy/factory.py: wiring from Settings."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from sitesync.cache.json_store import JsonDeployCache
from sitesync.cache.sqlite_store import SqliteDeployCache
from sitesync.config.settings import ConfigurationError, Settings
from sitesync.deploy.factory import build_orchestrator, deploy


def _settings(tmp_path, **overrides) -> Settings:
    values = {
        "bucket": "www.example.com",
        "cache_root": tmp_path / "cache",
        "cdn_max_paths_to_invalidate": 10,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestBuildOrchestrator:
    def test_requires_bucket(self, tmp_path, s3_client):
        with pytest.raises(ConfigurationError, match="SITESYNC_BUCKET"):
            build_orchestrator(_settings(tmp_path, bucket=""), s3_client=s3_client)

    def test_uses_configured_cache(self, tmp_path, s3_client):
        orch = build_orchestrator(
            _settings(tmp_path, cache_backend="sqlite"), s3_client=s3_client
        )
        try:
            assert isinstance(orch.cache, SqliteDeployCache)
        finally:
            orch.cache.close()

    def test_namespace_from_settings(self, tmp_path, s3_client):
        orch = build_orchestrator(
            _settings(tmp_path, deploy_namespace="prod"), s3_client=s3_client
        )
        assert orch.namespace == "prod"

    def test_no_cloudfront_client_without_distribution(self, tmp_path, s3_client):
        with patch("sitesync.deploy.factory.create_cloudfront_client") as create_cf:
            build_orchestrator(_settings(tmp_path), s3_client=s3_client)
        create_cf.assert_not_called()

    def test_clients_created_from_settings(self, tmp_path):
        settings = _settings(tmp_path, cdn_distribution_id="E1ABCDEF2GHIJK")
        decrypt = MagicMock(side_effect=str.upper)
        with patch("sitesync.deploy.factory.create_s3_client") as create_s3, \
                patch("sitesync.deploy.factory.create_cloudfront_client") as create_cf:
            build_orchestrator(settings, decrypt=decrypt)
        create_s3.assert_called_once_with(settings, decrypt)
        create_cf.assert_called_once_with(settings, decrypt)

    def test_redirects_loaded_from_file(self, tmp_path, s3_client, site_dir):
        redirects = tmp_path / "redirects.json"
        redirects.write_text(
            json.dumps([{"url": "/old/", "redirect_to": "/new/"}]), encoding="utf-8"
        )
        settings = _settings(tmp_path, redirects_file=redirects)
        orch = build_orchestrator(settings, s3_client=s3_client)
        assert orch._redirects[0].url == "/old/"


class TestDeploy:
    @pytest.mark.asyncio
    async def test_missing_root_touches_nothing(self, tmp_path):
        session = MagicMock()
        session.get_credentials.return_value = None
        settings = _settings(tmp_path, cdn_distribution_id="E1ABCDEF2GHIJK")

        with patch("sitesync.storage.credentials.boto3.Session", return_value=session) as session_cls:
            await deploy(tmp_path / "does-not-exist", settings)

        session_cls.assert_not_called()
        assert not (tmp_path / "cache").exists()

    @pytest.mark.asyncio
    async def test_full_run(self, tmp_path, site_dir, s3_client, cloudfront_client):
        settings = _settings(
            tmp_path,
            cdn_distribution_id="E1ABCDEF2GHIJK",
            cache_control_header="max-age=300",
            remote_path_prefix="/www/",
        )
        await deploy(
            site_dir, settings, s3_client=s3_client, cloudfront_client=cloudfront_client
        )

        assert sorted(s3_client.objects) == [
            "www/blog/index.html", "www/css/site.css", "www/img/logo.png", "www/index.html",
        ]
        assert s3_client.objects["www/index.html"]["CacheControl"] == "max-age=300"
        cloudfront_client.create_invalidation.assert_called_once()

    @pytest.mark.asyncio
    async def test_injected_cache_left_open(self, tmp_path, site_dir, s3_client):
        cache = JsonDeployCache(tmp_path / "injected")
        cache.close = MagicMock()
        await deploy(site_dir, _settings(tmp_path), cache=cache, s3_client=s3_client)
        cache.close.assert_not_called()
        assert len(await cache.list_keys("sitesync/default")) == 4
