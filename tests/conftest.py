# tests/conftest.py - v2
"""Shared test fixtures for unit and integration tests.

Provides mocked boto3 clients, a sample site tree and a temp deploy cache.
No network access: every AWS call goes to a MagicMock.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from sitesync.cache.json_store import JsonDeployCache
from sitesync.deploy.orchestrator import DeploymentOrchestrator
from sitesync.storage.edge_invalidator import CloudFrontInvalidator
from sitesync.storage.object_store import S3ObjectStore


def ok_response(status: int = 200) -> dict[str, Any]:
    return {"ResponseMetadata": {"HTTPStatusCode": status}}


# === FIXTURES: AWS clients ===


@pytest.fixture
def s3_client() -> MagicMock:
    """Mock S3 client: stores put kwargs by key, answers HTTP 200."""
    client = MagicMock()
    objects: dict[str, dict[str, Any]] = {}

    def put_object(**kwargs):
        objects[kwargs["Key"]] = kwargs
        return ok_response()

    client.objects = objects
    client.put_object = MagicMock(side_effect=put_object)
    return client


@pytest.fixture
def cloudfront_client() -> MagicMock:
    """Mock CloudFront client returning a fixed invalidation id."""
    client = MagicMock()
    client.create_invalidation = MagicMock(
        return_value={"Invalidation": {"Id": "I2J3K4L5", "Status": "InProgress"}}
    )
    return client


# === FIXTURES: cache and site ===


@pytest.fixture
def deploy_cache(tmp_path: Path) -> JsonDeployCache:
    """Empty JSON deploy cache in a temp directory."""
    return JsonDeployCache(cache_root=tmp_path / "cache")


def write_site(root: Path, files: dict[str, bytes | str]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
    return root


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small generated site: 4 files, one nested index document."""
    return write_site(
        tmp_path / "site",
        {
            "index.html": "<h1>Home</h1>",
            "blog/index.html": "<h1>Blog</h1>",
            "css/site.css": "body { margin: 0 }",
            "img/logo.png": b"\x89PNG fake",
        },
    )


@pytest.fixture
def make_orchestrator(deploy_cache, s3_client, cloudfront_client):
    """Build an orchestrator on the mocked clients; kwargs override defaults."""

    def _make(
        *,
        cache=None,
        cdn: bool = True,
        bucket: str = "www.example.com",
        cache_control: str | None = None,
        **kwargs,
    ) -> DeploymentOrchestrator:
        store = S3ObjectStore(s3_client, bucket, cache_control=cache_control)
        invalidator = (
            CloudFrontInvalidator(cloudfront_client, "E1ABCDEF2GHIJK") if cdn else None
        )
        kwargs.setdefault("max_paths_to_invalidate", 10)
        return DeploymentOrchestrator(
            cache=cache if cache is not None else deploy_cache,
            object_store=store,
            invalidator=invalidator,
            **kwargs,
        )

    return _make
