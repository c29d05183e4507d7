# src/deploy/factory.py - v1
"""Factory: wire a DeploymentOrchestrator from Settings."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from sitesync.cache.base_cache_store import BaseDeployCache
from sitesync.cache.cache_factory import create_deploy_cache
from sitesync.config.settings import ConfigurationError, Settings
from sitesync.deploy.content_type import ContentTyper
from sitesync.deploy.models import RedirectRule
from sitesync.deploy.orchestrator import DeploymentOrchestrator
from sitesync.deploy.redirects import load_redirects
from sitesync.storage.credentials import (
    SecretDecryptor,
    create_cloudfront_client,
    create_s3_client,
    plain_secret,
)
from sitesync.storage.edge_invalidator import CloudFrontInvalidator
from sitesync.storage.object_store import S3ObjectStore

logger = logging.getLogger(__name__)


def build_orchestrator(
    settings: Settings,
    cache: BaseDeployCache | None = None,
    redirects: Sequence[RedirectRule] | None = None,
    content_typer: ContentTyper | None = None,
    decrypt: SecretDecryptor = plain_secret,
    s3_client: Any = None,
    cloudfront_client: Any = None,
) -> DeploymentOrchestrator:
    """Create the orchestrator and its collaborators from settings.

    Args:
        settings: Deploy settings.
        cache: Deploy cache; defaults to the configured backend.
        redirects: Redirect rules; defaults to ``settings.redirects_file``.
        content_typer: MIME lookup; defaults to :mod:`mimetypes`.
        decrypt: Turns stored secrets into usable secret keys.
        s3_client: Prebuilt S3 client (skips credential resolution).
        cloudfront_client: Prebuilt CloudFront client.

    Raises:
        ConfigurationError: If no bucket is configured.
        CredentialsError: If a client cannot obtain credentials.
    """
    if not settings.bucket:
        raise ConfigurationError("SITESYNC_BUCKET must be set to deploy")

    if redirects is None:
        redirects = load_redirects(settings.redirects_file) if settings.redirects_file else []

    if s3_client is None:
        s3_client = create_s3_client(settings, decrypt)
    store = S3ObjectStore(
        s3_client, settings.bucket, cache_control=settings.cache_control_header
    )

    invalidator = None
    if settings.cdn_enabled:
        if cloudfront_client is None:
            cloudfront_client = create_cloudfront_client(settings, decrypt)
        invalidator = CloudFrontInvalidator(cloudfront_client, settings.cdn_distribution_id)

    return DeploymentOrchestrator(
        cache=cache if cache is not None else create_deploy_cache(settings),
        object_store=store,
        invalidator=invalidator,
        redirects=redirects,
        content_typer=content_typer,
        namespace=settings.deploy_namespace,
        remote_path_prefix=settings.remote_path_prefix,
        max_paths_to_invalidate=settings.cdn_max_paths_to_invalidate,
        concurrency=settings.deploy_concurrency,
        timeout=settings.deploy_timeout_seconds,
    )


async def deploy(local_root: Path | str, settings: Settings, **wiring: Any) -> None:
    """Deploy ``local_root`` with an orchestrator built from ``settings``.

    ``wiring`` is passed to :func:`build_orchestrator`. A missing root is a
    no-op: no client, cache or redirect file is touched.
    """
    if not Path(local_root).is_dir():
        logger.debug("Nothing to deploy, not a directory: %s", local_root)
        return

    owns_cache = wiring.get("cache") is None
    orchestrator = build_orchestrator(settings, **wiring)
    try:
        await orchestrator.deploy(local_root)
    finally:
        if owns_cache:
            orchestrator.cache.close()
