# src/deploy/orchestrator.py - v1
"""Deployment orchestrator: incremental sync of a site tree to S3 + CDN.

A run goes through three phases:

1. files: every file under the site root not yet in the deploy cache is
   uploaded; a confirmed upload marks it cached and its URL stale;
2. redirects: each rule becomes an empty redirect object, cached under a
   fingerprint of its target so a changed target is redeployed;
3. invalidation: stale URLs are invalidated in one batch, or the whole
   distribution when more changed than the configured cap.

A failed put leaves its entry uncached; the next run retries exactly those.
Two runs against the same namespace must not overlap: the deploy cache has
no cross-run locking.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable, Sequence
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from sitesync.cache.fingerprint import redirect_fingerprint
from sitesync.config.settings import DEFAULT_NAMESPACE
from sitesync.deploy.content_type import ContentTyper, MimetypesContentTyper, with_charset
from sitesync.deploy.errors import DeployTimeoutError, SkippableInputError
from sitesync.deploy.models import DeployStats, RedirectRule
from sitesync.deploy.paths import (
    cache_key_for,
    iter_site_files,
    redirect_cache_key,
    remote_key,
    resolve_entry,
)
from sitesync.deploy.stale_paths import StalePathSet
from sitesync.logging.context import clear_context, set_deploy_context, set_phase

if TYPE_CHECKING:
    from sitesync.cache.base_cache_store import BaseDeployCache
    from sitesync.storage.edge_invalidator import CloudFrontInvalidator
    from sitesync.storage.object_store import S3ObjectStore

logger = logging.getLogger(__name__)


class DeploymentOrchestrator:
    """Deploy a generated site tree and keep the CDN consistent."""

    def __init__(
        self,
        cache: BaseDeployCache,
        object_store: S3ObjectStore,
        invalidator: CloudFrontInvalidator | None = None,
        redirects: Sequence[RedirectRule] = (),
        content_typer: ContentTyper | None = None,
        namespace: str = DEFAULT_NAMESPACE,
        remote_path_prefix: str = "",
        max_paths_to_invalidate: int = 0,
        concurrency: int = 1,
        timeout: float | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            cache: Deploy cache recording what is already deployed.
            object_store: Target bucket.
            invalidator: CDN invalidator; None disables invalidation.
            redirects: Redirect rules deployed after the files, in order.
            content_typer: MIME lookup, defaults to :mod:`mimetypes`.
            namespace: Deploy cache namespace of this target.
            remote_path_prefix: Key prefix inside the bucket.
            max_paths_to_invalidate: Above this many changed paths the whole
                distribution is invalidated. 0 always invalidates everything.
            concurrency: Max entries in flight per phase (1 = sequential).
            timeout: Deadline in seconds for the upload phases.
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._cache = cache
        self._store = object_store
        self._invalidator = invalidator
        self._redirects = tuple(redirects)
        self._typer = content_typer or MimetypesContentTyper()
        self._namespace = namespace
        self._remote_prefix = remote_path_prefix
        self._max_paths = max_paths_to_invalidate
        self._concurrency = concurrency
        self._timeout = timeout

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def cache(self) -> BaseDeployCache:
        return self._cache

    async def deploy(self, root: Path | str) -> None:
        """Deploy the site under ``root``.

        A missing root directory is a silent no-op: no puts, no cache writes.

        Raises:
            DeployTimeoutError: The upload phases exceeded the deadline. Paths
                uploaded before the deadline are still invalidated.
        """
        root = Path(root)
        if not root.is_dir():
            logger.debug("Nothing to deploy, not a directory: %s", root)
            return

        set_deploy_context(self._namespace, uuid.uuid4().hex[:12])
        stats = DeployStats()
        stale = StalePathSet(self._max_paths)
        t0 = time.perf_counter()

        try:
            try:
                await asyncio.wait_for(
                    self._upload_phases(root, stale, stats), timeout=self._timeout
                )
            except asyncio.TimeoutError as e:
                logger.error(
                    "Deploy exceeded %ss, invalidating the %d paths deployed so far",
                    self._timeout, len(stale),
                )
                await self.invalidate_stale(stale, stats)
                raise DeployTimeoutError(self._timeout or 0.0) from e

            await self.invalidate_stale(stale, stats)

            stats.duration_seconds = round(time.perf_counter() - t0, 2)
            logger.info(
                "Deploy complete: %d uploaded, %d unchanged, %d failed, "
                "%d redirects uploaded (%.1fs)",
                stats.files_uploaded, stats.files_cached,
                stats.files_failed + stats.redirects_failed,
                stats.redirects_uploaded, stats.duration_seconds,
                extra={"data": stats.model_dump()},
            )
        finally:
            clear_context()

    async def _upload_phases(
        self, root: Path, stale: StalePathSet, stats: DeployStats
    ) -> None:
        await self.upload_files(root, stale, stats)
        await self.deploy_redirects(stale, stats)

    # ── Phase 1: files ────────────────────────────────────────────────

    async def upload_files(
        self,
        root: Path | str,
        stale: StalePathSet | None = None,
        stats: DeployStats | None = None,
    ) -> None:
        """Upload every file under ``root`` that is not cached yet."""
        root = Path(root)
        if not root.is_dir():
            return
        stale = stale if stale is not None else StalePathSet(self._max_paths)
        stats = stats if stats is not None else DeployStats()

        set_phase("files")
        entries = list(iter_site_files(root))
        logger.info("Checking %d files under %s", len(entries), root)
        await self._run_bounded(
            partial(self._upload_entry, root, path, stale, stats) for path in entries
        )

    async def _upload_entry(
        self, root: Path, path: Path, stale: StalePathSet, stats: DeployStats
    ) -> None:
        try:
            real_path = resolve_entry(path)
        except SkippableInputError as e:
            logger.warning("Skipping entry: %s", e)
            stats.files_unresolvable += 1
            return

        cache_key = cache_key_for(path, root)
        if await self._cache.is_cached(cache_key, self._namespace):
            stats.files_cached += 1
            return

        key = remote_key(cache_key, self._remote_prefix)
        content_type = with_charset(self._typer.guess(str(path)))

        try:
            body = await asyncio.to_thread(real_path.read_bytes)
        except OSError as e:
            logger.error("Cannot read %s, will retry next run: %s", path, e)
            stats.files_failed += 1
            return

        result = await self._store.put_file(key, body, content_type)
        if not result.ok:
            logger.warning(
                "Upload of %s failed (status %s), will retry next run",
                cache_key, result.status_code,
            )
            stats.files_failed += 1
            return

        await self._cache.mark_cached(cache_key, self._namespace)
        stale.add(cache_key)
        stats.files_uploaded += 1
        logger.debug("Deployed %s (%s, %d bytes)", key, content_type, len(body))

    # ── Phase 2: redirects ────────────────────────────────────────────

    async def deploy_redirects(
        self, stale: StalePathSet | None = None, stats: DeployStats | None = None
    ) -> None:
        """Deploy redirect rules whose target changed since the last run."""
        if not self._redirects:
            return
        stale = stale if stale is not None else StalePathSet(self._max_paths)
        stats = stats if stats is not None else DeployStats()

        set_phase("redirects")
        logger.info("Checking %d redirects", len(self._redirects))
        # Rules sharing a cache key run one after another, in rule order.
        key_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        await self._run_bounded(
            partial(self._deploy_redirect, rule, stale, stats, key_locks)
            for rule in self._redirects
        )

    async def _deploy_redirect(
        self,
        rule: RedirectRule,
        stale: StalePathSet,
        stats: DeployStats,
        key_locks: defaultdict[str, asyncio.Lock],
    ) -> None:
        cache_key = redirect_cache_key(rule.url)
        fingerprint = redirect_fingerprint(rule.redirect_to)

        async with key_locks[cache_key]:
            if await self._cache.is_cached(cache_key, self._namespace, fingerprint):
                stats.redirects_cached += 1
                return

            key = remote_key(cache_key, self._remote_prefix)
            result = await self._store.put_redirect(key, rule.redirect_to)
            if not result.ok:
                logger.warning(
                    "Redirect %s -> %s failed (status %s), will retry next run",
                    rule.url, rule.redirect_to, result.status_code,
                )
                stats.redirects_failed += 1
                return

            await self._cache.mark_cached(cache_key, self._namespace, fingerprint)
            stale.add(cache_key)
            stats.redirects_uploaded += 1
            logger.debug("Deployed redirect %s -> %s", key, rule.redirect_to)

    # ── Phase 3: invalidation ─────────────────────────────────────────

    async def invalidate_stale(
        self, stale: StalePathSet, stats: DeployStats | None = None
    ) -> str | None:
        """Invalidate what changed: explicit paths, or everything past the cap.

        Returns:
            The invalidation id, or None when nothing was (or could be) sent.
        """
        set_phase("invalidation")
        if stats is not None:
            stats.stale_paths = len(stale)
        if self._invalidator is None or not stale:
            return None

        if stale.overflowed:
            logger.info(
                "More than %d paths changed, invalidating the whole distribution",
                stale.cap,
            )
            if stats is not None:
                stats.invalidation = "all"
            return await self._invalidator.invalidate_all()

        noun = "path" if len(stale) == 1 else "paths"
        logger.info("Invalidating %d CloudFront %s", len(stale), noun)
        if stats is not None:
            stats.invalidation = "paths"
        return await self._invalidator.invalidate(stale.invalidation_batch())

    async def invalidate_all(self) -> str | None:
        """Flush the whole distribution. No-op without a configured CDN."""
        if self._invalidator is None:
            logger.info("No CloudFront distribution configured, nothing to invalidate")
            return None
        return await self._invalidator.invalidate_all()

    # ── Helpers ───────────────────────────────────────────────────────

    async def _run_bounded(
        self, jobs: Iterable[Callable[[], Awaitable[None]]]
    ) -> None:
        """Run ``jobs`` with at most ``concurrency`` in flight.

        The first unexpected error cancels the remaining jobs and propagates.
        """
        semaphore = asyncio.Semaphore(self._concurrency)

        async def run_with_semaphore(job: Callable[[], Awaitable[None]]) -> None:
            async with semaphore:
                await job()

        tasks = [asyncio.ensure_future(run_with_semaphore(job)) for job in jobs]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
