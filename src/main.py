# src/main.py - v2
"""CLI entry point: deploy, invalidate-all and cache commands.

Usage:
    sitesync deploy <site_dir> [--redirects FILE] [--namespace NS]
    sitesync invalidate-all
    sitesync cache list [--namespace NS]
    sitesync cache clear [--namespace NS]

Configuration comes from SITESYNC_* environment variables or a .env file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sitesync.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from sitesync.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings(**_overrides(args))
    except (ConfigurationError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="sitesync",
        description=f"sitesync v{__version__}: incremental static site deploys to S3",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- deploy ---
    p_deploy = subparsers.add_parser(
        "deploy", help="Deploy a generated site directory",
    )
    p_deploy.add_argument("site_dir", type=Path, help="Site root directory")
    p_deploy.add_argument(
        "--redirects", type=Path, default=None,
        help="JSON file of redirect rules (overrides SITESYNC_REDIRECTS_FILE)",
    )
    _add_namespace_arg(p_deploy)
    p_deploy.set_defaults(func=_cmd_deploy)

    # --- invalidate-all ---
    p_invalidate = subparsers.add_parser(
        "invalidate-all", help="Invalidate every path of the CloudFront distribution",
    )
    p_invalidate.set_defaults(func=_cmd_invalidate_all)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Inspect or reset the deploy cache")
    cache_sub = p_cache.add_subparsers(dest="cache_command", required=True)

    p_list = cache_sub.add_parser("list", help="List deployed keys")
    _add_namespace_arg(p_list)
    p_list.set_defaults(func=_cmd_cache_list)

    p_clear = cache_sub.add_parser(
        "clear", help="Forget deployed keys so the next deploy uploads everything",
    )
    _add_namespace_arg(p_clear)
    p_clear.set_defaults(func=_cmd_cache_clear)

    return parser


def _add_namespace_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--namespace", default=None,
        help="Deploy cache namespace (overrides SITESYNC_DEPLOY_NAMESPACE)",
    )


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    """Settings overrides taken from command line flags."""
    overrides: dict[str, object] = {}
    if getattr(args, "namespace", None):
        overrides["deploy_namespace"] = args.namespace
    if getattr(args, "redirects", None):
        overrides["redirects_file"] = args.redirects
    return overrides


async def _cmd_deploy(args: argparse.Namespace, settings) -> int:
    """Deploy a site directory."""
    from sitesync.deploy.factory import deploy

    site_dir: Path = args.site_dir
    if not site_dir.is_dir():
        logger.error("Not a directory: %s", site_dir)
        return 1

    logger.info(
        "Deploying %s to s3://%s (namespace %s)",
        site_dir, settings.bucket, settings.deploy_namespace,
    )
    await deploy(site_dir, settings)
    return 0


async def _cmd_invalidate_all(args: argparse.Namespace, settings) -> int:
    """Flush the whole CDN cache."""
    from sitesync.storage.credentials import create_cloudfront_client
    from sitesync.storage.edge_invalidator import CloudFrontInvalidator

    if not settings.cdn_enabled:
        logger.error("SITESYNC_CDN_DISTRIBUTION_ID is not set")
        return 1

    invalidator = CloudFrontInvalidator(
        create_cloudfront_client(settings), settings.cdn_distribution_id
    )
    invalidation_id = await invalidator.invalidate_all()
    if invalidation_id is None:
        return 1
    print(f"Invalidation {invalidation_id} created")
    return 0


async def _cmd_cache_list(args: argparse.Namespace, settings) -> int:
    """Print every key deployed in the namespace."""
    from sitesync.cache.cache_factory import create_deploy_cache

    cache = create_deploy_cache(settings)
    try:
        keys = await cache.list_keys(settings.deploy_namespace)
    finally:
        cache.close()

    for key in keys:
        print(key)
    print(f"\n{len(keys)} keys in {settings.deploy_namespace}")
    return 0


async def _cmd_cache_clear(args: argparse.Namespace, settings) -> int:
    """Drop every cache entry of the namespace."""
    from sitesync.cache.cache_factory import create_deploy_cache

    cache = create_deploy_cache(settings)
    try:
        removed = await cache.clear(settings.deploy_namespace)
    finally:
        cache.close()

    print(f"Removed {removed} entries from {settings.deploy_namespace}")
    return 0


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from sitesync.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
