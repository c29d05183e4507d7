# src/deploy/paths.py - v1
"""Key and path conventions shared by the deploy phases.

- cache key: ``/`` + path relative to the site root, POSIX separators;
- remote key: cache key without leading ``/``, under the remote prefix;
- invalidation path: cache key with ``/index.html`` folded to ``/``.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from urllib.parse import quote

from sitesync.deploy.errors import SkippableInputError

INDEX_DOCUMENT = "index.html"


def iter_site_files(root: Path) -> Iterator[Path]:
    """Yield every non-directory entry under ``root``, sorted.

    Broken symlinks are yielded too; symlinked directories are not entered.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            yield Path(dirpath) / name


def resolve_entry(path: Path) -> Path:
    """Return the real path of ``path``.

    Raises:
        SkippableInputError: If the entry does not resolve to an existing file.
    """
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise SkippableInputError(f"cannot resolve {path}: {e}") from e


def cache_key_for(path: Path, root: Path) -> str:
    """Cache key of a file: its site-relative path, e.g. ``/blog/index.html``."""
    return "/" + path.relative_to(root).as_posix()


def redirect_cache_key(url: str) -> str:
    """Cache key of a redirect: a directory URL maps to its index document."""
    if url.endswith("/"):
        return url + INDEX_DOCUMENT
    return url


def remote_key(cache_key: str, prefix: str = "") -> str:
    """Object store key for a cache key, never with a leading slash."""
    key = cache_key.lstrip("/")
    prefix = prefix.strip("/")
    if prefix:
        return f"{prefix}/{key}"
    return key


def invalidation_path(cache_key: str) -> str:
    """CDN path for a cache key: the URL users request, not the index file.

    Characters outside the URL path alphabet are percent-encoded, including
    ``*`` so a literal asterisk never acts as a wildcard.
    """
    path = cache_key if cache_key.startswith("/") else "/" + cache_key
    if path.endswith("/" + INDEX_DOCUMENT):
        path = path[: -len(INDEX_DOCUMENT)]
    return quote(path, safe="/")
