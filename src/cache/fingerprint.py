# src/cache/fingerprint.py - v2
"""Content fingerprints for deploy cache entries."""

from __future__ import annotations

import hashlib

REDIRECT_STATUS = "301"


def redirect_fingerprint(redirect_to: str) -> str:
    """Fingerprint of a 301 redirect: md5 of the status and its target.

    Changes whenever the target changes, while the redirect's key stays put.
    """
    payload = f"{REDIRECT_STATUS}{redirect_to}".encode("utf-8")
    return hashlib.md5(payload).hexdigest()  # noqa: S324


def key_digest(key: str) -> str:
    """Stable filesystem-safe name for a cache key or namespace."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()
