# src/deploy/content_type.py - v1
"""Content-Type lookup for deployed files."""

from __future__ import annotations

import mimetypes
from pathlib import PurePath
from typing import Protocol

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CHARSET = "charset=UTF-8"

# Fixed types for web assets; the system mime table differs between hosts.
_WEB_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".webmanifest": "application/manifest+json",
}


class ContentTyper(Protocol):
    """Maps a file path to a MIME type."""

    def guess(self, path: str) -> str: ...


class MimetypesContentTyper:
    """ContentTyper backed by :mod:`mimetypes` with fixed web asset types."""

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._types = dict(_WEB_TYPES)
        if overrides:
            self._types.update({k.lower(): v for k, v in overrides.items()})

    def guess(self, path: str) -> str:
        suffix = PurePath(path).suffix.lower()
        if suffix in self._types:
            return self._types[suffix]
        guessed, _ = mimetypes.guess_type(path, strict=False)
        return guessed or DEFAULT_CONTENT_TYPE


def with_charset(mime_type: str) -> str:
    """Append a UTF-8 charset to ``text/*`` types."""
    if mime_type.startswith("text/") and "charset" not in mime_type:
        return f"{mime_type}; {TEXT_CHARSET}"
    return mime_type
