# src/deploy/errors.py - v1
"""Deploy run errors."""

from __future__ import annotations


class SkippableInputError(Exception):
    """An enumerated entry has no real path (dangling symlink, deleted file)."""


class DeployTimeoutError(Exception):
    """The upload phases did not finish before the configured deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Deploy did not finish within {timeout:g}s")
