# src/cache/models.py - v2
"""Deploy cache domain model: one record per deployed key and namespace."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class DeployCacheEntry(BaseModel):
    """A key that was successfully written to the object store.

    ``fingerprint`` is only set for content-addressed entries (redirects);
    plain files are cached by key alone.
    """

    key: str
    namespace: str
    fingerprint: str | None = None
    deployed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def matches(self, fingerprint: str | None) -> bool:
        """True if this entry satisfies a lookup for ``fingerprint``.

        A lookup without fingerprint is satisfied by any prior success.
        """
        if fingerprint is None:
            return True
        return self.fingerprint == fingerprint
