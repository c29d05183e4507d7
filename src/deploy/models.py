# src/deploy/models.py - v1
"""Deploy domain models: RedirectRule, DeployStats."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RedirectRule(BaseModel):
    """A 301 redirect from a site URL to another location."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    redirect_to: str = Field(min_length=1)


class DeployStats(BaseModel):
    """Counters for one deploy run, logged when the run ends."""

    files_uploaded: int = 0
    files_cached: int = 0
    files_unresolvable: int = 0
    files_failed: int = 0
    redirects_uploaded: int = 0
    redirects_cached: int = 0
    redirects_failed: int = 0
    stale_paths: int = 0
    invalidation: Literal["none", "paths", "all"] = "none"
    duration_seconds: float = 0.0
