# src/config/settings.py - v2
"""Typed deploy configuration loaded from .env via pydantic-settings.

Built once per process and handed to the orchestrator factory. Every
variable is read with the ``SITESYNC_`` prefix, e.g. ``SITESYNC_BUCKET``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_NAMESPACE = "sitesync/default"


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Deploy settings loaded from the environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SITESYNC_",
        extra="ignore",
    )

    # === Object store (S3) ===
    bucket: str = ""
    region: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    profile: str = ""
    endpoint_url: str = ""
    remote_path_prefix: str = ""
    cache_control_header: str = ""

    # === CDN (CloudFront) ===
    cdn_distribution_id: str = ""
    cdn_region: str = ""
    cdn_access_key_id: str = ""
    cdn_secret_access_key: str = ""
    cdn_profile: str = ""
    cdn_max_paths_to_invalidate: int = 0

    # === Deploy run ===
    deploy_namespace: str = DEFAULT_NAMESPACE
    deploy_concurrency: int = 1
    deploy_timeout_seconds: float | None = None
    redirects_file: Path | None = None

    # === Deploy cache ===
    cache_backend: Literal["json", "sqlite", "redis"] = "json"
    cache_root: Path = Path("~/.sitesync/cache")
    cache_redis_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cdn_max_paths_to_invalidate", mode="before")
    @classmethod
    def empty_max_paths_is_zero(cls, v: object) -> object:  # noqa: N805
        """An unset or blank cap (``SITESYNC_CDN_MAX_PATHS_TO_INVALIDATE=``) reads as 0."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v

    @field_validator("deploy_timeout_seconds", mode="before")
    @classmethod
    def empty_timeout_is_none(cls, v: object) -> object:  # noqa: N805
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cdn_max_paths_to_invalidate")
    @classmethod
    def validate_max_paths(cls, v: int) -> int:  # noqa: N805
        """A negative cap has no meaning; 0 means always invalidate everything."""
        if v < 0:
            raise ValueError("cdn_max_paths_to_invalidate must be >= 0")
        return v

    @field_validator("deploy_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("deploy_concurrency must be >= 1")
        return v

    @field_validator("remote_path_prefix")
    @classmethod
    def strip_remote_prefix(cls, v: str) -> str:  # noqa: N805
        return v.strip().strip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.deploy_timeout_seconds is not None and self.deploy_timeout_seconds <= 0:
            errors.append("SITESYNC_DEPLOY_TIMEOUT_SECONDS must be > 0 when set")

        if not self.deploy_namespace.strip():
            errors.append("SITESYNC_DEPLOY_NAMESPACE must not be empty")
        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cdn_enabled(self) -> bool:
        """True when a CloudFront distribution is configured."""
        return bool(self.cdn_distribution_id)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
