# src/storage/credentials.py - v1
"""AWS client construction with explicit credential precedence.

For each client, independently:

1. an access key id *and* secret: those keys (secret decrypted first);
2. else a named profile: ``boto3.Session(profile_name=...)``;
3. else nothing: boto3's default chain (env vars, credentials file,
   instance role).

Construction fails fast with :class:`CredentialsError` when no credentials
can be found, so a misconfigured run stops before the first put.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Literal

import boto3
from botocore.exceptions import BotoCoreError

if TYPE_CHECKING:
    from sitesync.config.settings import Settings

logger = logging.getLogger(__name__)

SecretDecryptor = Callable[[str], str]


class CredentialsError(Exception):
    """No usable AWS credentials for a client."""


def plain_secret(secret: str) -> str:
    """Default decryptor: secrets are stored in clear."""
    return secret


@dataclass(frozen=True)
class ClientCredentials:
    """Credentials chosen for one client."""

    source: Literal["explicit", "profile", "ambient"]
    access_key_id: str | None = None
    secret_access_key: str | None = field(default=None, repr=False)
    profile: str | None = None

    def session_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``boto3.Session`` (empty for ambient)."""
        if self.source == "explicit":
            return {
                "aws_access_key_id": self.access_key_id,
                "aws_secret_access_key": self.secret_access_key,
            }
        if self.source == "profile":
            return {"profile_name": self.profile}
        return {}


def resolve_credentials(
    access_key_id: str = "",
    secret_access_key: str = "",
    profile: str = "",
    decrypt: SecretDecryptor = plain_secret,
) -> ClientCredentials:
    """Pick credentials: explicit keys, then profile, then ambient."""
    if access_key_id and secret_access_key:
        return ClientCredentials(
            source="explicit",
            access_key_id=access_key_id,
            secret_access_key=decrypt(secret_access_key),
        )
    if profile:
        return ClientCredentials(source="profile", profile=profile)
    return ClientCredentials(source="ambient")


def create_client(
    service: str,
    credentials: ClientCredentials,
    region: str | None = None,
    endpoint_url: str | None = None,
) -> Any:
    """Create a boto3 client for ``service`` with the given credentials.

    Raises:
        CredentialsError: If the profile does not exist or no credentials
            resolve at all.
    """
    session_kwargs = credentials.session_kwargs()
    if region:
        session_kwargs["region_name"] = region

    try:
        session = boto3.Session(**session_kwargs)
    except BotoCoreError as e:
        raise CredentialsError(
            f"Cannot create {service} session ({credentials.source}): {e}"
        ) from e

    if session.get_credentials() is None:
        raise CredentialsError(
            f"No AWS credentials found for {service} ({credentials.source})"
        )

    client_kwargs: dict[str, Any] = {}
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url

    logger.debug(
        "Created %s client (credentials=%s, region=%s)",
        service, credentials.source, region or "default",
    )
    return session.client(service, **client_kwargs)


def create_s3_client(settings: Settings, decrypt: SecretDecryptor = plain_secret) -> Any:
    """S3 client from the object store settings."""
    credentials = resolve_credentials(
        settings.access_key_id,
        settings.secret_access_key,
        settings.profile,
        decrypt=decrypt,
    )
    return create_client(
        "s3",
        credentials,
        region=settings.region or None,
        endpoint_url=settings.endpoint_url or None,
    )


def create_cloudfront_client(
    settings: Settings, decrypt: SecretDecryptor = plain_secret
) -> Any:
    """CloudFront client from the CDN settings."""
    credentials = resolve_credentials(
        settings.cdn_access_key_id,
        settings.cdn_secret_access_key,
        settings.cdn_profile,
        decrypt=decrypt,
    )
    return create_client("cloudfront", credentials, region=settings.cdn_region or None)
