# src/storage/models.py - v2
"""Object store put payload and per-put outcome."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ACL_PUBLIC_READ = "public-read"
HTTP_OK = 200


class PutObjectRequest(BaseModel):
    """A single S3 PutObject call.

    Base fields (bucket, ACL, cache control) come from the store; file puts
    add body and content type, redirect puts add a redirect location.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    acl: str = ACL_PUBLIC_READ
    cache_control: str | None = None
    body: bytes | None = Field(default=None, repr=False)
    content_type: str | None = None
    website_redirect_location: str | None = None

    def to_boto_kwargs(self) -> dict[str, Any]:
        """Map to boto3 ``put_object`` keyword arguments, omitting unset fields."""
        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": self.key,
            "ACL": self.acl,
        }
        if self.cache_control:
            kwargs["CacheControl"] = self.cache_control
        if self.body is not None:
            kwargs["Body"] = self.body
        if self.content_type:
            kwargs["ContentType"] = self.content_type
        if self.website_redirect_location:
            kwargs["WebsiteRedirectLocation"] = self.website_redirect_location
        return kwargs


class PutResult(BaseModel):
    """Outcome of one put. Anything but HTTP 200 counts as a failure."""

    key: str
    status_code: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == HTTP_OK
