# src/storage/object_store.py - v3
"""S3 object store used by the deploy run.

Supports AWS S3, MinIO, and other S3-compatible storage. Puts run in a
worker thread so several can be in flight; a put never raises for HTTP or
transport errors, it returns a failed :class:`PutResult` instead.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from sitesync.storage.models import ACL_PUBLIC_READ, PutObjectRequest, PutResult

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """Idempotent public-read puts into one bucket."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        cache_control: str | None = None,
        acl: str = ACL_PUBLIC_READ,
    ) -> None:
        """Initialize the store.

        Args:
            client: boto3 S3 client.
            bucket: Target bucket name.
            cache_control: Cache-Control header applied to every object.
            acl: Canned ACL applied to every object.
        """
        if not bucket:
            raise ValueError("bucket must not be empty")
        self._client = client
        self._bucket = bucket
        self._cache_control = cache_control or None
        self._acl = acl

    @property
    def bucket(self) -> str:
        return self._bucket

    def new_request(self, key: str, **fields: Any) -> PutObjectRequest:
        """Build a put payload from the base fields plus ``fields``."""
        return PutObjectRequest(
            bucket=self._bucket,
            key=key,
            acl=self._acl,
            cache_control=self._cache_control,
            **fields,
        )

    async def put_file(self, key: str, body: bytes, content_type: str) -> PutResult:
        """Upload file contents."""
        return await self.put(
            self.new_request(key, body=body, content_type=content_type)
        )

    async def put_redirect(self, key: str, location: str) -> PutResult:
        """Write an empty object that redirects to ``location``."""
        return await self.put(
            self.new_request(key, website_redirect_location=location)
        )

    async def put(self, request: PutObjectRequest) -> PutResult:
        """Issue one PutObject and report its HTTP status."""
        try:
            response = await asyncio.to_thread(
                self._client.put_object, **request.to_boto_kwargs()
            )
        except ClientError as e:
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
            logger.warning(
                "S3 put rejected: s3://%s/%s (%s): %s",
                self.bucket, request.key, status, e,
            )
            return PutResult(key=request.key, status_code=status, error=str(e))
        except BotoCoreError as e:
            logger.warning(
                "S3 put failed: s3://%s/%s: %s", self.bucket, request.key, e
            )
            return PutResult(key=request.key, status_code=0, error=str(e))

        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
        logger.debug("S3 put: s3://%s/%s -> %s", self.bucket, request.key, status)
        return PutResult(key=request.key, status_code=status)
