# src/storage/edge_invalidator.py - v1
"""CloudFront edge cache invalidation.

Invalidation is best effort: service and transport errors are logged and
reported as ``None``, never raised, so a failed invalidation does not fail
the deploy that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

INVALIDATE_ALL = "/*"


class CloudFrontInvalidator:
    """Issue invalidation batches against one distribution."""

    def __init__(
        self, client: Any, distribution_id: str, caller_prefix: str = "sitesync"
    ) -> None:
        if not distribution_id:
            raise ValueError("distribution_id must not be empty")
        self._client = client
        self._distribution_id = distribution_id
        self._caller_prefix = caller_prefix

    @property
    def distribution_id(self) -> str:
        return self._distribution_id

    async def invalidate(self, paths: list[str]) -> str | None:
        """Invalidate ``paths`` in a single batch.

        Returns:
            The invalidation id, or None if nothing was sent or the call failed.
        """
        if not paths:
            return None

        batch = {
            "CallerReference": self._caller_reference(),
            "Paths": {"Quantity": len(paths), "Items": list(paths)},
        }
        try:
            response = await asyncio.to_thread(
                self._client.create_invalidation,
                DistributionId=self._distribution_id,
                InvalidationBatch=batch,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "CloudFront invalidation failed on %s (%d paths): %s",
                self.distribution_id, len(paths), e,
            )
            return None

        invalidation_id = response.get("Invalidation", {}).get("Id")
        logger.info(
            "Created CloudFront invalidation %s on %s",
            invalidation_id, self.distribution_id,
        )
        return invalidation_id

    async def invalidate_all(self) -> str | None:
        """Invalidate every cached object of the distribution."""
        logger.info("Invalidating all CloudFront paths")
        return await self.invalidate([INVALIDATE_ALL])

    def _caller_reference(self) -> str:
        # Must be unique per request; a reused reference with a different
        # batch is rejected by CloudFront.
        return f"{self._caller_prefix}-{int(time.time())}-{uuid.uuid4().hex[:8]}"
