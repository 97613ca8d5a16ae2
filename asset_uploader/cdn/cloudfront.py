"""
Amazon CloudFront backend built on boto3.
"""

from typing import Any, Dict, Optional, Sequence

import boto3

from asset_uploader.cdn.base import CDNClient
from asset_uploader.utils.logging import get_logger
from asset_uploader.utils.retry import retry_with_backoff

logger = get_logger(__name__)

MAX_ATTEMPTS = 3


class CloudFrontClient(CDNClient):
    """Creates CloudFront invalidations."""

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        session_token: Optional[str] = None,
        max_attempts: int = MAX_ATTEMPTS,
        boto_client: Optional[Any] = None,
    ) -> None:
        self.max_attempts = max_attempts
        self.boto_client = boto_client or boto3.client(
            "cloudfront",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            aws_session_token=session_token,
        )

    def create_invalidation(
        self,
        distribution_id: str,
        paths: Sequence[str],
        caller_reference: str,
    ) -> Dict[str, Any]:
        items = list(paths)

        @retry_with_backoff(max_attempts=self.max_attempts, base_delay=1.0, max_delay=10.0)
        def _create() -> Dict[str, Any]:
            return self.boto_client.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    "CallerReference": caller_reference,
                    "Paths": {"Quantity": len(items), "Items": items},
                },
            )

        logger.debug(
            f"Creating CloudFront invalidation on {distribution_id} for {items}"
        )
        return _create()


def create_cdn_client(credentials: Optional[Dict[str, Any]] = None) -> CDNClient:
    """
    Create a CloudFront client, reusing the storage credentials.

    Args:
        credentials: Mapping with optional ``access_key_id``,
            ``secret_access_key`` and ``session_token``
    """
    credentials = credentials or {}
    return CloudFrontClient(
        access_key_id=credentials.get("access_key_id"),
        secret_access_key=credentials.get("secret_access_key"),
        session_token=credentials.get("session_token"),
    )
