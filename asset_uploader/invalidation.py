"""
CDN invalidation after a successful upload.

Runs only when a distribution id is configured. A transport failure is
logged as a warning and raised as InvalidationError; a response without an
invalidation body raises EmptyInvalidationResponse.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from asset_uploader.cdn import CDNClient, create_cdn_client
from asset_uploader.errors import EmptyInvalidationResponse, InvalidationError
from asset_uploader.models import InvalidationRequest
from asset_uploader.utils.logging import get_logger, log_function_call
from asset_uploader.utils.metrics import UploaderMetrics, get_metrics

logger = get_logger(__name__)

DEFAULT_INVALIDATION_PATHS = ["/*"]


@dataclass
class InvalidationOptions:
    """
    CDN invalidation settings.

    Attributes:
        distribution_id: Distribution to invalidate (None disables invalidation)
        paths: Paths to invalidate, in order
    """

    distribution_id: Optional[str] = None
    paths: List[str] = field(default_factory=lambda: list(DEFAULT_INVALIDATION_PATHS))

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "InvalidationOptions":
        options = options or {}
        paths = options.get("paths")
        return cls(
            distribution_id=options.get("distribution_id") or None,
            paths=list(paths) if paths else list(DEFAULT_INVALIDATION_PATHS),
        )


def new_caller_reference() -> str:
    """Millisecond timestamp, unique per invalidation call."""
    return str(int(time.time() * 1000))


def build_invalidation_request(
    options: InvalidationOptions,
    caller_reference: Optional[str] = None,
) -> InvalidationRequest:
    return InvalidationRequest(
        distribution_id=options.distribution_id,
        paths=tuple(options.paths),
        caller_reference=caller_reference or new_caller_reference(),
    )


@log_function_call
async def invalidate(
    options: InvalidationOptions,
    client_factory: Callable[[Optional[Dict[str, Any]]], CDNClient] = create_cdn_client,
    credentials: Optional[Dict[str, Any]] = None,
    metrics: Optional[UploaderMetrics] = None,
) -> Optional[str]:
    """
    Invalidate the configured CDN paths.

    Args:
        options: Distribution and paths
        client_factory: Builds the CDN client from ``credentials``
        credentials: Passed to ``client_factory``
        metrics: Metrics sink (global instance if None)

    Returns:
        The invalidation id, or None when no distribution is configured

    Raises:
        InvalidationError: Transport failure (original error chained)
        EmptyInvalidationResponse: Response without an invalidation
    """
    if not options.distribution_id:
        logger.debug("No CDN distribution configured, skipping invalidation")
        return None

    metrics = metrics or get_metrics()
    request = build_invalidation_request(options)
    logger.info(
        f"Invalidating {list(request.paths)} on distribution {request.distribution_id}"
    )

    client = client_factory(credentials)
    try:
        response = await asyncio.to_thread(
            client.create_invalidation,
            request.distribution_id,
            request.paths,
            request.caller_reference,
        )
    except Exception as e:
        metrics.record_invalidation(success=False)
        logger.warning(
            f"Error creating CDN invalidation on {request.distribution_id}: {e}"
        )
        raise InvalidationError(
            f"Error creating CDN invalidation on {request.distribution_id}: {e}",
            distribution_id=request.distribution_id,
            error=e,
        ) from e

    invalidation = (response or {}).get("Invalidation")
    if not invalidation or not invalidation.get("Id"):
        metrics.record_invalidation(success=False)
        raise EmptyInvalidationResponse(request.distribution_id)

    metrics.record_invalidation(success=True)
    logger.info(f"Created invalidation {invalidation['Id']}")
    return invalidation["Id"]
