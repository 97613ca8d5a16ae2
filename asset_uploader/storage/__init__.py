"""
Object storage clients.

``create_client(config)`` builds the backend named by ``config["provider"]``
(``"s3"`` by default, or ``"gcs"``). Backends are imported lazily so only the
SDK actually in use has to be importable.
"""

from typing import Any, Dict, Optional

from asset_uploader.errors import ConfigurationError
from asset_uploader.storage.base import (
    DEFAULT_MAX_CONCURRENCY,
    StorageClient,
    ThreadedStorageClient,
)
from asset_uploader.storage.transfer import TransferHandle, TransferState
from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ["s3", "gcs"]


def create_client(config: Optional[Dict[str, Any]] = None) -> StorageClient:
    """
    Create a storage client from connection options.

    Args:
        config: Connection options. Recognized keys: ``provider``,
            ``access_key_id``, ``secret_access_key``, ``session_token``,
            ``region``, ``endpoint_url`` (S3); ``project`` (GCS);
            ``max_concurrency``, ``max_attempts`` (both)

    Returns:
        StorageClient for the configured provider

    Raises:
        ConfigurationError: If the provider is not supported
    """
    config = dict(config or {})
    provider = str(config.pop("provider", "s3")).lower()
    max_concurrency = int(config.get("max_concurrency", DEFAULT_MAX_CONCURRENCY))
    logger.info(f"Creating {provider} storage client")

    if provider == "s3":
        from asset_uploader.storage.s3 import MAX_ATTEMPTS, S3StorageClient

        return S3StorageClient(
            access_key_id=config.get("access_key_id"),
            secret_access_key=config.get("secret_access_key"),
            session_token=config.get("session_token"),
            region=config.get("region"),
            endpoint_url=config.get("endpoint_url"),
            max_concurrency=max_concurrency,
            max_attempts=int(config.get("max_attempts", MAX_ATTEMPTS)),
        )

    if provider == "gcs":
        from asset_uploader.storage.gcs import MAX_ATTEMPTS, GCSStorageClient

        return GCSStorageClient(
            project=config.get("project"),
            max_concurrency=max_concurrency,
            max_attempts=int(config.get("max_attempts", MAX_ATTEMPTS)),
        )

    raise ConfigurationError(
        f"Unsupported storage provider '{provider}'. "
        f"Supported: {SUPPORTED_PROVIDERS}"
    )


__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "StorageClient",
    "SUPPORTED_PROVIDERS",
    "ThreadedStorageClient",
    "TransferHandle",
    "TransferState",
    "create_client",
]
