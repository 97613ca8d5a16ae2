"""
Amazon S3 (and S3-compatible) storage backend built on boto3.

Upload parameters use S3's own names (``Bucket``, ``Key``, ``ACL``,
``ContentType``, ``ContentEncoding``, ``CacheControl``, ``Metadata`` ...);
everything except ``Bucket`` and ``Key`` is passed through as ``ExtraArgs``.
"""

import os
import threading
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

from asset_uploader.storage.base import (
    DEFAULT_MAX_CONCURRENCY,
    ProgressCallback,
    ThreadedStorageClient,
)
from asset_uploader.utils.logging import get_logger
from asset_uploader.utils.retry import retry_with_backoff

logger = get_logger(__name__)

MAX_ATTEMPTS = 3


class S3StorageClient(ThreadedStorageClient):
    """Uploads files to S3 with ``boto3``'s managed transfer."""

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        session_token: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_attempts: int = MAX_ATTEMPTS,
        boto_client: Optional[Any] = None,
    ) -> None:
        super().__init__(max_concurrency=max_concurrency)
        self.max_attempts = max_attempts
        self.boto_client = boto_client or boto3.client(
            "s3",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            aws_session_token=session_token,
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(max_pool_connections=max_concurrency),
        )
        logger.info(
            f"S3 storage client initialized (region={region or 'default'}, "
            f"max_concurrency={max_concurrency})"
        )

    def _transfer(
        self,
        local_file: str,
        remote_params: Dict[str, Any],
        on_progress: ProgressCallback,
    ) -> None:
        params = dict(remote_params)
        bucket = params.pop("Bucket")
        key = params.pop("Key")
        total = os.path.getsize(local_file)
        on_progress(0, total)

        @retry_with_backoff(max_attempts=self.max_attempts, base_delay=1.0, max_delay=30.0)
        def _upload() -> None:
            tracker = _ByteTracker(total, on_progress)
            self.boto_client.upload_file(
                local_file,
                bucket,
                key,
                ExtraArgs=params or None,
                Callback=tracker,
            )

        logger.debug(f"Uploading {local_file} -> s3://{bucket}/{key} ({total} bytes)")
        _upload()


class _ByteTracker:
    """Turns boto3's per-chunk byte counts into cumulative progress."""

    def __init__(self, total: int, on_progress: ProgressCallback) -> None:
        self._total = total
        self._seen = 0
        self._lock = threading.Lock()
        self._on_progress = on_progress

    def __call__(self, bytes_amount: int) -> None:
        with self._lock:
            self._seen += bytes_amount
            seen = self._seen
        self._on_progress(seen, self._total)
