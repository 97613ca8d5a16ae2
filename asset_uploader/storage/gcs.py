"""
Google Cloud Storage backend built on google-cloud-storage.

Accepts the same S3-style parameter names as the S3 backend and maps them
onto blob properties, so one ``upload_options`` mapping works for both.
"""

import os
from typing import Any, Dict, Optional

from google.cloud import storage

from asset_uploader.storage.base import (
    DEFAULT_MAX_CONCURRENCY,
    ProgressCallback,
    ThreadedStorageClient,
)
from asset_uploader.utils.logging import get_logger
from asset_uploader.utils.retry import retry_with_backoff

logger = get_logger(__name__)

MAX_ATTEMPTS = 3
UPLOAD_TIMEOUT_SECONDS = 300

# Canned S3 ACLs -> GCS predefined ACLs
PREDEFINED_ACLS = {
    "private": "private",
    "public-read": "publicRead",
    "authenticated-read": "authenticatedRead",
    "bucket-owner-read": "bucketOwnerRead",
    "bucket-owner-full-control": "bucketOwnerFullControl",
    "project-private": "projectPrivate",
}

# S3 parameter name -> blob attribute
BLOB_PROPERTIES = {
    "CacheControl": "cache_control",
    "ContentDisposition": "content_disposition",
    "ContentEncoding": "content_encoding",
    "ContentLanguage": "content_language",
    "ContentType": "content_type",
    "Metadata": "metadata",
}


class GCSStorageClient(ThreadedStorageClient):
    """Uploads files to Google Cloud Storage buckets."""

    def __init__(
        self,
        project: Optional[str] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_attempts: int = MAX_ATTEMPTS,
        timeout_seconds: int = UPLOAD_TIMEOUT_SECONDS,
        gcs_client: Optional[Any] = None,
    ) -> None:
        super().__init__(max_concurrency=max_concurrency)
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self.gcs_client = gcs_client or storage.Client(project=project)
        logger.info(f"GCS storage client initialized (max_concurrency={max_concurrency})")

    def _transfer(
        self,
        local_file: str,
        remote_params: Dict[str, Any],
        on_progress: ProgressCallback,
    ) -> None:
        params = dict(remote_params)
        bucket_name = params.pop("Bucket")
        key = params.pop("Key")
        acl = params.pop("ACL", None)
        total = os.path.getsize(local_file)
        on_progress(0, total)

        blob = self.gcs_client.bucket(bucket_name).blob(key)
        for param, attribute in BLOB_PROPERTIES.items():
            if param in params:
                setattr(blob, attribute, params.pop(param))

        if params:
            logger.warning(
                f"Ignoring upload parameters unsupported by GCS: {sorted(params)}"
            )

        predefined_acl = PREDEFINED_ACLS.get(acl) if acl else None
        if acl and predefined_acl is None:
            logger.warning(f"Unknown ACL '{acl}' for GCS, using bucket default")

        @retry_with_backoff(max_attempts=self.max_attempts, base_delay=2.0, max_delay=30.0)
        def _upload() -> None:
            blob.upload_from_filename(
                local_file,
                content_type=blob.content_type,
                predefined_acl=predefined_acl,
                timeout=self.timeout_seconds,
            )

        logger.debug(f"Uploading {local_file} -> gs://{bucket_name}/{key} ({total} bytes)")
        _upload()
        on_progress(total, total)
