"""
Upload coordination.

Starts one transfer per qualifying asset, all at once, and waits for every
one of them. The first failure fails the whole upload; transfers still in
flight are left to finish on their own.

Example usage:
    >>> coordinator = UploadCoordinator(
    ...     client=create_client({"provider": "s3"}),
    ...     upload_options={"Bucket": "my-site", "CacheControl": "max-age=300"},
    ...     base_path="static/",
    ... )
    >>> uploaded = await coordinator.upload_all(files)
"""

import asyncio
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from asset_uploader.errors import ConfigurationError, UploadFailedError
from asset_uploader.models import AssetFile, UploadTask
from asset_uploader.paths import add_trailing_separator, build_remote_key, normalize_asset_name
from asset_uploader.progress import ProgressAggregator, ProgressReporter, TqdmProgressReporter
from asset_uploader.storage import StorageClient
from asset_uploader.utils.logging import get_logger, log_function_call
from asset_uploader.utils.metrics import UploaderMetrics, get_metrics

logger = get_logger(__name__)

# Applied to every upload unless overridden by upload options
DEFAULT_UPLOAD_OPTIONS = {"ACL": "public-read"}

REQUIRED_UPLOAD_OPTIONS = ["Bucket"]

# Icons are never served gzip-encoded
ICON_FILE = re.compile(r"\.ico$", re.IGNORECASE)
GZIP_ENCODING = "gzip"


def missing_upload_options(upload_options: Mapping[str, Any]) -> List[str]:
    return [key for key in REQUIRED_UPLOAD_OPTIONS if not upload_options.get(key)]


def validate_upload_options(upload_options: Mapping[str, Any]) -> None:
    """
    Check that every required upload option is set.

    Raises:
        ConfigurationError: Naming the missing keys
    """
    missing = missing_upload_options(upload_options)
    if missing:
        raise ConfigurationError(
            f"Missing required upload options: {', '.join(missing)}",
            missing_keys=missing,
        )


def resolve_upload_params(
    upload_options: Mapping[str, Any],
    file_name: str,
    local_path: str,
) -> Dict[str, Any]:
    """
    Resolve per-file upload parameters.

    Callable option values are invoked with ``(file_name, local_path)``;
    anything else is used verbatim. ``ContentEncoding: gzip`` is dropped for
    ``.ico`` files.
    """
    params = {
        key: value(file_name, local_path) if callable(value) else value
        for key, value in upload_options.items()
    }

    if ICON_FILE.search(file_name) and params.get("ContentEncoding") == GZIP_ENCODING:
        del params["ContentEncoding"]

    return params


def build_upload_params(key: str, resolved: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge computed key < default options < resolved options."""
    params: Dict[str, Any] = {"Key": key}
    params.update(DEFAULT_UPLOAD_OPTIONS)
    params.update(resolved)
    return params


class UploadCoordinator:
    """
    Uploads a set of assets concurrently through a storage client.

    Attributes:
        client: Storage client shared by all transfers
        upload_options: Literal values or ``(file_name, local_path) -> value`` resolvers
        base_path: Key prefix, always ending in "/" when non-empty
        progress: Whether to display combined progress
    """

    def __init__(
        self,
        client: StorageClient,
        upload_options: Mapping[str, Any],
        base_path: str = "",
        progress: bool = True,
        reporter_factory: Callable[[], ProgressReporter] = TqdmProgressReporter,
        metrics: Optional[UploaderMetrics] = None,
    ) -> None:
        self.client = client
        self.upload_options = dict(upload_options)
        self.base_path = add_trailing_separator(base_path)
        self.progress = progress
        self._reporter_factory = reporter_factory
        self._metrics = metrics or get_metrics()

    def upload_file(self, asset: AssetFile) -> UploadTask:
        """
        Start the upload of a single asset.

        Returns:
            UploadTask whose handle completes when the transfer ends

        Raises:
            UploadFailedError: If the storage client refuses the transfer
        """
        file_name = normalize_asset_name(asset.name)
        key = build_remote_key(self.base_path, file_name)
        resolved = resolve_upload_params(self.upload_options, file_name, asset.local_path)
        params = build_upload_params(key, resolved)

        logger.debug(f"Starting upload: {asset.local_path} -> {key}")
        try:
            handle = self.client.upload_file(local_file=asset.local_path, remote_params=params)
        except Exception as e:
            raise UploadFailedError(file_name, key, e) from e

        self._metrics.upload_started()
        return UploadTask(file=asset, remote_key=key, params=params, handle=handle)

    @log_function_call
    async def upload_all(self, files: Iterable[AssetFile]) -> List[str]:
        """
        Upload every asset concurrently.

        Args:
            files: Assets that passed filtering

        Returns:
            Local paths of the uploaded files, in input order

        Raises:
            UploadFailedError: For the first transfer that fails
        """
        files = list(files)
        if not files:
            logger.info("No assets to upload")
            return []

        logger.info(f"Uploading {len(files)} asset(s) to {self.base_path or '/'}")

        with self._metrics.track_upload():
            tasks = [self.upload_file(asset) for asset in files]

            aggregator = None
            if self.progress:
                aggregator = ProgressAggregator(
                    (task.handle for task in tasks), self._reporter_factory()
                )

            waiters = [asyncio.ensure_future(self._wait(task)) for task in tasks]
            for waiter in waiters:
                waiter.add_done_callback(_consume_exception)

            try:
                uploaded = await asyncio.gather(*waiters)
            finally:
                if aggregator is not None:
                    aggregator.close()

        logger.info(f"Upload complete: {len(uploaded)} file(s)")
        return list(uploaded)

    async def _wait(self, task: UploadTask) -> str:
        try:
            local_path = await task.handle
        except Exception as e:
            self._metrics.record_upload_failure()
            logger.error(
                f"Upload failed: {task.file.local_path} -> {task.remote_key}: {e}"
            )
            raise UploadFailedError(
                normalize_asset_name(task.file.name), task.remote_key, e
            ) from e

        self._metrics.record_upload_success(bytes_uploaded=task.handle.progress_total or 0)
        logger.debug(f"Uploaded {task.remote_key}")
        return local_path


def _consume_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()
