"""
Bundler-facing plugin.

After the bundler emits a build, the plugin selects the assets to upload,
uploads them concurrently and, when a distribution is configured, requests a
CDN invalidation. Each stage starts only when the previous one succeeded.

Example usage:
    >>> plugin = AssetUploadPlugin(
    ...     include=r"\\.(js|css|html)$",
    ...     base_path="static",
    ...     storage_options={"provider": "s3", "region": "eu-west-1"},
    ...     upload_options={"Bucket": "my-site-assets"},
    ...     invalidate_options={"distribution_id": "E2EXAMPLE", "paths": ["/*"]},
    ... )
    >>> result = plugin.run({"app.js": "/build/dist/app.js"})
    >>> if not result.success:
    ...     print(result.error_message)
"""

import asyncio
import os
import time
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from asset_uploader.cdn import CDNClient, create_cdn_client
from asset_uploader.errors import ConfigurationError
from asset_uploader.filtering import filter_allowed_files
from asset_uploader.invalidation import InvalidationOptions, invalidate
from asset_uploader.models import AssetFile, BuildResult
from asset_uploader.paths import add_trailing_separator
from asset_uploader.progress import ProgressReporter, TqdmProgressReporter
from asset_uploader.rules import ListMode, to_rule
from asset_uploader.storage import StorageClient, create_client
from asset_uploader.uploader import UploadCoordinator, validate_upload_options
from asset_uploader.utils.logging import get_logger, set_correlation_id
from asset_uploader.utils.metrics import UploaderMetrics, get_metrics

logger = get_logger(__name__)

PLUGIN_NAME = "AssetUploadPlugin"

# Attributes checked, in order, on emitted asset objects for their local path
_ASSET_PATH_ATTRIBUTES = ("existsAt", "exists_at", "local_path", "path")


def _resolve_local_path(name: str, value: Any, output_dir: Optional[str]) -> str:
    path: Any = None
    if isinstance(value, (str, os.PathLike)):
        path = value
    else:
        for attribute in _ASSET_PATH_ATTRIBUTES:
            path = getattr(value, attribute, None)
            if path:
                break

    if not path:
        if output_dir is None:
            raise ConfigurationError(
                f"Cannot resolve a local path for asset '{name}' without an output directory"
            )
        path = os.path.join(output_dir, name)
    elif output_dir is not None and not os.path.isabs(path):
        path = os.path.join(output_dir, path)

    return os.fspath(path)


def get_asset_files(assets: Mapping[str, Any], output_dir: Optional[str] = None) -> List[AssetFile]:
    """
    Turn the bundler's emitted-asset mapping into AssetFiles.

    Args:
        assets: Output name -> local path, or an object exposing one
            (``existsAt``, ``exists_at``, ``local_path`` or ``path``)
        output_dir: Build output directory, used for relative or missing paths

    Returns:
        One AssetFile per emitted asset, in mapping order
    """
    return [
        AssetFile(name=name, local_path=_resolve_local_path(name, value, output_dir))
        for name, value in assets.items()
    ]


class AssetUploadPlugin:
    """
    Uploads emitted build assets to object storage.

    Configuration is fixed for the plugin's lifetime. The storage client is
    created on first use and reused for every later build.
    """

    def __init__(
        self,
        include: Any = None,
        exclude: Any = None,
        progress: Any = True,
        base_path: str = "",
        storage_options: Optional[Dict[str, Any]] = None,
        upload_options: Optional[Dict[str, Any]] = None,
        invalidate_options: Optional[Dict[str, Any]] = None,
        list_mode: ListMode = ListMode.ANY,
        client_factory: Callable[[Optional[Dict[str, Any]]], StorageClient] = create_client,
        cdn_client_factory: Callable[[Optional[Dict[str, Any]]], CDNClient] = create_cdn_client,
        reporter_factory: Callable[[], ProgressReporter] = TqdmProgressReporter,
        metrics: Optional[UploaderMetrics] = None,
    ) -> None:
        self.include = include
        self.exclude = exclude
        self.progress = progress if isinstance(progress, bool) else True
        self.base_path = add_trailing_separator(base_path) if base_path else ""
        self.storage_options = dict(storage_options or {})
        self.upload_options = dict(upload_options or {})
        self.invalidate_options = InvalidationOptions.from_mapping(invalidate_options)
        self.list_mode = ListMode(list_mode)

        self._client_factory = client_factory
        self._cdn_client_factory = cdn_client_factory
        self._reporter_factory = reporter_factory
        self._metrics = metrics or get_metrics()
        self._client: Optional[StorageClient] = None

    @staticmethod
    def options_from_config(config: Mapping[str, Any]) -> Dict[str, Any]:
        """Map a loaded configuration file onto constructor arguments."""
        return {
            "include": config.get("include"),
            "exclude": config.get("exclude"),
            "progress": config.get("progress", True),
            "base_path": config.get("base_path") or "",
            "storage_options": config.get("storage"),
            "upload_options": dict(config.get("upload") or {}),
            "invalidate_options": dict(config.get("invalidation") or {}),
            "list_mode": ListMode(config.get("list_mode", ListMode.ANY.value)),
        }

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides: Any) -> "AssetUploadPlugin":
        """
        Build a plugin from a loaded configuration file.

        Args:
            config: Mapping as returned by ``load_config``
            **overrides: Constructor arguments that win over the file
        """
        options = cls.options_from_config(config)
        options.update(overrides)
        return cls(**options)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> StorageClient:
        """Create the storage client once; later calls return the same one."""
        if self._client is None:
            logger.info("Connecting storage client")
            self._client = self._client_factory(self.storage_options)
        return self._client

    async def after_emit(
        self,
        assets: Mapping[str, Any],
        output_dir: Optional[str] = None,
    ) -> BuildResult:
        """
        Upload one build and invalidate the CDN.

        Args:
            assets: Output name -> local path (or object exposing one)
            output_dir: Build output directory

        Returns:
            Successful BuildResult

        Raises:
            ConfigurationError: Missing upload options or invalid rules,
                before anything is sent over the network
            UploadFailedError: A file failed to upload
            InvalidationError: The CDN invalidation failed
        """
        validate_upload_options(self.upload_options)

        include = to_rule(self.include, mode=self.list_mode) if self.include is not None else None
        exclude = to_rule(self.exclude, mode=self.list_mode) if self.exclude is not None else None

        files = get_asset_files(assets, output_dir)
        allowed = filter_allowed_files(files, include, exclude)

        coordinator = UploadCoordinator(
            client=self.connect(),
            upload_options=self.upload_options,
            base_path=self.base_path,
            progress=self.progress,
            reporter_factory=self._reporter_factory,
            metrics=self._metrics,
        )
        uploaded = await coordinator.upload_all(allowed)

        invalidation_id = await invalidate(
            self.invalidate_options,
            client_factory=self._cdn_client_factory,
            credentials=self.storage_options,
            metrics=self._metrics,
        )

        return BuildResult(success=True, uploaded=uploaded, invalidation_id=invalidation_id)

    def run(self, assets: Mapping[str, Any], output_dir: Optional[str] = None) -> BuildResult:
        """
        Synchronous entry point for bundler hooks.

        Never raises for build failures; the error is returned on the result.
        """
        set_correlation_id(f"build-{uuid.uuid4().hex[:12]}")
        start_time = time.time()

        try:
            result = asyncio.run(self.after_emit(assets, output_dir))
        except Exception as e:
            logger.error(f"{PLUGIN_NAME} build step failed: {e}", exc_info=True)
            self._metrics.record_build(time.time() - start_time, success=False)
            return BuildResult(success=False, error=e)

        self._metrics.record_build(time.time() - start_time, success=True)
        logger.info(
            f"{PLUGIN_NAME} uploaded {len(result.uploaded)} file(s)"
            + (f", invalidation {result.invalidation_id}" if result.invalidation_id else "")
        )
        return result
