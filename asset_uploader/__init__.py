"""
Asset Uploader

Uploads the assets emitted by a frontend build to object storage (S3 or
Google Cloud Storage) and optionally invalidates a CloudFront distribution.

This package provides modular components for each stage of the workflow:
- rules / filtering: include / exclude selection of emitted assets
- uploader: concurrent uploads with combined progress display
- invalidation: CDN invalidation after a successful upload
- plugin: the bundler-facing entry point tying the stages together
- storage / cdn: SDK-backed clients
- utils: logging, configuration, retry and metrics
"""

__version__ = "0.1.0"

from asset_uploader.utils.logging import setup_logging

# Initialize default logging configuration
setup_logging()

from asset_uploader.errors import (  # noqa: E402
    AssetUploaderError,
    ConfigurationError,
    EmptyInvalidationResponse,
    InvalidationError,
    InvalidRuleError,
    UploadFailedError,
)
from asset_uploader.models import AssetFile, BuildResult  # noqa: E402
from asset_uploader.plugin import AssetUploadPlugin, get_asset_files  # noqa: E402
from asset_uploader.rules import ListMode  # noqa: E402

__all__ = [
    "AssetFile",
    "AssetUploadPlugin",
    "AssetUploaderError",
    "BuildResult",
    "ConfigurationError",
    "EmptyInvalidationResponse",
    "InvalidRuleError",
    "InvalidationError",
    "ListMode",
    "UploadFailedError",
    "get_asset_files",
]
