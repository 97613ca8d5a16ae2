"""
Concurrent upload of build assets to object storage.

Resolves the remote key and per-file parameters for each asset, starts all
transfers at once and waits for them, with combined progress display.
"""

from .coordinator import (
    DEFAULT_UPLOAD_OPTIONS,
    REQUIRED_UPLOAD_OPTIONS,
    UploadCoordinator,
    build_upload_params,
    missing_upload_options,
    resolve_upload_params,
    validate_upload_options,
)

__all__ = [
    "DEFAULT_UPLOAD_OPTIONS",
    "REQUIRED_UPLOAD_OPTIONS",
    "UploadCoordinator",
    "build_upload_params",
    "missing_upload_options",
    "resolve_upload_params",
    "validate_upload_options",
]
