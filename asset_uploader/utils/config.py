"""
Environment configuration loader for the asset uploader.

Loads configuration from a .env file or environment variables, for builds
that configure the uploader through CI secrets rather than a config file.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

from asset_uploader.errors import ConfigurationError
from asset_uploader.storage.base import DEFAULT_MAX_CONCURRENCY

DEFAULT_ENV_FILE_NAME = ".env"


def _split_paths(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class UploaderSettings:
    """Uploader environment configuration."""

    # Object storage
    bucket: str
    base_path: str = ""
    provider: str = "s3"
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    # Credentials (boto3 falls back to its own chain when unset)
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None

    # CDN
    distribution_id: Optional[str] = None
    invalidation_paths: List[str] = field(default_factory=lambda: ["/*"])

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "UploaderSettings":
        """
        Load configuration from environment variables.

        Loads ``env_file`` (default: ./.env) first if it exists; variables
        already set in the environment win.

        Returns:
            UploaderSettings instance with loaded values

        Raises:
            ConfigurationError: If ASSET_UPLOAD_BUCKET is missing
        """
        env_path = env_file or Path.cwd() / DEFAULT_ENV_FILE_NAME
        if env_path.exists():
            load_dotenv(env_path)

        bucket = os.getenv("ASSET_UPLOAD_BUCKET")
        if not bucket:
            raise ConfigurationError(
                "ASSET_UPLOAD_BUCKET environment variable is required. "
                "Set it in .env or export it.",
                missing_keys=["ASSET_UPLOAD_BUCKET"],
            )

        return cls(
            bucket=bucket,
            base_path=os.getenv("ASSET_UPLOAD_BASE_PATH", ""),
            provider=os.getenv("STORAGE_PROVIDER", "s3").lower(),
            region=os.getenv("AWS_REGION"),
            endpoint_url=os.getenv("S3_ENDPOINT_URL"),
            max_concurrency=int(
                os.getenv("MAX_CONCURRENT_UPLOADS", str(DEFAULT_MAX_CONCURRENCY))
            ),
            access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            session_token=os.getenv("AWS_SESSION_TOKEN"),
            distribution_id=os.getenv("CLOUDFRONT_DISTRIBUTION_ID"),
            invalidation_paths=_split_paths(
                os.getenv("CLOUDFRONT_INVALIDATION_PATHS", "/*")
            ),
        )

    def storage_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "provider": self.provider,
            "max_concurrency": self.max_concurrency,
        }
        for key in ("region", "endpoint_url", "access_key_id", "secret_access_key", "session_token"):
            value = getattr(self, key)
            if value:
                options[key] = value
        return options

    def plugin_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``AssetUploadPlugin``."""
        return {
            "base_path": self.base_path,
            "storage_options": self.storage_options(),
            "upload_options": {"Bucket": self.bucket},
            "invalidate_options": {
                "distribution_id": self.distribution_id,
                "paths": list(self.invalidation_paths),
            },
        }


# Global settings instance (lazy-loaded)
_settings: Optional[UploaderSettings] = None


def get_settings() -> UploaderSettings:
    """
    Get or create uploader settings singleton.

    Example:
        >>> settings = get_settings()
        >>> print(settings.bucket)
        my-site-assets
    """
    global _settings
    if _settings is None:
        _settings = UploaderSettings.from_env()
    return _settings
