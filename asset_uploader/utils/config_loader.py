"""
Configuration file loader and validator.

Loads YAML plugin configuration for builds driven by the CLI or by a bundler
integration that keeps its settings in a file. Rules in YAML are strings
(regular expressions) or lists of strings.

Example config file (asset-uploader.yaml):
    ```yaml
    version: "1.0"

    include: ['\\.(js|css|html)$', 'images/']
    exclude: '\\.map$'
    list_mode: any
    base_path: static/
    progress: true

    storage:
      provider: s3
      region: eu-west-1

    upload:
      Bucket: my-site-assets
      CacheControl: max-age=31536000

    invalidation:
      distribution_id: E2EXAMPLE
      paths: ['/index.html', '/static/*']
    ```

Usage:
    >>> from asset_uploader.utils.config_loader import load_config, validate_config
    >>> config = load_config("asset-uploader.yaml")
    >>> issues = validate_config(config)
    >>> if not issues:
    ...     plugin = AssetUploadPlugin.from_config(config)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from asset_uploader.rules import ListMode
from asset_uploader.storage import SUPPORTED_PROVIDERS
from asset_uploader.uploader import REQUIRED_UPLOAD_OPTIONS
from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)


# Supported config versions
SUPPORTED_VERSIONS = ["1.0"]

VALID_LIST_MODES = [mode.value for mode in ListMode]


@dataclass
class ConfigIssue:
    """Validation error in configuration file."""

    field: str
    message: str
    value: Optional[Any] = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value})"
        return f"{self.field}: {self.message}"


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing parsed configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the path is not a file, or the file is empty or not a mapping
        yaml.YAMLError: If YAML is malformed
    """
    path = Path(config_path)
    logger.info(f"Loading configuration from: {path}")

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Configuration path is not a file: {path}")

    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise

    if config is None:
        raise ValueError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ValueError(
            f"Configuration must be a mapping, got {type(config).__name__}"
        )

    logger.info(f"Configuration loaded: {path.name}")
    return config


def _is_rule_value(value: Any) -> bool:
    if isinstance(value, str):
        return True
    if isinstance(value, list):
        return all(_is_rule_value(item) for item in value)
    return False


def validate_config(config: Dict[str, Any]) -> List[ConfigIssue]:
    """
    Validate configuration against expected schema.

    Args:
        config: Configuration dictionary to validate

    Returns:
        List of validation issues (empty if valid)

    Example:
        >>> issues = validate_config({"version": "1.0", "upload": {}})
        >>> [str(issue) for issue in issues]
        ['upload.Bucket: Missing required field']
    """
    issues: List[ConfigIssue] = []

    if "version" not in config:
        issues.append(ConfigIssue("version", "Missing required field"))
    elif str(config["version"]) not in SUPPORTED_VERSIONS:
        issues.append(
            ConfigIssue(
                "version",
                f"Unsupported version, expected one of {SUPPORTED_VERSIONS}",
                config["version"],
            )
        )

    for rule_field in ("include", "exclude"):
        if rule_field in config and config[rule_field] is not None:
            if not _is_rule_value(config[rule_field]):
                issues.append(
                    ConfigIssue(
                        rule_field,
                        "Must be a pattern string or a list of pattern strings",
                        config[rule_field],
                    )
                )

    if "list_mode" in config and config["list_mode"] not in VALID_LIST_MODES:
        issues.append(
            ConfigIssue(
                "list_mode", f"Must be one of {VALID_LIST_MODES}", config["list_mode"]
            )
        )

    if "progress" in config and not isinstance(config["progress"], bool):
        issues.append(ConfigIssue("progress", "Must be true or false", config["progress"]))

    if "base_path" in config and not isinstance(config["base_path"], str):
        issues.append(ConfigIssue("base_path", "Must be a string", config["base_path"]))

    storage = config.get("storage") or {}
    if not isinstance(storage, dict):
        issues.append(ConfigIssue("storage", "Must be a mapping", storage))
    elif "provider" in storage and storage["provider"] not in SUPPORTED_PROVIDERS:
        issues.append(
            ConfigIssue(
                "storage.provider",
                f"Must be one of {SUPPORTED_PROVIDERS}",
                storage["provider"],
            )
        )

    upload = config.get("upload")
    if not isinstance(upload, dict):
        issues.append(ConfigIssue("upload", "Missing required section"))
    else:
        for key in REQUIRED_UPLOAD_OPTIONS:
            if not upload.get(key):
                issues.append(ConfigIssue(f"upload.{key}", "Missing required field"))

    invalidation = config.get("invalidation")
    if invalidation is not None:
        if not isinstance(invalidation, dict):
            issues.append(ConfigIssue("invalidation", "Must be a mapping", invalidation))
        else:
            paths = invalidation.get("paths")
            if paths is not None and (
                not isinstance(paths, list)
                or not all(isinstance(path, str) for path in paths)
            ):
                issues.append(
                    ConfigIssue("invalidation.paths", "Must be a list of strings", paths)
                )

    if issues:
        logger.warning(f"Configuration has {len(issues)} issue(s)")
    return issues
