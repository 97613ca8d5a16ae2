#!/usr/bin/env python3
"""
Upload a built output directory to object storage.

CLI wrapper running the same select / upload / invalidate workflow the
bundler plugin runs, for builds that are not driven by a bundler hook.
Settings come from a YAML config file (--config) or from the environment.

Usage:
    python scripts/upload.py dist/
    python scripts/upload.py dist/ --config asset-uploader.yaml
    python scripts/upload.py dist/ --include '\\.js$' --exclude '\\.map$'
    python scripts/upload.py dist/ --base-path static/ --no-progress
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path for imports (before other imports)
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from asset_uploader import AssetUploadPlugin  # noqa: E402
from asset_uploader.errors import ConfigurationError  # noqa: E402
from asset_uploader.utils.config import UploaderSettings  # noqa: E402
from asset_uploader.utils.config_loader import load_config, validate_config  # noqa: E402
from asset_uploader.utils.logging import get_logger, setup_logging  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv: List[str] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Upload build output assets to object storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload everything in dist/ using environment settings
  %(prog)s dist/

  # Use a YAML configuration file
  %(prog)s dist/ --config asset-uploader.yaml

  # Only JavaScript and CSS, never source maps
  %(prog)s dist/ --include '\\.js$' --include '\\.css$' --exclude '\\.map$'

  # Upload under a key prefix and invalidate CloudFront
  %(prog)s dist/ --base-path static/ --distribution-id E2EXAMPLE
        """,
    )

    parser.add_argument(
        "directory",
        help="Build output directory to upload",
    )

    parser.add_argument(
        "-c",
        "--config",
        help="YAML configuration file (default: settings from environment)",
    )

    parser.add_argument(
        "-i",
        "--include",
        action="append",
        help="Regex an asset name must match (repeatable, any may match)",
    )

    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        help="Regex excluding matching asset names (repeatable)",
    )

    parser.add_argument(
        "-b",
        "--base-path",
        help="Key prefix inside the bucket",
    )

    parser.add_argument(
        "--bucket",
        help="Bucket name (overrides config / ASSET_UPLOAD_BUCKET)",
    )

    parser.add_argument(
        "--distribution-id",
        help="CloudFront distribution to invalidate after upload",
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def collect_assets(directory: Path) -> Dict[str, str]:
    """Map output-relative names to absolute paths for every file under ``directory``."""
    assets: Dict[str, str] = {}
    for path in sorted(directory.rglob("*")):
        if path.is_file():
            assets[path.relative_to(directory).as_posix()] = str(path.resolve())
    return assets


def build_plugin_options(args) -> Dict[str, Any]:
    """Combine config file (or environment) settings with CLI overrides."""
    if args.config:
        config = load_config(args.config)
        issues = validate_config(config)
        if args.bucket:
            issues = [issue for issue in issues if issue.field != "upload.Bucket"]
        if issues:
            raise ConfigurationError(
                "Invalid configuration:\n" + "\n".join(f"  - {issue}" for issue in issues)
            )
        options = AssetUploadPlugin.options_from_config(config)
    else:
        if args.bucket:
            os.environ.setdefault("ASSET_UPLOAD_BUCKET", args.bucket)
        options = UploaderSettings.from_env().plugin_options()

    if args.include:
        options["include"] = args.include
    if args.exclude:
        options["exclude"] = args.exclude
    if args.base_path is not None:
        options["base_path"] = args.base_path
    if args.bucket:
        options["upload_options"]["Bucket"] = args.bucket
    if args.distribution_id:
        options["invalidate_options"]["distribution_id"] = args.distribution_id
    if args.no_progress:
        options["progress"] = False

    return options


def main(argv: List[str] = None) -> int:
    """Main entry point for upload CLI."""
    args = parse_args(argv)

    setup_logging("DEBUG" if args.verbose else "INFO")

    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"❌ Not a directory: {directory}")
        return 1

    try:
        options = build_plugin_options(args)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        print(f"❌ Configuration error: {e}")
        return 1

    assets = collect_assets(directory)
    if not assets:
        print(f"❌ No files found in {directory}")
        return 1

    bucket = options["upload_options"].get("Bucket")
    print(f"📤 Uploading from {directory} ({len(assets)} file(s) found)")
    print(f"   Bucket: {bucket}")
    if options.get("base_path"):
        print(f"   Base path: {options['base_path']}")
    print()

    try:
        plugin = AssetUploadPlugin(**options)
        result = plugin.run(assets, output_dir=str(directory.resolve()))
    except KeyboardInterrupt:
        print("\n⚠️  Upload cancelled by user")
        return 130

    if not result.success:
        print("❌ Upload failed:")
        print(f"  Error: {result.error_message}")
        return 1

    print("✅ Upload successful!")
    print(f"  Files uploaded: {len(result.uploaded)}")
    if result.invalidation_id:
        print(f"  Invalidation: {result.invalidation_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
