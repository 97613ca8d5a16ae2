"""Integration tests for end-to-end upload workflows.

These tests verify that all components work together correctly:
- Emitted assets -> filtering -> S3 uploads -> CloudFront invalidation
- Config-file driven builds
- CLI script execution
- Error handling when the storage backend fails
"""

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from asset_uploader import AssetUploadPlugin
from asset_uploader.cdn import CloudFrontClient
from asset_uploader.errors import UploadFailedError
from asset_uploader.storage.s3 import S3StorageClient
from asset_uploader.utils.config_loader import load_config, validate_config

project_root = Path(__file__).parent.parent.parent


@pytest.fixture
def emitted_assets(dist_dir: Path, tmp_path: Path):
    """Asset mapping as a bundler reports it, including a file outside dist/."""
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "font.woff").write_bytes(b"wOFF")
    return {
        "index.html": "index.html",
        "app.js": "app.js",
        "images/logo.png": "images/logo.png",
        "favicon.ico": "favicon.ico",
        ".DS_Store": ".DS_Store",
        "../shared/font.woff": str(shared / "font.woff"),
    }


@pytest.fixture
def s3_mock():
    return MagicMock()


@pytest.fixture
def cloudfront_mock():
    mock = MagicMock()
    mock.create_invalidation.return_value = {
        "Location": "https://cloudfront.amazonaws.com/2020-05-31/distribution/E2EXAMPLE/invalidation/I1",
        "Invalidation": {"Id": "I1", "Status": "InProgress"},
    }
    return mock


def make_plugin(s3_mock, cloudfront_mock, metrics, **kwargs):
    return AssetUploadPlugin(
        client_factory=lambda options: S3StorageClient(boto_client=s3_mock, max_concurrency=2),
        cdn_client_factory=lambda credentials: CloudFrontClient(boto_client=cloudfront_mock),
        metrics=metrics,
        progress=False,
        **kwargs,
    )


class TestUploadWorkflow:
    """Test the complete build step against mocked AWS clients."""

    def test_full_build(self, emitted_assets, dist_dir, s3_mock, cloudfront_mock, metrics):
        """Test every qualifying file is uploaded and the CDN invalidated."""
        plugin = make_plugin(
            s3_mock,
            cloudfront_mock,
            metrics,
            exclude=r"\.html$",
            base_path="static",
            upload_options={
                "Bucket": "site-assets",
                "ContentEncoding": "gzip",
                "CacheControl": lambda name, path: "no-cache" if name.endswith(".js") else "max-age=31536000",
            },
            invalidate_options={"distribution_id": "E2EXAMPLE", "paths": ["/static/*"]},
        )

        result = plugin.run(emitted_assets, output_dir=str(dist_dir))

        assert result.success is True, result.error_message
        assert result.invalidation_id == "I1"
        assert len(result.uploaded) == 4

        calls = {call.args[2]: call for call in s3_mock.upload_file.call_args_list}
        assert sorted(calls) == [
            "static/app.js",
            "static/favicon.ico",
            "static/images/logo.png",
            "static/shared/font.woff",
        ]
        assert all(call.args[1] == "site-assets" for call in calls.values())
        assert calls["static/app.js"].kwargs["ExtraArgs"] == {
            "ACL": "public-read",
            "ContentEncoding": "gzip",
            "CacheControl": "no-cache",
        }
        assert calls["static/favicon.ico"].kwargs["ExtraArgs"] == {
            "ACL": "public-read",
            "CacheControl": "max-age=31536000",
        }
        assert calls["static/app.js"].args[0] == str(dist_dir / "app.js")

        cloudfront_mock.create_invalidation.assert_called_once()
        batch = cloudfront_mock.create_invalidation.call_args.kwargs["InvalidationBatch"]
        assert batch["Paths"] == {"Quantity": 1, "Items": ["/static/*"]}

    def test_storage_failure(self, emitted_assets, dist_dir, s3_mock, cloudfront_mock, metrics):
        """Test a persistent S3 error fails the build and skips invalidation."""

        def upload_file(local_file, bucket, key, ExtraArgs=None, Callback=None):
            if key == "app.js":
                raise ConnectionError("connection reset by peer")

        s3_mock.upload_file.side_effect = upload_file
        plugin = make_plugin(
            s3_mock,
            cloudfront_mock,
            metrics,
            upload_options={"Bucket": "site-assets"},
            invalidate_options={"distribution_id": "E2EXAMPLE"},
        )

        with patch("asset_uploader.utils.retry.time"):
            result = plugin.run(emitted_assets, output_dir=str(dist_dir))

        assert result.success is False
        assert isinstance(result.error, UploadFailedError)
        assert "Failed uploading file: app.js with Key app.js" in result.error_message
        cloudfront_mock.create_invalidation.assert_not_called()


class TestConfigDrivenBuild:
    """Test builds configured from a YAML file."""

    def test_config_file_build(self, tmp_path, emitted_assets, dist_dir, s3_mock, cloudfront_mock, metrics):
        config_file = tmp_path / "asset-uploader.yaml"
        config_file.write_text(
            """
version: "1.0"
include: ['\\.js$', '\\.png$']
upload:
  Bucket: site-assets
  ACL: private
"""
        )

        config = load_config(config_file)
        assert validate_config(config) == []

        plugin = AssetUploadPlugin.from_config(
            config,
            client_factory=lambda options: S3StorageClient(boto_client=s3_mock),
            metrics=metrics,
            progress=False,
        )
        result = plugin.run(emitted_assets, output_dir=str(dist_dir))

        assert result.success is True
        keys = sorted(call.args[2] for call in s3_mock.upload_file.call_args_list)
        assert keys == ["app.js", "images/logo.png"]
        assert all(
            call.kwargs["ExtraArgs"] == {"ACL": "private"}
            for call in s3_mock.upload_file.call_args_list
        )


class TestUploadCLI:
    """Test the upload.py CLI script."""

    def test_help_message(self):
        result = subprocess.run(
            [sys.executable, str(project_root / "scripts" / "upload.py"), "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "Upload build output assets to object storage" in result.stdout

    def test_invalid_config_file(self, tmp_path, dist_dir):
        """Test an invalid config file is reported and nothing is uploaded."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text('version: "1.0"\nupload: {}\n')

        result = subprocess.run(
            [
                sys.executable,
                str(project_root / "scripts" / "upload.py"),
                str(dist_dir),
                "--config",
                str(config_file),
            ],
            capture_output=True,
            text=True,
        )

        assert result.returncode == 1
        assert "upload.Bucket: Missing required field" in result.stdout
