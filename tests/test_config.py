"""Tests for environment configuration."""

import pytest

from asset_uploader.errors import ConfigurationError
from asset_uploader.utils.config import UploaderSettings, get_settings

ENV_VARS = [
    "ASSET_UPLOAD_BUCKET",
    "ASSET_UPLOAD_BASE_PATH",
    "STORAGE_PROVIDER",
    "AWS_REGION",
    "S3_ENDPOINT_URL",
    "MAX_CONCURRENT_UPLOADS",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "CLOUDFRONT_DISTRIBUTION_ID",
    "CLOUDFRONT_INVALIDATION_PATHS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Start every test from an empty environment and no .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestUploaderSettings:
    """Test UploaderSettings dataclass and loading."""

    def test_settings_creation(self):
        """Test direct UploaderSettings instantiation."""
        settings = UploaderSettings(bucket="site-assets")

        assert settings.bucket == "site-assets"
        assert settings.base_path == ""
        assert settings.provider == "s3"
        assert settings.max_concurrency == 50
        assert settings.distribution_id is None
        assert settings.invalidation_paths == ["/*"]

    def test_from_env_missing_required(self):
        """Test from_env raises ConfigurationError when the bucket is missing."""
        with pytest.raises(ConfigurationError, match="ASSET_UPLOAD_BUCKET.*required") as exc_info:
            UploaderSettings.from_env()
        assert exc_info.value.missing_keys == ["ASSET_UPLOAD_BUCKET"]

    def test_from_env_with_required_only(self, monkeypatch):
        """Test from_env with only required environment variables."""
        monkeypatch.setenv("ASSET_UPLOAD_BUCKET", "env-bucket")

        settings = UploaderSettings.from_env()

        assert settings.bucket == "env-bucket"
        assert settings.region is None
        assert settings.access_key_id is None
        assert settings.invalidation_paths == ["/*"]

    def test_from_env_with_all_vars(self, monkeypatch):
        """Test from_env loads all environment variables correctly."""
        monkeypatch.setenv("ASSET_UPLOAD_BUCKET", "full-bucket")
        monkeypatch.setenv("ASSET_UPLOAD_BASE_PATH", "static/")
        monkeypatch.setenv("STORAGE_PROVIDER", "GCS")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
        monkeypatch.setenv("MAX_CONCURRENT_UPLOADS", "8")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        monkeypatch.setenv("AWS_SESSION_TOKEN", "token")
        monkeypatch.setenv("CLOUDFRONT_DISTRIBUTION_ID", "E2EXAMPLE")
        monkeypatch.setenv("CLOUDFRONT_INVALIDATION_PATHS", "/index.html, /static/*,")

        settings = UploaderSettings.from_env()

        assert settings.bucket == "full-bucket"
        assert settings.base_path == "static/"
        assert settings.provider == "gcs"
        assert settings.region == "eu-west-1"
        assert settings.endpoint_url == "http://localhost:9000"
        assert settings.max_concurrency == 8
        assert settings.access_key_id == "AKIA"
        assert settings.secret_access_key == "secret"
        assert settings.session_token == "token"
        assert settings.distribution_id == "E2EXAMPLE"
        assert settings.invalidation_paths == ["/index.html", "/static/*"]

    def test_from_env_file(self, tmp_path):
        """Test values are read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("ASSET_UPLOAD_BUCKET=dotenv-bucket\nAWS_REGION=us-east-2\n")

        settings = UploaderSettings.from_env()

        assert settings.bucket == "dotenv-bucket"
        assert settings.region == "us-east-2"

    def test_environment_wins_over_env_file(self, monkeypatch, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("ASSET_UPLOAD_BUCKET=dotenv-bucket\n")
        monkeypatch.setenv("ASSET_UPLOAD_BUCKET", "exported-bucket")

        assert UploaderSettings.from_env(env_file=env_file).bucket == "exported-bucket"

    def test_plugin_options(self):
        """Test conversion into plugin keyword arguments."""
        settings = UploaderSettings(
            bucket="site-assets",
            base_path="static",
            region="eu-west-1",
            access_key_id="AKIA",
            distribution_id="E2EXAMPLE",
        )

        assert settings.plugin_options() == {
            "base_path": "static",
            "storage_options": {
                "provider": "s3",
                "max_concurrency": 50,
                "region": "eu-west-1",
                "access_key_id": "AKIA",
            },
            "upload_options": {"Bucket": "site-assets"},
            "invalidate_options": {"distribution_id": "E2EXAMPLE", "paths": ["/*"]},
        }

    def test_get_settings_singleton(self, monkeypatch):
        """Test get_settings returns singleton instance."""
        monkeypatch.setenv("ASSET_UPLOAD_BUCKET", "singleton-bucket")

        import asset_uploader.utils.config as config_module

        monkeypatch.setattr(config_module, "_settings", None)

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
        assert settings1.bucket == "singleton-bucket"
