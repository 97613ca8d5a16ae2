"""Shared fixtures for the asset uploader tests."""

import pytest
from prometheus_client import CollectorRegistry

from asset_uploader.utils.metrics import UploaderMetrics
from tests.fakes import FakeCDNClient, FakeStorageClient, RecordingReporter


@pytest.fixture
def metrics() -> UploaderMetrics:
    """Metrics bound to a private registry."""
    return UploaderMetrics(registry=CollectorRegistry())


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def cdn_client() -> FakeCDNClient:
    return FakeCDNClient()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def dist_dir(tmp_path):
    """Build output directory with a handful of emitted files."""
    dist = tmp_path / "dist"
    (dist / "images").mkdir(parents=True)
    (dist / "index.html").write_text("<html></html>")
    (dist / "app.js").write_text("console.log('app');")
    (dist / "images" / "logo.png").write_bytes(b"\x89PNG\r\n")
    (dist / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    (dist / ".DS_Store").write_bytes(b"\x00")
    return dist
