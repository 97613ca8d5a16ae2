"""
Prometheus metrics for the upload workflow.

Metrics Provided:
    - asset_upload_requests_total: Counter for file uploads by status
    - asset_upload_bytes_total: Counter for uploaded bytes
    - asset_upload_duration_seconds: Histogram for a whole build's upload phase
    - asset_active_uploads: Gauge for uploads in flight
    - cdn_invalidation_requests_total: Counter for invalidations by status
    - asset_build_duration_seconds: Histogram for the complete build step

Collection can be switched off with METRICS_ENABLED=false.

Usage:
    from asset_uploader.utils.metrics import get_metrics

    metrics = get_metrics()
    with metrics.track_upload():
        await coordinator.upload_all(files)
"""

import os
from contextlib import nullcontext
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    REGISTRY,
    CollectorRegistry,
)

from asset_uploader.utils.logging import get_logger

logger = get_logger(__name__)


class UploaderMetrics:
    """
    Prometheus collectors for the upload workflow.

    Example:
        >>> metrics = UploaderMetrics(registry=CollectorRegistry())
        >>> metrics.record_upload_success(bytes_uploaded=1024)
    """

    def __init__(self, enabled: bool = True, registry: Optional[CollectorRegistry] = None) -> None:
        """
        Initialize metrics collectors.

        Args:
            enabled: Whether metrics collection is enabled
            registry: Custom Prometheus registry (uses default if None)
        """
        self.enabled = enabled
        self.registry = registry if registry is not None else REGISTRY

        if not self.enabled:
            logger.debug("Metrics collection disabled")
            return

        self.upload_requests = Counter(
            name="asset_upload_requests_total",
            documentation="Total number of asset uploads",
            labelnames=["status"],  # success, failure
            registry=self.registry,
        )

        self.upload_bytes = Counter(
            name="asset_upload_bytes_total",
            documentation="Total bytes uploaded to object storage",
            registry=self.registry,
        )

        self.upload_duration = Histogram(
            name="asset_upload_duration_seconds",
            documentation="Time spent uploading all assets of a build",
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
            registry=self.registry,
        )

        self.active_uploads = Gauge(
            name="asset_active_uploads",
            documentation="Number of uploads currently in flight",
            registry=self.registry,
        )

        self.invalidation_requests = Counter(
            name="cdn_invalidation_requests_total",
            documentation="Total number of CDN invalidation requests",
            labelnames=["status"],  # success, failure
            registry=self.registry,
        )

        self.build_duration = Histogram(
            name="asset_build_duration_seconds",
            documentation="Time spent in the complete upload build step",
            labelnames=["status"],
            buckets=[0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
            registry=self.registry,
        )

    def track_upload(self):
        """Context manager timing a build's upload phase."""
        if not self.enabled:
            return nullcontext()
        return self.upload_duration.time()

    def upload_started(self) -> None:
        if self.enabled:
            self.active_uploads.inc()

    def record_upload_success(self, bytes_uploaded: int = 0) -> None:
        """
        Record a successful upload.

        Args:
            bytes_uploaded: Size of the uploaded file
        """
        if not self.enabled:
            return
        self.active_uploads.dec()
        self.upload_requests.labels(status="success").inc()
        if bytes_uploaded > 0:
            self.upload_bytes.inc(bytes_uploaded)

    def record_upload_failure(self) -> None:
        if not self.enabled:
            return
        self.active_uploads.dec()
        self.upload_requests.labels(status="failure").inc()

    def record_invalidation(self, success: bool) -> None:
        if not self.enabled:
            return
        self.invalidation_requests.labels(
            status="success" if success else "failure"
        ).inc()

    def record_build(self, duration_seconds: float, success: bool) -> None:
        if not self.enabled:
            return
        self.build_duration.labels(
            status="success" if success else "failure"
        ).observe(duration_seconds)


# Global metrics instance (singleton)
_metrics_instance: Optional[UploaderMetrics] = None


def get_metrics() -> UploaderMetrics:
    """
    Get global metrics instance (singleton).

    Returns:
        Global UploaderMetrics instance registered on the default registry
    """
    global _metrics_instance

    if _metrics_instance is None:
        enabled = os.getenv("METRICS_ENABLED", "true").lower() == "true"
        _metrics_instance = UploaderMetrics(enabled=enabled)

    return _metrics_instance
