"""
Utility modules for the asset uploader.

This package provides shared utilities used across all stages:
- logging: Structured logging with entry/exit decorators
- config / config_loader: Environment and YAML configuration
- retry: Backoff for blocking SDK calls in the storage and CDN backends
- metrics: Prometheus collectors
"""

from asset_uploader.utils.logging import get_logger, log_function_call

__all__ = ["get_logger", "log_function_call"]
