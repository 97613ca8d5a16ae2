"""
CDN clients used to invalidate cached assets after an upload.
"""

from .base import CDNClient
from .cloudfront import CloudFrontClient, create_cdn_client

__all__ = [
    "CDNClient",
    "CloudFrontClient",
    "create_cdn_client",
]
