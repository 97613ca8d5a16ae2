"""Tests for the CloudFront client."""

from unittest.mock import MagicMock, patch

import pytest

from asset_uploader.cdn import CloudFrontClient, create_cdn_client


class TestCloudFrontClient:
    """Test CloudFront invalidation requests."""

    def test_create_invalidation_request_shape(self):
        """Test the invalidation batch sent to CloudFront."""
        boto_client = MagicMock()
        boto_client.create_invalidation.return_value = {"Invalidation": {"Id": "I1"}}
        client = CloudFrontClient(boto_client=boto_client)

        response = client.create_invalidation(
            "E2EXAMPLE", ("/index.html", "/static/*"), "1700000000000"
        )

        assert response == {"Invalidation": {"Id": "I1"}}
        boto_client.create_invalidation.assert_called_once_with(
            DistributionId="E2EXAMPLE",
            InvalidationBatch={
                "CallerReference": "1700000000000",
                "Paths": {"Quantity": 2, "Items": ["/index.html", "/static/*"]},
            },
        )

    @patch("asset_uploader.utils.retry.time")
    def test_retries_transient_errors(self, mock_time):
        boto_client = MagicMock()
        boto_client.create_invalidation.side_effect = [
            ConnectionError("throttled"),
            {"Invalidation": {"Id": "I2"}},
        ]
        client = CloudFrontClient(boto_client=boto_client)

        assert client.create_invalidation("E2EXAMPLE", ["/*"], "1") == {"Invalidation": {"Id": "I2"}}
        assert boto_client.create_invalidation.call_count == 2

    @patch("asset_uploader.utils.retry.time")
    def test_gives_up_after_max_attempts(self, mock_time):
        boto_client = MagicMock()
        boto_client.create_invalidation.side_effect = ConnectionError("down")
        client = CloudFrontClient(boto_client=boto_client, max_attempts=2)

        with pytest.raises(ConnectionError, match="down"):
            client.create_invalidation("E2EXAMPLE", ["/*"], "1")
        assert boto_client.create_invalidation.call_count == 2


class TestCreateCdnClient:
    """Test the CDN client factory."""

    @patch("asset_uploader.cdn.cloudfront.boto3")
    def test_reuses_storage_credentials(self, mock_boto3):
        """Test storage credentials are passed on to CloudFront."""
        client = create_cdn_client(
            {
                "provider": "s3",
                "region": "eu-west-1",
                "access_key_id": "AKIA",
                "secret_access_key": "secret",
                "session_token": "token",
            }
        )

        assert isinstance(client, CloudFrontClient)
        mock_boto3.client.assert_called_once_with(
            "cloudfront",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token="token",
        )

    @patch("asset_uploader.cdn.cloudfront.boto3")
    def test_default_credential_chain(self, mock_boto3):
        create_cdn_client(None)
        mock_boto3.client.assert_called_once_with(
            "cloudfront",
            aws_access_key_id=None,
            aws_secret_access_key=None,
            aws_session_token=None,
        )
