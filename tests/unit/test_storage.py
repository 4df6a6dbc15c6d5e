"""
Unit tests for image upload to S3-compatible storage.
"""
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError, EndpointConnectionError

from devevent.core import storage
from devevent.core.config import settings
from devevent.core.errors import ImageUploadError


@pytest.mark.unit
class TestUploadImage:
    """Test the S3 upload wrapper."""

    @patch("devevent.core.storage.boto3.client")
    def test_upload_returns_public_url(self, mock_client):
        s3 = MagicMock()
        mock_client.return_value = s3

        url = storage.upload_image(b"\x89PNG...", "events/abc.png", "image/png")

        assert url == f"{settings.image_base_url}/events/abc.png"
        s3.put_object.assert_called_once_with(
            Bucket=settings.S3_BUCKET,
            Key="events/abc.png",
            Body=b"\x89PNG...",
            ContentType="image/png",
        )

    @patch("devevent.core.storage.boto3.client")
    def test_empty_file_is_rejected(self, mock_client):
        with pytest.raises(ImageUploadError):
            storage.upload_image(b"", "events/abc.png")
        mock_client.assert_not_called()

    @patch("devevent.core.storage.boto3.client")
    def test_client_error_is_wrapped(self, mock_client):
        s3 = MagicMock()
        s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )
        mock_client.return_value = s3

        with pytest.raises(ImageUploadError) as exc_info:
            storage.upload_image(b"data", "events/abc.png")

        assert exc_info.value.detail == "Access Denied"
        assert exc_info.value.status_code == 500

    @patch("devevent.core.storage.boto3.client")
    def test_connection_error_is_wrapped(self, mock_client):
        s3 = MagicMock()
        s3.put_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.invalid")
        mock_client.return_value = s3

        with pytest.raises(ImageUploadError):
            storage.upload_image(b"data", "events/abc.png")


@pytest.mark.unit
class TestBuildObjectName:
    """Test object key generation."""

    def test_keeps_file_extension(self):
        name = storage.build_object_name("Poster.PNG", "image/png")
        assert name.startswith(f"{settings.S3_FOLDER}/")
        assert name.endswith(".png")

    def test_guesses_extension_from_content_type(self):
        assert storage.build_object_name("poster", "image/png").endswith(".png")

    def test_names_are_unique(self):
        assert storage.build_object_name("a.jpg", "image/jpeg") != storage.build_object_name("a.jpg", "image/jpeg")
