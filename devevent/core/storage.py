"""
Image upload to S3-compatible storage.

Event images are uploaded before the event record is written; the returned
public URL becomes the event's ``image`` field. The boto3 calls are
blocking, so async callers run ``upload_image`` in a worker thread.
"""
import mimetypes
import uuid

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError, BotoCoreError

from devevent.core.config import settings
from devevent.core.errors import ImageUploadError
from devevent.core.logging import logger


def get_s3_client():
    """Create an S3 client for the configured endpoint."""
    return boto3.client(
        's3',
        endpoint_url=settings.S3_ENDPOINT,
        aws_access_key_id=settings.S3_ACCESS_KEY,
        aws_secret_access_key=settings.S3_SECRET_KEY,
        region_name=settings.S3_REGION,
        config=Config(signature_version='s3v4', s3={'addressing_style': 'path'}),
    )


def build_object_name(filename: str, content_type: str) -> str:
    """Random object key under the configured folder, keeping the file extension."""
    extension = ""
    if filename and "." in filename:
        extension = "." + filename.rsplit(".", 1)[1].lower()
    elif content_type:
        extension = mimetypes.guess_extension(content_type) or ""
    return f"{settings.S3_FOLDER}/{uuid.uuid4().hex}{extension}"


def upload_image(file_data: bytes, object_name: str, content_type: str = 'image/jpeg') -> str:
    """
    Upload image bytes and return their public URL.

    Args:
        file_data: Image binary data to upload
        object_name: Object key in the bucket (e.g. "events/3f2a....png")
        content_type: MIME type of the image

    Returns:
        Public URL of the uploaded object

    Raises:
        ImageUploadError: If the data is empty or the upload fails
    """
    if not file_data:
        raise ImageUploadError("image file is empty")

    try:
        get_s3_client().put_object(
            Bucket=settings.S3_BUCKET,
            Key=object_name,
            Body=file_data,
            ContentType=content_type,
        )
    except ClientError as e:
        error_message = e.response.get('Error', {}).get('Message', str(e))
        logger.error(f"S3 ClientError during upload of {object_name}: {error_message}")
        raise ImageUploadError(error_message) from e
    except BotoCoreError as e:
        logger.error(f"BotoCoreError during upload of {object_name}: {e}")
        raise ImageUploadError(str(e)) from e

    url = f"{settings.image_base_url}/{object_name}"
    logger.info(f"Uploaded event image: {object_name}")
    return url
