"""
Object storage for images embedded in writeups.

This module provides:
- get_s3_client(): a boto3 S3 client configured from settings
- ObjectStorage: ``upload(path, data)`` and ``get_public_url(path)`` over one bucket
- get_storage(): the storage instance configured in settings
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from .exceptions import StorageError

logger = logging.getLogger(__name__)


def get_s3_client():
    """
    Get a boto3 S3 client for the configured S3-compatible endpoint.

    Returns:
        boto3 S3 client configured with credentials and endpoint from settings
    """
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        endpoint_url=settings.AWS_S3_ENDPOINT_URL,
        region_name=settings.AWS_S3_REGION_NAME,
        config=Config(
            signature_version=settings.AWS_S3_SIGNATURE_VERSION,
            s3={"addressing_style": settings.AWS_S3_ADDRESSING_STYLE},
        ),
    )


class ObjectStorage:
    """
    A single bucket.

    Args:
        bucket: Bucket name
        client: boto3 S3 client; created lazily from settings when omitted
        public_url_base: Prefix for public object URLs. Defaults to
            ``<endpoint>/<bucket>`` (path-style addressing).
    """

    def __init__(self, bucket, client=None, public_url_base=None):
        self.bucket = bucket
        self._client = client
        self.public_url_base = public_url_base

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def upload(self, path, data, content_type="application/octet-stream"):
        """
        Store ``data`` (bytes) at ``path``.

        Raises:
            StorageError: the bucket rejected the upload or the endpoint was unreachable
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Upload of %s to bucket %s failed: %s", path, self.bucket, e)
            raise StorageError(f"Upload failed: {e}") from e
        logger.info("Uploaded %s (%d bytes) to bucket %s", path, len(data), self.bucket)

    def get_public_url(self, path):
        base = self.public_url_base
        if not base:
            endpoint = settings.AWS_S3_ENDPOINT_URL or f"https://s3.{settings.AWS_S3_REGION_NAME}.amazonaws.com"
            base = f"{endpoint.rstrip('/')}/{self.bucket}"
        return f"{base.rstrip('/')}/{path.lstrip('/')}"


def get_storage():
    return ObjectStorage(
        bucket=getattr(settings, "AWS_STORAGE_BUCKET_NAME", "images"),
        public_url_base=getattr(settings, "STORAGE_PUBLIC_URL_BASE", "") or None,
    )
