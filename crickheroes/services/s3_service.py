"""
S3 service: the club's image host.

Provides a lazily initialized boto3 client and helpers for uploading and
deleting gallery images. Only the returned public URL is
persisted by callers.
"""

import logging
import os
import uuid
from typing import Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Lazy-initialized S3 client
_s3_client = None


def _get_config():
    """Read S3 configuration from environment at call time (not import time)."""
    return {
        "access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
        "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        "bucket": os.getenv("AWS_S3_BUCKET"),
        "region": os.getenv("AWS_S3_REGION", "ap-south-1"),
    }


def _get_s3_client():
    """Get or create the boto3 S3 client. Lazy-imports boto3 to avoid import-time dependency."""
    global _s3_client
    if _s3_client is None:
        cfg = _get_config()
        if not all([cfg["access_key_id"], cfg["secret_access_key"], cfg["bucket"]]):
            raise ValueError(
                "AWS S3 environment variables not configured. "
                "Set AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, and AWS_S3_BUCKET."
            )
        import boto3

        _s3_client = boto3.client(
            "s3",
            aws_access_key_id=cfg["access_key_id"],
            aws_secret_access_key=cfg["secret_access_key"],
            region_name=cfg["region"],
        )
    return _s3_client


def _public_url(bucket: str, region: str, key: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def upload_image(folder: str, owner: str, image_bytes: bytes, content_type: str = "image/jpeg") -> str:
    """
    Upload an image and return its public URL.

    Stores at key: {folder}/{owner}/{uuid}.jpg

    Args:
        folder: Top-level prefix, e.g. "gallery"
        owner: Username (or other id) used to group uploads
        image_bytes: Processed JPEG image bytes
        content_type: MIME type for the uploaded object

    Returns:
        Public URL of the uploaded image
    """
    client = _get_s3_client()
    cfg = _get_config()
    bucket = cfg["bucket"]
    key = f"{folder}/{owner}/{uuid.uuid4().hex}.jpg"

    client.put_object(
        Bucket=bucket,
        Key=key,
        Body=image_bytes,
        ContentType=content_type,
    )

    logger.info("Uploaded image to S3: %s", key)
    return _public_url(bucket, cfg["region"], key)


def upload_gallery_image(username: str, image_bytes: bytes) -> str:
    return upload_image("gallery", username, image_bytes)


def delete_image(url: str) -> bool:
    """
    Delete an image from S3 by its URL. Best-effort: logs errors but doesn't raise.

    Args:
        url: The full S3 URL of the image

    Returns:
        True if deleted successfully, False otherwise
    """
    try:
        cfg = _get_config()
        bucket = cfg["bucket"]
        if not bucket:
            return False
        key = _extract_key_from_url(url, bucket)
        if not key:
            logger.warning(f"Could not extract S3 key from URL: {url}")
            return False

        client = _get_s3_client()
        client.delete_object(Bucket=bucket, Key=key)
        logger.info(f"Deleted image from S3: {key}")
        return True
    except Exception as e:
        logger.error(f"Failed to delete image from S3: {e}")
        return False


def _extract_key_from_url(url: str, expected_bucket: Optional[str] = None) -> Optional[str]:
    """
    Extract the S3 object key from a full S3 URL.

    Handles URLs like:
      https://bucket.s3.region.amazonaws.com/gallery/alex-kumar/abc123.jpg

    Args:
        url: Full S3 URL
        expected_bucket: Expected S3 bucket name for hostname validation

    Returns:
        Object key string or None if parsing fails or hostname doesn't match
    """
    try:
        parsed = urlparse(url)

        if expected_bucket and parsed.hostname:
            if expected_bucket not in parsed.hostname:
                logger.warning(
                    f"URL hostname '{parsed.hostname}' does not match "
                    f"expected bucket '{expected_bucket}'"
                )
                return None

        key = parsed.path.lstrip("/")
        return key if key else None
    except Exception:
        return None
