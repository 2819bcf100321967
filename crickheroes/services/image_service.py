"""
Image service for validating and processing gallery uploads.

Handles image validation (size, type), conversion to RGB, downscaling to a
maximum edge length, and JPEG compression.
"""

import logging
from io import BytesIO
from typing import Tuple

from PIL import Image

logger = logging.getLogger(__name__)

# Validation constants
MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
MAX_IMAGE_PIXELS = 40_000_000  # ~40MP, guards against decompression bombs
MAX_EDGE = 1600  # Longest side of the stored image, in pixels
JPEG_QUALITY = 85
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp"}

Image.MAX_IMAGE_PIXELS = MAX_IMAGE_PIXELS


def validate_image(file_bytes: bytes, content_type: str) -> Tuple[bool, str]:
    """
    Validate an uploaded gallery image.

    Args:
        file_bytes: Raw uploaded file bytes
        content_type: MIME type from the upload

    Returns:
        Tuple of (is_valid, error_message). error_message is empty string if valid.
    """
    if not file_bytes:
        return False, "No file provided"

    if len(file_bytes) > MAX_FILE_SIZE_BYTES:
        return False, f"File size exceeds maximum of {MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB"

    if not content_type or content_type not in ALLOWED_CONTENT_TYPES:
        return False, f"Invalid file type '{content_type}'. Allowed: JPEG, PNG, WebP"

    try:
        img = Image.open(BytesIO(file_bytes))
        width, height = img.size
        if width * height > MAX_IMAGE_PIXELS:
            return False, f"Image dimensions too large ({width}x{height})"
        img.verify()
    except Image.DecompressionBombError:
        return False, "Image dimensions too large (possible decompression bomb)"
    except Exception as e:
        return False, f"Invalid or corrupted image file: {str(e)}"

    return True, ""


def process_image(image_bytes: bytes) -> bytes:
    """
    Convert to RGB, shrink so the longest edge is at most MAX_EDGE, compress as JPEG.

    Args:
        image_bytes: Raw image bytes (any supported format)

    Returns:
        Processed JPEG image bytes
    """
    img = Image.open(BytesIO(image_bytes))

    if img.mode in ("RGBA", "P", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        if img.mode == "P":
            img = img.convert("RGBA")
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode != "RGB":
        img = img.convert("RGB")

    if max(img.size) > MAX_EDGE:
        img.thumbnail((MAX_EDGE, MAX_EDGE), Image.Resampling.LANCZOS)

    output = BytesIO()
    img.save(output, format="JPEG", quality=JPEG_QUALITY, optimize=True)
    return output.getvalue()
