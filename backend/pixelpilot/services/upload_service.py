"""
PixelPilot Backend — Upload Validation Service
================================================

What:  Validates uploaded images before they are sent to the AI provider.
How:   Checks extension, size, then opens the bytes with Pillow to learn the
       real format, which becomes the MIME type of the inline image part.
Who:   AI route handlers, once per request.
When:  After receiving the multipart upload, before any AI call.

Validation order (cheapest first):
    1. Extension check: no bytes inspected
    2. Size check: Content-Length header, then actual byte count
    3. Format sniff: Pillow reads the file header only
"""

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from pixelpilot.config import settings
from pixelpilot.exceptions import ValidationError

logger = logging.getLogger(__name__)

# What: Pillow format name → MIME type the Gemini API accepts for inline images
ALLOWED_FORMATS = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif"}


class UploadService:
    """
    Validates uploaded image files. Nothing is written to disk.

    Args:
        max_file_size: Override the configured size limit (used in tests).
    """

    def __init__(self, max_file_size: Optional[int] = None):
        self.max_file_size = max_file_size or settings.max_file_size

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks Content-Length first (may be absent or wrong), then the real size.

        Raises:
            ValidationError with human-readable size limit message
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise ValidationError(
                message=f"File size exceeds the allowed limit ({max_mb:.0f}MB).",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds the allowed limit ({max_mb:.0f}MB).",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def detect_mime_type(self, content: bytes) -> str:
        """
        Identify the image format from its bytes.

        Returns:
            MIME type string (e.g., "image/jpeg")

        Raises:
            ValidationError if Pillow cannot identify the file or the format
            is not one the AI provider accepts
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                image_format = image.format
        except (UnidentifiedImageError, OSError) as e:
            raise ValidationError(
                message="Uploaded file is not a readable image.",
                field="image",
                context={"error": str(e)},
            )

        mime_type = ALLOWED_FORMATS.get(image_format or "")
        if mime_type is None:
            raise ValidationError(
                message=(
                    f"Image format '{image_format}' is not supported. "
                    f"Allowed formats: {', '.join(sorted(ALLOWED_FORMATS))}"
                ),
                field="image",
                context={"detected_format": image_format},
            )
        return mime_type

    def validate_image(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Complete validation pipeline.

        Returns:
            Detected MIME type for the inline image part.
        """
        if not content:
            raise ValidationError(message="No file uploaded", field="image")

        self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.detect_mime_type(content)

        logger.debug("Validated upload %s (%s, %d bytes)", filename, mime_type, len(content))
        return mime_type


upload_service = UploadService()
