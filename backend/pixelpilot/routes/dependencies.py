"""
PixelPilot Backend — Shared Route Dependencies
================================================

What:  FastAPI dependency that reads and validates the uploaded `image` field.
Who:   Every AI endpoint (Depends(validated_image)).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import File, UploadFile

from pixelpilot.exceptions import ValidationError
from pixelpilot.services.upload_service import upload_service

logger = logging.getLogger(__name__)


@dataclass
class ValidatedImage:
    filename: str
    content: bytes
    mime_type: str


async def validated_image(
    image: Optional[UploadFile] = File(
        None,
        description="Image file (PNG, JPEG, WEBP or GIF, max 10MB)",
    ),
) -> ValidatedImage:
    """
    Read the upload into memory and validate it.

    Raises:
        ValidationError (HTTP 400): Missing file, bad type, or too large.
    """
    if image is None:
        raise ValidationError(message="No file uploaded", field="image")

    try:
        content = await image.read()
        filename = image.filename or "upload.png"
        mime_type = upload_service.validate_image(filename, content, image.size)
    finally:
        await image.close()

    logger.info(
        "Received image: filename=%s, type=%s, size=%d bytes",
        filename,
        mime_type,
        len(content),
    )
    return ValidatedImage(filename=filename, content=content, mime_type=mime_type)
