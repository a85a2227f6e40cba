"""
PixelPilot Backend — AI Enhance Routes
========================================

What:  Enhancement suggestions, accessible alt text and object detection.
Who:   Called by the frontend enhance panel.

Endpoints:
    POST /api/ai-enhance/suggestions  image → enhancement suggestions (degrades to presets)
    POST /api/ai-enhance/alt-text     image → {altText, characterCount} (503 on outage)
    POST /api/ai-enhance/detect       image → detected objects (degrades to empty)
"""

import logging

from fastapi import APIRouter, Depends

from pixelpilot.routes.dependencies import ValidatedImage, validated_image
from pixelpilot.schemas.ai import AltTextData, ApiResponse, ErrorResponse
from pixelpilot.services.ai_service import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-enhance", tags=["AI Enhance"])


@router.post(
    "/suggestions",
    response_model=ApiResponse,
    responses={400: {"description": "Missing or invalid image", "model": ErrorResponse}},
    summary="Get AI enhancement suggestions",
)
async def enhancement_suggestions(
    image: ValidatedImage = Depends(validated_image),
) -> ApiResponse:
    suggestions = await ai_service.get_enhancement_suggestions(image.content, image.mime_type)
    return ApiResponse(data=suggestions)


@router.post(
    "/alt-text",
    response_model=ApiResponse,
    responses={
        400: {"description": "Missing or invalid image", "model": ErrorResponse},
        503: {"description": "AI service unavailable", "model": ErrorResponse},
    },
    summary="Generate accessible alt text",
)
async def alt_text(image: ValidatedImage = Depends(validated_image)) -> ApiResponse:
    text = await ai_service.generate_alt_text(image.content, image.mime_type)
    data = AltTextData(alt_text=text, character_count=len(text))
    return ApiResponse(data=data.model_dump(by_alias=True))


@router.post(
    "/detect",
    response_model=ApiResponse,
    responses={400: {"description": "Missing or invalid image", "model": ErrorResponse}},
    summary="Detect objects in an image",
)
async def detect(image: ValidatedImage = Depends(validated_image)) -> ApiResponse:
    detection = await ai_service.detect_objects(image.content, image.mime_type)
    return ApiResponse(data=detection)
