"""
PixelPilot Backend — AI Edit Routes
=====================================

What:  Prompt-driven edit planning, free-form analysis and creative ideas.
How:   Each handler validates the upload (dependency), delegates to AIService
       and wraps the result in the {"success": true, "data": ...} envelope.
Who:   Called by the frontend AI editor panel.

Endpoints:
    POST /api/ai-edit          image + prompt → EditInstruction
    POST /api/ai-edit/analyze  image (+ prompt) → analysis text
    POST /api/ai-edit/ideas    image → creative edit ideas

The returned EditInstruction is applied by the image-transform executor,
not by this service.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form

from pixelpilot.exceptions import ValidationError
from pixelpilot.routes.dependencies import ValidatedImage, validated_image
from pixelpilot.schemas.ai import AnalysisData, ApiResponse, EditPlanData, ErrorResponse
from pixelpilot.services.ai_service import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-edit", tags=["AI Edit"])

ANALYZE_DEFAULT_PROMPT = (
    "Describe this image in detail, including colors, composition, subjects, and mood."
)


@router.post(
    "",
    response_model=ApiResponse,
    responses={
        400: {"description": "Missing image or prompt", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Plan an edit from a natural-language prompt",
)
async def plan_edit(
    image: ValidatedImage = Depends(validated_image),
    prompt: Optional[str] = Form(None, description="What to do with the image"),
) -> ApiResponse:
    """
    Always answers 200 with an instruction: when the AI provider is down the
    instruction comes from the keyword rules and carries usedFallback=true.
    """
    if not prompt or not prompt.strip():
        raise ValidationError(message="Prompt is required for AI editing", field="prompt")

    instruction = await ai_service.plan_edit_from_text(image.content, prompt, image.mime_type)

    data = EditPlanData(ai_instructions=instruction.to_dict(), original_prompt=prompt)
    return ApiResponse(data=data.model_dump(by_alias=True))


@router.post(
    "/analyze",
    response_model=ApiResponse,
    responses={
        400: {"description": "Missing or invalid image", "model": ErrorResponse},
        503: {"description": "AI service unavailable", "model": ErrorResponse},
    },
    summary="Describe an image",
)
async def analyze_image(
    image: ValidatedImage = Depends(validated_image),
    prompt: Optional[str] = Form(None, description="Custom analysis prompt"),
) -> ApiResponse:
    prompt = prompt or ANALYZE_DEFAULT_PROMPT
    analysis = await ai_service.analyze(image.content, prompt, image.mime_type)
    return ApiResponse(data=AnalysisData(analysis=analysis, prompt=prompt).model_dump())


@router.post(
    "/ideas",
    response_model=ApiResponse,
    responses={400: {"description": "Missing or invalid image", "model": ErrorResponse}},
    summary="Suggest creative edits",
)
async def creative_ideas(image: ValidatedImage = Depends(validated_image)) -> ApiResponse:
    ideas = await ai_service.generate_creative_ideas(image.content, image.mime_type)
    return ApiResponse(data=ideas)
