"""
PixelPilot Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models for edit instructions and the API contract.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI docs. Field aliases keep the camelCase keys the frontend reads
       (usedFallback, aiInstructions, altText, ...).
Who:   AIService builds EditInstruction; route handlers return the envelopes.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

EditAction = Literal["resize", "crop", "enhance", "filter", "transform"]
EDIT_ACTIONS = ("resize", "crop", "enhance", "filter", "transform")

FILTER_TYPES = ("grayscale", "sepia", "blur", "vintage")


# ══════════════════════════════════════════════════════════════════════════
# Edit Instructions: output of both the AI path and the fallback path
# ══════════════════════════════════════════════════════════════════════════


class EditInstruction(BaseModel):
    """
    What:  A single edit the image-transform executor can apply as-is.

    Parameter shapes by action:
        resize:    {width, height, fit: cover|contain|fill}
        crop:      {left, top, width, height} or {aspectRatio: "16:9"|"4:3"|"1:1"}
        enhance:   {brightness, contrast, saturation: 0.5-2.0, sharpen: bool}
        filter:    {type: grayscale|sepia|blur|vintage}
        transform: {rotate: degrees} or {flip: horizontal|vertical}

    used_fallback / fallback_reason are only set when the rule-based
    extractor produced the instruction because the AI provider was unavailable.
    """
    action: EditAction = Field(description="Edit to perform")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Action-specific parameters"
    )
    explanation: str = Field(default="", description="Human-readable summary of the edit")
    used_fallback: Optional[bool] = Field(default=None, alias="usedFallback")
    fallback_reason: Optional[str] = Field(default=None, alias="fallbackReason")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, unset fallback fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Envelopes
# ══════════════════════════════════════════════════════════════════════════


class EditPlanData(BaseModel):
    ai_instructions: Dict[str, Any] = Field(alias="aiInstructions")
    original_prompt: str = Field(alias="originalPrompt")

    model_config = {"populate_by_name": True}


class AnalysisData(BaseModel):
    analysis: str
    prompt: str


class AltTextData(BaseModel):
    alt_text: str = Field(alias="altText")
    character_count: int = Field(alias="characterCount")

    model_config = {"populate_by_name": True}


class ApiResponse(BaseModel):
    """
    What:  Success envelope shared by all AI endpoints.

    Example:
        {"success": true, "data": {"aiInstructions": {...}, "originalPrompt": "make it pop"}}
    """
    success: bool = True
    data: Any


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and AI provider status.
    """
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    gemini: str = Field(description="Gemini API status: available, unavailable, not_configured")
    selection: Dict[str, Any] = Field(description="Current model selection and candidates")
    uptime_seconds: float = Field(description="Seconds since service started")
