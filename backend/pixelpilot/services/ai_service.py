"""
PixelPilot Backend — AI Service (Caller-Facing Operations)
============================================================

What:  The operations routes call: analysis, alt text, structured suggestions,
       object detection, creative ideas and prompt-driven edit planning.
How:   Each operation builds a prompt + inline image, runs it through the
       ModelOrchestrator, then interprets the text with extract_structured().
Who:   Route handlers in pixelpilot.routes.

Degradation Policy:
    The orchestrator never swallows a terminal failure. Operations that must
    always answer catch AIServiceUnavailableError here and return a clearly
    flagged degraded result:

        plan_edit_from_text          → rule-based instruction, usedFallback=True
        get_enhancement_suggestions  → preset suggestions + "error"
        detect_objects               → empty detection + "error"
        generate_creative_ideas      → preset ideas, fallback=True + "error"

    analyze() and generate_alt_text() return free text only, so there is no
    meaningful degraded value; they propagate the error (HTTP 503).
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as SchemaValidationError

from pixelpilot.exceptions import AIServiceUnavailableError
from pixelpilot.schemas.ai import EditInstruction
from pixelpilot.services.fallback_intent import classify, fallback_instruction
from pixelpilot.services.llm_base import PromptPart
from pixelpilot.services.model_orchestrator import ModelOrchestrator, model_orchestrator
from pixelpilot.services.response_interpreter import extract_structured

logger = logging.getLogger(__name__)


# ── Prompts ───────────────────────────────────────────────────────────────

DEFAULT_ANALYSIS_PROMPT = "Describe this image in detail."

ALT_TEXT_PROMPT = """Generate a concise, accessible alt text description for this image.
The description should be:
- Brief (under 125 characters if possible)
- Descriptive of key visual elements
- Useful for screen readers

Respond with only the alt text, no additional explanation."""

ENHANCEMENT_PROMPT = """Analyze this image and provide specific enhancement suggestions in JSON format:
{
  "brightness": "increase/decrease/none",
  "contrast": "increase/decrease/none",
  "saturation": "increase/decrease/none",
  "sharpness": "increase/decrease/none",
  "cropSuggestion": "description of suggested crop or 'none'",
  "overallQuality": "1-10 rating",
  "suggestions": ["list of specific improvement suggestions"]
}

Respond with only the JSON, no markdown formatting."""

DETECT_OBJECTS_PROMPT = """Detect and list all objects visible in this image.
Provide the response in JSON format:
{
  "objects": [
    { "name": "object name", "confidence": "high/medium/low", "location": "description of position" }
  ],
  "scene": "description of the overall scene",
  "dominantColors": ["color1", "color2", "color3"]
}

Respond with only the JSON, no markdown formatting."""

CREATIVE_IDEAS_PROMPT = """Based on this image, suggest 5 creative variations or edits that could be made.

Provide in JSON format:
{
  "ideas": [
    {
      "title": "Short title",
      "description": "Detailed description of the creative edit",
      "difficulty": "easy/medium/hard"
    }
  ]
}

Respond with only the JSON, no markdown formatting."""

EDIT_PLAN_PROMPT = """Based on this image and the user's request: "{user_prompt}"

Provide specific image processing instructions in JSON format:
{{
  "action": "resize|crop|enhance|filter|transform",
  "parameters": {{}},
  "explanation": "Brief explanation of recommended changes"
}}

Available actions:
- resize: {{ width, height, fit: "cover|contain|fill" }}
- crop: {{ left, top, width, height }} or {{ aspectRatio: "16:9|4:3|1:1|etc" }}
- enhance: {{ brightness: 0.5-2.0, contrast: 0.5-2.0, saturation: 0.5-2.0, sharpen: true/false }}
- filter: {{ type: "grayscale|sepia|blur|vintage" }}
- transform: {{ rotate: degrees, flip: "horizontal|vertical" }}

Respond with only the JSON, no markdown formatting."""


# ── Degraded Results ──────────────────────────────────────────────────────

def _default_enhancement_suggestions() -> Dict[str, Any]:
    return {
        "brightness": "none",
        "contrast": "increase",
        "saturation": "none",
        "sharpness": "increase",
        "overallQuality": 7,
        "suggestions": ["Consider sharpening the image", "Adjust contrast for better depth"],
        "error": "AI analysis unavailable, showing default suggestions",
    }


def _default_detection() -> Dict[str, Any]:
    return {
        "objects": [],
        "scene": "Unable to analyze image",
        "dominantColors": [],
        "error": "AI analysis temporarily unavailable",
    }


def _default_creative_ideas() -> Dict[str, Any]:
    ideas: List[Dict[str, str]] = [
        {"title": "Grayscale Conversion", "description": "Convert to black and white for a classic look", "difficulty": "easy"},
        {"title": "Vintage Filter", "description": "Apply sepia tones for a nostalgic feel", "difficulty": "easy"},
        {"title": "Enhance Colors", "description": "Boost saturation and vibrancy", "difficulty": "easy"},
        {"title": "Sharpen Details", "description": "Increase sharpness for clearer details", "difficulty": "easy"},
        {"title": "Adjust Contrast", "description": "Improve depth with contrast adjustment", "difficulty": "medium"},
    ]
    return {
        "ideas": ideas,
        "fallback": True,
        "error": "AI suggestions temporarily unavailable, showing default ideas",
    }


# ══════════════════════════════════════════════════════════════════════════
# AI Service
# ══════════════════════════════════════════════════════════════════════════

class AIService:
    """
    Caller-facing AI operations on already-validated image bytes.

    Args:
        orchestrator: Retry/fallback layer used for every provider call.
    """

    def __init__(self, orchestrator: ModelOrchestrator):
        self.orchestrator = orchestrator

    @staticmethod
    def _parts(content: bytes, mime_type: str, prompt: str) -> List[PromptPart]:
        return [prompt, {"mime_type": mime_type, "data": content}]

    async def analyze(
        self,
        content: bytes,
        prompt: Optional[str] = None,
        mime_type: str = "image/png",
    ) -> str:
        """
        Free-form analysis of an image.

        Raises:
            AIServiceUnavailableError: Every candidate model failed.
        """
        return await self.orchestrator.invoke(
            self._parts(content, mime_type, prompt or DEFAULT_ANALYSIS_PROMPT)
        )

    async def generate_alt_text(self, content: bytes, mime_type: str = "image/png") -> str:
        return await self.analyze(content, ALT_TEXT_PROMPT, mime_type)

    async def get_structured_suggestion(
        self,
        content: bytes,
        prompt_template: str,
        mime_type: str = "image/png",
    ) -> Dict[str, Any]:
        """
        Ask for JSON and return it parsed, or {"raw": text} when the model
        answered without a JSON object.

        Raises:
            AIServiceUnavailableError: Every candidate model failed.
        """
        text = await self.analyze(content, prompt_template, mime_type)
        parsed = extract_structured(text)
        if isinstance(parsed, dict):
            return parsed
        return {"raw": text}

    async def get_enhancement_suggestions(
        self, content: bytes, mime_type: str = "image/png"
    ) -> Dict[str, Any]:
        try:
            return await self.get_structured_suggestion(content, ENHANCEMENT_PROMPT, mime_type)
        except AIServiceUnavailableError as e:
            logger.error("Enhancement suggestions failed: %s", e.message)
            return _default_enhancement_suggestions()

    async def detect_objects(self, content: bytes, mime_type: str = "image/png") -> Dict[str, Any]:
        try:
            return await self.get_structured_suggestion(content, DETECT_OBJECTS_PROMPT, mime_type)
        except AIServiceUnavailableError as e:
            logger.error("Object detection failed: %s", e.message)
            return _default_detection()

    async def generate_creative_ideas(
        self, content: bytes, mime_type: str = "image/png"
    ) -> Dict[str, Any]:
        try:
            return await self.get_structured_suggestion(content, CREATIVE_IDEAS_PROMPT, mime_type)
        except AIServiceUnavailableError as e:
            logger.error("Creative ideas generation failed: %s", e.message)
            return _default_creative_ideas()

    async def plan_edit_from_text(
        self,
        content: bytes,
        user_prompt: str,
        mime_type: str = "image/png",
    ) -> EditInstruction:
        """
        Turn a natural-language edit request into an EditInstruction.

        Flow:
            1. Ask the model for a JSON instruction
            2. Valid JSON with a known action → use it
            3. Anything else from the model → derive from the user's prompt
            4. AI unavailable → rule-based instruction flagged usedFallback
        """
        try:
            text = await self.analyze(
                content, EDIT_PLAN_PROMPT.format(user_prompt=user_prompt), mime_type
            )
        except AIServiceUnavailableError as e:
            logger.error("AI processing failed, using fallback: %s", e.message)
            return fallback_instruction(user_prompt)

        instruction = self._instruction_from_response(text)
        if instruction is not None:
            return instruction

        logger.info("Model answer had no usable instruction; deriving from prompt")
        return classify(user_prompt)

    @staticmethod
    def _instruction_from_response(text: str) -> Optional[EditInstruction]:
        parsed = extract_structured(text)
        if not isinstance(parsed, dict) or not parsed.get("action"):
            return None
        try:
            return EditInstruction(
                action=parsed["action"],
                parameters=parsed.get("parameters") or {},
                explanation=parsed.get("explanation") or "",
            )
        except SchemaValidationError:
            logger.warning("Model proposed unsupported action: %r", parsed.get("action"))
            return None

    def model_status(self) -> Dict[str, Any]:
        return self.orchestrator.registry.snapshot()


ai_service = AIService(model_orchestrator)
