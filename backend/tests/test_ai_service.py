"""
PixelPilot Backend — AI Service Unit Tests
============================================

What:  Tests for the caller-facing operations in AIService.
How:   A real ModelOrchestrator over ScriptedProvider; no network, no sleeping.

What we test:
    ✅ plan_edit_from_text: AI instruction, prompt-derived instruction, fallback
    ✅ get_structured_suggestion: parsed JSON or {"raw": text}
    ✅ Degraded results for suggestions, detection and ideas
    ✅ analyze() and generate_alt_text() propagate unavailability
"""

import pytest

from conftest import ScriptedProvider, make_orchestrator
from pixelpilot.exceptions import AIServiceUnavailableError
from pixelpilot.services.ai_service import (
    ALT_TEXT_PROMPT,
    DEFAULT_ANALYSIS_PROMPT,
    ENHANCEMENT_PROMPT,
    AIService,
)
from pixelpilot.services.fallback_intent import FALLBACK_REASON

IMAGE = b"\x89PNG fake bytes"


def always_quota(model):
    return Exception("429 Too Many Requests")


@pytest.fixture
def build_service(registry, sleeper):
    def _build(script):
        provider = ScriptedProvider(script)
        return AIService(make_orchestrator(provider, registry, sleeper)), provider

    return _build


class TestPlanEditFromText:

    @pytest.mark.asyncio
    async def test_uses_model_instruction(self, build_service):
        service, provider = build_service([
            '```json\n{"action": "crop", "parameters": {"aspectRatio": "1:1"}, '
            '"explanation": "Square crop"}\n```'
        ])

        instruction = await service.plan_edit_from_text(IMAGE, "make it square", "image/jpeg")

        assert instruction.to_dict() == {
            "action": "crop",
            "parameters": {"aspectRatio": "1:1"},
            "explanation": "Square crop",
        }
        prompt, image_part = provider.parts[0]
        assert '"make it square"' in prompt
        assert image_part == {"mime_type": "image/jpeg", "data": IMAGE}

    @pytest.mark.asyncio
    async def test_unknown_action_derives_from_prompt(self, build_service):
        service, _ = build_service(['{"action": "posterize", "parameters": {}}'])

        instruction = await service.plan_edit_from_text(IMAGE, "make it black and white")

        assert instruction.action == "filter"
        assert instruction.parameters == {"type": "grayscale"}
        assert instruction.used_fallback is None

    @pytest.mark.asyncio
    async def test_prose_answer_derives_from_prompt(self, build_service):
        service, _ = build_service(["I would rotate it a little."])

        instruction = await service.plan_edit_from_text(IMAGE, "rotate 45")

        assert instruction.parameters == {"rotate": 45}
        assert "usedFallback" not in instruction.to_dict()

    @pytest.mark.asyncio
    async def test_unavailable_uses_flagged_fallback(self, build_service, models):
        service, provider = build_service(always_quota)

        instruction = await service.plan_edit_from_text(IMAGE, "make it black and white")

        assert len(provider.calls) == len(models)
        assert instruction.action == "filter"
        assert instruction.used_fallback is True
        assert instruction.fallback_reason == FALLBACK_REASON


class TestStructuredSuggestions:

    @pytest.mark.asyncio
    async def test_structured_suggestion_parses_json(self, build_service):
        service, provider = build_service(['{"brightness": "increase", "overallQuality": 6}'])

        result = await service.get_structured_suggestion(IMAGE, ENHANCEMENT_PROMPT)

        assert result == {"brightness": "increase", "overallQuality": 6}
        assert provider.parts[0][0] == ENHANCEMENT_PROMPT

    @pytest.mark.asyncio
    async def test_structured_suggestion_keeps_raw_text(self, build_service):
        service, _ = build_service(["Looks great already."])

        result = await service.get_structured_suggestion(IMAGE, ENHANCEMENT_PROMPT)

        assert result == {"raw": "Looks great already."}

    @pytest.mark.asyncio
    async def test_structured_suggestion_propagates(self, build_service):
        service, _ = build_service(always_quota)
        with pytest.raises(AIServiceUnavailableError):
            await service.get_structured_suggestion(IMAGE, ENHANCEMENT_PROMPT)

    @pytest.mark.asyncio
    async def test_enhancement_suggestions_degrade(self, build_service):
        service, _ = build_service(always_quota)

        result = await service.get_enhancement_suggestions(IMAGE)

        assert result["contrast"] == "increase"
        assert "error" in result

    @pytest.mark.asyncio
    async def test_detection_degrades(self, build_service):
        service, _ = build_service(always_quota)

        result = await service.detect_objects(IMAGE)

        assert result["objects"] == []
        assert "error" in result

    @pytest.mark.asyncio
    async def test_creative_ideas_degrade(self, build_service):
        service, _ = build_service(always_quota)

        result = await service.generate_creative_ideas(IMAGE)

        assert result["fallback"] is True
        assert len(result["ideas"]) == 5

    @pytest.mark.asyncio
    async def test_detection_passes_model_json_through(self, build_service):
        service, _ = build_service([
            'Sure! {"objects": [{"name": "cat", "confidence": "high"}], "scene": "sofa"}'
        ])

        result = await service.detect_objects(IMAGE)

        assert result["objects"][0]["name"] == "cat"
        assert "error" not in result


class TestFreeText:

    @pytest.mark.asyncio
    async def test_analyze_default_prompt(self, build_service):
        service, provider = build_service(["A cat on a sofa."])

        assert await service.analyze(IMAGE) == "A cat on a sofa."
        assert provider.parts[0][0] == DEFAULT_ANALYSIS_PROMPT

    @pytest.mark.asyncio
    async def test_alt_text_prompt(self, build_service):
        service, provider = build_service(["Cat on sofa"])

        assert await service.generate_alt_text(IMAGE, "image/webp") == "Cat on sofa"
        assert provider.parts[0] == [ALT_TEXT_PROMPT, {"mime_type": "image/webp", "data": IMAGE}]

    @pytest.mark.asyncio
    async def test_analyze_propagates_unavailable(self, build_service):
        service, _ = build_service(always_quota)
        with pytest.raises(AIServiceUnavailableError):
            await service.analyze(IMAGE, "What is this?")

    def test_model_status(self, build_service, models):
        service, _ = build_service([])
        status = service.model_status()
        assert status["current_model"] == models[0]
        assert status["models"] == models
