"""
PixelPilot Backend — Rule-Based Intent Extractor Unit Tests
=============================================================

What we test:
    ✅ Each keyword group maps to its instruction
    ✅ Priority order decides prompts that match several groups
    ✅ Rotation degrees and flip axis capture
    ✅ Unmatched and empty prompts get the general enhancement preset
    ✅ fallback_instruction() flags the result
"""

import pytest

from pixelpilot.services.fallback_intent import (
    FALLBACK_REASON,
    classify,
    fallback_instruction,
)


class TestKeywordGroups:

    @pytest.mark.parametrize(
        "prompt, action, parameters",
        [
            ("convert to black and white", "filter", {"type": "grayscale"}),
            ("Make it GRAYSCALE", "filter", {"type": "grayscale"}),
            ("b&w please", "filter", {"type": "grayscale"}),
            ("give it a vintage look", "filter", {"type": "sepia"}),
            ("sepia tone", "filter", {"type": "sepia"}),
            ("blur the background", "filter", {"type": "blur"}),
            ("make it more vibrant", "enhance", {"saturation": 1.5, "contrast": 1.1}),
            ("lighten it up", "enhance", {"brightness": 1.3}),
            ("make it darker", "enhance", {"brightness": 0.7}),
            ("sharpen", "enhance", {"sharpen": True, "contrast": 1.1}),
            ("more detail", "enhance", {"sharpen": True, "contrast": 1.1}),
            ("increase contrast", "enhance", {"contrast": 1.3}),
            ("crop to 16:9", "crop", {"aspectRatio": "16:9"}),
            ("widescreen", "crop", {"aspectRatio": "16:9"}),
            ("crop 4/3", "crop", {"aspectRatio": "4:3"}),
            ("make it square", "crop", {"aspectRatio": "1:1"}),
            ("add warm tones", "enhance", {"saturation": 1.2, "brightness": 1.05}),
        ],
    )
    def test_group(self, prompt, action, parameters):
        instruction = classify(prompt)
        assert instruction.action == action
        assert instruction.parameters == parameters
        assert instruction.explanation

    def test_rotate_captures_degrees(self):
        instruction = classify("rotate this 90 degrees")
        assert instruction.action == "transform"
        assert instruction.parameters == {"rotate": 90}
        assert instruction.explanation == "Rotating 90 degrees"

    def test_rotate_uses_first_number(self):
        assert classify("rotate by 45 then 10").parameters == {"rotate": 45}

    def test_rotate_defaults_to_90(self):
        assert classify("rotate it").parameters == {"rotate": 90}

    def test_flip_vertical(self):
        instruction = classify("flip vertically")
        assert instruction.parameters == {"flip": "vertical"}
        assert instruction.explanation == "Flipping vertically"

    def test_mirror_defaults_to_horizontal(self):
        assert classify("mirror the image").parameters == {"flip": "horizontal"}


class TestPriority:

    @pytest.mark.parametrize(
        "prompt, expected_type",
        [
            ("vintage blur", "sepia"),
            ("black and white with blur", "grayscale"),
        ],
    )
    def test_earlier_filter_group_wins(self, prompt, expected_type):
        assert classify(prompt).parameters == {"type": expected_type}

    def test_saturation_beats_brightness(self):
        assert classify("brighten this colorful photo").parameters == {
            "saturation": 1.5,
            "contrast": 1.1,
        }

    def test_enhance_beats_transform(self):
        assert classify("increase contrast and rotate 180").action == "enhance"


class TestDefault:

    @pytest.mark.parametrize("prompt", ["", None, "do something nice"])
    def test_general_enhancement(self, prompt):
        instruction = classify(prompt)
        assert instruction.action == "enhance"
        assert instruction.parameters == {"contrast": 1.1, "saturation": 1.1, "sharpen": True}
        assert instruction.explanation == "General enhancement applied"

    def test_classify_is_deterministic(self):
        assert classify("rotate 30").to_dict() == classify("rotate 30").to_dict()

    def test_classify_does_not_flag_fallback(self):
        assert "usedFallback" not in classify("blur").to_dict()


class TestFallbackInstruction:

    def test_flags_result(self):
        payload = fallback_instruction("make it black and white").to_dict()
        assert payload == {
            "action": "filter",
            "parameters": {"type": "grayscale"},
            "explanation": "Converting to grayscale",
            "usedFallback": True,
            "fallbackReason": FALLBACK_REASON,
        }

    def test_presets_are_not_shared(self):
        first = fallback_instruction("sharpen")
        first.parameters["contrast"] = 9
        assert fallback_instruction("sharpen").parameters["contrast"] == 1.1
