"""
PixelPilot Backend — Rule-Based Edit Intent Extractor
=======================================================

What:  Turns a free-text edit request ("make it black and white") into an
       EditInstruction without calling the AI provider.
How:   Lower-cases the prompt and walks RULES in order; the first rule whose
       predicate matches builds the instruction. No match yields the general
       enhancement preset.
Who:   AIService, when the AI path is unavailable (fallback_instruction) or
       when the model answered without a usable instruction (classify).

Rule order is the tie-break for prompts that match several keywords
("vintage blur" is sepia, not blur) and must not be reordered casually.
"""

import re
from typing import Callable, List, Optional, Tuple

from pixelpilot.schemas.ai import EditInstruction

FALLBACK_REASON = "AI service quota exceeded. Using smart preset processing."

_FIRST_NUMBER = re.compile(r"(\d+)")

Predicate = Callable[[str], bool]
Builder = Callable[[str], EditInstruction]


def _contains(*keywords: str) -> Predicate:
    return lambda prompt: any(k in prompt for k in keywords)


def _preset(action: str, parameters: dict, explanation: str) -> Builder:
    return lambda prompt: EditInstruction(
        action=action, parameters=dict(parameters), explanation=explanation
    )


def _rotate(prompt: str) -> EditInstruction:
    match = _FIRST_NUMBER.search(prompt)
    degrees = int(match.group(1)) if match else 90
    return EditInstruction(
        action="transform",
        parameters={"rotate": degrees},
        explanation=f"Rotating {degrees} degrees",
    )


def _flip(prompt: str) -> EditInstruction:
    direction = "vertical" if "vertical" in prompt else "horizontal"
    return EditInstruction(
        action="transform",
        parameters={"flip": direction},
        explanation=f"Flipping {direction}ly",
    )


# (predicate, builder) pairs, highest priority first
RULES: List[Tuple[Predicate, Builder]] = [
    (_contains("grayscale", "black and white", "b&w"),
     _preset("filter", {"type": "grayscale"}, "Converting to grayscale")),
    (_contains("sepia", "vintage", "old"),
     _preset("filter", {"type": "sepia"}, "Applying vintage sepia effect")),
    (_contains("blur"),
     _preset("filter", {"type": "blur"}, "Applying blur effect")),
    (_contains("vibrant", "colorful", "saturate"),
     _preset("enhance", {"saturation": 1.5, "contrast": 1.1}, "Enhancing colors and vibrancy")),
    (_contains("bright", "lighten"),
     _preset("enhance", {"brightness": 1.3}, "Increasing brightness")),
    (_contains("dark", "dim"),
     _preset("enhance", {"brightness": 0.7}, "Reducing brightness")),
    (_contains("sharp", "detail"),
     _preset("enhance", {"sharpen": True, "contrast": 1.1}, "Sharpening image")),
    (_contains("contrast"),
     _preset("enhance", {"contrast": 1.3}, "Increasing contrast")),
    (_contains("rotate"), _rotate),
    (_contains("flip", "mirror"), _flip),
    (_contains("16:9", "16/9", "widescreen"),
     _preset("crop", {"aspectRatio": "16:9"}, "Cropping to 16:9 aspect ratio")),
    (_contains("4:3", "4/3"),
     _preset("crop", {"aspectRatio": "4:3"}, "Cropping to 4:3 aspect ratio")),
    (_contains("square", "1:1"),
     _preset("crop", {"aspectRatio": "1:1"}, "Cropping to square")),
    (_contains("warm", "golden"),
     _preset("enhance", {"saturation": 1.2, "brightness": 1.05}, "Adding warm tones")),
]

DEFAULT_BUILDER: Builder = _preset(
    "enhance",
    {"contrast": 1.1, "saturation": 1.1, "sharpen": True},
    "General enhancement applied",
)


def classify(user_prompt: Optional[str]) -> EditInstruction:
    """
    Map a user instruction to an EditInstruction. Pure and deterministic.

    Examples:
        classify("convert to black and white")
            → filter {type: grayscale}
        classify("rotate this 90 degrees")
            → transform {rotate: 90}
        classify("")
            → enhance {contrast: 1.1, saturation: 1.1, sharpen: True}
    """
    prompt = (user_prompt or "").lower()
    for predicate, build in RULES:
        if predicate(prompt):
            return build(prompt)
    return DEFAULT_BUILDER(prompt)


def fallback_instruction(user_prompt: Optional[str]) -> EditInstruction:
    """classify() result flagged as produced without the AI provider."""
    instruction = classify(user_prompt)
    instruction.used_fallback = True
    instruction.fallback_reason = FALLBACK_REASON
    return instruction
