"""
PixelPilot Backend — Response Interpreter
===========================================

What:  Pulls a JSON value out of free-form model output.
How:   Strips Markdown code fences (```json and bare ```), trims, takes the
       greedy span from the first "{" to the last "}" and parses it.
Who:   AIService, after every successful orchestrated call that asked for JSON.

"No structured result" is a normal outcome and is reported as None, never as
an exception. Callers fall back to the raw text, or to the rule-based intent
extractor when a structured edit instruction is mandatory.
"""

import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

_FENCE_JSON = re.compile(r"```json\n?")
_FENCE_BARE = re.compile(r"```\n?")
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(raw_text: str) -> str:
    cleaned = _FENCE_JSON.sub("", raw_text)
    cleaned = _FENCE_BARE.sub("", cleaned)
    return cleaned.strip()


def extract_structured(raw_text: Optional[str]) -> Optional[Any]:
    """
    Extract the JSON object embedded in a model response.

    Examples:
        >>> extract_structured('```json\\n{"a": 1}\\n```')
        {'a': 1}
        >>> extract_structured('Sure! {"action": "filter"} Hope that helps.')
        {'action': 'filter'}
        >>> extract_structured('no json here') is None
        True
    """
    if not raw_text:
        return None

    match = _BRACE_SPAN.search(strip_code_fences(raw_text))
    if not match:
        return None

    try:
        return json.loads(match.group(0))
    except ValueError:
        logger.debug("Model response contained an unparseable JSON span")
        return None
