"""
PixelPilot Backend — Google Gemini Provider
=============================================

What:  ModelProvider implementation backed by the google-generativeai SDK.
How:   Keeps one GenerativeModel per model id (created lazily) and issues a
       single generate_content_async call per attempt.
Who:   Instantiated once at import; used by ModelOrchestrator.

Generation settings (max_output_tokens, temperature, request timeout) come
from settings and apply to every candidate model alike.
"""

import logging
import time
from typing import Dict, Sequence

import google.generativeai as genai

from pixelpilot.config import settings
from pixelpilot.exceptions import ProviderConfigurationError
from pixelpilot.services.llm_base import ModelProvider, PromptPart

logger = logging.getLogger(__name__)


class GeminiProvider(ModelProvider):
    """
    Google Gemini implementation of the provider contract.

    Errors raised by the SDK (google.api_core exceptions) are passed through
    untouched; their messages start with the HTTP status ("429 Resource has
    been exhausted", "404 models/x is not found") which is what the
    orchestrator classifies on.
    """

    def __init__(self, api_key: str = "", request_timeout: int = 60):
        self.api_key = api_key
        self.request_timeout = request_timeout
        self._models: Dict[str, "genai.GenerativeModel"] = {}

        if self.configured:
            genai.configure(api_key=api_key)

        logger.info(
            "GeminiProvider initialized (configured=%s, timeout=%ds)",
            self.configured,
            request_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "your_gemini_api_key_here"

    def _get_model(self, model_id: str) -> "genai.GenerativeModel":
        model = self._models.get(model_id)
        if model is None:
            model = genai.GenerativeModel(
                model_id,
                generation_config={
                    "max_output_tokens": settings.gemini_max_output_tokens,
                    "temperature": settings.gemini_temperature,
                },
            )
            self._models[model_id] = model
        return model

    async def generate(self, model_id: str, prompt_parts: Sequence[PromptPart]) -> str:
        if not self.configured:
            raise ProviderConfigurationError(
                message="GEMINI_API_KEY is not configured",
                context={"model": model_id},
            )

        start_time = time.time()
        response = await self._get_model(model_id).generate_content_async(
            list(prompt_parts),
            request_options={"timeout": self.request_timeout},
        )
        duration_ms = (time.time() - start_time) * 1000

        text = response.text.strip() if response.text else ""
        logger.debug(
            "Gemini %s responded in %.0fms with %d chars",
            model_id,
            duration_ms,
            len(text),
        )
        return text

    async def health_check(self) -> bool:
        """
        Check if the Gemini API is reachable.

        How: Lists available models (no token cost).
        """
        if not self.configured:
            return False
        try:
            # list_models() is a lazy pager; pull the first page to hit the API
            next(iter(genai.list_models()), None)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


gemini_provider = GeminiProvider(
    api_key=settings.gemini_api_key,
    request_timeout=settings.gemini_request_timeout,
)
