"""
PixelPilot Backend — Abstract Model Provider Interface
========================================================

What:  Contract for the upstream AI provider the orchestrator calls.
How:   Concrete providers implement generate() for a single model and a
       single attempt. Retries, model switching and fallbacks live in
       ModelOrchestrator, never in the provider.
Who:   ModelOrchestrator (generate) and the health route (health_check).

Error contract:
    generate() raises whatever the provider SDK raises. The message must carry
    the status-like substrings that failure_classifier matches ("429", "quota",
    "Too Many Requests", "404", "not found"). A provider that cannot work at all
    raises ProviderConfigurationError.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

# A prompt part is either text or an inline blob: {"mime_type": str, "data": bytes}
PromptPart = Any


class ModelProvider(ABC):
    """
    Abstract interface for a multimodal generation API.

    Implementations:
        - GeminiProvider: Google Gemini via google-generativeai
    """

    @abstractmethod
    async def generate(self, model_id: str, prompt_parts: Sequence[PromptPart]) -> str:
        """
        Run one generation call against one model.

        Args:
            model_id: Candidate identifier chosen by the ModelRegistry.
            prompt_parts: Text instructions and inline image blobs, in order.

        Returns:
            The response text (may be empty, never None).
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        What:    Lightweight connectivity test (does NOT consume generation quota).
        Returns: True if the provider is reachable, False otherwise.
        """
        ...
