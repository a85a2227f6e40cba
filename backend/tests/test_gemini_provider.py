"""
PixelPilot Backend — Gemini Provider Unit Tests
=================================================

What:  Tests for GeminiProvider with the google-generativeai SDK mocked out.

What we test:
    ✅ One GenerativeModel per model id, reused across calls
    ✅ Response text stripped, request timeout forwarded
    ✅ SDK errors pass through untouched for classification
    ✅ Unconfigured provider raises ProviderConfigurationError
    ✅ Health check outcomes
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pixelpilot.exceptions import ProviderConfigurationError
from pixelpilot.services.gemini_provider import GeminiProvider

PARTS = ["Describe", {"mime_type": "image/png", "data": b"x"}]


@pytest.fixture
def mock_genai():
    with patch("pixelpilot.services.gemini_provider.genai") as genai:
        yield genai


def stub_model(genai, text="  A red square.  ", error=None):
    model = MagicMock()
    if error is not None:
        model.generate_content_async = AsyncMock(side_effect=error)
    else:
        model.generate_content_async = AsyncMock(return_value=MagicMock(text=text))
    genai.GenerativeModel.return_value = model
    return model


class TestGeminiProviderGenerate:

    def test_configures_sdk_with_key(self, mock_genai):
        GeminiProvider(api_key="real-key")
        mock_genai.configure.assert_called_once_with(api_key="real-key")

    @pytest.mark.parametrize("key", ["", "your_gemini_api_key_here"])
    def test_placeholder_keys_are_not_configured(self, mock_genai, key):
        provider = GeminiProvider(api_key=key)
        assert provider.configured is False
        mock_genai.configure.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_returns_stripped_text(self, mock_genai):
        model = stub_model(mock_genai)
        provider = GeminiProvider(api_key="real-key", request_timeout=15)

        result = await provider.generate("gemini-2.0-flash", PARTS)

        assert result == "A red square."
        model.generate_content_async.assert_awaited_once_with(
            PARTS, request_options={"timeout": 15}
        )
        assert mock_genai.GenerativeModel.call_args.args[0] == "gemini-2.0-flash"

    @pytest.mark.asyncio
    async def test_models_are_cached_per_id(self, mock_genai):
        stub_model(mock_genai)
        provider = GeminiProvider(api_key="real-key")

        await provider.generate("gemini-2.0-flash", PARTS)
        await provider.generate("gemini-2.0-flash", PARTS)
        await provider.generate("gemini-1.5-pro", PARTS)

        assert mock_genai.GenerativeModel.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_response_text(self, mock_genai):
        stub_model(mock_genai, text="")
        provider = GeminiProvider(api_key="real-key")
        assert await provider.generate("gemini-2.0-flash", PARTS) == ""

    @pytest.mark.asyncio
    async def test_sdk_errors_pass_through(self, mock_genai):
        stub_model(mock_genai, error=RuntimeError("429 Resource has been exhausted"))
        provider = GeminiProvider(api_key="real-key")

        with pytest.raises(RuntimeError, match="429"):
            await provider.generate("gemini-2.0-flash", PARTS)

    @pytest.mark.asyncio
    async def test_unconfigured_raises(self, mock_genai):
        provider = GeminiProvider(api_key="")
        with pytest.raises(ProviderConfigurationError):
            await provider.generate("gemini-2.0-flash", PARTS)
        mock_genai.GenerativeModel.assert_not_called()


class TestGeminiProviderHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, mock_genai):
        mock_genai.list_models.return_value = iter([MagicMock(name="gemini-2.0-flash")])
        assert await GeminiProvider(api_key="real-key").health_check() is True

    @pytest.mark.asyncio
    async def test_api_error(self, mock_genai):
        mock_genai.list_models.side_effect = Exception("403 API key not valid")
        assert await GeminiProvider(api_key="real-key").health_check() is False

    @pytest.mark.asyncio
    async def test_unconfigured(self, mock_genai):
        assert await GeminiProvider(api_key="").health_check() is False
        mock_genai.list_models.assert_not_called()
