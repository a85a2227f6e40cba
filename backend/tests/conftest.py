"""
PixelPilot Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Overview:
    ├── fake_clock: Manually advanced monotonic clock for registry timing
    ├── registry: Seven-model ModelRegistry on the fake clock
    ├── sleeper: Records orchestrator delays instead of sleeping
    ├── sample_png_bytes: Small real PNG for upload validation
    └── test_client: HTTPX AsyncClient wired to a fresh app instance

No test talks to the real Gemini API.
"""

import io
import os
from typing import Callable, List, Optional, Sequence, Union

# Override settings for testing BEFORE any pixelpilot imports
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "1000"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

from pixelpilot.config import DEFAULT_GEMINI_MODELS
from pixelpilot.services.llm_base import ModelProvider
from pixelpilot.services.model_orchestrator import ModelOrchestrator
from pixelpilot.services.model_registry import ModelRegistry


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

Outcome = Union[str, BaseException]


class ScriptedProvider(ModelProvider):
    """
    ModelProvider whose answers come from a script.

    `script` is either a list of outcomes consumed one per call, or a function
    of the model id. An outcome that is an exception is raised.
    """

    def __init__(
        self,
        script: Union[Sequence[Outcome], Callable[[str], Outcome]],
        default: Outcome = "ok",
    ):
        self._script = script if callable(script) else list(script)
        self.default = default
        self.calls: List[str] = []
        self.parts: List[list] = []

    async def generate(self, model_id, prompt_parts):
        self.calls.append(model_id)
        self.parts.append(list(prompt_parts))
        if callable(self._script):
            outcome = self._script(model_id)
        elif self._script:
            outcome = self._script.pop(0)
        else:
            outcome = self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def health_check(self) -> bool:
        return True


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_orchestrator(
    provider: ModelProvider,
    registry: ModelRegistry,
    sleeper: SleepRecorder,
    max_attempts: Optional[int] = None,
    base_delay: float = 1.5,
) -> ModelOrchestrator:
    return ModelOrchestrator(
        provider=provider,
        registry=registry,
        max_attempts=max_attempts,
        base_delay=base_delay,
        sleep=sleeper,
    )


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def models():
    return list(DEFAULT_GEMINI_MODELS)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def registry(models, fake_clock):
    return ModelRegistry(models, reset_interval=60.0, clock=fake_clock)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def sample_png_bytes():
    """A real 8x8 PNG so Pillow can identify it."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to a fresh app (fresh rate-limit counters).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from pixelpilot.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
