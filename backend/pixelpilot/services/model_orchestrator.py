"""
PixelPilot Backend — Model-Call Orchestrator
==============================================

What:  Issues a generation request against the registry's current model and
       decides, after each failure, whether to switch models, wait, or give up.
How:   A tenacity AsyncRetrying loop. Each attempt classifies its own failure
       (and advances the registry when needed); a custom wait strategy turns
       that decision into the delay before the next attempt.
Who:   AIService, for every AI-dependent operation.

Retry State Machine (per attempt, terminal states Success / Unavailable):
    current() → generate() ─ok──────────────────────────────▶ Success
                    │
                    └─fail→ classify_failure()
                        QUOTA      advance() ? wait switch_delay : linear backoff
                        NOT_FOUND  advance() ? retry at once     : linear backoff
                        OTHER      wait base_delay * attempt_number (same model)
                        FATAL      ───────────────────────────▶ Unavailable
    after max_attempts failures ─────────────────────────────▶ Unavailable

Quota and not-found are provider-capacity signals, so they skip the generic
backoff and move to the next model. Network-style errors back off linearly on
the same model. The default attempt budget is one per candidate model.

Concurrency:
    Sleeps are asyncio.sleep, so a waiting request yields the event loop to
    other requests. All requests share one ModelRegistry; a quota failure on
    one request moves every later request to the next model as well.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from pixelpilot.config import settings
from pixelpilot.exceptions import AIServiceUnavailableError
from pixelpilot.services.failure_classifier import FailureKind, classify_failure
from pixelpilot.services.gemini_provider import gemini_provider
from pixelpilot.services.llm_base import ModelProvider, PromptPart
from pixelpilot.services.model_registry import ModelRegistry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Attempt Bookkeeping
# ══════════════════════════════════════════════════════════════════════════

SUCCESS = "success"
TRANSIENT_FAILURE = "transient_failure"
TERMINAL_FAILURE = "terminal_failure"


@dataclass
class CallAttempt:
    """One provider call made by invoke(). Not persisted."""

    attempt_number: int
    model: str
    outcome: str
    failure_kind: Optional[FailureKind] = None
    error: Optional[str] = None


class ProviderCallFailed(Exception):
    """A failed attempt together with the retry decision already taken for it."""

    def __init__(self, error: BaseException, kind: FailureKind, switched: bool):
        super().__init__(str(error))
        self.error = error
        self.kind = kind
        self.switched = switched


def _is_retryable(exc: BaseException) -> bool:
    # Cancellation and other BaseExceptions are re-raised by tenacity untouched
    return isinstance(exc, ProviderCallFailed) and exc.kind is not FailureKind.FATAL


class wait_for_failure(wait_base):
    """
    Delay before the next attempt, chosen from the last failure's kind.

    - QUOTA with a successful model switch: fixed switch_delay
    - NOT_FOUND with a successful model switch: no wait
    - anything else: base_delay * attempt_number (linear backoff)
    """

    def __init__(self, base_delay: float, switch_delay: float):
        self.base_delay = base_delay
        self.switch_delay = switch_delay

    def __call__(self, retry_state: RetryCallState) -> float:
        failure = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(failure, ProviderCallFailed) and failure.switched:
            if failure.kind is FailureKind.QUOTA:
                return self.switch_delay
            if failure.kind is FailureKind.NOT_FOUND:
                return 0.0
        return self.base_delay * retry_state.attempt_number


# ══════════════════════════════════════════════════════════════════════════
# Orchestrator
# ══════════════════════════════════════════════════════════════════════════

class ModelOrchestrator:
    """
    Runs one logical AI request across the candidate models.

    Args:
        provider: Upstream client; called once per attempt.
        registry: Shared model selection state.
        max_attempts: Default attempt budget (defaults to one per model).
        base_delay: Default backoff unit in seconds.
        switch_delay: Wait after a quota-driven switch (defaults to base_delay).
        sleep: Awaitable sleep function (replaced in tests).
    """

    def __init__(
        self,
        provider: ModelProvider,
        registry: ModelRegistry,
        max_attempts: Optional[int] = None,
        base_delay: float = 1.5,
        switch_delay: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.provider = provider
        self.registry = registry
        self.max_attempts = max_attempts or len(registry)
        self.base_delay = base_delay
        self.switch_delay = switch_delay
        self._sleep = sleep

    async def invoke(
        self,
        prompt_parts: Sequence[PromptPart],
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
    ) -> str:
        """
        Call the provider until one attempt succeeds or the budget is spent.

        Returns:
            Raw response text from the first successful attempt.

        Raises:
            AIServiceUnavailableError: Every attempt failed, or a failure was
                classified as fatal. `last_error` holds the final provider error.
        """
        max_attempts = max_attempts or self.max_attempts
        base_delay = self.base_delay if base_delay is None else base_delay
        switch_delay = base_delay if self.switch_delay is None else self.switch_delay

        call_id = str(uuid.uuid4())[:8]
        attempts: List[CallAttempt] = []

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_for_failure(base_delay, switch_delay),
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry(call_id),
            sleep=self._sleep,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._attempt(
                        call_id,
                        prompt_parts,
                        attempt.retry_state.attempt_number,
                        attempts,
                    )
        except RetryError as e:
            failure = e.last_attempt.exception()
            raise self._unavailable(call_id, failure, attempts) from failure
        except ProviderCallFailed as failure:
            # FATAL: surfaced on the first failure
            raise self._unavailable(call_id, failure, attempts) from failure

        # AsyncRetrying always returns or raises above
        raise AIServiceUnavailableError(attempts=attempts)

    async def _attempt(
        self,
        call_id: str,
        prompt_parts: Sequence[PromptPart],
        attempt_number: int,
        attempts: List[CallAttempt],
    ) -> str:
        model = self.registry.current()
        logger.info("[%s] AI attempt %d using model: %s", call_id, attempt_number, model)

        try:
            text = await self.provider.generate(model, prompt_parts)
        except Exception as exc:
            kind = classify_failure(exc)
            switched = False
            if kind in (FailureKind.QUOTA, FailureKind.NOT_FOUND):
                switched = self.registry.advance()

            attempts.append(
                CallAttempt(attempt_number, model, TRANSIENT_FAILURE, kind, str(exc))
            )
            logger.warning(
                "[%s] AI attempt %d on %s failed (%s, switched=%s): %s",
                call_id,
                attempt_number,
                model,
                kind.value,
                switched,
                str(exc),
            )
            raise ProviderCallFailed(exc, kind, switched) from exc

        attempts.append(CallAttempt(attempt_number, model, SUCCESS))
        return text

    def _unavailable(
        self,
        call_id: str,
        failure: Optional[BaseException],
        attempts: List[CallAttempt],
    ) -> AIServiceUnavailableError:
        last_error = failure.error if isinstance(failure, ProviderCallFailed) else failure
        if attempts:
            attempts[-1].outcome = TERMINAL_FAILURE

        logger.error(
            "[%s] AI service unavailable after %d attempt(s): %s",
            call_id,
            len(attempts),
            str(last_error) if last_error else "Unknown error",
        )
        retry_after = int(self.registry.reset_interval) if self.registry.reset_interval else None
        return AIServiceUnavailableError(
            message=(
                f"AI service temporarily unavailable: "
                f"{last_error or 'Unknown error'}. Please try again later."
            ),
            last_error=last_error,
            attempts=attempts,
            retry_after=retry_after,
            context={"call_id": call_id},
        )

    @staticmethod
    def _log_retry(call_id: str) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            delay = retry_state.next_action.sleep if retry_state.next_action else 0
            logger.info("[%s] Retrying in %.1fs", call_id, delay)

        return before_sleep


# ── Singleton Instances ───────────────────────────────────────────────────
# One registry per process: every request shares the model selection state.
model_registry = ModelRegistry(
    settings.gemini_models_list,
    reset_interval=settings.model_reset_interval,
)

model_orchestrator = ModelOrchestrator(
    provider=gemini_provider,
    registry=model_registry,
    max_attempts=settings.effective_max_attempts,
    base_delay=settings.ai_retry_delay,
)
