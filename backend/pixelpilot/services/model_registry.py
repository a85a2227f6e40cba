"""
PixelPilot Backend — Model Registry
=====================================

What:  Ordered list of candidate Gemini models plus the mutable selection state
       that says which one to call next.
How:   A SelectionState (index + last reset time) is owned by the registry.
       advance() moves forward on capacity failures; current() snaps back to the
       primary model once the reset interval has elapsed since the last reset.
Who:   ModelOrchestrator asks for current() before every attempt and calls
       advance() on quota / not-found failures.

State Machine:
    index 0 ──advance()──▶ index 1 ──▶ ... ──▶ index N-1 (advance() → False)
        ▲                                          │
        └──── reset() or current() after interval ─┘

The reset interval is measured from the last reset, not from the last failure.
A burst of failures faster than the interval never resets, while a mixed run
of successes and failures spanning the interval reverts to the primary model
mid-sequence. Set reset_interval=None to disable the auto-reset.

Thread Safety:
    One registry is shared by every request in the process. advance() and the
    reset check run under a lock, so concurrent failures can each advance the
    index but never push it past the last candidate.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass
class SelectionState:
    """Index of the model in use and when selection was last reset."""

    current_index: int = 0
    last_reset_at: float = field(default_factory=time.monotonic)


class ModelRegistry:
    """
    Candidate models in preference order and the current selection.

    Args:
        models: Model identifiers, most preferred first. Must not be empty.
        reset_interval: Seconds after the last reset before current() returns
            to the first model. None or 0 disables the auto-reset.
        state: Selection state to mutate. A fresh one is created if omitted.
        clock: Monotonic time source (overridden in tests).
    """

    def __init__(
        self,
        models: Sequence[str],
        reset_interval: Optional[float] = 60.0,
        state: Optional[SelectionState] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._models: Tuple[str, ...] = tuple(models)
        if not self._models:
            raise ValueError("ModelRegistry requires at least one candidate model")

        self.reset_interval = reset_interval or None
        self._clock = clock
        self.state = state or SelectionState(last_reset_at=clock())
        self._lock = threading.Lock()

    def current(self) -> str:
        """Return the model to call now, applying the auto-reset rule first."""
        with self._lock:
            now = self._clock()
            if (
                self.reset_interval is not None
                and now - self.state.last_reset_at > self.reset_interval
            ):
                if self.state.current_index != 0:
                    logger.info("Auto-reset to primary model: %s", self._models[0])
                self.state.current_index = 0
                self.state.last_reset_at = now
            return self._models[self.state.current_index]

    def advance(self) -> bool:
        """
        Move to the next candidate.

        Returns:
            True if the index moved, False if already on the last candidate
            (no more fallbacks). The index never decrements here.
        """
        with self._lock:
            if self.state.current_index < len(self._models) - 1:
                self.state.current_index += 1
                logger.info(
                    "Switching to model %d/%d: %s",
                    self.state.current_index + 1,
                    len(self._models),
                    self._models[self.state.current_index],
                )
                return True
        logger.warning("All models exhausted, no more fallbacks available")
        return False

    def reset(self) -> None:
        with self._lock:
            self.state.current_index = 0
            self.state.last_reset_at = self._clock()

    def models(self) -> Tuple[str, ...]:
        """Read-only snapshot of all candidates, for diagnostics."""
        return self._models

    list = models

    @property
    def current_index(self) -> int:
        return self.state.current_index

    def __len__(self) -> int:
        return len(self._models)

    def snapshot(self) -> dict:
        """Diagnostic view used by the health endpoint."""
        return {
            "current_model": self._models[self.state.current_index],
            "current_index": self.state.current_index,
            "models": [*self._models],
            "reset_interval": self.reset_interval,
        }
