"""
PixelPilot Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    PixelPilotError (base)
    ├── ValidationError             → 400 Bad Request (client can fix)
    ├── AIServiceUnavailableError   → 503 Service Unavailable (all models exhausted)
    ├── ProviderConfigurationError  → fatal for the orchestrator (no retries)
    └── RateLimitExceededError      → 429 Too Many Requests

Transient provider errors (quota, not-found, network) are never raised to
callers directly. The orchestrator retries them and only surfaces
AIServiceUnavailableError once the attempt budget is spent.
"""

from typing import Any, Dict, Optional


class PixelPilotError(Exception):
    """
    Base exception for all PixelPilot application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PixelPilotError):
    """
    Raised when client input fails validation.

    When:    No file, unsupported image type, size exceeded, missing prompt.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AIServiceUnavailableError(PixelPilotError):
    """
    Raised when every attempt against the AI provider has failed.

    What:    Terminal state of ModelOrchestrator.invoke().
    HTTP:    503 Service Unavailable

    Attributes:
        last_error:  The underlying provider exception from the final attempt
        attempts:    Ordered CallAttempt records for diagnostics
        retry_after: Suggested seconds before the client retries
    """

    def __init__(
        self,
        message: str = "AI service temporarily unavailable. Please try again later.",
        last_error: Optional[BaseException] = None,
        attempts: Optional[list] = None,
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if last_error is not None:
            ctx["last_error"] = str(last_error)
        if attempts:
            ctx["attempts"] = len(attempts)
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.last_error = last_error
        self.attempts = list(attempts or [])
        self.retry_after = retry_after


class ProviderConfigurationError(PixelPilotError):
    """
    Raised by a provider that cannot make calls at all (e.g. no API key).

    What:    Classified as fatal, so the orchestrator stops retrying at once.
    HTTP:    Never reaches the client directly; wrapped in AIServiceUnavailableError.
    """

    def __init__(
        self,
        message: str = "AI provider is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PixelPilotError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
