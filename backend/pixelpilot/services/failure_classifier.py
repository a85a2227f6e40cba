"""
PixelPilot Backend — Provider Failure Classification
======================================================

What:  Maps a provider exception to the retry decision it should trigger.
How:   Pattern-matches the exception message against the status-like
       substrings the Gemini SDK emits ("429 Resource has been exhausted",
       "404 models/x is not found", ...).
Who:   ModelOrchestrator, after every failed attempt.

Integrating another provider means translating its errors into these same
message signatures, or extending classify_failure(). The retry state machine
does not need to change.
"""

import enum

from pixelpilot.exceptions import ProviderConfigurationError


class FailureKind(str, enum.Enum):
    QUOTA = "quota"             # rate limit / quota: switch model, fixed wait
    NOT_FOUND = "not_found"     # model missing: switch model, no wait
    OTHER = "other"             # network blip etc.: same model, linear backoff
    FATAL = "fatal"             # retrying cannot help: stop immediately


QUOTA_SIGNATURES = ("429", "quota", "Too Many Requests")
NOT_FOUND_SIGNATURES = ("404", "not found")


def classify_failure(error: BaseException) -> FailureKind:
    """
    Classify a failed provider call.

    Quota is checked before not-found, so a message carrying both signatures
    is treated as a quota failure.
    """
    if isinstance(error, ProviderConfigurationError):
        return FailureKind.FATAL

    message = str(error)
    if any(sig in message for sig in QUOTA_SIGNATURES):
        return FailureKind.QUOTA
    if any(sig in message for sig in NOT_FOUND_SIGNATURES):
        return FailureKind.NOT_FOUND
    return FailureKind.OTHER
