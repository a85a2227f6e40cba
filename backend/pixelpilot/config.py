"""
PixelPilot Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


# Ordered by preference. A quota or not-found failure on one model moves the
# registry to the next entry.
DEFAULT_GEMINI_MODELS = (
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-2.0-flash-thinking-exp-01-21",
    "gemini-2.0-pro-exp-02-05",
    "gemini-1.5-pro",
    "gemini-1.5-flash-8b",
    "gemini-exp-1206",
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST set GEMINI_API_KEY and CORS_ORIGINS.
    """

    # ── Google Gemini ─────────────────────────────────────────────────────
    # How to obtain: https://aistudio.google.com/app/apikey
    gemini_api_key: str = Field(
        default="",
        description="Google Gemini API key for vision and text generation"
    )

    # What: Candidate models, most preferred first (comma-separated in env)
    gemini_models: str = Field(default=",".join(DEFAULT_GEMINI_MODELS))

    gemini_max_output_tokens: int = Field(default=1024, ge=64, le=8192)
    gemini_temperature: float = Field(default=0.4, ge=0.0, le=2.0)

    # What: Per-request timeout handed to the Gemini SDK (seconds)
    gemini_request_timeout: int = Field(default=60, ge=5, le=600)

    @property
    def gemini_models_list(self) -> Tuple[str, ...]:
        """Candidate model ids in preference order, blanks dropped."""
        return tuple(m.strip() for m in self.gemini_models.split(",") if m.strip())

    @field_validator("gemini_models")
    @classmethod
    def validate_gemini_models(cls, v: str) -> str:
        """The registry cannot be built from an empty candidate list."""
        if not any(m.strip() for m in v.split(",")):
            raise ValueError("GEMINI_MODELS must name at least one model")
        return v

    # ── Model Fallback & Retry ────────────────────────────────────────────
    # What: Seconds after the last reset before selection returns to the
    # primary model. 0 disables the auto-reset.
    model_reset_interval: float = Field(default=60.0, ge=0.0, le=3600.0)

    # What: Fixed wait after switching models on a quota error, and the unit
    # of the linear backoff for other errors (wait = delay * attempt).
    ai_retry_delay: float = Field(default=1.5, ge=0.0, le=60.0)

    # What: Attempt budget per call. 0 means one attempt per candidate model.
    ai_max_attempts: int = Field(default=0, ge=0, le=50)

    @property
    def effective_max_attempts(self) -> int:
        return self.ai_max_attempts or len(self.gemini_models_list)

    # ── Uploads ───────────────────────────────────────────────────────────
    # Default: 10MB = 10 * 1024 * 1024 = 10485760
    max_file_size: int = Field(default=10_485_760, ge=1_048_576, le=52_428_800)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window limit on the AI endpoints
    rate_limit_requests: int = Field(default=20, ge=1, le=10000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "protected_namespaces": ("settings_",),
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        """
        errors = []
        if not self.gemini_api_key or self.gemini_api_key == "your_gemini_api_key_here":
            errors.append(
                "GEMINI_API_KEY is not set. "
                "Get a key at https://aistudio.google.com/app/apikey"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
