"""Settings for the SportsApp backend with moderation and rate-limit configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GROQ_API_KEY_PLACEHOLDER = "YOUR_GROQ_API_KEY_HERE"
DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"


def groq_key_configured(key: Optional[str]) -> bool:
    """A key counts only when it is set and is not the shipped placeholder."""
    return bool(key) and key != GROQ_API_KEY_PLACEHOLDER


def _env_field(default, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


class Settings(BaseSettings):
    redis_url: str = _env_field("redis://localhost:6379/0", "REDIS_URL")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
    service_name: str = _env_field("sportsapp-api", "SERVICE_NAME")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")
    obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
    obs_log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")

    # Write-path rate limiting (per user, per action type, one hour window)
    rate_limiting_enabled: bool = _env_field(True, "RATE_LIMITING_ENABLED", "RATELIMITING__ENABLED")
    rate_limiting_posts_per_hour: int = _env_field(
        10, "RATE_LIMITING_POSTS_PER_HOUR", "RATELIMITING__POSTSPERHOUR"
    )
    rate_limiting_comments_per_hour: int = _env_field(
        30, "RATE_LIMITING_COMMENTS_PER_HOUR", "RATELIMITING__COMMENTSPERHOUR"
    )
    # "memory" keeps counters in-process, "redis" shares them through redis_url
    rate_limiting_backend: str = _env_field("memory", "RATE_LIMITING_BACKEND")

    # Remote AI classification (Groq chat completions)
    groq_api_enabled: bool = _env_field(False, "GROQ_API_ENABLED", "GROQAPI__ENABLED")
    groq_api_key: Optional[str] = _env_field(None, "GROQ_API_KEY", "GROQAPI__APIKEY")
    groq_api_model: str = _env_field(DEFAULT_GROQ_MODEL, "GROQ_API_MODEL", "GROQAPI__MODEL")
    groq_api_timeout_seconds: float = _env_field(10.0, "GROQ_API_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("rate_limiting_backend", mode="before")
    def _normalise_backend(cls, value):  # type: ignore[override]
        if value is None:
            return "memory"
        normalised = str(value).strip().lower()
        if normalised not in {"memory", "redis"}:
            raise ValueError("rate_limiting_backend must be 'memory' or 'redis'")
        return normalised

    @field_validator("groq_api_key", mode="before")
    def _blank_key_is_unset(cls, value):  # type: ignore[override]
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    # Environment helpers
    def is_prod(self) -> bool:
        return self.environment.lower() in ("prod", "production", "live")

    def is_dev(self) -> bool:
        return self.environment.lower() in ("dev", "development")


settings = Settings()
