"""Usage analytics configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from usage_analytics._version import __version__


class Settings(BaseSettings):
    """
    Usage analytics configuration.

    All settings can be overridden via environment variables with the
    USAGE_ANALYTICS_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="USAGE_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Analytics API serving /analytics, /health and /high-quality-prompts
    api_url: str = "http://localhost:4200"
    request_timeout_seconds: float = 10.0

    # Period windows offered by the dashboard
    default_window_days: int = 30
    allowed_windows: tuple[int, ...] = (7, 30, 90)

    # Aggregation
    response_time_policy: Literal["running_mean", "weighted_mean"] = "running_mean"
    endpoint_aliases: dict[str, str] = {}

    debug: bool = False
    log_format: Literal["text", "json"] = "text"

    version: str = __version__

    @field_validator("api_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("allowed_windows", mode="after")
    @classmethod
    def _sorted_windows(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        return tuple(sorted(set(value)))


@lru_cache
def get_settings() -> Settings:
    return Settings()
