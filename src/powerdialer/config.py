"""
Dialer configuration with environment-driven settings.

Every field can be overridden with a DIALER_ prefixed environment variable
(e.g. DIALER_DIAL_RATIO=3) or through a local .env file.
"""

import logging
import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DialerSettings(BaseSettings):
    """Power dialer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DIALER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"

    # Dialing
    dial_ratio: int = Field(
        default=2,
        ge=1,
        le=50,
        description="Maximum number of leads dialed concurrently per round.",
    )
    cancel_losing_attempts: bool = Field(
        default=False,
        description="Cancel still-running dial attempts once a round has a winner.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept any standard logging level name, case-insensitively."""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def _get_settings_cached() -> DialerSettings:
    """Get cached settings instance."""
    return DialerSettings()


def get_settings() -> DialerSettings:
    # Under pytest the environment changes between tests (monkeypatch),
    # so never hand out a frozen instance there.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return DialerSettings()
    return _get_settings_cached()
