"""Configuration management for tryscope using pydantic-settings.

Settings are read from ``TRYSCOPE_*`` environment variables and an optional
``.env`` file, and validated on load.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TryscopeSettings(BaseSettings):
    """Main configuration settings for tryscope.

    Examples:
        TRYSCOPE_LOG_LEVEL=DEBUG
        TRYSCOPE_STRUCTURED_LOGS=true
    """

    model_config = SettingsConfigDict(
        env_prefix="TRYSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Log level for tryscope loggers"
    )
    structured_logs: bool = Field(False, description="Render log records as JSON")
    log_file: Path | None = Field(None, description="Optional file to write logs to")

    # Scope settings
    attach_notes: bool = Field(
        True, description="Add a traceback note for every suppressed failure"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Accept log levels in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value


# Singleton instance
_settings: TryscopeSettings | None = None


def get_settings() -> TryscopeSettings:
    """Get the singleton settings instance.

    Returns:
        TryscopeSettings instance
    """
    global _settings

    if _settings is None:
        _settings = TryscopeSettings()

    return _settings


def configure(**overrides) -> TryscopeSettings:
    """Replace the singleton with settings built from explicit values.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        The new TryscopeSettings instance
    """
    global _settings
    _settings = TryscopeSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
