"""Configuration management for Tandem.

Handles segmentation, locator and registry settings using Pydantic Settings.
Supports environment variables and .env files.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loads configuration from environment variables or .env file.
    All settings can be overridden via environment variables with TANDEM_ prefix.

    Example .env file:
        TANDEM_SEGMENT_DELIMITER=µ
        TANDEM_SEGMENTATION_STRATEGY=regex
        TANDEM_SEGMENTATION_REGEX=[;.]\\s*
        TANDEM_SOURCE_LOCATOR=tag:source

    Example usage:
        >>> settings = Settings()
        >>> print(settings.segmentation_strategy)
        sentence
    """

    # Segmentation
    segment_delimiter: str = Field(
        default="µ",
        description="Reserved character inserted before every segment",
        min_length=1,
        max_length=1,
        json_schema_extra={"env": "TANDEM_SEGMENT_DELIMITER"},
    )

    segmentation_strategy: str = Field(
        default="sentence",
        description="Intra-paragraph splitting strategy (sentence, paragraph, regex)",
        json_schema_extra={"env": "TANDEM_SEGMENTATION_STRATEGY"},
    )

    segmentation_regex: str | None = Field(
        default=None,
        description="Boundary pattern for the regex strategy",
        json_schema_extra={"env": "TANDEM_SEGMENTATION_REGEX"},
    )

    # Root section locators
    source_locator: str = Field(
        default="heading:^source$",
        description="Locator of the source section (tag:, id:, property:, heading:)",
        json_schema_extra={"env": "TANDEM_SOURCE_LOCATOR"},
    )

    translation_locator: str = Field(
        default="heading:^translation$",
        description="Locator of the translation section",
        json_schema_extra={"env": "TANDEM_TRANSLATION_LOCATOR"},
    )

    glossary_locator: str = Field(
        default="heading:^glossary$",
        description="Locator of the glossary section",
        json_schema_extra={"env": "TANDEM_GLOSSARY_LOCATOR"},
    )

    # Project registry
    registry_path: Path = Field(
        default=Path.home() / ".tandem" / "projects.json",
        description="JSON file recording named projects",
        json_schema_extra={"env": "TANDEM_REGISTRY_PATH"},
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        json_schema_extra={"env": "TANDEM_LOG_LEVEL"},
    )

    # Model configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TANDEM_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("segmentation_strategy")
    @classmethod
    def _normalise_strategy(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call reloads them."""
    global _settings
    _settings = None
