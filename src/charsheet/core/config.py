"""Configuration management for charsheet.

Settings are loaded with pydantic-settings from environment variables
and an optional ``.env`` file. They only supply defaults: every engine
operation also accepts explicit arguments.

Example:
    >>> from charsheet.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.default_point_buy
    20

Environment Variables:
    CHARSHEET_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CHARSHEET_JSON_LOGS: Emit JSON log lines
    CHARSHEET_DATABASE_PATH: Path to the SQLite character database
    CHARSHEET_RULES_DEFAULT_POINT_BUY: Default point-buy budget
    CHARSHEET_RULES_ENCUMBRANCE_ENABLED: Track encumbrance on new characters
    CHARSHEET_RULES_ENCUMBRANCE_VARIANT: core, simplified or none
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from charsheet.core.constants import CUSTOM_POINT_BUY_MAX, CUSTOM_POINT_BUY_MIN
from charsheet.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Defaults for the rules engines.

    Attributes:
        default_point_buy: Point-buy budget used when none is given.
        encumbrance_enabled: Whether new characters track encumbrance.
        encumbrance_variant: Encumbrance rule set for new characters.
        enforce_slot_compatibility: Reject items equipped to slots of the wrong kind.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_point_buy: int = Field(
        default=20,
        description="Default point-buy budget",
    )
    encumbrance_enabled: bool = Field(
        default=False,
        description="Track encumbrance on new characters",
    )
    encumbrance_variant: Literal["core", "simplified", "none"] = Field(
        default="core",
        description="Encumbrance rule set",
    )
    enforce_slot_compatibility: bool = Field(
        default=True,
        description="Reject items equipped to slots of the wrong kind",
    )

    @field_validator("default_point_buy", mode="after")
    @classmethod
    def validate_point_buy_range(cls, value: int) -> int:
        """Keep the default budget inside the custom point-buy bounds.

        Raises:
            ConfigurationError: If the budget is outside the allowed range.
        """
        if not CUSTOM_POINT_BUY_MIN <= value <= CUSTOM_POINT_BUY_MAX:
            raise ConfigurationError(
                f"default_point_buy must be between {CUSTOM_POINT_BUY_MIN} "
                f"and {CUSTOM_POINT_BUY_MAX} (got {value})",
                config_key="default_point_buy",
            )
        return value


class StorageSettings(BaseSettings):
    """Configuration for character persistence.

    Attributes:
        database_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/charsheet.db"),
        description="Path to SQLite database",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        rules: Rules engine defaults.
        storage: Persistence settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHARSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Charsheet",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
