"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CharsheetError: Base exception for all application errors.
        RulesEngineError: Failures inside the rules engines.
        StorageError: Persistence failures, tagged with a StorageErrorCode.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from charsheet.core.config import (
    RulesSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from charsheet.core.exceptions import (
    AuthError,
    CharacterImportError,
    CharacterNotFoundError,
    CharsheetError,
    ConfigurationError,
    DiceRollError,
    EquipmentError,
    ReferenceDataError,
    RulesEngineError,
    StorageError,
    StorageErrorCode,
)
from charsheet.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "CharsheetError",
    # Configuration exceptions
    "ConfigurationError",
    # Rules engine exceptions
    "RulesEngineError",
    "DiceRollError",
    "ReferenceDataError",
    "CharacterImportError",
    "EquipmentError",
    # Storage and auth exceptions
    "StorageErrorCode",
    "StorageError",
    "CharacterNotFoundError",
    "AuthError",
    # Configuration
    "Settings",
    "RulesSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
