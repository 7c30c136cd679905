"""Custom exception hierarchy for the charsheet rules engine.

All exceptions inherit from CharsheetError, enabling unified error
handling at the application boundary while preserving domain-specific
context in ``details``.

Rule checks (point buy, names, dice formulas, whole characters) do not
raise: they return validation results. The exceptions here are reserved
for hard failures such as rolling a malformed dice formula, importing a
document that cannot be parsed, or reading a character that does not
exist.

Example:
    >>> from charsheet.core.exceptions import DiceRollError
    >>> raise DiceRollError("Invalid dice formula: 4x6", expression="4x6")
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class CharsheetError(Exception):
    """Base exception for all charsheet errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(CharsheetError):
    """Raised when settings are missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(CharsheetError):
    """Base exception for failures inside the rules engines."""


class DiceRollError(RulesEngineError):
    """Raised when a dice formula cannot be rolled."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression is not None:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class ReferenceDataError(RulesEngineError):
    """Raised when a race or class lookup has no fallback and the name is unknown."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize reference data error.

        Args:
            message: Human-readable error description.
            table: Name of the reference table that was searched.
            name: The name that could not be resolved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if table:
            combined_details["table"] = table
        if name is not None:
            combined_details["name"] = name
        super().__init__(message, details=combined_details)


class CharacterImportError(RulesEngineError):
    """Raised when a serialized character cannot be parsed or fails validation."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize import error.

        Args:
            message: Human-readable error description.
            errors: Validation errors reported for the imported document.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if errors:
            combined_details["errors"] = errors
        self.errors = errors or []
        super().__init__(message, details=combined_details)


class EquipmentError(RulesEngineError):
    """Raised when an item cannot be created from the catalog."""

    def __init__(
        self,
        message: str,
        *,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize equipment error with item context.

        Args:
            message: Human-readable error description.
            item_id: Template or item identifier involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if item_id:
            combined_details["item_id"] = item_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageErrorCode(StrEnum):
    """Machine-readable reasons for storage failures."""

    CHARACTER_NOT_FOUND = "CHARACTER_NOT_FOUND"
    INVALID_CHARACTER_DATA = "INVALID_CHARACTER_DATA"
    STORAGE_QUOTA_EXCEEDED = "STORAGE_QUOTA_EXCEEDED"
    CORRUPTED_DATA = "CORRUPTED_DATA"
    PARSE_ERROR = "PARSE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"


class StorageError(CharsheetError):
    """Raised by the character repository."""

    def __init__(
        self,
        message: str,
        *,
        code: StorageErrorCode,
        character_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error description.
            code: Machine-readable failure reason.
            character_id: Character the operation targeted.
            details: Optional dictionary containing additional error context.
        """
        self.code = code
        combined_details = details or {}
        combined_details["code"] = str(code)
        if character_id:
            combined_details["character_id"] = character_id
        super().__init__(message, details=combined_details)


class CharacterNotFoundError(StorageError):
    """Raised when a character id has no stored document."""

    def __init__(self, character_id: str) -> None:
        super().__init__(
            "Character not found",
            code=StorageErrorCode.CHARACTER_NOT_FOUND,
            character_id=character_id,
        )


class AuthError(CharsheetError):
    """Raised by authentication providers."""

    def __init__(
        self,
        message: str,
        *,
        email: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if email:
            combined_details["email"] = email
        super().__init__(message, details=combined_details)


__all__ = [
    "CharsheetError",
    "ConfigurationError",
    "RulesEngineError",
    "DiceRollError",
    "ReferenceDataError",
    "CharacterImportError",
    "EquipmentError",
    "StorageErrorCode",
    "StorageError",
    "CharacterNotFoundError",
    "AuthError",
]
