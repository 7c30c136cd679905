"""Tests for the exception hierarchy."""

from __future__ import annotations

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


class TestCharsheetError:
    """Tests for the base CharsheetError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = CharsheetError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = CharsheetError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(CharsheetError("Test", details={"x": 1}))
        assert "CharsheetError" in repr_str
        assert "Test" in repr_str


class TestConfigurationExceptions:
    """Tests for configuration exceptions."""

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError records the config key."""
        exc = ConfigurationError("Bad value", config_key="log_level")
        assert exc.details["config_key"] == "log_level"


class TestRulesEngineExceptions:
    """Tests for rules engine exceptions."""

    def test_dice_roll_error_expression(self) -> None:
        """Test DiceRollError with the offending formula."""
        exc = DiceRollError("Invalid dice formula: 0d6", expression="0d6")
        assert exc.details["expression"] == "0d6"
        assert isinstance(exc, RulesEngineError)

    def test_reference_data_error(self) -> None:
        """Test ReferenceDataError records table and name."""
        exc = ReferenceDataError("Unknown race: Orc", table="races", name="Orc")
        assert exc.details["table"] == "races"
        assert exc.details["name"] == "Orc"

    def test_import_error_keeps_errors(self) -> None:
        """Test CharacterImportError exposes validation errors."""
        exc = CharacterImportError("Failed", errors=["Character name is required"])
        assert exc.errors == ["Character name is required"]
        assert exc.details["errors"] == ["Character name is required"]

    def test_equipment_error_inheritance(self) -> None:
        """Test exception inheritance chain."""
        exc = EquipmentError("Unknown template", item_id="vorpal_spoon")
        assert isinstance(exc, RulesEngineError)
        assert isinstance(exc, CharsheetError)
        assert exc.details["item_id"] == "vorpal_spoon"


class TestStorageExceptions:
    """Tests for storage and auth exceptions."""

    def test_storage_error_code(self) -> None:
        """Test StorageError exposes its code."""
        exc = StorageError("Nope", code=StorageErrorCode.PERMISSION_DENIED, character_id="c1")
        assert exc.code is StorageErrorCode.PERMISSION_DENIED
        assert exc.details["character_id"] == "c1"

    def test_not_found(self) -> None:
        """Test CharacterNotFoundError message and code."""
        exc = CharacterNotFoundError("missing")
        assert exc.message == "Character not found"
        assert exc.code == StorageErrorCode.CHARACTER_NOT_FOUND
        assert isinstance(exc, StorageError)

    def test_auth_error_email(self) -> None:
        """Test AuthError records the email."""
        exc = AuthError("Invalid email or password", email="a@b.c")
        assert exc.details["email"] == "a@b.c"
