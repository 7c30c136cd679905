"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the charsheet test suite.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from charsheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CHARSHEET_DEBUG": "true",
        "CHARSHEET_LOG_LEVEL": "DEBUG",
        "CHARSHEET_RULES_DEFAULT_POINT_BUY": "25",
        "CHARSHEET_RULES_ENCUMBRANCE_ENABLED": "true",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so rolls and ids are reproducible."""
    return random.Random(1234)


@pytest.fixture
def dice_roller(rng: random.Random) -> Any:
    """Create a DiceRoller drawing from the seeded random source.

    Returns:
        DiceRoller instance.
    """
    from charsheet.engine.dice import DiceRoller

    return DiceRoller(rng)


@pytest.fixture
def character_engine(dice_roller: Any) -> Any:
    """Create a CharacterEngine with default reference data.

    Returns:
        CharacterEngine instance.
    """
    from charsheet.core.config import RulesSettings
    from charsheet.engine.character import CharacterEngine

    return CharacterEngine(roller=dice_roller, settings=RulesSettings())


@pytest.fixture
def catalog(dice_roller: Any) -> Any:
    """Create an EquipmentCatalog with the Core Rulebook templates.

    Returns:
        EquipmentCatalog instance.
    """
    from charsheet.engine.catalog import EquipmentCatalog

    return EquipmentCatalog(roller=dice_roller)


@pytest.fixture
def equipment_engine(catalog: Any) -> Any:
    """Create an EquipmentEngine that enforces slot compatibility.

    Returns:
        EquipmentEngine instance.
    """
    from charsheet.engine.equipment import EquipmentEngine

    return EquipmentEngine(catalog, enforce_slot_compatibility=True)


# =============================================================================
# Character Fixtures
# =============================================================================


@pytest.fixture
def dwarf_fighter_scores() -> dict[str, int]:
    """Provide a legal point buy costing 17 points.

    Returns:
        Dictionary of base ability scores.
    """
    return {
        "strength": 16,
        "dexterity": 12,
        "constitution": 14,
        "intelligence": 10,
        "wisdom": 12,
        "charisma": 8,
    }


@pytest.fixture
def dwarf_fighter_params(dwarf_fighter_scores: dict[str, int]) -> Any:
    """Provide creation parameters for a Dwarf Fighter.

    Returns:
        CreateCharacterParams instance.
    """
    from charsheet.models.character import CreateCharacterParams

    return CreateCharacterParams(
        name="Thorin",
        race="Dwarf",
        class_name="Fighter",
        ability_scores=dwarf_fighter_scores,
        deity="Torag",
    )


@pytest.fixture
def dwarf_fighter(character_engine: Any, dwarf_fighter_params: Any) -> Any:
    """Create a level 1 Dwarf Fighter.

    Returns:
        Character instance.
    """
    return character_engine.create_character(dwarf_fighter_params)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def repository(tmp_path: Path, character_engine: Any) -> Any:
    """Create a CharacterRepository in a temporary directory.

    Returns:
        CharacterRepository instance.
    """
    from charsheet.storage.database import CharacterRepository

    return CharacterRepository(tmp_path / "data" / "characters.db", engine=character_engine)


@pytest.fixture
def auth_provider() -> Any:
    """Create an in-memory auth provider with no accounts.

    Returns:
        InMemoryAuthProvider instance.
    """
    from charsheet.storage.auth import InMemoryAuthProvider

    return InMemoryAuthProvider()
