"""Charsheet - Pathfinder First Edition character rules engine.

Builds and validates characters from the Core Rulebook races, classes
and equipment: ability score generation, racial modifiers, class
progression, slot-based equipment with bonus stacking and encumbrance,
and JSON import and export with schema versioning.

Example:
    >>> from charsheet import CharacterEngine, CreateCharacterParams, EquipmentEngine
    >>>
    >>> engine = CharacterEngine()
    >>> hero = engine.create_character(CreateCharacterParams(
    ...     name="Thorin", race="Dwarf", class_name="Fighter",
    ...     ability_scores={"strength": 16, "constitution": 14},
    ... ))
    >>> engine.validate_character(hero).is_valid
    True
    >>>
    >>> gear = EquipmentEngine()
    >>> gear.add_item_to_character(hero, gear.catalog.get_by_id("longsword"))

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 character, equipment and reference models.
    engine: Dice, ability scores, character, equipment and validation rules.
    storage: SQLite character repository and authentication collaborators.
"""

from __future__ import annotations

# Core
from charsheet.core.config import Settings, get_settings
from charsheet.core.exceptions import CharsheetError
from charsheet.core.logging import configure_logging, get_logger

# Models
from charsheet.models import (
    Ability,
    AbilityScoreMethod,
    Character,
    CreateCharacterParams,
    EquipmentSlot,
    ValidationResult,
)

# Engines
from charsheet.engine import (
    CharacterEngine,
    DiceRoller,
    EquipmentCatalog,
    EquipmentEngine,
    ReferenceData,
)

# Storage
from charsheet.storage import CharacterRepository, InMemoryAuthProvider, get_repository


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "CharsheetError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "AbilityScoreMethod",
    "Character",
    "CreateCharacterParams",
    "EquipmentSlot",
    "ValidationResult",
    # Engines
    "CharacterEngine",
    "DiceRoller",
    "EquipmentCatalog",
    "EquipmentEngine",
    "ReferenceData",
    # Storage
    "CharacterRepository",
    "InMemoryAuthProvider",
    "get_repository",
]
