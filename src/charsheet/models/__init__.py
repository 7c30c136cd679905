"""Pydantic V2 models and static reference tables for characters."""

from __future__ import annotations

from charsheet.models.abilities import (
    AbilityScore,
    AbilityScores,
    Bonus,
    DiceRoll,
    ability_modifier,
    stack_bonuses,
)
from charsheet.models.character import (
    Character,
    CharacterClasses,
    CharacterInfo,
    CharacterSummary,
    ClassEntry,
    CreateCharacterParams,
    Currency,
    Experience,
    Feat,
    HitPoints,
    Skill,
)
from charsheet.models.classes import CORE_CLASSES, CharacterClassData, ClassFeature
from charsheet.models.enums import (
    Ability,
    AbilityScoreMethod,
    Alignment,
    BABProgression,
    BonusType,
    EncumbranceLevel,
    EncumbranceVariant,
    EquipmentSlot,
    EquipmentType,
    SaveProgression,
    Size,
    WeaponHandedness,
)
from charsheet.models.equipment import (
    Armor,
    Effect,
    EffectActivation,
    EffectCondition,
    EncumbranceSettings,
    Equipment,
    EquipmentTemplate,
    Gear,
    Item,
    ItemAbility,
    MagicItem,
    Shield,
    Weapon,
)
from charsheet.models.races import CORE_RACES, FLEXIBLE_ABILITY_RACES, Race, RacialTrait
from charsheet.models.results import (
    ArmorClass,
    CarryingCapacity,
    EquipmentBonuses,
    EquipResult,
    PointBuyPreset,
    ValidationResult,
)


__all__ = [
    # Enums
    "Ability",
    "AbilityScoreMethod",
    "Alignment",
    "BABProgression",
    "BonusType",
    "EncumbranceLevel",
    "EncumbranceVariant",
    "EquipmentSlot",
    "EquipmentType",
    "SaveProgression",
    "Size",
    "WeaponHandedness",
    # Abilities
    "AbilityScore",
    "AbilityScores",
    "Bonus",
    "DiceRoll",
    "ability_modifier",
    "stack_bonuses",
    # Character
    "Character",
    "CharacterClasses",
    "CharacterInfo",
    "CharacterSummary",
    "ClassEntry",
    "CreateCharacterParams",
    "Currency",
    "Experience",
    "Feat",
    "HitPoints",
    "Skill",
    # Reference data
    "CORE_CLASSES",
    "CORE_RACES",
    "FLEXIBLE_ABILITY_RACES",
    "CharacterClassData",
    "ClassFeature",
    "Race",
    "RacialTrait",
    # Equipment
    "Armor",
    "Effect",
    "EffectActivation",
    "EffectCondition",
    "EncumbranceSettings",
    "Equipment",
    "EquipmentTemplate",
    "Gear",
    "Item",
    "ItemAbility",
    "MagicItem",
    "Shield",
    "Weapon",
    # Results
    "ArmorClass",
    "CarryingCapacity",
    "EquipmentBonuses",
    "EquipResult",
    "PointBuyPreset",
    "ValidationResult",
]
