"""Enumeration types for the charsheet rules engine.

Every closed vocabulary used by the character model lives here:
abilities, sizes, alignments, progressions, bonus types, equipment
slots and kinds, and encumbrance levels.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Full ability name (e.g., 'Strength' for STR)."""
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Three-letter abbreviation (e.g., 'STR')."""
        return self.name


class Size(StrEnum):
    """Creature size categories."""

    FINE = "Fine"
    DIMINUTIVE = "Diminutive"
    TINY = "Tiny"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HUGE = "Huge"
    GARGANTUAN = "Gargantuan"
    COLOSSAL = "Colossal"


class Alignment(StrEnum):
    """The nine alignments."""

    LAWFUL_GOOD = "Lawful Good"
    NEUTRAL_GOOD = "Neutral Good"
    CHAOTIC_GOOD = "Chaotic Good"
    LAWFUL_NEUTRAL = "Lawful Neutral"
    TRUE_NEUTRAL = "True Neutral"
    CHAOTIC_NEUTRAL = "Chaotic Neutral"
    LAWFUL_EVIL = "Lawful Evil"
    NEUTRAL_EVIL = "Neutral Evil"
    CHAOTIC_EVIL = "Chaotic Evil"


class BABProgression(StrEnum):
    """Base attack bonus progression tiers."""

    FULL = "Full"
    MEDIUM = "Medium"
    LOW = "Low"


class SaveProgression(StrEnum):
    """Saving throw progression tiers."""

    GOOD = "Good"
    POOR = "Poor"


class AbilityScoreMethod(StrEnum):
    """Ways of generating base ability scores."""

    POINT_BUY = "Point Buy"
    ROLL_3D6 = "3d6 Straight"
    ROLL_4D6_DROP_LOWEST = "4d6 Drop Lowest"
    CUSTOM_DICE = "Custom Dice"


class BonusType(StrEnum):
    """Bonus types.

    Bonuses of the same type do not stack (only the highest applies),
    except untyped bonuses, which always stack.
    """

    ALCHEMICAL = "alchemical"
    ARMOR = "armor"
    CIRCUMSTANCE = "circumstance"
    COMPETENCE = "competence"
    DEFLECTION = "deflection"
    DODGE = "dodge"
    ENHANCEMENT = "enhancement"
    INHERENT = "inherent"
    INSIGHT = "insight"
    LUCK = "luck"
    MORALE = "morale"
    NATURAL = "natural"
    PROFANE = "profane"
    RACIAL = "racial"
    RESISTANCE = "resistance"
    SACRED = "sacred"
    SHIELD = "shield"
    SIZE = "size"
    TRAIT = "trait"
    UNTYPED = "untyped"


ABILITY_BONUS_TYPES: tuple[BonusType, ...] = (
    BonusType.ENHANCEMENT,
    BonusType.MORALE,
    BonusType.SIZE,
    BonusType.ALCHEMICAL,
    BonusType.INSIGHT,
    BonusType.PROFANE,
    BonusType.SACRED,
    BonusType.LUCK,
    BonusType.CIRCUMSTANCE,
    BonusType.COMPETENCE,
    BonusType.UNTYPED,
)
"""Bonus buckets every ability score starts with."""


class EquipmentType(StrEnum):
    """Item kinds. Also the discriminator carried by every item instance."""

    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"
    MAGIC_ITEM = "magic_item"
    GEAR = "gear"


class EquipmentSlot(StrEnum):
    """Body slots an equipped item can occupy."""

    HEAD = "head"
    NECK = "neck"
    CHEST = "chest"
    BODY = "body"
    BELT = "belt"
    WRISTS = "wrists"
    HANDS = "hands"
    RING_LEFT = "ring_left"
    RING_RIGHT = "ring_right"
    FEET = "feet"
    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    TWO_HANDED = "two_handed"

    @property
    def is_hand(self) -> bool:
        """Whether this slot holds a weapon."""
        return self in HAND_SLOTS

    @property
    def is_ring(self) -> bool:
        return self in RING_SLOTS

    def accepts(self, declared: EquipmentSlot) -> bool:
        """Whether an item declared for ``declared`` fits this slot.

        Either ring slot takes a ring declared for the other hand.
        """
        return self == declared or (self.is_ring and declared.is_ring)


HAND_SLOTS = frozenset({EquipmentSlot.MAIN_HAND, EquipmentSlot.OFF_HAND, EquipmentSlot.TWO_HANDED})
RING_SLOTS = frozenset({EquipmentSlot.RING_LEFT, EquipmentSlot.RING_RIGHT})


class EncumbranceVariant(StrEnum):
    """Encumbrance rule sets."""

    CORE_RULES = "core"
    SIMPLIFIED = "simplified"
    NONE = "none"


class EncumbranceLevel(StrEnum):
    """Weight-derived load tiers."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    OVERLOADED = "overloaded"


class WeaponHandedness(StrEnum):
    """How many hands a weapon needs."""

    LIGHT = "light"
    ONE_HANDED = "one-handed"
    TWO_HANDED = "two-handed"


__all__ = [
    "Ability",
    "Size",
    "Alignment",
    "BABProgression",
    "SaveProgression",
    "AbilityScoreMethod",
    "BonusType",
    "ABILITY_BONUS_TYPES",
    "EquipmentType",
    "EquipmentSlot",
    "HAND_SLOTS",
    "EncumbranceVariant",
    "EncumbranceLevel",
    "WeaponHandedness",
]
