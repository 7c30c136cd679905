"""Character aggregate models.

``Character`` is the aggregate root: identity and descriptive info, six
ability scores, one or more class entries, equipment, and the plain-data
subsystems (skills, feats, currency, experience). The engines update a
character in place and return the same object.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field, computed_field

from charsheet.core.constants import CURRENT_SCHEMA_VERSION, FIRST_LEVEL_XP_TARGET
from charsheet.models.abilities import AbilityScores
from charsheet.models.base import RulesModel
from charsheet.models.classes import ClassFeature
from charsheet.models.enums import (
    Ability,
    AbilityScoreMethod,
    Alignment,
    BABProgression,
    SaveProgression,
    Size,
)
from charsheet.models.equipment import Equipment
from charsheet.models.races import Race


def utc_now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Skills
# =============================================================================

CORE_SKILLS: dict[str, tuple[Ability, bool, bool]] = {
    # key: (ability, trained only, armor check penalty applies)
    "acrobatics": (Ability.DEX, False, True),
    "appraise": (Ability.INT, False, False),
    "bluff": (Ability.CHA, False, False),
    "climb": (Ability.STR, False, True),
    "diplomacy": (Ability.CHA, False, False),
    "disable_device": (Ability.DEX, True, True),
    "disguise": (Ability.CHA, False, False),
    "escape_artist": (Ability.DEX, False, True),
    "fly": (Ability.DEX, False, True),
    "handle_animal": (Ability.CHA, True, False),
    "heal": (Ability.WIS, False, False),
    "intimidate": (Ability.CHA, False, False),
    "knowledge_arcana": (Ability.INT, True, False),
    "knowledge_dungeoneering": (Ability.INT, True, False),
    "knowledge_engineering": (Ability.INT, True, False),
    "knowledge_geography": (Ability.INT, True, False),
    "knowledge_history": (Ability.INT, True, False),
    "knowledge_local": (Ability.INT, True, False),
    "knowledge_nature": (Ability.INT, True, False),
    "knowledge_nobility": (Ability.INT, True, False),
    "knowledge_planes": (Ability.INT, True, False),
    "knowledge_religion": (Ability.INT, True, False),
    "linguistics": (Ability.INT, True, False),
    "perception": (Ability.WIS, False, False),
    "ride": (Ability.DEX, False, True),
    "sense_motive": (Ability.WIS, False, False),
    "sleight_of_hand": (Ability.DEX, True, True),
    "spellcraft": (Ability.INT, True, False),
    "stealth": (Ability.DEX, False, True),
    "survival": (Ability.WIS, False, False),
    "swim": (Ability.STR, False, True),
    "use_magic_device": (Ability.CHA, True, False),
}


class Skill(RulesModel):
    """One skill entry on the sheet."""

    ability: Ability
    ranks: int = Field(default=0, ge=0)
    is_class_skill: bool = False
    trained_only: bool = False
    armor_check_penalty: bool = False
    misc: int = 0
    total: int = 0


def default_skills(class_skills: list[str] | tuple[str, ...] = ()) -> dict[str, Skill]:
    """Unranked skill entries with class skills flagged."""
    return {
        key: Skill(
            ability=ability,
            is_class_skill=key in class_skills,
            trained_only=trained_only,
            armor_check_penalty=acp,
        )
        for key, (ability, trained_only, acp) in CORE_SKILLS.items()
    }


# =============================================================================
# Classes
# =============================================================================


class ClassEntry(RulesModel):
    """Levels taken in one class.

    Attributes:
        name: Class name.
        level: Levels in this class.
        hit_die: Hit die size.
        hit_die_results: Hit points rolled per level; level 1 takes the maximum.
        skill_ranks: Skill ranks per level before Intelligence.
        class_skills: Skill keys that are class skills.
        bab_progression: Base attack bonus tier.
        fort_progression: Fortitude save tier.
        ref_progression: Reflex save tier.
        will_progression: Will save tier.
        class_features: Features gained at or below ``level``.
    """

    name: str
    level: int = Field(default=1, ge=1, le=20)
    hit_die: int = Field(default=8, ge=1)
    hit_die_results: list[int] = Field(default_factory=list)
    skill_ranks: int = Field(default=2, ge=0)
    class_skills: list[str] = Field(default_factory=list)
    bab_progression: BABProgression = BABProgression.MEDIUM
    fort_progression: SaveProgression = SaveProgression.POOR
    ref_progression: SaveProgression = SaveProgression.POOR
    will_progression: SaveProgression = SaveProgression.POOR
    class_features: list[ClassFeature] = Field(default_factory=list)


class CharacterClasses(RulesModel):
    """All class entries with their combined progression values."""

    classes: list[ClassEntry] = Field(default_factory=list)
    total_level: int = 0
    base_attack_bonus: list[int] = Field(default_factory=lambda: [0])
    base_fort_save: int = 0
    base_ref_save: int = 0
    base_will_save: int = 0
    favored_class_bonuses: list[str] = Field(default_factory=list)

    def summary(self) -> str:
        """Class summary in the form 'Fighter 3/Wizard 2'."""
        return "/".join(f"{entry.name} {entry.level}" for entry in self.classes)


# =============================================================================
# Plain-data Subsystems
# =============================================================================


class Feat(RulesModel):
    name: str
    description: str = ""
    source: str = ""


class Currency(RulesModel):
    """Coins carried."""

    platinum: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    silver: int = Field(default=0, ge=0)
    copper: int = Field(default=0, ge=0)

    @computed_field(description="Total value in gold pieces")
    @property
    def total_gp(self) -> float:
        return self.platinum * 10 + self.gold + self.silver / 10 + self.copper / 100


class Experience(RulesModel):
    current: int = Field(default=0, ge=0)
    next_level: int = Field(default=FIRST_LEVEL_XP_TARGET, ge=0)


class HitPoints(RulesModel):
    maximum: int = 0
    current: int = 0
    temporary: int = Field(default=0, ge=0)
    nonlethal: int = Field(default=0, ge=0)


# =============================================================================
# Character
# =============================================================================


class CharacterInfo(RulesModel):
    """Identity and descriptive fields."""

    id: str
    name: str
    player: str = ""
    user_id: str | None = None
    storage_id: str | None = None
    race: Race
    racial_ability_choice: Ability | None = None
    size: Size = Size.MEDIUM
    alignment: Alignment = Alignment.TRUE_NEUTRAL
    deity: str = ""
    gender: str = ""
    age: int | None = Field(default=None, ge=0)
    height: str = ""
    weight: str = ""
    hair: str = ""
    eyes: str = ""
    homeland: str = ""
    background: str = ""
    notes: str = ""


class Character(RulesModel):
    """A complete character sheet."""

    info: CharacterInfo
    ability_scores: AbilityScores
    classes: CharacterClasses = Field(default_factory=CharacterClasses)
    hit_points: HitPoints = Field(default_factory=HitPoints)
    skills: dict[str, Skill] = Field(default_factory=default_skills)
    feats: list[Feat] = Field(default_factory=list)
    traits: list[str] = Field(default_factory=list)
    equipment: Equipment = Field(default_factory=Equipment)
    conditions: list[str] = Field(default_factory=list)
    experience: Experience = Field(default_factory=Experience)
    currency: Currency = Field(default_factory=Currency)

    schema_version: str = CURRENT_SCHEMA_VERSION
    last_updated: datetime = Field(default_factory=utc_now)

    @property
    def id(self) -> str:
        return self.info.id

    @property
    def name(self) -> str:
        return self.info.name

    def touch(self) -> None:
        """Stamp ``last_updated`` with the current time."""
        self.last_updated = utc_now()


class CreateCharacterParams(RulesModel):
    """Inputs to character creation.

    Attributes:
        name: Character name; blank becomes 'New Character'.
        race: Race name or a Race row.
        class_name: Class name; unknown classes fall back to defaults.
        ability_score_method: How the base scores were generated.
        ability_scores: Base score per ability; missing abilities default to 10.
        racial_ability_choice: Ability receiving a flexible racial bonus.
        alignment: Alignment.
        deity: Deity name.
    """

    name: str = ""
    race: str | Race = "Human"
    class_name: str = "Fighter"
    ability_score_method: AbilityScoreMethod = AbilityScoreMethod.POINT_BUY
    ability_scores: dict[Ability, int] = Field(default_factory=dict)
    racial_ability_choice: Ability | None = None
    alignment: Alignment = Alignment.TRUE_NEUTRAL
    deity: str | None = None
    player: str = ""
    user_id: str | None = None
    gender: str = ""
    age: int | None = None


class CharacterSummary(RulesModel):
    """A stored character as listed for its owner."""

    id: str
    name: str
    level: int
    race: str
    classes: str
    last_updated: datetime


__all__ = [
    "CORE_SKILLS",
    "Skill",
    "default_skills",
    "ClassEntry",
    "CharacterClasses",
    "Feat",
    "Currency",
    "Experience",
    "HitPoints",
    "CharacterInfo",
    "Character",
    "CreateCharacterParams",
    "CharacterSummary",
]
