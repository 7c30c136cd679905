"""Core class reference data.

Hit dice, skill ranks, base attack and save progressions, class skills
and level-gated features for the eleven Core Rulebook classes, plus the
progression formulas that turn a tier and a level into a number.
"""

from __future__ import annotations

from pydantic import Field

from charsheet.models.base import ReferenceModel
from charsheet.models.enums import BABProgression, SaveProgression


class ClassFeature(ReferenceModel):
    """A class feature gained at a given level."""

    name: str
    level: int = Field(default=1, ge=1, le=20)
    description: str = ""


class CharacterClassData(ReferenceModel):
    """One row of the class table.

    Attributes:
        name: Class name.
        hit_die: Hit die size.
        skill_ranks: Skill ranks per level before Intelligence.
        class_skills: Skill keys treated as class skills.
        bab_progression: Base attack bonus tier.
        fort_progression: Fortitude save tier.
        ref_progression: Reflex save tier.
        will_progression: Will save tier.
        features: Class features with the level they are gained at.
    """

    name: str
    hit_die: int = Field(ge=4, le=12)
    skill_ranks: int = Field(ge=0)
    class_skills: tuple[str, ...] = ()
    bab_progression: BABProgression
    fort_progression: SaveProgression
    ref_progression: SaveProgression
    will_progression: SaveProgression
    features: tuple[ClassFeature, ...] = ()

    def features_at(self, level: int) -> list[ClassFeature]:
        """Features gained at or below ``level``."""
        return [feature for feature in self.features if feature.level <= level]


# =============================================================================
# Progression Formulas
# =============================================================================


def base_attack_bonus(progression: BABProgression, level: int) -> int:
    """Base attack bonus for ``level`` levels in one class."""
    if progression == BABProgression.FULL:
        return level
    if progression == BABProgression.MEDIUM:
        return (level * 3) // 4
    return level // 2


def base_save_bonus(progression: SaveProgression, level: int) -> int:
    """Base save bonus for ``level`` levels in one class."""
    if level <= 0:
        return 0
    if progression == SaveProgression.GOOD:
        return 2 + level // 2
    return level // 3


# =============================================================================
# Class Table
# =============================================================================

KNOWLEDGE_SKILLS: tuple[str, ...] = (
    "knowledge_arcana",
    "knowledge_dungeoneering",
    "knowledge_engineering",
    "knowledge_geography",
    "knowledge_history",
    "knowledge_local",
    "knowledge_nature",
    "knowledge_nobility",
    "knowledge_planes",
    "knowledge_religion",
)


def _features(*rows: tuple[int, str, str]) -> tuple[ClassFeature, ...]:
    return tuple(ClassFeature(level=level, name=name, description=text) for level, name, text in rows)


CORE_CLASSES: tuple[CharacterClassData, ...] = (
    CharacterClassData(
        name="Barbarian",
        hit_die=12,
        skill_ranks=4,
        bab_progression=BABProgression.FULL,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.POOR,
        class_skills=(
            "acrobatics", "climb", "handle_animal", "intimidate", "knowledge_nature",
            "perception", "ride", "survival", "swim",
        ),
        features=_features(
            (1, "Fast Movement", "+10 feet to land speed in light or medium armor"),
            (1, "Rage", "+4 Strength and Constitution, +2 Will saves, -2 AC"),
            (2, "Rage Power", "Gain a rage power"),
            (2, "Uncanny Dodge", "Cannot be caught flat-footed"),
            (3, "Trap Sense +1", "+1 on Reflex saves and AC against traps"),
            (5, "Improved Uncanny Dodge", "Can no longer be flanked"),
        ),
    ),
    CharacterClassData(
        name="Bard",
        hit_die=8,
        skill_ranks=6,
        bab_progression=BABProgression.MEDIUM,
        fort_progression=SaveProgression.POOR,
        ref_progression=SaveProgression.GOOD,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "acrobatics", "appraise", "bluff", "climb", "diplomacy", "disguise",
            "escape_artist", "intimidate", *KNOWLEDGE_SKILLS, "linguistics", "perception",
            "sense_motive", "sleight_of_hand", "spellcraft", "stealth", "use_magic_device",
        ),
        features=_features(
            (1, "Bardic Knowledge", "Add half class level to all Knowledge checks"),
            (1, "Bardic Performance", "Countersong, distraction, fascinate, inspire courage +1"),
            (1, "Cantrips", "Cast 0-level bard spells at will"),
            (2, "Versatile Performance", "Substitute a Perform check for related skills"),
            (2, "Well-Versed", "+4 on saves against bardic performance and sonic effects"),
            (3, "Inspire Competence +2", "Allies gain a competence bonus on skill checks"),
            (5, "Lore Master", "Take 10 on any Knowledge check"),
        ),
    ),
    CharacterClassData(
        name="Cleric",
        hit_die=8,
        skill_ranks=2,
        bab_progression=BABProgression.MEDIUM,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "appraise", "diplomacy", "heal", "knowledge_arcana", "knowledge_history",
            "knowledge_nobility", "knowledge_planes", "knowledge_religion", "linguistics",
            "sense_motive", "spellcraft",
        ),
        features=_features(
            (1, "Aura", "Aura matching the deity's alignment"),
            (1, "Channel Energy 1d6", "Channel positive or negative energy"),
            (1, "Domains", "Choose two domains of the deity"),
            (1, "Orisons", "Prepare 0-level cleric spells"),
            (1, "Spontaneous Casting", "Convert prepared spells into cure or inflict spells"),
            (3, "Channel Energy 2d6", "Channel energy improves"),
            (5, "Channel Energy 3d6", "Channel energy improves"),
        ),
    ),
    CharacterClassData(
        name="Druid",
        hit_die=8,
        skill_ranks=4,
        bab_progression=BABProgression.MEDIUM,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "climb", "fly", "handle_animal", "heal", "knowledge_geography", "knowledge_nature",
            "perception", "ride", "spellcraft", "survival", "swim",
        ),
        features=_features(
            (1, "Nature Bond", "Animal companion or domain"),
            (1, "Nature Sense", "+2 on Knowledge (nature) and Survival checks"),
            (1, "Orisons", "Prepare 0-level druid spells"),
            (1, "Wild Empathy", "Improve the attitude of animals"),
            (2, "Woodland Stride", "Move through undergrowth at normal speed"),
            (3, "Trackless Step", "Leave no trail in natural surroundings"),
            (4, "Resist Nature's Lure", "+4 on saves against fey and plant effects"),
            (4, "Wild Shape", "Turn into an animal once per day"),
        ),
    ),
    CharacterClassData(
        name="Fighter",
        hit_die=10,
        skill_ranks=2,
        bab_progression=BABProgression.FULL,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.POOR,
        class_skills=(
            "climb", "handle_animal", "intimidate", "knowledge_dungeoneering",
            "knowledge_engineering", "ride", "survival", "swim",
        ),
        features=_features(
            (1, "Bonus Feat", "A bonus combat feat"),
            (2, "Bonus Feat", "A bonus combat feat"),
            (2, "Bravery +1", "+1 on Will saves against fear"),
            (3, "Armor Training 1", "-1 armor check penalty, +1 maximum Dexterity bonus"),
            (4, "Bonus Feat", "A bonus combat feat"),
            (5, "Weapon Training 1", "+1 attack and damage with one weapon group"),
        ),
    ),
    CharacterClassData(
        name="Monk",
        hit_die=8,
        skill_ranks=4,
        bab_progression=BABProgression.MEDIUM,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.GOOD,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "acrobatics", "climb", "escape_artist", "intimidate", "knowledge_history",
            "knowledge_religion", "perception", "ride", "sense_motive", "stealth", "swim",
        ),
        features=_features(
            (1, "AC Bonus", "Add Wisdom bonus to AC when unarmored"),
            (1, "Bonus Feat", "A bonus monk feat"),
            (1, "Flurry of Blows", "Extra unarmed attacks as a full-attack action"),
            (1, "Stunning Fist", "Gain Stunning Fist as a bonus feat"),
            (1, "Unarmed Strike", "Unarmed attacks deal 1d6 lethal damage"),
            (2, "Evasion", "No damage on a successful Reflex save for half"),
            (3, "Fast Movement", "+10 feet to land speed when unarmored"),
            (3, "Maneuver Training", "Use monk level as base attack bonus for CMB"),
            (3, "Still Mind", "+2 on saves against enchantment"),
            (4, "Ki Pool", "Pool of ki points for special abilities"),
            (4, "Slow Fall", "Reduce falling damage near a wall"),
            (5, "High Jump", "Add monk level to Acrobatics checks to jump"),
            (5, "Purity of Body", "Immune to all diseases"),
        ),
    ),
    CharacterClassData(
        name="Paladin",
        hit_die=10,
        skill_ranks=2,
        bab_progression=BABProgression.FULL,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "diplomacy", "handle_animal", "heal", "knowledge_nobility", "knowledge_religion",
            "ride", "sense_motive", "spellcraft",
        ),
        features=_features(
            (1, "Aura of Good", "Aura of good equal to paladin level"),
            (1, "Detect Evil", "Detect evil at will"),
            (1, "Smite Evil 1/day", "Add Charisma to attack and level to damage against evil"),
            (2, "Divine Grace", "Add Charisma bonus to all saving throws"),
            (2, "Lay on Hands", "Heal by touch"),
            (3, "Aura of Courage", "Immune to fear; allies gain +4 against fear"),
            (3, "Divine Health", "Immune to all diseases"),
            (3, "Mercy", "Lay on hands also removes a condition"),
            (4, "Channel Positive Energy", "Spend lay on hands uses to channel energy"),
            (4, "Smite Evil 2/day", "Smite evil twice per day"),
            (5, "Divine Bond", "Bond with a weapon or a mount"),
        ),
    ),
    CharacterClassData(
        name="Ranger",
        hit_die=10,
        skill_ranks=6,
        bab_progression=BABProgression.FULL,
        fort_progression=SaveProgression.GOOD,
        ref_progression=SaveProgression.GOOD,
        will_progression=SaveProgression.POOR,
        class_skills=(
            "climb", "handle_animal", "heal", "intimidate", "knowledge_dungeoneering",
            "knowledge_geography", "knowledge_nature", "perception", "ride", "spellcraft",
            "stealth", "survival", "swim",
        ),
        features=_features(
            (1, "Favored Enemy", "+2 on attacks and checks against one creature type"),
            (1, "Track", "Add half level to Survival checks to follow tracks"),
            (1, "Wild Empathy", "Improve the attitude of animals"),
            (2, "Combat Style Feat", "A bonus feat from the chosen combat style"),
            (3, "Endurance", "Gain Endurance as a bonus feat"),
            (3, "Favored Terrain", "+2 on initiative and checks in one terrain"),
            (4, "Hunter's Bond", "Bond with companions or an animal companion"),
            (5, "Favored Enemy", "A second favored enemy"),
        ),
    ),
    CharacterClassData(
        name="Rogue",
        hit_die=8,
        skill_ranks=8,
        bab_progression=BABProgression.MEDIUM,
        fort_progression=SaveProgression.POOR,
        ref_progression=SaveProgression.GOOD,
        will_progression=SaveProgression.POOR,
        class_skills=(
            "acrobatics", "appraise", "bluff", "climb", "diplomacy", "disable_device",
            "disguise", "escape_artist", "intimidate", "knowledge_dungeoneering",
            "knowledge_local", "linguistics", "perception", "sense_motive", "sleight_of_hand",
            "stealth", "swim", "use_magic_device",
        ),
        features=_features(
            (1, "Sneak Attack +1d6", "Extra damage against flanked or flat-footed foes"),
            (1, "Trapfinding", "Add half level to Perception for traps and Disable Device"),
            (2, "Evasion", "No damage on a successful Reflex save for half"),
            (2, "Rogue Talent", "Gain a rogue talent"),
            (3, "Sneak Attack +2d6", "Sneak attack improves"),
            (3, "Trap Sense +1", "+1 on Reflex saves and AC against traps"),
            (4, "Rogue Talent", "Gain a rogue talent"),
            (4, "Uncanny Dodge", "Cannot be caught flat-footed"),
            (5, "Sneak Attack +3d6", "Sneak attack improves"),
        ),
    ),
    CharacterClassData(
        name="Sorcerer",
        hit_die=6,
        skill_ranks=2,
        bab_progression=BABProgression.LOW,
        fort_progression=SaveProgression.POOR,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.GOOD,
        class_skills=(
            "appraise", "bluff", "fly", "intimidate", "knowledge_arcana", "spellcraft",
            "use_magic_device",
        ),
        features=_features(
            (1, "Bloodline", "Source of innate magic"),
            (1, "Cantrips", "Cast 0-level sorcerer spells at will"),
            (1, "Eschew Materials", "Gain Eschew Materials as a bonus feat"),
            (3, "Bloodline Power", "A second bloodline power"),
        ),
    ),
    CharacterClassData(
        name="Wizard",
        hit_die=6,
        skill_ranks=2,
        bab_progression=BABProgression.LOW,
        fort_progression=SaveProgression.POOR,
        ref_progression=SaveProgression.POOR,
        will_progression=SaveProgression.GOOD,
        class_skills=("appraise", "fly", *KNOWLEDGE_SKILLS, "linguistics", "spellcraft"),
        features=_features(
            (1, "Arcane Bond", "Bonded object or familiar"),
            (1, "Arcane School", "Specialize in a school of magic or remain a universalist"),
            (1, "Cantrips", "Prepare 0-level wizard spells"),
            (1, "Scribe Scroll", "Gain Scribe Scroll as a bonus feat"),
            (5, "Bonus Feat", "A metamagic, item creation or spell mastery feat"),
        ),
    ),
)


__all__ = [
    "ClassFeature",
    "CharacterClassData",
    "base_attack_bonus",
    "base_save_bonus",
    "KNOWLEDGE_SKILLS",
    "CORE_CLASSES",
]
