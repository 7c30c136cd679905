"""Core race reference data.

The seven Core Rulebook races. Human, Half-Elf and Half-Orc have no
fixed ability modifiers; instead they add +2 to one ability chosen at
character creation.
"""

from __future__ import annotations

from pydantic import Field

from charsheet.models.base import ReferenceModel
from charsheet.models.enums import Ability, Size


class RacialTrait(ReferenceModel):
    """A named racial trait."""

    name: str
    description: str = ""


class Race(ReferenceModel):
    """A playable race.

    Attributes:
        name: Race name.
        subtype: Creature subtype (e.g., 'dwarf', 'human').
        size: Size category.
        base_speed: Base land speed in feet.
        ability_modifiers: Fixed signed modifiers per ability.
        flexible_bonus: Bonus applied to one chosen ability, 0 if none.
        traits: Racial traits.
        languages: Starting languages.
        bonus_languages: Languages available for high Intelligence.
        vision: Vision type.
    """

    name: str
    subtype: str = ""
    size: Size = Size.MEDIUM
    base_speed: int = Field(default=30, ge=0)
    ability_modifiers: dict[Ability, int] = Field(default_factory=dict)
    flexible_bonus: int = 0
    traits: tuple[RacialTrait, ...] = ()
    languages: tuple[str, ...] = ()
    bonus_languages: tuple[str, ...] = ()
    vision: str = "Normal"

    @property
    def has_flexible_bonus(self) -> bool:
        return self.flexible_bonus != 0

    def modifiers_with_choice(self, chosen: Ability | None = None) -> dict[Ability, int]:
        """Signed modifier for every ability, including a chosen flexible bonus."""
        modifiers = {ability: self.ability_modifiers.get(ability, 0) for ability in Ability}
        if self.has_flexible_bonus and chosen is not None:
            modifiers[chosen] += self.flexible_bonus
        return modifiers


def _traits(*pairs: tuple[str, str]) -> tuple[RacialTrait, ...]:
    return tuple(RacialTrait(name=name, description=description) for name, description in pairs)


CORE_RACES: tuple[Race, ...] = (
    Race(
        name="Human",
        subtype="human",
        size=Size.MEDIUM,
        base_speed=30,
        flexible_bonus=2,
        traits=_traits(
            ("Bonus Feat", "Humans select one extra feat at 1st level"),
            ("Skilled", "Humans gain an additional skill rank at 1st level and at each level"),
        ),
        languages=("Common",),
        bonus_languages=("Any",),
    ),
    Race(
        name="Dwarf",
        subtype="dwarf",
        size=Size.MEDIUM,
        base_speed=20,
        ability_modifiers={Ability.CON: 2, Ability.WIS: 2, Ability.CHA: -2},
        traits=_traits(
            ("Darkvision", "See in the dark up to 60 feet"),
            ("Defensive Training", "+4 dodge bonus to AC against giants"),
            ("Greed", "+2 racial bonus on Appraise checks for precious metals or gems"),
            ("Hatred", "+1 bonus on attack rolls against orcs and goblinoids"),
            ("Hardy", "+2 racial bonus on saves against poison, spells, and spell-like abilities"),
            ("Stability", "+4 racial bonus to CMD against bull rush or trip"),
            ("Stonecunning", "+2 bonus on Perception checks for unusual stonework"),
            ("Weapon Familiarity", "Proficient with battleaxes, heavy picks, and warhammers"),
        ),
        languages=("Common", "Dwarven"),
        bonus_languages=("Giant", "Gnome", "Goblin", "Orc", "Terran", "Undercommon"),
        vision="Darkvision 60 ft.",
    ),
    Race(
        name="Elf",
        subtype="elf",
        size=Size.MEDIUM,
        base_speed=30,
        ability_modifiers={Ability.DEX: 2, Ability.INT: 2, Ability.CON: -2},
        traits=_traits(
            ("Low-Light Vision", "See twice as far as humans in dim light"),
            ("Elven Immunities", "Immune to magic sleep; +2 racial bonus on saves against enchantment"),
            ("Elven Magic", "+2 racial bonus on caster level checks against spell resistance"),
            ("Keen Senses", "+2 racial bonus on Perception checks"),
            ("Weapon Familiarity", "Proficient with longbows, longswords, rapiers, and shortbows"),
        ),
        languages=("Common", "Elven"),
        bonus_languages=("Celestial", "Draconic", "Gnoll", "Gnome", "Goblin", "Orc", "Sylvan"),
        vision="Low-Light Vision",
    ),
    Race(
        name="Gnome",
        subtype="gnome",
        size=Size.SMALL,
        base_speed=20,
        ability_modifiers={Ability.CON: 2, Ability.CHA: 2, Ability.STR: -2},
        traits=_traits(
            ("Low-Light Vision", "See twice as far as humans in dim light"),
            ("Defensive Training", "+4 dodge bonus to AC against giants"),
            ("Gnome Magic", "+1 to the DC of illusion spells cast"),
            ("Hatred", "+1 bonus on attack rolls against reptilian humanoids and goblinoids"),
            ("Illusion Resistance", "+2 racial bonus on saves against illusions"),
            ("Keen Senses", "+2 racial bonus on Perception checks"),
            ("Obsessive", "+2 racial bonus on one Craft or Profession skill"),
            ("Weapon Familiarity", "Treat any weapon with 'gnome' in its name as a martial weapon"),
        ),
        languages=("Common", "Gnome", "Sylvan"),
        bonus_languages=("Draconic", "Dwarven", "Elven", "Giant", "Goblin", "Orc"),
        vision="Low-Light Vision",
    ),
    Race(
        name="Half-Elf",
        subtype="elf, human",
        size=Size.MEDIUM,
        base_speed=30,
        flexible_bonus=2,
        traits=_traits(
            ("Low-Light Vision", "See twice as far as humans in dim light"),
            ("Adaptability", "Skill Focus as a bonus feat at 1st level"),
            ("Elf Blood", "Counts as both an elf and a human for any effect related to race"),
            ("Elven Immunities", "Immune to magic sleep; +2 racial bonus on saves against enchantment"),
            ("Keen Senses", "+2 racial bonus on Perception checks"),
            ("Multitalented", "Choose two favored classes"),
        ),
        languages=("Common", "Elven"),
        bonus_languages=("Any",),
        vision="Low-Light Vision",
    ),
    Race(
        name="Half-Orc",
        subtype="human, orc",
        size=Size.MEDIUM,
        base_speed=30,
        flexible_bonus=2,
        traits=_traits(
            ("Darkvision", "See in the dark up to 60 feet"),
            ("Intimidating", "+2 racial bonus on Intimidate checks"),
            ("Orc Blood", "Counts as both a human and an orc for any effect related to race"),
            ("Orc Ferocity", "Once per day, keep fighting for one more round at 0 hit points or below"),
            ("Weapon Familiarity", "Proficient with greataxes and falchions"),
        ),
        languages=("Common", "Orc"),
        bonus_languages=("Abyssal", "Draconic", "Giant", "Gnoll", "Goblin"),
        vision="Darkvision 60 ft.",
    ),
    Race(
        name="Halfling",
        subtype="halfling",
        size=Size.SMALL,
        base_speed=20,
        ability_modifiers={Ability.DEX: 2, Ability.CHA: 2, Ability.STR: -2},
        traits=_traits(
            ("Fearless", "+2 racial bonus on saves against fear"),
            ("Halfling Luck", "+1 racial bonus on all saving throws"),
            ("Keen Senses", "+2 racial bonus on Perception checks"),
            ("Sure-Footed", "+2 racial bonus on Acrobatics and Climb checks"),
            ("Weapon Familiarity", "Proficient with slings"),
        ),
        languages=("Common", "Halfling"),
        bonus_languages=("Dwarven", "Elven", "Gnome", "Goblin"),
    ),
)

FLEXIBLE_ABILITY_RACES = frozenset(race.name for race in CORE_RACES if race.has_flexible_bonus)


__all__ = [
    "RacialTrait",
    "Race",
    "CORE_RACES",
    "FLEXIBLE_ABILITY_RACES",
]
