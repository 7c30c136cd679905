"""Ability score models and the bonus stacking rule.

An ability score keeps its inputs (base, racial, inherent, damage,
drain and typed bonus buckets) next to the derived values. Derived
values are never edited directly: ``AbilityScore.recalculate`` rebuilds
them from the inputs and is safe to call any number of times.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime

from pydantic import Field

from charsheet.models.base import RulesModel
from charsheet.models.enums import ABILITY_BONUS_TYPES, Ability, BonusType


def ability_modifier(score: int) -> int:
    """Modifier for a score: floor((score - 10) / 2)."""
    return (score - 10) // 2


class Bonus(RulesModel):
    """A single typed bonus from one source."""

    type: BonusType = Field(default=BonusType.UNTYPED, description="Bonus type")
    value: int = Field(default=0, description="Signed bonus value")
    source: str = Field(default="", description="Where the bonus comes from")
    condition: str | None = Field(default=None, description="When the bonus applies")
    active: bool = Field(default=True)


def _stacked_value(bonus_type: BonusType, bonuses: Iterable[Bonus]) -> int:
    values = [bonus.value for bonus in bonuses if bonus.active]
    if bonus_type == BonusType.UNTYPED:
        return sum(values)
    return max([0, *values])


def stack_bonuses(bonuses: Iterable[Bonus]) -> int:
    """Total of a set of bonuses under the stacking rule.

    Active untyped bonuses all add together. For every other type only
    the single highest active value counts, and a type with nothing
    positive contributes 0.

    Example:
        >>> stack_bonuses([Bonus(value=1), Bonus(value=2)])
        3
        >>> stack_bonuses([
        ...     Bonus(type=BonusType.ENHANCEMENT, value=2),
        ...     Bonus(type=BonusType.ENHANCEMENT, value=4),
        ... ])
        4
    """
    by_type: dict[BonusType, list[Bonus]] = defaultdict(list)
    for bonus in bonuses:
        by_type[bonus.type].append(bonus)
    return sum(_stacked_value(bonus_type, group) for bonus_type, group in by_type.items())


def _empty_buckets() -> dict[BonusType, list[Bonus]]:
    return {bonus_type: [] for bonus_type in ABILITY_BONUS_TYPES}


class AbilityScore(RulesModel):
    """One ability score with its inputs and derived values.

    Attributes:
        base: Score from the generation method.
        racial: Signed modifier set from the character's race.
        inherent: Permanent magical increases.
        damage: Temporary ability damage.
        drain: Ability drain.
        bonuses: Typed bonus buckets keyed by bonus type.
        total: base + racial + inherent + stacked bonuses.
        modifier: Modifier of ``total``.
        temp_total: ``total`` less damage and drain, never below 0.
        temp_modifier: Modifier of ``temp_total``.
    """

    base: int = Field(default=10)
    racial: int = Field(default=0)
    inherent: int = Field(default=0, ge=0)
    damage: int = Field(default=0, ge=0)
    drain: int = Field(default=0, ge=0)
    bonuses: dict[BonusType, list[Bonus]] = Field(default_factory=_empty_buckets)

    total: int = Field(default=10)
    modifier: int = Field(default=0)
    temp_total: int = Field(default=10)
    temp_modifier: int = Field(default=0)

    def add_bonus(self, bonus: Bonus) -> None:
        """File a bonus under its own type. Call ``recalculate`` afterwards."""
        self.bonuses.setdefault(bonus.type, []).append(bonus)

    def recalculate(self) -> AbilityScore:
        """Rebuild the derived values from the inputs.

        Returns:
            This score, updated in place.
        """
        total = self.base + self.racial + self.inherent
        for bonus_type, bucket in self.bonuses.items():
            total += _stacked_value(bonus_type, bucket)

        self.total = total
        self.modifier = ability_modifier(total)
        self.temp_total = max(0, total - self.damage - self.drain)
        self.temp_modifier = ability_modifier(self.temp_total)
        return self


class AbilityScores(RulesModel):
    """The six ability scores of a character."""

    strength: AbilityScore = Field(default_factory=AbilityScore)
    dexterity: AbilityScore = Field(default_factory=AbilityScore)
    constitution: AbilityScore = Field(default_factory=AbilityScore)
    intelligence: AbilityScore = Field(default_factory=AbilityScore)
    wisdom: AbilityScore = Field(default_factory=AbilityScore)
    charisma: AbilityScore = Field(default_factory=AbilityScore)

    def __getitem__(self, ability: Ability | str) -> AbilityScore:
        return getattr(self, Ability(ability).value)

    def items(self) -> Iterator[tuple[Ability, AbilityScore]]:
        """Iterate (ability, score) pairs in STR..CHA order."""
        for ability in Ability:
            yield ability, self[ability]

    def bases(self) -> dict[Ability, int]:
        """Base score of every ability."""
        return {ability: score.base for ability, score in self.items()}


class DiceRoll(RulesModel):
    """The outcome of one ability or custom dice roll.

    Attributes:
        ability: Ability the roll was made for, if any.
        formula: Dice formula rolled.
        rolls: Dice that count toward the total.
        dropped: Dice rolled but discarded.
        total: Sum of ``rolls`` plus any formula modifier.
        timestamp: When the roll was made.
    """

    ability: Ability | None = Field(default=None)
    formula: str = Field(default="3d6")
    rolls: list[int] = Field(default_factory=list)
    dropped: list[int] = Field(default_factory=list)
    total: int = Field(default=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


__all__ = [
    "ability_modifier",
    "Bonus",
    "stack_bonuses",
    "AbilityScore",
    "AbilityScores",
    "DiceRoll",
]
