"""Dice rolling for ability generation and custom formulas.

All randomness in the rules engine goes through a ``DiceRoller``, which
wraps a private ``random.Random``. Pass a seeded roller (or your own
``random.Random``) to make rolls and generated ids reproducible.

Custom formulas use the grammar ``XdY[kZ][+/-N]``: X dice (1-20) of Y
sides (2-100), optionally keeping the highest Z, plus a modifier.
"""

from __future__ import annotations

import random
import re
import statistics
import string
import time
from collections.abc import Sequence
from dataclasses import dataclass

from charsheet.core.constants import (
    ID_SUFFIX_LENGTH,
    MAX_DICE_COUNT,
    MAX_DIE_SIDES,
    MIN_DIE_SIDES,
)
from charsheet.core.exceptions import DiceRollError
from charsheet.core.logging import get_logger
from charsheet.models.abilities import DiceRoll
from charsheet.models.enums import Ability, AbilityScoreMethod


logger = get_logger(__name__)

DICE_FORMULA_PATTERN = re.compile(r"^(\d+)d(\d+)(?:k(\d+))?([+-]\d+)?$", re.IGNORECASE)
"""Whitespace-free ``XdY[kZ][+/-N]``."""

_BASE36 = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class DiceFormula:
    """A parsed dice formula.

    Attributes:
        count: Number of dice rolled.
        sides: Sides per die.
        keep: Number of highest dice kept, or None to keep all.
        modifier: Flat modifier added to the kept dice.
    """

    count: int
    sides: int
    keep: int | None = None
    modifier: int = 0

    def __str__(self) -> str:
        text = f"{self.count}d{self.sides}"
        if self.keep is not None:
            text += f"k{self.keep}"
        if self.modifier:
            text += f"{self.modifier:+d}"
        return text


@dataclass(frozen=True)
class RollStatistics:
    """Summary of a set of roll totals. All zero for an empty set."""

    minimum: int = 0
    maximum: int = 0
    mean: float = 0.0
    standard_deviation: float = 0.0


def strip_whitespace(formula: str) -> str:
    return re.sub(r"\s+", "", formula)


def parse_dice_formula(formula: str) -> DiceFormula | None:
    """Parse ``XdY[kZ][+/-N]``.

    Args:
        formula: Formula text; case and whitespace are ignored.

    Returns:
        The parsed formula, or None if it does not parse or is out of bounds.

    Example:
        >>> parse_dice_formula("4d6k3")
        DiceFormula(count=4, sides=6, keep=3, modifier=0)
    """
    match = DICE_FORMULA_PATTERN.match(strip_whitespace(formula or ""))
    if match is None:
        return None

    count = int(match.group(1))
    sides = int(match.group(2))
    keep = int(match.group(3)) if match.group(3) else None
    modifier = int(match.group(4)) if match.group(4) else 0

    if not 1 <= count <= MAX_DICE_COUNT:
        return None
    if not MIN_DIE_SIDES <= sides <= MAX_DIE_SIDES:
        return None
    if keep is not None and not 1 <= keep <= count:
        return None

    return DiceFormula(count=count, sides=sides, keep=keep, modifier=modifier)


def calculate_statistics(totals: Sequence[int]) -> RollStatistics:
    """Minimum, maximum, mean and population standard deviation of roll totals."""
    if not totals:
        return RollStatistics()
    return RollStatistics(
        minimum=min(totals),
        maximum=max(totals),
        mean=statistics.fmean(totals),
        standard_deviation=statistics.pstdev(totals),
    )


class DiceRoller:
    """Replaceable source of randomness for the rules engine.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> roll = roller.roll_4d6_drop_lowest()
        >>> 3 <= roll.total <= 18
        True
    """

    def __init__(self, rng: random.Random | None = None, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            rng: Random source to draw from. A new one is created if omitted.
            seed: Seed for the new random source; ignored when ``rng`` is given.
        """
        self._rng = rng if rng is not None else random.Random(seed)

    def die(self, sides: int) -> int:
        """Roll one die."""
        return self._rng.randint(1, sides)

    def dice(self, count: int, sides: int) -> list[int]:
        return [self.die(sides) for _ in range(count)]

    def roll_3d6(self) -> DiceRoll:
        """Roll 3d6 and keep all three."""
        rolls = self.dice(3, 6)
        return DiceRoll(formula="3d6", rolls=rolls, total=sum(rolls))

    def roll_4d6_drop_lowest(self) -> DiceRoll:
        """Roll 4d6, sort descending and keep the highest three."""
        rolled = sorted(self.dice(4, 6), reverse=True)
        kept, dropped = rolled[:3], rolled[3:]
        return DiceRoll(formula="4d6k3", rolls=kept, dropped=dropped, total=sum(kept))

    def roll_custom_dice(self, formula: str) -> DiceRoll:
        """Roll a custom formula.

        Raises:
            DiceRollError: If the formula does not parse.
        """
        parsed = parse_dice_formula(formula)
        if parsed is None:
            raise DiceRollError(f"Invalid dice formula: {formula}", expression=formula)

        rolled = self.dice(parsed.count, parsed.sides)
        if parsed.keep is not None and parsed.keep < parsed.count:
            ordered = sorted(rolled, reverse=True)
            kept, dropped = ordered[: parsed.keep], ordered[parsed.keep :]
        else:
            kept, dropped = rolled, []

        total = sum(kept) + parsed.modifier
        logger.debug("Custom dice rolled", formula=str(parsed), total=total)
        return DiceRoll(formula=str(parsed), rolls=kept, dropped=dropped, total=total)

    def roll_all_abilities(
        self,
        method: AbilityScoreMethod,
        *,
        formula: str | None = None,
    ) -> dict[Ability, DiceRoll]:
        """Roll one score per ability, each tagged with its ability.

        Args:
            method: 3d6 straight, 4d6 drop lowest, or custom dice.
            formula: Formula used with the custom dice method.

        Raises:
            DiceRollError: For point buy, or custom dice without a formula.
        """
        if method == AbilityScoreMethod.ROLL_3D6:
            roll_one = self.roll_3d6
        elif method == AbilityScoreMethod.ROLL_4D6_DROP_LOWEST:
            roll_one = self.roll_4d6_drop_lowest
        elif method == AbilityScoreMethod.CUSTOM_DICE and formula:
            def roll_one() -> DiceRoll:
                return self.roll_custom_dice(formula)
        else:
            raise DiceRollError(
                "Unsupported rolling method",
                expression=formula,
                details={"method": str(method)},
            )

        results: dict[Ability, DiceRoll] = {}
        for ability in Ability:
            result = roll_one()
            result.ability = ability
            results[ability] = result

        logger.debug(
            "Ability scores rolled",
            method=str(method),
            totals={str(ability): roll.total for ability, roll in results.items()},
        )
        return results

    def simulate_roll(self, formula: str, iterations: int = 1000) -> list[int]:
        """Totals of ``iterations`` rolls of a custom formula."""
        return [self.roll_custom_dice(formula).total for _ in range(iterations)]

    def random_suffix(self, length: int = ID_SUFFIX_LENGTH) -> str:
        """Random lowercase base-36 string."""
        return "".join(self._rng.choice(_BASE36) for _ in range(length))


def generate_id(prefix: str, roller: DiceRoller) -> str:
    """Build ``{prefix}_{epoch milliseconds}_{9 base-36 characters}``."""
    return f"{prefix}_{time.time_ns() // 1_000_000}_{roller.random_suffix()}"


# =============================================================================
# Module-level convenience functions
# =============================================================================

_default_roller = DiceRoller()


def get_default_roller() -> DiceRoller:
    return _default_roller


def roll_3d6() -> DiceRoll:
    return _default_roller.roll_3d6()


def roll_4d6_drop_lowest() -> DiceRoll:
    return _default_roller.roll_4d6_drop_lowest()


def roll_custom_dice(formula: str) -> DiceRoll:
    """Roll a custom formula with the default roller.

    Raises:
        DiceRollError: If the formula does not parse.
    """
    return _default_roller.roll_custom_dice(formula)


__all__ = [
    "DICE_FORMULA_PATTERN",
    "DiceFormula",
    "RollStatistics",
    "parse_dice_formula",
    "calculate_statistics",
    "DiceRoller",
    "generate_id",
    "get_default_roller",
    "roll_3d6",
    "roll_4d6_drop_lowest",
    "roll_custom_dice",
]
