"""Ability score rules: point buy, modifiers and score construction."""

from __future__ import annotations

from collections.abc import Mapping

from charsheet.core.config import get_settings
from charsheet.core.constants import (
    CUSTOM_POINT_BUY_MAX,
    CUSTOM_POINT_BUY_MIN,
    DEFAULT_ABILITY_SCORE,
    POINT_BUY_BUDGET_MAX,
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
)
from charsheet.core.logging import get_logger
from charsheet.models.abilities import AbilityScore, AbilityScores, DiceRoll, ability_modifier
from charsheet.models.enums import Ability
from charsheet.models.results import PointBuyPreset, ValidationResult


logger = get_logger(__name__)

POINT_BUY_PRESETS: tuple[PointBuyPreset, ...] = (
    PointBuyPreset(
        name="Low Fantasy",
        points=15,
        description="Gritty campaigns where heroes are only a cut above commoners",
    ),
    PointBuyPreset(
        name="Standard Fantasy",
        points=20,
        description="The default for most campaigns",
    ),
    PointBuyPreset(
        name="High Fantasy",
        points=25,
        description="Heroic campaigns with exceptional characters",
    ),
)

UNUSED_POINTS_TOLERANCE = 2
"""Leftover points allowed before validate_point_buy warns."""


def calculate_point_cost(score: int) -> int:
    """Point-buy cost of one base score.

    Raises:
        KeyError: If the score is outside 7-18; check the range first.
    """
    return POINT_BUY_COSTS[score]


def total_point_cost(scores: Mapping[Ability, int]) -> int:
    """Cost of the in-range scores of a point-buy spread."""
    return sum(
        calculate_point_cost(score)
        for score in scores.values()
        if POINT_BUY_MIN <= score <= POINT_BUY_MAX
    )


def validate_point_buy(
    scores: Mapping[Ability, int],
    total_points: int | None = None,
) -> ValidationResult:
    """Check a point-buy spread against a budget.

    The budget defaults to ``settings.rules.default_point_buy``.

    Each score outside 7-18 is its own error and adds no cost. A budget
    outside 0-100 is an error. Spending more than the budget is an
    error; leaving more than two points unspent is a warning.
    """
    if total_points is None:
        total_points = get_settings().rules.default_point_buy
    errors: list[str] = []
    warnings: list[str] = []

    if not 0 <= total_points <= POINT_BUY_BUDGET_MAX:
        errors.append(f"Invalid point buy total: {total_points}")

    for ability in Ability:
        score = scores.get(ability, DEFAULT_ABILITY_SCORE)
        if not POINT_BUY_MIN <= score <= POINT_BUY_MAX:
            errors.append(
                f"{ability.abbreviation} score {score} is outside valid range "
                f"({POINT_BUY_MIN}-{POINT_BUY_MAX})"
            )

    cost = total_point_cost({ability: scores.get(ability, DEFAULT_ABILITY_SCORE) for ability in Ability})
    if cost > total_points:
        errors.append(f"Point buy exceeds limit: {cost}/{total_points} points used")
    elif cost < total_points - UNUSED_POINTS_TOLERANCE:
        warnings.append(f"{total_points - cost} unused points remaining")

    logger.debug("Point buy validated", cost=cost, budget=total_points, errors=len(errors))
    return ValidationResult.from_messages(errors, warnings)


def validate_custom_point_buy(total_points: int) -> ValidationResult:
    """Check a custom point-buy budget (5-50 inclusive)."""
    errors: list[str] = []
    warnings: list[str] = []

    if total_points < CUSTOM_POINT_BUY_MIN:
        errors.append(
            f"Custom point buy too low: {total_points} (minimum: {CUSTOM_POINT_BUY_MIN})"
        )
    elif total_points > CUSTOM_POINT_BUY_MAX:
        errors.append(
            f"Custom point buy too high: {total_points} (maximum: {CUSTOM_POINT_BUY_MAX})"
        )
    elif total_points < 15:
        warnings.append("Very low point buy may result in weak characters")
    elif total_points > 30:
        warnings.append("Very high point buy may result in overpowered characters")

    return ValidationResult.from_messages(errors, warnings)


def get_point_buy_presets() -> tuple[PointBuyPreset, ...]:
    return POINT_BUY_PRESETS


def calculate_ability_modifier(score: int) -> int:
    """Modifier for a score: floor((score - 10) / 2).

    Example:
        >>> [calculate_ability_modifier(s) for s in (8, 10, 15, 18)]
        [-1, 0, 2, 4]
    """
    return ability_modifier(score)


def create_default_ability_score(base: int = DEFAULT_ABILITY_SCORE) -> AbilityScore:
    """A score with no racial, inherent, damage, drain or bonuses."""
    return AbilityScore(base=base).recalculate()


def create_ability_scores(bases: Mapping[Ability, int] | None = None) -> AbilityScores:
    """Six scores from base values; a missing ability gets 10."""
    bases = bases or {}
    return AbilityScores(
        **{
            ability.value: create_default_ability_score(bases.get(ability, DEFAULT_ABILITY_SCORE))
            for ability in Ability
        }
    )


def create_ability_scores_from_rolls(rolls: Mapping[Ability, DiceRoll]) -> AbilityScores:
    """Six scores whose bases are roll totals; an ability without a roll gets 10."""
    return create_ability_scores({ability: roll.total for ability, roll in rolls.items()})


__all__ = [
    "POINT_BUY_PRESETS",
    "calculate_point_cost",
    "total_point_cost",
    "validate_point_buy",
    "validate_custom_point_buy",
    "get_point_buy_presets",
    "calculate_ability_modifier",
    "create_default_ability_score",
    "create_ability_scores",
    "create_ability_scores_from_rolls",
]
