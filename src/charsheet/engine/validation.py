"""Validation checks shared by the creation flow and the storage layer.

Each check returns a ``ValidationResult``: errors mean the input cannot
be accepted as it is, warnings flag something worth a second look.
None of these functions raise for bad input.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from charsheet.core.config import get_settings
from charsheet.core.constants import (
    ABILITY_SCORE_MAX,
    ABILITY_SCORE_MIN,
    LONG_NAME_WARNING_LENGTH,
    MAX_DICE_COUNT,
    MAX_DIE_SIDES,
    MAX_NAME_LENGTH,
    MIN_DIE_SIDES,
    POINT_BUY_BUDGET_MAX,
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
    ROLLED_SCORE_MAX,
    ROLLED_SCORE_MIN,
    STANDARD_DIE_SIZES,
)
from charsheet.core.logging import get_logger
from charsheet.engine.dice import DICE_FORMULA_PATTERN, parse_dice_formula, strip_whitespace
from charsheet.engine.reference import ReferenceData, get_reference_data
from charsheet.models.abilities import AbilityScores, DiceRoll
from charsheet.models.character import CreateCharacterParams
from charsheet.models.enums import Ability, AbilityScoreMethod
from charsheet.models.races import Race
from charsheet.models.results import ValidationResult


logger = get_logger(__name__)

# =============================================================================
# Tables
# =============================================================================

METHOD_SCORE_RANGES: dict[AbilityScoreMethod, tuple[int, int, str]] = {
    AbilityScoreMethod.POINT_BUY: (POINT_BUY_MIN, POINT_BUY_MAX, "point buy"),
    AbilityScoreMethod.ROLL_3D6: (ROLLED_SCORE_MIN, ROLLED_SCORE_MAX, "3d6 rolls"),
    AbilityScoreMethod.ROLL_4D6_DROP_LOWEST: (ROLLED_SCORE_MIN, ROLLED_SCORE_MAX, "4d6 drop lowest"),
}
"""Valid base score range per generation method. Custom dice has no fixed range."""

RACE_CLASS_SYNERGIES: dict[str, tuple[str, ...]] = {
    "Elf": ("Wizard", "Ranger", "Fighter"),
    "Dwarf": ("Fighter", "Cleric", "Barbarian"),
    "Halfling": ("Rogue", "Ranger", "Bard"),
    "Half-Orc": ("Barbarian", "Fighter", "Ranger"),
    "Human": ("Any",),
}
"""Classes that suit each race. Races not listed draw no synergy warnings."""

CLASS_KEY_ABILITIES: dict[str, tuple[Ability, ...]] = {
    "Fighter": (Ability.STR, Ability.CON),
    "Wizard": (Ability.INT,),
    "Cleric": (Ability.WIS,),
    "Rogue": (Ability.DEX,),
    "Ranger": (Ability.DEX, Ability.WIS),
    "Barbarian": (Ability.STR, Ability.CON),
    "Bard": (Ability.CHA,),
    "Sorcerer": (Ability.CHA,),
    "Paladin": (Ability.STR, Ability.CHA),
    "Monk": (Ability.DEX, Ability.WIS),
    "Druid": (Ability.WIS,),
}

UNUSED_POINTS_WARNING = 3
UNBALANCED_SPREAD = 11
DUMP_STAT_SCORE = 8
LOW_SCORE_WARNING = 6
HIGH_SCORE_WARNING = 18
HIGH_AVERAGE_ROLL = 16
LARGE_MODIFIER = 50
MANY_DICE = 10

INVALID_NAME_CHARACTERS = re.compile(r"[<>{}\[\]\\/|`~!@#$%^&*()+=]")
TEST_NAME_MARKERS = ("test", "temp")


def _bases(scores: AbilityScores | Mapping[Ability, int]) -> dict[Ability, int]:
    if isinstance(scores, AbilityScores):
        return scores.bases()
    given = {Ability(key): value for key, value in scores.items()}
    return {ability: given.get(ability, 10) for ability in Ability}


# =============================================================================
# Ability Scores
# =============================================================================


def validate_ability_scores(
    scores: AbilityScores | Mapping[Ability, int],
    method: AbilityScoreMethod,
) -> ValidationResult:
    """Check base scores against the absolute and per-method ranges."""
    errors: list[str] = []
    warnings: list[str] = []
    method_range = METHOD_SCORE_RANGES.get(method)

    for ability, score in _bases(scores).items():
        abbr = ability.abbreviation
        if score < ABILITY_SCORE_MIN:
            errors.append(f"{abbr} cannot be less than {ABILITY_SCORE_MIN}")
        elif score > ABILITY_SCORE_MAX:
            errors.append(f"{abbr} cannot be greater than {ABILITY_SCORE_MAX}")

        if method_range is not None:
            low, high, label = method_range
            if not low <= score <= high:
                errors.append(f"{abbr} must be between {low}-{high} for {label} (got {score})")

        if score <= LOW_SCORE_WARNING:
            warnings.append(f"{abbr} of {score} is very low and may severely impact gameplay")
        if score >= HIGH_SCORE_WARNING and method != AbilityScoreMethod.POINT_BUY:
            warnings.append(f"{abbr} of {score} is very high")

    if _bases(scores)[Ability.CON] <= 0:
        errors.append("Constitution cannot be 0 or negative (character would be dead)")

    return ValidationResult.from_messages(errors, warnings)


def validate_point_buy(
    scores: AbilityScores | Mapping[Ability, int],
    points: int | None = None,
) -> ValidationResult:
    """Check a point-buy allocation against a budget.

    The budget defaults to ``settings.rules.default_point_buy``. Agrees
    with ``charsheet.engine.abilities.validate_point_buy`` on validity;
    the warnings differ.
    """
    if points is None:
        points = get_settings().rules.default_point_buy
    errors: list[str] = []
    warnings: list[str] = []

    if not 0 <= points <= POINT_BUY_BUDGET_MAX:
        errors.append(f"Invalid point buy total: {points}")
        return ValidationResult.from_messages(errors, warnings)

    bases = _bases(scores)
    total_cost = 0
    for ability, score in bases.items():
        if not POINT_BUY_MIN <= score <= POINT_BUY_MAX:
            errors.append(
                f"{ability.abbreviation} score {score} is outside point buy range "
                f"({POINT_BUY_MIN}-{POINT_BUY_MAX})"
            )
            continue
        total_cost += POINT_BUY_COSTS[score]

    if total_cost > points:
        errors.append(f"Point buy exceeds limit: {total_cost}/{points} points used")
    elif total_cost < points - UNUSED_POINTS_WARNING:
        warnings.append(
            f"{points - total_cost} unused points remaining (consider optimizing allocation)"
        )

    if max(bases.values()) - min(bases.values()) > UNBALANCED_SPREAD:
        warnings.append("Very unbalanced ability spread detected")

    for ability, score in bases.items():
        if score <= DUMP_STAT_SCORE:
            warnings.append(
                f"{ability.abbreviation} is very low ({score}) - "
                "consider if this fits your character concept"
            )

    return ValidationResult.from_messages(errors, warnings)


def _roll_is_consistent(roll: DiceRoll) -> bool:
    if not roll.rolls:
        return False
    parsed = parse_dice_formula(roll.formula)
    sides = parsed.sides if parsed else 6
    modifier = parsed.modifier if parsed else 0
    if not all(1 <= die <= sides for die in roll.rolls):
        return False
    return sum(roll.rolls) + modifier == roll.total


def validate_rolled_stats(
    scores: AbilityScores | Mapping[Ability, int],
    roll_history: Sequence[DiceRoll],
) -> ValidationResult:
    """Cross-check rolled base scores against the rolls that produced them."""
    errors: list[str] = []
    warnings: list[str] = []

    if not roll_history:
        warnings.append("No roll history provided - cannot verify legitimacy of rolled stats")
        return ValidationResult.from_messages(errors, warnings)

    by_ability = {roll.ability: roll for roll in roll_history if roll.ability is not None}
    missing = [ability.abbreviation for ability in Ability if ability not in by_ability]
    if missing:
        errors.append(f"Missing roll history for: {', '.join(missing)}")

    for ability, score in _bases(scores).items():
        roll = by_ability.get(ability)
        if roll is None:
            continue
        if roll.total != score:
            errors.append(
                f"{ability.abbreviation} score {score} doesn't match roll total {roll.total}"
            )
        if not _roll_is_consistent(roll):
            errors.append(f"Invalid roll data for {ability.abbreviation}: {roll.rolls}")

    average = sum(roll.total for roll in roll_history) / len(roll_history)
    if average > HIGH_AVERAGE_ROLL:
        warnings.append(f"Average roll is unusually high ({average:.1f})")

    impossible = [
        roll for roll in roll_history
        if not ROLLED_SCORE_MIN <= roll.total <= ROLLED_SCORE_MAX
    ]
    if impossible:
        detail = ", ".join(f"{roll.ability or '?'}:{roll.total}" for roll in impossible)
        errors.append(f"Impossible roll totals detected: {detail}")

    return ValidationResult.from_messages(errors, warnings)


# =============================================================================
# Names and Formulas
# =============================================================================


def validate_character_name(name: str | None) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not name or not name.strip():
        errors.append("Character name is required")
        return ValidationResult.from_messages(errors, warnings)

    if len(name) > MAX_NAME_LENGTH:
        errors.append(f"Character name must be {MAX_NAME_LENGTH} characters or less")
    elif len(name) > LONG_NAME_WARNING_LENGTH:
        warnings.append("Character name is quite long")
    if len(name) < 2:
        warnings.append("Character name is very short")

    invalid = INVALID_NAME_CHARACTERS.findall(name)
    if invalid:
        unique = "".join(dict.fromkeys(invalid))
        errors.append(f"Character name contains invalid characters: {unique}")

    lowered = name.lower()
    if any(marker in lowered for marker in TEST_NAME_MARKERS):
        warnings.append("Name suggests this might be a test character")
    if name.isdigit():
        warnings.append("Name is only numbers")
    if name.strip() != name:
        warnings.append("Name has leading or trailing whitespace")

    return ValidationResult.from_messages(errors, warnings)


def validate_dice_formula(formula: str | None) -> ValidationResult:
    """Check a custom dice formula, explaining what is wrong with it.

    Uses the same grammar and bounds as ``parse_dice_formula``.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not formula or not formula.strip():
        errors.append("Dice formula is required")
        return ValidationResult.from_messages(errors, warnings)

    match = DICE_FORMULA_PATTERN.match(strip_whitespace(formula))
    if match is None:
        errors.append(
            f'Invalid dice formula format: "{formula}". '
            "Expected format: XdY[kZ][+/-N] (e.g., 4d6k3, 3d6+1)"
        )
        return ValidationResult.from_messages(errors, warnings)

    count = int(match.group(1))
    sides = int(match.group(2))
    keep = int(match.group(3)) if match.group(3) else None
    modifier = int(match.group(4)) if match.group(4) else None

    if not 1 <= count <= MAX_DICE_COUNT:
        errors.append(f"Number of dice must be between 1-{MAX_DICE_COUNT} (got {count})")
    if not MIN_DIE_SIDES <= sides <= MAX_DIE_SIDES:
        errors.append(f"Die size must be between {MIN_DIE_SIDES}-{MAX_DIE_SIDES} (got {sides})")

    if keep is not None:
        if keep < 1:
            errors.append(f"Keep value must be at least 1 (got {keep})")
        elif keep > count:
            errors.append(f"Cannot keep more dice ({keep}) than rolled ({count})")
        elif keep == count:
            warnings.append(f"Keeping all dice ({keep}/{count}) - consider removing 'k' modifier")

    if modifier is not None and abs(modifier) > LARGE_MODIFIER:
        warnings.append(f"Large modifier ({modifier}) detected")
    if sides not in STANDARD_DIE_SIZES:
        warnings.append(f"Unusual die size: d{sides}")
    if count > MANY_DICE:
        warnings.append(f"Rolling many dice ({count}) - this may be slow")

    return ValidationResult.from_messages(errors, warnings)


# =============================================================================
# Race and Class
# =============================================================================


def validate_race_class_combination(
    race: Race | str | None,
    class_name: str | None,
    *,
    reference: ReferenceData | None = None,
) -> ValidationResult:
    """Require a race and a class, and warn about awkward pairings.

    Any pairing is allowed. Warnings flag classes outside the race's
    usual choices and racial penalties to the class's key abilities.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if isinstance(race, str) and race.strip():
        resolved = (reference or get_reference_data()).find_race(race)
        if resolved is None:
            errors.append(f"Unknown race: {race}")
        race = resolved
    elif isinstance(race, str):
        race = None

    if race is None and not errors:
        errors.append("Race is required")
    if not class_name or not class_name.strip():
        errors.append("Class is required")
    if errors or race is None or class_name is None:
        return ValidationResult.from_messages(errors, warnings)

    good_classes = RACE_CLASS_SYNERGIES.get(race.name, ())
    if good_classes and "Any" not in good_classes and class_name not in good_classes:
        warnings.append(
            f"{race.name} and {class_name} is an unusual combination. "
            f"Consider: {', '.join(good_classes)}"
        )

    for ability in CLASS_KEY_ABILITIES.get(class_name, ()):
        if race.ability_modifiers.get(ability, 0) < 0:
            warnings.append(
                f"{race.name} has a penalty to {ability.abbreviation}, "
                f"which is important for {class_name}"
            )

    return ValidationResult.from_messages(errors, warnings)


def validate_character_creation(
    params: CreateCharacterParams,
    *,
    reference: ReferenceData | None = None,
) -> ValidationResult:
    """Run the name, ability score and race/class checks for a creation request."""
    result = (
        validate_character_name(params.name)
        .merge(validate_ability_scores(params.ability_scores, params.ability_score_method))
        .merge(validate_race_class_combination(params.race, params.class_name, reference=reference))
    )
    logger.debug(
        "Creation parameters validated",
        valid=result.is_valid,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


__all__ = [
    "METHOD_SCORE_RANGES",
    "RACE_CLASS_SYNERGIES",
    "CLASS_KEY_ABILITIES",
    "validate_ability_scores",
    "validate_point_buy",
    "validate_rolled_stats",
    "validate_character_name",
    "validate_dice_formula",
    "validate_race_class_combination",
    "validate_character_creation",
]
