"""Rules constants shared across the charsheet engines.

Values follow the Pathfinder Roleplaying Game Core Rulebook.
"""

from __future__ import annotations

# =============================================================================
# Serialization
# =============================================================================

CURRENT_SCHEMA_VERSION = "1.1.0"
"""Schema version stamped on every created or imported character."""

DEFAULT_CHARACTER_NAME = "New Character"
"""Name used when character creation is given a blank name."""

# =============================================================================
# Ability Scores
# =============================================================================

POINT_BUY_COSTS: dict[int, int] = {
    7: -4,
    8: -2,
    9: -1,
    10: 0,
    11: 1,
    12: 2,
    13: 3,
    14: 5,
    15: 7,
    16: 10,
    17: 13,
    18: 17,
}
"""Point cost of each purchasable base score (Core Rulebook table 1-1)."""

POINT_BUY_MIN = 7
"""Lowest base score purchasable with point buy."""

POINT_BUY_MAX = 18
"""Highest base score purchasable with point buy."""

CUSTOM_POINT_BUY_MIN = 5
"""Smallest custom point-buy budget."""

CUSTOM_POINT_BUY_MAX = 50
"""Largest custom point-buy budget."""

POINT_BUY_BUDGET_MAX = 100
"""Largest budget either point-buy validator accepts."""

ABILITY_SCORE_MIN = 1
"""Lowest base score a valid character may have."""

ABILITY_SCORE_MAX = 25
"""Highest base score a valid character may have."""

ROLLED_SCORE_MIN = 3
"""Lowest total of three six-sided dice."""

ROLLED_SCORE_MAX = 18
"""Highest total of three six-sided dice."""

DEFAULT_ABILITY_SCORE = 10
"""Base score used when no value is supplied."""

# =============================================================================
# Dice Formulas
# =============================================================================

MAX_DICE_COUNT = 20
"""Most dice a custom formula may roll."""

MIN_DIE_SIDES = 2
"""Smallest die a custom formula may roll."""

MAX_DIE_SIDES = 100
"""Largest die a custom formula may roll."""

STANDARD_DIE_SIZES = frozenset({4, 6, 8, 10, 12, 20})
"""Die sizes found in a standard polyhedral set."""

# =============================================================================
# Characters
# =============================================================================

MAX_NAME_LENGTH = 50
"""Longest name accepted at character creation."""

LONG_NAME_WARNING_LENGTH = 30
"""Names longer than this produce a warning."""

CHARACTER_NAME_WARNING_LENGTH = 100
"""Stored characters with longer names produce a warning on validation."""

DEFAULT_HIT_DIE = 8
"""Hit die used for classes missing from the reference table."""

DEFAULT_SKILL_RANKS = 2
"""Skill ranks per level for classes missing from the reference table."""

FIRST_LEVEL_XP_TARGET = 2000
"""Experience needed for second level on the medium advancement track."""

CLASS_SKILL_BONUS = 3
"""Bonus on class skills with at least one rank."""

# =============================================================================
# Equipment
# =============================================================================

BASE_ARMOR_CLASS = 10
"""Armor class before any modifiers."""

RANGE_INCREMENT_PENALTY = -2
"""Attack penalty per full range increment beyond the first."""

MAX_RANGE_INCREMENTS = 10
"""Range increments a ranged weapon can reach."""

ITERATIVE_ATTACK_STEP = 5
"""Base attack bonus lost by each additional iterative attack."""

ID_SUFFIX_LENGTH = 9
"""Length of the random base-36 suffix in generated ids."""
