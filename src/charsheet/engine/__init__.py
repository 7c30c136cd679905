"""Rules engines: dice, ability scores, characters, equipment and validation.

The engines are plain classes and functions over the models in
``charsheet.models``. Randomness comes from an injectable ``DiceRoller``
and race/class data from an injectable ``ReferenceData``.

The creation-time checks live in ``charsheet.engine.validation``; import
that module directly (its ``validate_point_buy`` shares a name with the
ability score engine's).
"""

from __future__ import annotations

from charsheet.engine.abilities import (
    POINT_BUY_PRESETS,
    calculate_ability_modifier,
    calculate_point_cost,
    create_ability_scores,
    create_ability_scores_from_rolls,
    create_default_ability_score,
    get_point_buy_presets,
    total_point_cost,
    validate_custom_point_buy,
    validate_point_buy,
)
from charsheet.engine.catalog import (
    CatalogFilters,
    EquipmentCatalog,
    ItemOptions,
    get_catalog,
)
from charsheet.engine.character import (
    CharacterEngine,
    calculate_ability_modifiers,
    calculate_class_progression,
    calculate_hit_points,
    calculate_skill_totals,
)
from charsheet.engine.dice import (
    DiceFormula,
    DiceRoller,
    RollStatistics,
    calculate_statistics,
    generate_id,
    get_default_roller,
    parse_dice_formula,
    roll_3d6,
    roll_4d6_drop_lowest,
    roll_custom_dice,
)
from charsheet.engine.equipment import (
    EquipmentEngine,
    base_carrying_capacity,
    calculate_range_penalty,
    check_slot_compatibility,
    get_effective_range,
)
from charsheet.engine.reference import ReferenceData, get_reference_data


__all__ = [
    # Dice
    "DiceFormula",
    "DiceRoller",
    "RollStatistics",
    "calculate_statistics",
    "generate_id",
    "get_default_roller",
    "parse_dice_formula",
    "roll_3d6",
    "roll_4d6_drop_lowest",
    "roll_custom_dice",
    # Ability scores
    "POINT_BUY_PRESETS",
    "calculate_ability_modifier",
    "calculate_point_cost",
    "create_ability_scores",
    "create_ability_scores_from_rolls",
    "create_default_ability_score",
    "get_point_buy_presets",
    "total_point_cost",
    "validate_custom_point_buy",
    "validate_point_buy",
    # Reference data
    "ReferenceData",
    "get_reference_data",
    # Catalog
    "CatalogFilters",
    "EquipmentCatalog",
    "ItemOptions",
    "get_catalog",
    # Characters
    "CharacterEngine",
    "calculate_ability_modifiers",
    "calculate_class_progression",
    "calculate_hit_points",
    "calculate_skill_totals",
    # Equipment
    "EquipmentEngine",
    "base_carrying_capacity",
    "calculate_range_penalty",
    "check_slot_compatibility",
    "get_effective_range",
]
