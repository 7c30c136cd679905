"""Character assembly, racial modifiers, class progression and validation.

Update contract: every function here that takes a ``Character`` changes
it in place and returns that same object. Callers holding the old
reference see the update; callers who need the previous state must copy
it first (``character.model_copy(deep=True)``).
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from charsheet.core.config import RulesSettings, get_settings
from charsheet.core.constants import (
    ABILITY_SCORE_MAX,
    ABILITY_SCORE_MIN,
    CHARACTER_NAME_WARNING_LENGTH,
    CLASS_SKILL_BONUS,
    CURRENT_SCHEMA_VERSION,
    DEFAULT_CHARACTER_NAME,
    DEFAULT_HIT_DIE,
    DEFAULT_SKILL_RANKS,
    ITERATIVE_ATTACK_STEP,
)
from charsheet.core.exceptions import CharacterImportError
from charsheet.core.logging import get_logger
from charsheet.engine.abilities import create_ability_scores
from charsheet.engine.dice import DiceRoller, generate_id, get_default_roller
from charsheet.engine.reference import ReferenceData, get_reference_data
from charsheet.models.abilities import AbilityScores
from charsheet.models.character import (
    Character,
    CharacterClasses,
    CharacterInfo,
    ClassEntry,
    CreateCharacterParams,
    HitPoints,
    default_skills,
)
from charsheet.models.classes import base_attack_bonus, base_save_bonus
from charsheet.models.enums import (
    Ability,
    BABProgression,
    EncumbranceVariant,
    SaveProgression,
)
from charsheet.models.equipment import EncumbranceSettings, Equipment
from charsheet.models.races import Race
from charsheet.models.results import ValidationResult


logger = get_logger(__name__)

MAX_ITERATIVE_ATTACKS = 4


# =============================================================================
# Derived Values
# =============================================================================


def calculate_ability_modifiers(scores: AbilityScores) -> AbilityScores:
    """Recompute total, modifier, temp total and temp modifier of all six scores.

    Idempotent: run it after any change to bases, racial values or bonuses.
    """
    for _, score in scores.items():
        score.recalculate()
    return scores


def calculate_class_progression(character: Character) -> Character:
    """Rebuild total level, base attack bonus and base saves from the class entries."""
    classes = character.classes
    entries = classes.classes

    bab = sum(base_attack_bonus(entry.bab_progression, entry.level) for entry in entries)
    attacks = [bab]
    while attacks[-1] - ITERATIVE_ATTACK_STEP > 0 and len(attacks) < MAX_ITERATIVE_ATTACKS:
        attacks.append(attacks[-1] - ITERATIVE_ATTACK_STEP)

    classes.total_level = sum(entry.level for entry in entries)
    classes.base_attack_bonus = attacks
    classes.base_fort_save = sum(base_save_bonus(e.fort_progression, e.level) for e in entries)
    classes.base_ref_save = sum(base_save_bonus(e.ref_progression, e.level) for e in entries)
    classes.base_will_save = sum(base_save_bonus(e.will_progression, e.level) for e in entries)
    return character


def calculate_hit_points(character: Character) -> int:
    """Maximum hit points: each recorded hit die plus the CON modifier, at least 1 each."""
    con_modifier = character.ability_scores.constitution.modifier
    return sum(
        max(1, result + con_modifier)
        for entry in character.classes.classes
        for result in entry.hit_die_results
    )


def calculate_skill_totals(character: Character) -> dict[str, int]:
    """Recompute every skill total and return them by skill key.

    A skill total is ranks + ability modifier + class skill bonus (with
    at least one rank) + misc, less the armor check penalty for skills
    it applies to.
    """
    penalty = character.equipment.ac_penalty
    totals: dict[str, int] = {}
    for key, skill in character.skills.items():
        total = skill.ranks + character.ability_scores[skill.ability].modifier + skill.misc
        if skill.is_class_skill and skill.ranks >= 1:
            total += CLASS_SKILL_BONUS
        if skill.armor_check_penalty:
            total -= penalty
        skill.total = total
        totals[key] = total
    return totals


# =============================================================================
# Character Engine
# =============================================================================


class CharacterEngine:
    """Builds and validates characters against race and class reference data.

    Example:
        >>> engine = CharacterEngine()
        >>> hero = engine.create_character(CreateCharacterParams(
        ...     name="Thorin", race="Dwarf", class_name="Fighter",
        ...     ability_scores={Ability.CON: 14},
        ... ))
        >>> hero.ability_scores.constitution.total
        16
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        *,
        roller: DiceRoller | None = None,
        settings: RulesSettings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            reference: Race and class tables. Defaults to the Core Rulebook.
            roller: Random source for character ids.
            settings: Rules defaults. Defaults to the application settings.
        """
        self._reference = reference or get_reference_data()
        self._roller = roller or get_default_roller()
        self._settings = settings or get_settings().rules

    @property
    def reference(self) -> ReferenceData:
        return self._reference

    def generate_character_id(self) -> str:
        """A new id of the form ``char_<epoch ms>_<9 base-36 chars>``."""
        return generate_id("char", self._roller)

    def resolve_race(self, race: str | Race) -> Race:
        """Race row for a name; Race objects pass through unchanged.

        Raises:
            ReferenceDataError: If the name is not in the race table.
        """
        if isinstance(race, Race):
            return race
        return self._reference.get_race(race)

    def build_class_entry(self, class_name: str, level: int = 1) -> ClassEntry:
        """Class entry for ``level`` levels in a class.

        Unknown classes are accepted with default values: d8 hit die,
        2 skill ranks, medium BAB, poor saves and no features.
        """
        data = self._reference.find_class(class_name)
        if data is None:
            logger.info("Unknown class, using defaults", class_name=class_name)
            return ClassEntry(
                name=class_name,
                level=level,
                hit_die=DEFAULT_HIT_DIE,
                hit_die_results=self._hit_die_results(DEFAULT_HIT_DIE, level),
                skill_ranks=DEFAULT_SKILL_RANKS,
                class_skills=[],
                bab_progression=BABProgression.MEDIUM,
                fort_progression=SaveProgression.POOR,
                ref_progression=SaveProgression.POOR,
                will_progression=SaveProgression.POOR,
                class_features=[],
            )

        return ClassEntry(
            name=data.name,
            level=level,
            hit_die=data.hit_die,
            hit_die_results=self._hit_die_results(data.hit_die, level),
            skill_ranks=data.skill_ranks,
            class_skills=list(data.class_skills),
            bab_progression=data.bab_progression,
            fort_progression=data.fort_progression,
            ref_progression=data.ref_progression,
            will_progression=data.will_progression,
            class_features=data.features_at(level),
        )

    @staticmethod
    def _hit_die_results(hit_die: int, level: int) -> list[int]:
        # Maximum at 1st level, rounded-up average afterwards
        return [hit_die] + [hit_die // 2 + 1] * (level - 1)

    def create_character(self, params: CreateCharacterParams) -> Character:
        """Assemble a new level-1 character.

        Raises:
            ReferenceDataError: If the race name is not in the race table.
        """
        race = self.resolve_race(params.race)
        entry = self.build_class_entry(params.class_name)

        info = CharacterInfo(
            id=self.generate_character_id(),
            name=params.name if params.name.strip() else DEFAULT_CHARACTER_NAME,
            player=params.player,
            user_id=params.user_id,
            race=race,
            racial_ability_choice=params.racial_ability_choice,
            size=race.size,
            alignment=params.alignment,
            deity=params.deity or "",
            gender=params.gender,
            age=params.age,
        )

        character = Character(
            info=info,
            ability_scores=create_ability_scores(params.ability_scores),
            classes=CharacterClasses(classes=[entry], total_level=1),
            skills=default_skills(entry.class_skills),
            equipment=Equipment(
                encumbrance_settings=EncumbranceSettings(
                    enabled=self._settings.encumbrance_enabled,
                    variant=EncumbranceVariant(self._settings.encumbrance_variant),
                ),
            ),
            schema_version=CURRENT_SCHEMA_VERSION,
        )

        self.apply_racial_modifiers(character)
        calculate_class_progression(character)
        maximum = calculate_hit_points(character)
        character.hit_points = HitPoints(maximum=maximum, current=maximum)
        calculate_skill_totals(character)
        character.touch()

        logger.info(
            "Character created",
            character_id=info.id,
            race=race.name,
            class_name=entry.name,
            method=str(params.ability_score_method),
        )
        return character

    def apply_racial_modifiers(
        self,
        character: Character,
        race: str | Race | None = None,
    ) -> Character:
        """Set every ability's racial value from the character's race.

        Racial values are replaced, not added to, so switching races
        never leaves the previous race's modifiers behind. Also sets the
        character's size and refreshes hit points and skill totals.

        Args:
            character: Character to update.
            race: New race to switch to first; keeps the current race if omitted.

        Raises:
            ReferenceDataError: If ``race`` is a name not in the race table.
        """
        if race is not None:
            character.info.race = self.resolve_race(race)
        current = character.info.race

        choice = character.info.racial_ability_choice
        if current.has_flexible_bonus and choice is None:
            logger.debug("No ability chosen for flexible racial bonus", race=current.name)

        modifiers = current.modifiers_with_choice(choice)
        for ability, score in character.ability_scores.items():
            score.racial = modifiers[ability]

        calculate_ability_modifiers(character.ability_scores)
        character.info.size = current.size
        self._sync_hit_points(character)
        calculate_skill_totals(character)
        return character

    def replace_class(self, character: Character, class_name: str) -> Character:
        """Re-derive the class entry from reference data, keeping the current level."""
        level = max(1, character.classes.total_level)
        entry = self.build_class_entry(class_name, level)
        character.classes.classes = [entry]
        for key, skill in character.skills.items():
            skill.is_class_skill = key in entry.class_skills

        calculate_class_progression(character)
        self._sync_hit_points(character)
        calculate_skill_totals(character)
        character.touch()
        logger.info("Class replaced", character_id=character.id, class_name=entry.name, level=level)
        return character

    def recalculate(self, character: Character) -> Character:
        """Recompute every derived value from the character's current inputs.

        Ability totals and modifiers, class progression, maximum hit
        points (current hit points are clamped to it) and skill totals.
        """
        calculate_ability_modifiers(character.ability_scores)
        calculate_class_progression(character)
        self._sync_hit_points(character)
        calculate_skill_totals(character)
        return character

    @staticmethod
    def _sync_hit_points(character: Character) -> None:
        hit_points = character.hit_points
        hit_points.maximum = calculate_hit_points(character)
        hit_points.current = min(hit_points.current, hit_points.maximum)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_character(self, character: Character) -> ValidationResult:
        """Check a character for problems without changing it."""
        errors: list[str] = []
        warnings: list[str] = []

        name = character.info.name
        if not name.strip():
            errors.append("Character name is required")
        if len(name) > CHARACTER_NAME_WARNING_LENGTH:
            warnings.append("Character name is very long")

        self._validate_ability_scores(character.ability_scores, errors, warnings)

        entries = character.classes.classes
        if not entries:
            errors.append("Character must have at least one class")
        else:
            calculated = sum(entry.level for entry in entries)
            if calculated != character.classes.total_level:
                errors.append(
                    f"Total level mismatch: {character.classes.total_level} "
                    f"vs calculated {calculated}"
                )

        if character.schema_version != CURRENT_SCHEMA_VERSION:
            warnings.append(f"Character uses old schema version: {character.schema_version}")

        result = ValidationResult.from_messages(errors, warnings)
        logger.debug(
            "Character validated",
            character_id=character.info.id,
            valid=result.is_valid,
            errors=len(errors),
            warnings=len(warnings),
        )
        return result

    @staticmethod
    def _validate_ability_scores(
        scores: AbilityScores,
        errors: list[str],
        warnings: list[str],
    ) -> None:
        for ability, stored in scores.items():
            # Derived values may be stale; check a recalculated copy
            score = stored.model_copy(deep=True).recalculate()
            if not ABILITY_SCORE_MIN <= score.base <= ABILITY_SCORE_MAX:
                errors.append(
                    f"{ability.abbreviation} base score {score.base} is outside valid range "
                    f"({ABILITY_SCORE_MIN}-{ABILITY_SCORE_MAX})"
                )
            if ability == Ability.CON:
                if score.base <= 0:
                    errors.append("Constitution base score cannot be 0 or negative")
                if score.temp_total <= 0:
                    errors.append("Constitution cannot be reduced to 0 or below")
            elif score.temp_total == 0:
                warnings.append(f"{ability.full_name} is reduced to 0")

    # =========================================================================
    # Serialization
    # =========================================================================

    def export_to_json(self, character: Character) -> str:
        """Serialize a character to JSON."""
        return character.model_dump_json(indent=2)

    def import_from_json(self, payload: str | bytes) -> Character:
        """Rebuild a character from JSON and validate it.

        A character saved under another schema version has its version
        updated and ``last_updated`` restamped.

        Raises:
            CharacterImportError: If the payload does not parse into a
                character or the character fails validation.
        """
        try:
            character = Character.model_validate_json(payload)
        except PydanticValidationError as exc:
            raise CharacterImportError(f"Failed to import character: {exc}") from exc

        result = self.validate_character(character)
        if not result.is_valid:
            raise CharacterImportError(
                "Failed to import character: Invalid character data: " + ", ".join(result.errors),
                errors=result.errors,
            )

        if character.schema_version != CURRENT_SCHEMA_VERSION:
            logger.info(
                "Character schema upgraded",
                character_id=character.info.id,
                from_version=character.schema_version,
                to_version=CURRENT_SCHEMA_VERSION,
            )
            character.schema_version = CURRENT_SCHEMA_VERSION
            character.touch()

        return character


__all__ = [
    "calculate_ability_modifiers",
    "calculate_class_progression",
    "calculate_hit_points",
    "calculate_skill_totals",
    "CharacterEngine",
]
