"""Tests for character assembly, derived values and import/export."""

from __future__ import annotations

import json
import re

import pytest

from charsheet.core.constants import CURRENT_SCHEMA_VERSION
from charsheet.core.exceptions import CharacterImportError, ReferenceDataError
from charsheet.engine.character import (
    CharacterEngine,
    calculate_ability_modifiers,
    calculate_class_progression,
    calculate_hit_points,
    calculate_skill_totals,
)
from charsheet.engine.reference import ReferenceData
from charsheet.models.abilities import Bonus
from charsheet.models.character import Character, CreateCharacterParams
from charsheet.models.classes import CORE_CLASSES
from charsheet.models.enums import Ability, BABProgression, BonusType, SaveProgression, Size
from charsheet.models.races import Race


class TestCreateCharacter:
    """Tests for the assembly algorithm."""

    def test_dwarf_fighter(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test racial modifiers, size and class entry of a Dwarf Fighter."""
        scores = dwarf_fighter.ability_scores

        assert (scores.constitution.total, scores.constitution.modifier) == (16, 3)
        assert (scores.wisdom.total, scores.wisdom.modifier) == (14, 2)
        assert (scores.charisma.total, scores.charisma.modifier) == (6, -2)
        assert dwarf_fighter.info.size == Size.MEDIUM

        entry = dwarf_fighter.classes.classes[0]
        assert entry.name == "Fighter"
        assert entry.level == 1
        assert entry.hit_die == 10
        assert entry.hit_die_results == [10]
        assert entry.bab_progression == BABProgression.FULL
        assert character_engine.validate_character(dwarf_fighter).is_valid

    def test_id_and_stamps(self, dwarf_fighter: Character) -> None:
        """Test id shape, schema version and timestamp."""
        assert re.fullmatch(r"char_\d+_[0-9a-z]{9}", dwarf_fighter.id)
        assert dwarf_fighter.schema_version == CURRENT_SCHEMA_VERSION
        assert dwarf_fighter.last_updated.tzinfo is not None

    def test_progression_and_hit_points(self, dwarf_fighter: Character) -> None:
        """Test level 1 BAB, saves and hit points."""
        classes = dwarf_fighter.classes

        assert classes.total_level == 1
        assert classes.base_attack_bonus == [1]
        assert (classes.base_fort_save, classes.base_ref_save, classes.base_will_save) == (2, 0, 0)
        assert dwarf_fighter.hit_points.maximum == 13
        assert dwarf_fighter.hit_points.current == 13

    def test_blank_name_and_deity_defaults(self, character_engine: CharacterEngine) -> None:
        """Test a blank name becomes 'New Character' and a missing deity is empty."""
        hero = character_engine.create_character(CreateCharacterParams(name="   "))

        assert hero.info.name == "New Character"
        assert hero.info.deity == ""

    def test_unknown_class_falls_back(self, character_engine: CharacterEngine) -> None:
        """Test unknown classes use default values instead of failing."""
        hero = character_engine.create_character(CreateCharacterParams(name="Odd", class_name="Gunslinger"))
        entry = hero.classes.classes[0]

        assert entry.name == "Gunslinger"
        assert entry.hit_die == 8
        assert entry.skill_ranks == 2
        assert entry.class_skills == []
        assert entry.bab_progression == BABProgression.MEDIUM
        assert entry.class_features == []

    def test_unknown_race_rejected(self, character_engine: CharacterEngine) -> None:
        """Test an unknown race name raises."""
        with pytest.raises(ReferenceDataError, match="Unknown race: Tiefling"):
            character_engine.create_character(CreateCharacterParams(name="X", race="Tiefling"))

    def test_lookup_ignores_case(self, character_engine: CharacterEngine) -> None:
        """Test race and class names are matched case-insensitively."""
        hero = character_engine.create_character(
            CreateCharacterParams(name="Lia", race="half-elf", class_name="wizard")
        )

        assert hero.info.race.name == "Half-Elf"
        assert hero.classes.classes[0].name == "Wizard"

    def test_flexible_racial_bonus(self, character_engine: CharacterEngine) -> None:
        """Test the chosen ability gets the flexible +2."""
        hero = character_engine.create_character(
            CreateCharacterParams(name="Val", race="Human", racial_ability_choice=Ability.STR)
        )

        assert hero.ability_scores.strength.racial == 2
        assert hero.ability_scores.dexterity.racial == 0

    def test_small_race(self, character_engine: CharacterEngine) -> None:
        """Test size comes from the race."""
        hero = character_engine.create_character(CreateCharacterParams(name="Pip", race="Halfling"))

        assert hero.info.size == Size.SMALL

    def test_class_skills_flagged(self, dwarf_fighter: Character) -> None:
        """Test class skills are marked on the sheet."""
        assert dwarf_fighter.skills["climb"].is_class_skill
        assert not dwarf_fighter.skills["stealth"].is_class_skill

    def test_injected_reference_data(self) -> None:
        """Test a fixture race table can replace the core table."""
        orc = Race(name="Orc", ability_modifiers={Ability.STR: 4, Ability.INT: -2})
        engine = CharacterEngine(ReferenceData(races=[orc], classes=CORE_CLASSES))

        hero = engine.create_character(CreateCharacterParams(name="Grom", race="Orc"))

        assert hero.ability_scores.strength.total == 14


class TestRacialModifiers:
    """Tests for applying racial modifiers."""

    def test_replace_not_add(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test switching races replaces the previous modifiers."""
        character_engine.apply_racial_modifiers(dwarf_fighter, "Elf")
        character_engine.apply_racial_modifiers(dwarf_fighter, "Dwarf")
        scores = dwarf_fighter.ability_scores

        assert scores.dexterity.racial == 0
        assert scores.intelligence.racial == 0
        assert scores.constitution.racial == 2
        assert scores.wisdom.racial == 2
        assert scores.charisma.racial == -2

    def test_idempotent(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test applying the same race twice changes nothing."""
        character_engine.apply_racial_modifiers(dwarf_fighter)
        character_engine.apply_racial_modifiers(dwarf_fighter)

        assert dwarf_fighter.ability_scores.constitution.total == 16

    def test_race_swap_refreshes_hit_points_and_skills(
        self, character_engine: CharacterEngine, dwarf_fighter: Character
    ) -> None:
        """Test a new CON and WIS reach hit points and skill totals."""
        assert dwarf_fighter.hit_points.maximum == 13
        assert dwarf_fighter.skills["perception"].total == 2

        character_engine.apply_racial_modifiers(dwarf_fighter, "Elf")

        assert dwarf_fighter.ability_scores.constitution.modifier == 1
        assert dwarf_fighter.hit_points.maximum == 11
        assert dwarf_fighter.hit_points.current == 11
        assert dwarf_fighter.skills["perception"].total == 1

    def test_returns_same_character(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test the update happens in place."""
        assert character_engine.apply_racial_modifiers(dwarf_fighter, "Gnome") is dwarf_fighter
        assert dwarf_fighter.info.size == Size.SMALL


class TestAbilityModifiers:
    """Tests for the recalculation pass."""

    def test_untyped_stack(self, dwarf_fighter: Character) -> None:
        """Test untyped bonuses add together."""
        strength = dwarf_fighter.ability_scores.strength
        strength.add_bonus(Bonus(value=1, source="a"))
        strength.add_bonus(Bonus(value=2, source="b"))
        calculate_ability_modifiers(dwarf_fighter.ability_scores)

        assert strength.total == 19

    def test_typed_highest_wins(self, dwarf_fighter: Character) -> None:
        """Test same-typed bonuses do not stack."""
        strength = dwarf_fighter.ability_scores.strength
        strength.add_bonus(Bonus(type=BonusType.ENHANCEMENT, value=2, source="belt"))
        strength.add_bonus(Bonus(type=BonusType.ENHANCEMENT, value=4, source="spell"))
        calculate_ability_modifiers(dwarf_fighter.ability_scores)
        calculate_ability_modifiers(dwarf_fighter.ability_scores)

        assert strength.total == 20
        assert strength.modifier == 5

    def test_inactive_ignored(self, dwarf_fighter: Character) -> None:
        """Test inactive bonuses contribute nothing."""
        strength = dwarf_fighter.ability_scores.strength
        strength.add_bonus(Bonus(type=BonusType.MORALE, value=2, active=False))
        calculate_ability_modifiers(dwarf_fighter.ability_scores)

        assert strength.total == 16

    def test_damage_and_drain(self, dwarf_fighter: Character) -> None:
        """Test temporary totals subtract damage and drain, floored at 0."""
        dexterity = dwarf_fighter.ability_scores.dexterity
        dexterity.damage = 3
        dexterity.drain = 1
        calculate_ability_modifiers(dwarf_fighter.ability_scores)

        assert dexterity.total == 12
        assert dexterity.temp_total == 8
        assert dexterity.temp_modifier == -1

        dexterity.damage = 30
        calculate_ability_modifiers(dwarf_fighter.ability_scores)
        assert dexterity.temp_total == 0


class TestClassProgression:
    """Tests for class progression and replacement."""

    def test_iterative_attacks(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test a level 11 fighter gets three attacks."""
        dwarf_fighter.classes.classes = [character_engine.build_class_entry("Fighter", 11)]
        calculate_class_progression(dwarf_fighter)

        assert dwarf_fighter.classes.total_level == 11
        assert dwarf_fighter.classes.base_attack_bonus == [11, 6, 1]

    def test_multiclass_sums(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test BAB and saves sum across classes."""
        dwarf_fighter.classes.classes = [
            character_engine.build_class_entry("Fighter", 3),
            character_engine.build_class_entry("Wizard", 2),
        ]
        calculate_class_progression(dwarf_fighter)

        assert dwarf_fighter.classes.summary() == "Fighter 3/Wizard 2"
        assert dwarf_fighter.classes.base_attack_bonus == [4]
        assert dwarf_fighter.classes.base_fort_save == 3 + 0
        assert dwarf_fighter.classes.base_will_save == 1 + 3

    def test_replace_class(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test replacing the class re-derives the entry."""
        character_engine.replace_class(dwarf_fighter, "Rogue")
        entry = dwarf_fighter.classes.classes[0]

        assert entry.name == "Rogue"
        assert entry.hit_die == 8
        assert entry.ref_progression == SaveProgression.GOOD
        assert dwarf_fighter.skills["stealth"].is_class_skill
        assert dwarf_fighter.hit_points.maximum == 11

    def test_hit_points_minimum_one_per_level(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test a large CON penalty still leaves 1 hit point per level."""
        dwarf_fighter.ability_scores.constitution.base = 1
        calculate_ability_modifiers(dwarf_fighter.ability_scores)
        dwarf_fighter.classes.classes[0].hit_die_results = [2, 1]

        assert calculate_hit_points(dwarf_fighter) == 2

    def test_skill_totals(self, dwarf_fighter: Character) -> None:
        """Test ranks, ability modifier and class skill bonus."""
        dwarf_fighter.skills["climb"].ranks = 1
        dwarf_fighter.skills["stealth"].ranks = 1
        totals = calculate_skill_totals(dwarf_fighter)

        assert totals["climb"] == 1 + 3 + 3
        assert totals["stealth"] == 1 + 1
        assert dwarf_fighter.skills["climb"].total == 7

    def test_recalculate(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test one pass refreshes every derived value."""
        dwarf_fighter.ability_scores.strength.base = 18
        dwarf_fighter.ability_scores.constitution.base = 10
        dwarf_fighter.classes.total_level = 4

        assert character_engine.recalculate(dwarf_fighter) is dwarf_fighter
        assert dwarf_fighter.ability_scores.strength.modifier == 4
        assert dwarf_fighter.classes.total_level == 1
        assert dwarf_fighter.hit_points.maximum == 11
        assert dwarf_fighter.hit_points.current == 11
        assert dwarf_fighter.skills["climb"].total == 4

    def test_class_table_size(self) -> None:
        """Test all eleven core classes are present."""
        assert len(CORE_CLASSES) == 11


class TestValidateCharacter:
    """Tests for whole-character validation."""

    def test_blank_name(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test a blank name is an error."""
        dwarf_fighter.info.name = " "

        assert "Character name is required" in character_engine.validate_character(dwarf_fighter).errors

    def test_base_out_of_range(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test base scores must be 1-25."""
        dwarf_fighter.ability_scores.strength.base = 30

        result = character_engine.validate_character(dwarf_fighter)

        assert "STR base score 30 is outside valid range (1-25)" in result.errors

    def test_constitution_checks_separate(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test the CON base and CON temp total checks both report."""
        dwarf_fighter.ability_scores.constitution.base = 0
        dwarf_fighter.ability_scores.constitution.damage = 5

        errors = character_engine.validate_character(dwarf_fighter).errors

        assert "Constitution base score cannot be 0 or negative" in errors
        assert "Constitution cannot be reduced to 0 or below" in errors

    def test_constitution_damage_only(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test CON damage to 0 is an error even with a legal base."""
        dwarf_fighter.ability_scores.constitution.damage = 16

        errors = character_engine.validate_character(dwarf_fighter).errors

        assert errors == ["Constitution cannot be reduced to 0 or below"]

    def test_other_ability_at_zero_warns(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test other abilities at 0 are a warning."""
        dwarf_fighter.ability_scores.strength.damage = 16

        result = character_engine.validate_character(dwarf_fighter)

        assert result.is_valid
        assert "Strength is reduced to 0" in result.warnings

    def test_does_not_mutate(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test validation leaves derived values alone."""
        dwarf_fighter.ability_scores.strength.damage = 4
        character_engine.validate_character(dwarf_fighter)

        assert dwarf_fighter.ability_scores.strength.temp_total == 16

    def test_no_classes(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test at least one class is required."""
        dwarf_fighter.classes.classes = []

        assert "Character must have at least one class" in character_engine.validate_character(dwarf_fighter).errors

    def test_level_mismatch(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test total level must match the class entries."""
        dwarf_fighter.classes.total_level = 3

        errors = character_engine.validate_character(dwarf_fighter).errors

        assert "Total level mismatch: 3 vs calculated 1" in errors

    def test_old_schema_warns(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test an old schema version is only a warning."""
        dwarf_fighter.schema_version = "1.0.0"

        result = character_engine.validate_character(dwarf_fighter)

        assert result.is_valid
        assert result.valid
        assert "Character uses old schema version: 1.0.0" in result.warnings


class TestImportExport:
    """Tests for JSON round trips."""

    def test_round_trip(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test export then import reproduces the character."""
        restored = character_engine.import_from_json(character_engine.export_to_json(dwarf_fighter))

        assert restored.info.name == dwarf_fighter.info.name
        assert restored.info.race == dwarf_fighter.info.race
        assert restored.classes == dwarf_fighter.classes
        assert restored.ability_scores == dwarf_fighter.ability_scores
        assert restored.last_updated == dwarf_fighter.last_updated

    def test_not_json(self, character_engine: CharacterEngine) -> None:
        """Test unparseable input raises CharacterImportError."""
        with pytest.raises(CharacterImportError, match="Failed to import character"):
            character_engine.import_from_json("{not json")

    def test_missing_ability_scores(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test a document without ability scores fails to import."""
        document = json.loads(character_engine.export_to_json(dwarf_fighter))
        del document["ability_scores"]

        with pytest.raises(CharacterImportError):
            character_engine.import_from_json(json.dumps(document))

    def test_invalid_character(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test a parseable but invalid character is rejected."""
        dwarf_fighter.classes.total_level = 4

        with pytest.raises(CharacterImportError) as exc_info:
            character_engine.import_from_json(character_engine.export_to_json(dwarf_fighter))

        assert "Invalid character data: Total level mismatch: 4 vs calculated 1" in exc_info.value.message
        assert exc_info.value.errors == ["Total level mismatch: 4 vs calculated 1"]

    def test_schema_upgrade(self, character_engine: CharacterEngine, dwarf_fighter: Character) -> None:
        """Test old documents are restamped with the current version."""
        dwarf_fighter.schema_version = "1.0.0"
        exported = character_engine.export_to_json(dwarf_fighter)

        restored = character_engine.import_from_json(exported)

        assert restored.schema_version == CURRENT_SCHEMA_VERSION
        assert restored.last_updated >= dwarf_fighter.last_updated
