"""Tests for race and class reference data."""

from __future__ import annotations

import pytest

from charsheet.core.exceptions import ReferenceDataError
from charsheet.engine.reference import ReferenceData, get_reference_data
from charsheet.models.classes import base_attack_bonus, base_save_bonus
from charsheet.models.enums import Ability, BABProgression, SaveProgression, Size
from charsheet.models.races import CORE_RACES, Race


class TestReferenceData:
    """Tests for table lookups."""

    def test_core_tables(self) -> None:
        """Test the default tables hold the seven races and eleven classes."""
        reference = get_reference_data()

        assert len(reference.races) == 7
        assert len(reference.classes) == 11

    def test_case_insensitive(self) -> None:
        """Test lookups ignore case and surrounding space."""
        reference = get_reference_data()

        assert reference.get_race(" dwarf ").name == "Dwarf"
        assert reference.find_class("PALADIN").name == "Paladin"

    def test_unknown(self) -> None:
        """Test unknown names."""
        reference = get_reference_data()

        assert reference.find_class("Gunslinger") is None
        with pytest.raises(ReferenceDataError) as exc_info:
            reference.get_race("Tiefling")
        assert exc_info.value.details == {"table": "races", "name": "Tiefling"}

    def test_custom_tables(self) -> None:
        """Test alternative rows replace the core tables."""
        reference = ReferenceData(races=[Race(name="Orc")], classes=[])

        assert [race.name for race in reference.races] == ["Orc"]
        assert reference.find_class("Fighter") is None


class TestRaces:
    """Tests for racial modifier tables."""

    def test_flexible_bonus_races(self) -> None:
        """Test which races choose their +2."""
        flexible = {race.name for race in CORE_RACES if race.has_flexible_bonus}

        assert flexible == {"Human", "Half-Elf", "Half-Orc"}

    def test_modifiers_with_choice(self) -> None:
        """Test a chosen ability is added only for flexible races."""
        human = get_reference_data().get_race("Human")
        dwarf = get_reference_data().get_race("Dwarf")

        assert human.modifiers_with_choice(Ability.WIS)[Ability.WIS] == 2
        assert human.modifiers_with_choice()[Ability.WIS] == 0
        assert dwarf.modifiers_with_choice(Ability.STR)[Ability.STR] == 0

    def test_small_races(self) -> None:
        """Test gnomes and halflings are Small."""
        small = {race.name for race in CORE_RACES if race.size == Size.SMALL}

        assert small == {"Gnome", "Halfling"}


class TestProgressions:
    """Tests for base attack and save formulas."""

    @pytest.mark.parametrize(
        ("progression", "level", "expected"),
        [
            (BABProgression.FULL, 1, 1),
            (BABProgression.FULL, 20, 20),
            (BABProgression.MEDIUM, 1, 0),
            (BABProgression.MEDIUM, 4, 3),
            (BABProgression.MEDIUM, 20, 15),
            (BABProgression.LOW, 1, 0),
            (BABProgression.LOW, 7, 3),
            (BABProgression.LOW, 20, 10),
        ],
    )
    def test_base_attack_bonus(self, progression: BABProgression, level: int, expected: int) -> None:
        """Test the three BAB tiers."""
        assert base_attack_bonus(progression, level) == expected

    @pytest.mark.parametrize(
        ("progression", "level", "expected"),
        [
            (SaveProgression.GOOD, 1, 2),
            (SaveProgression.GOOD, 20, 12),
            (SaveProgression.POOR, 1, 0),
            (SaveProgression.POOR, 3, 1),
            (SaveProgression.POOR, 20, 6),
            (SaveProgression.GOOD, 0, 0),
        ],
    )
    def test_base_save(self, progression: SaveProgression, level: int, expected: int) -> None:
        """Test the two save tiers."""
        assert base_save_bonus(progression, level) == expected
