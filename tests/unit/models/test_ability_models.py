"""Tests for ability score models and bonus stacking."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from charsheet.models.abilities import AbilityScore, AbilityScores, Bonus, ability_modifier, stack_bonuses
from charsheet.models.enums import Ability, BonusType


class TestAbilityModifier:
    """Tests for the ability_modifier function."""

    def test_modifier_at_10(self) -> None:
        """Score of 10 gives modifier of 0."""
        assert ability_modifier(10) == 0

    def test_modifier_at_1(self) -> None:
        """Score of 1 gives modifier of -5."""
        assert ability_modifier(1) == -5

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, -5), (1, -5), (2, -4), (3, -4), (7, -2), (8, -1), (9, -1),
            (10, 0), (11, 0), (12, 1), (17, 3), (18, 4), (25, 7), (30, 10),
        ],
    )
    def test_modifier_table(self, score: int, expected: int) -> None:
        """Test modifiers round down."""
        assert ability_modifier(score) == expected


class TestStackBonuses:
    """Tests for the stacking rule."""

    def test_untyped_sum(self) -> None:
        """Untyped bonuses add together."""
        assert stack_bonuses([Bonus(value=1), Bonus(value=2)]) == 3

    def test_same_type_highest(self) -> None:
        """Same-typed bonuses do not stack."""
        bonuses = [
            Bonus(type=BonusType.ENHANCEMENT, value=2),
            Bonus(type=BonusType.ENHANCEMENT, value=4),
        ]

        assert stack_bonuses(bonuses) == 4

    def test_different_types_add(self) -> None:
        """Different types each contribute their best."""
        bonuses = [
            Bonus(type=BonusType.ENHANCEMENT, value=2),
            Bonus(type=BonusType.MORALE, value=1),
            Bonus(type=BonusType.MORALE, value=2),
            Bonus(value=1),
        ]

        assert stack_bonuses(bonuses) == 5

    def test_inactive_ignored(self) -> None:
        """Inactive bonuses count for nothing."""
        bonuses = [
            Bonus(type=BonusType.LUCK, value=3, active=False),
            Bonus(type=BonusType.LUCK, value=1),
            Bonus(value=5, active=False),
        ]

        assert stack_bonuses(bonuses) == 1

    def test_empty(self) -> None:
        """No bonuses total 0."""
        assert stack_bonuses([]) == 0


class TestAbilityScore:
    """Tests for AbilityScore."""

    def test_defaults(self) -> None:
        """Test a default score is a plain 10."""
        score = AbilityScore()

        assert (score.base, score.total, score.modifier) == (10, 10, 0)
        assert BonusType.ENHANCEMENT in score.bonuses

    def test_recalculate(self) -> None:
        """Test every input feeds the total."""
        score = AbilityScore(base=14, racial=2, inherent=1)
        score.add_bonus(Bonus(type=BonusType.ENHANCEMENT, value=2))
        score.add_bonus(Bonus(type=BonusType.ENHANCEMENT, value=4))
        score.add_bonus(Bonus(value=1))
        score.add_bonus(Bonus(value=2))

        assert score.recalculate() is score
        assert score.total == 14 + 2 + 1 + 4 + 3
        assert score.modifier == 7

    def test_recalculate_idempotent(self) -> None:
        """Test recalculating twice gives the same values."""
        score = AbilityScore(base=12, racial=-2, damage=3)
        first = score.recalculate().model_dump()

        assert score.recalculate().model_dump() == first
        assert (score.total, score.temp_total, score.temp_modifier) == (10, 7, -2)

    def test_negative_damage_rejected(self) -> None:
        """Test damage cannot be negative."""
        with pytest.raises(ValidationError):
            AbilityScore(damage=-1)

    def test_assignment_validated(self) -> None:
        """Test assignments are validated."""
        score = AbilityScore()

        with pytest.raises(ValidationError):
            score.drain = -2


class TestAbilityScores:
    """Tests for AbilityScores."""

    def test_lookup(self) -> None:
        """Test lookup by enum or value."""
        scores = AbilityScores(strength=AbilityScore(base=15))

        assert scores[Ability.STR].base == 15
        assert scores["strength"].base == 15

    def test_items_order(self) -> None:
        """Test iteration runs STR to CHA."""
        assert [ability for ability, _ in AbilityScores().items()] == list(Ability)

    def test_bases(self) -> None:
        """Test the base score map."""
        bases = AbilityScores(charisma=AbilityScore(base=8)).bases()

        assert bases[Ability.CHA] == 8
        assert bases[Ability.WIS] == 10

    def test_ability_names(self) -> None:
        """Test abbreviations and full names."""
        assert Ability.CON.abbreviation == "CON"
        assert Ability.CON.full_name == "Constitution"
