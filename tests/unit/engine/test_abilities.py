"""Tests for point buy and ability score construction."""

from __future__ import annotations

import pytest

from charsheet.core.config import clear_settings_cache
from charsheet.core.constants import POINT_BUY_COSTS
from charsheet.engine import validation
from charsheet.engine.abilities import (
    calculate_ability_modifier,
    calculate_point_cost,
    create_ability_scores,
    create_ability_scores_from_rolls,
    create_default_ability_score,
    get_point_buy_presets,
    validate_custom_point_buy,
    validate_point_buy,
)
from charsheet.engine.dice import DiceRoller
from charsheet.models.enums import Ability, AbilityScoreMethod


def _scores(str_: int = 10, dex: int = 10, con: int = 10, int_: int = 10, wis: int = 10, cha: int = 10) -> dict[Ability, int]:
    return {
        Ability.STR: str_,
        Ability.DEX: dex,
        Ability.CON: con,
        Ability.INT: int_,
        Ability.WIS: wis,
        Ability.CHA: cha,
    }


class TestPointCost:
    """Tests for the point-buy cost table."""

    def test_table_values(self) -> None:
        """Test a few known costs."""
        assert calculate_point_cost(7) == -4
        assert calculate_point_cost(10) == 0
        assert calculate_point_cost(14) == 5
        assert calculate_point_cost(18) == 17

    def test_strictly_increasing(self) -> None:
        """Test cost rises with every score from 7 to 18."""
        costs = [calculate_point_cost(score) for score in range(7, 19)]

        assert all(a < b for a, b in zip(costs, costs[1:]))

    def test_out_of_domain(self) -> None:
        """Test scores outside 7-18 have no cost."""
        with pytest.raises(KeyError):
            calculate_point_cost(19)


class TestValidatePointBuy:
    """Tests for the point-buy validator."""

    def test_exact_budget(self) -> None:
        """Test a fully spent budget."""
        result = validate_point_buy(_scores(16, 12, 14, 10, 12, 8), 17)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_over_budget(self) -> None:
        """Test spending more than the budget."""
        result = validate_point_buy(_scores(18, 18, 10, 10, 10, 10), 20)

        assert not result.is_valid
        assert "Point buy exceeds limit: 34/20 points used" in result.errors

    def test_each_range_error_reported(self) -> None:
        """Test each out-of-range score gets its own error."""
        result = validate_point_buy(_scores(str_=6, cha=19), 20)

        assert "STR score 6 is outside valid range (7-18)" in result.errors
        assert "CHA score 19 is outside valid range (7-18)" in result.errors

    def test_unused_points_warning(self) -> None:
        """Test a warning when more than two points are left."""
        result = validate_point_buy(_scores(), 20)

        assert result.is_valid
        assert result.warnings == ["20 unused points remaining"]

    @pytest.mark.parametrize("budget", [-1, 101])
    def test_budget_out_of_range(self, budget: int) -> None:
        """Test budgets outside 0-100 are refused."""
        result = validate_point_buy(_scores(), budget)

        assert not result.is_valid
        assert f"Invalid point buy total: {budget}" in result.errors

    def test_default_budget(self) -> None:
        """Test the budget falls back to the configured default of 20."""
        result = validate_point_buy(_scores(16, 12, 14, 10, 12, 8))

        assert result.is_valid
        assert result.warnings == ["3 unused points remaining"]

    def test_default_budget_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test both validators read the configured budget."""
        monkeypatch.setenv("CHARSHEET_RULES_DEFAULT_POINT_BUY", "15")
        clear_settings_cache()
        scores = _scores(16, 12, 14, 10, 12, 8)

        result = validate_point_buy(scores)

        assert result.errors == ["Point buy exceeds limit: 17/15 points used"]
        assert not validation.validate_point_buy(scores).is_valid

    def test_small_leftover_no_warning(self) -> None:
        """Test two leftover points do not warn."""
        result = validate_point_buy(_scores(16, 13, 14, 10, 12, 8), 20)

        assert result.warnings == []

    @pytest.mark.parametrize(
        "scores",
        [
            _scores(16, 12, 14, 10, 12, 8),
            _scores(18, 18, 10, 10, 10, 10),
            _scores(str_=6),
            _scores(),
            _scores(7, 7, 7, 7, 7, 18),
        ],
    )
    @pytest.mark.parametrize("budget", [-1, 0, 15, 20, 25, 100, 101])
    def test_agrees_with_validation_service(self, scores: dict[Ability, int], budget: int) -> None:
        """Test both point-buy validators agree on validity."""
        assert (
            validate_point_buy(scores, budget).is_valid
            == validation.validate_point_buy(scores, budget).is_valid
        )


class TestCustomPointBuy:
    """Tests for custom budget bounds."""

    @pytest.mark.parametrize("points", [15, 20, 30])
    def test_valid_without_warnings(self, points: int) -> None:
        """Test budgets inside the comfortable range."""
        result = validate_custom_point_buy(points)

        assert result.is_valid
        assert result.warnings == []

    def test_too_low(self) -> None:
        """Test budgets under the minimum."""
        assert validate_custom_point_buy(4).errors == ["Custom point buy too low: 4 (minimum: 5)"]

    def test_too_high(self) -> None:
        """Test budgets over the maximum."""
        assert not validate_custom_point_buy(51).is_valid

    def test_edge_warnings(self) -> None:
        """Test warnings for very low and very high budgets."""
        low = ["Very low point buy may result in weak characters"]
        high = ["Very high point buy may result in overpowered characters"]

        assert validate_custom_point_buy(5).warnings == low
        assert validate_custom_point_buy(10).warnings == low
        assert validate_custom_point_buy(40).warnings == high
        assert validate_custom_point_buy(50).warnings == high
        assert validate_custom_point_buy(5).is_valid
        assert validate_custom_point_buy(50).is_valid


class TestAbilityScoreConstruction:
    """Tests for score construction helpers."""

    @pytest.mark.parametrize(("score", "modifier"), [(1, -5), (8, -1), (9, -1), (10, 0), (15, 2), (18, 4), (25, 7)])
    def test_modifier_formula(self, score: int, modifier: int) -> None:
        """Test floor((score - 10) / 2)."""
        assert calculate_ability_modifier(score) == modifier

    def test_default_score(self) -> None:
        """Test a zero-initialized score."""
        score = create_default_ability_score(15)

        assert score.total == 15
        assert score.modifier == 2
        assert score.racial == score.damage == score.drain == 0
        assert all(bucket == [] for bucket in score.bonuses.values())

    def test_missing_abilities_default_to_ten(self) -> None:
        """Test absent abilities get a base of 10."""
        scores = create_ability_scores({Ability.STR: 17})

        assert scores.strength.total == 17
        assert scores.wisdom.base == 10

    def test_from_rolls(self, dice_roller: DiceRoller) -> None:
        """Test bases come from roll totals."""
        rolls = dice_roller.roll_all_abilities(AbilityScoreMethod.ROLL_3D6)
        scores = create_ability_scores_from_rolls(rolls)

        assert scores.bases() == {ability: roll.total for ability, roll in rolls.items()}

    def test_presets(self) -> None:
        """Test the campaign presets."""
        assert [(p.name, p.points) for p in get_point_buy_presets()] == [
            ("Low Fantasy", 15),
            ("Standard Fantasy", 20),
            ("High Fantasy", 25),
        ]

    def test_cost_table_covers_point_buy_range(self) -> None:
        """Test the cost table spans 7-18."""
        assert sorted(POINT_BUY_COSTS) == list(range(7, 19))
