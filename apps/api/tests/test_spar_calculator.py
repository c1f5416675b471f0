"""
Tests for the SPAR portion calculator

Covers the BMR formulas, the competition calorie adjuster and
slice rounding/minimums.
"""
import pytest

from services.weight_cut.spar_calculator import (
    DEFAULT_ACTIVITY_MULTIPLIER,
    SliceTargets,
    activity_multiplier,
    calculate_bmr,
    calculate_cunningham_bmr,
    calculate_slices,
    competition_calorie_adjustment,
    goal_config_key,
    slice_targets_for_profile,
)
from services.weight_cut.constants import Protocol
from tests.weight_cut_helpers import make_profile


class TestBMR:
    """Mifflin-St Jeor and Cunningham"""

    def test_mifflin_male(self):
        # 74.84 kg, 172.72 cm, 17 y
        assert calculate_bmr(165, 68, 17, "male") == pytest.approx(1747.93, abs=0.01)

    def test_mifflin_female(self):
        assert calculate_bmr(165, 68, 17, "female") == pytest.approx(1581.93, abs=0.01)

    def test_sex_offset(self):
        assert calculate_bmr(165, 68, 17, "male") - calculate_bmr(165, 68, 17, "female") == pytest.approx(166)

    def test_cunningham(self):
        assert calculate_cunningham_bmr(165, 15) == pytest.approx(1899.56, abs=0.01)

    def test_body_fat_switches_formula(self):
        slices = calculate_slices(165, 68, 17, body_fat_percent=15)
        assert slices.bmr == 1900

    def test_invalid_body_fat_ignored(self):
        slices = calculate_slices(165, 68, 17, body_fat_percent=0)
        assert slices.bmr == 1748


class TestActivityAndGoal:

    def test_matrix_lookup(self):
        assert activity_multiplier("7+", "on_feet_most") == 1.725
        assert activity_multiplier("1-2", "mostly_sitting") == 1.2

    def test_unknown_activity_defaults(self):
        assert activity_multiplier("daily", "couch") == DEFAULT_ACTIVITY_MULTIPLIER

    @pytest.mark.parametrize("goal,intensity,priority,key", [
        ("lose", None, None, "lose_aggressive"),
        ("lose", "lean", None, "lose_lean"),
        ("gain", "lean", None, "gain_lean"),
        ("maintain", None, None, "maintain_general"),
        ("maintain", None, "performance", "maintain_performance"),
    ])
    def test_goal_key(self, goal, intensity, priority, key):
        assert goal_config_key(goal, intensity, priority) == key


class TestCompetitionAdjustment:
    """Calorie adjustment for SPAR Competition (165 class, walk-around 176.55)"""

    def test_training_at_walk_around(self):
        result = competition_calorie_adjustment(170, 165, 10)
        assert result.calorie_adjustment == 0
        assert result.spar_goal == "maintain"

    def test_training_over_walk_around_clamped(self):
        """8.45 lbs over x 150 = 1267 cal, clamped to 750"""
        result = competition_calorie_adjustment(185, 165, 10)
        assert result.calorie_adjustment == -750
        assert result.goal_intensity == "aggressive"

    def test_water_load_at_walk_around(self):
        result = competition_calorie_adjustment(170, 165, 4)
        assert result.calorie_adjustment == -250
        assert result.goal_intensity == "lean"

    def test_water_load_over_walk_around(self):
        """3.45 lbs over x 150 = ~518 cal"""
        result = competition_calorie_adjustment(180, 165, 4)
        assert -520 < result.calorie_adjustment < -515
        assert result.goal_intensity == "aggressive"
        assert "over walk-around" in result.reason

    def test_slightly_over_hits_minimum_deficit(self):
        result = competition_calorie_adjustment(177, 165, 10)
        assert result.calorie_adjustment == -250

    @pytest.mark.parametrize("days,adjustment", [(2, -500), (1, -500), (0, 250), (-1, 500), (-4, 500)])
    def test_fixed_periods(self, days, adjustment):
        assert competition_calorie_adjustment(180, 165, days).calorie_adjustment == adjustment


class TestSliceTargets:

    def test_fixed_veg_and_fruit(self):
        slices = calculate_slices(165, 68, 17)
        assert slices.veg == 5
        assert slices.fruit == 2

    def test_minimums_applied(self):
        """Tiny athlete on a huge deficit: calorie floor and slice minimums hold"""
        slices = calculate_slices(50, 60, 17, sex="female", calorie_adjustment=-2000)
        assert slices.adjusted_tdee == 1200
        assert slices.protein == 2
        assert slices.carb >= 1
        assert slices.fat >= 1

    def test_goal_adjustment_recorded(self):
        slices = calculate_slices(165, 68, 17, goal="lose", goal_intensity="lean")
        assert slices.calorie_adjustment == -250
        assert slices.protein_per_lb == 0.85

    def test_override_beats_goal(self):
        slices = calculate_slices(165, 68, 17, goal="gain", calorie_adjustment=-100)
        assert slices.calorie_adjustment == -100

    def test_whole_slices(self):
        slices = calculate_slices(171.3, 69.5, 16)
        for value in (slices.protein, slices.carb, slices.fat):
            assert isinstance(value, int)

    def test_gram_and_calorie_totals(self):
        slices = SliceTargets(protein=4, carb=5, veg=5, fruit=2, fat=3)
        assert slices.protein_grams == 100
        assert slices.carb_grams == 220          # 130 + 40 + 50
        assert slices.total_calories == 1758

    def test_scaled(self):
        scaled = SliceTargets(protein=4, carb=5, veg=5, fruit=2, fat=3).scaled(0.5, 0.7)
        assert (scaled.protein, scaled.carb, scaled.veg, scaled.fruit, scaled.fat) == (2, 4, 4, 1, 3)

    def test_scaled_to_nothing(self):
        scaled = SliceTargets(protein=4, carb=5, veg=5, fruit=2, fat=3).scaled(0, 0)
        assert scaled.total_calories == 0


class TestProfileSlices:

    def test_competition_overrides_goal(self):
        profile = make_profile(days_out=2, protocol=Protocol.SPAR_COMPETITION, spar_goal="gain")
        slices = slice_targets_for_profile(profile, 2, competition=True)
        assert slices.calorie_adjustment == -500

    def test_plain_spar_uses_profile_goal(self):
        profile = make_profile(days_out=2, protocol=Protocol.SPAR, spar_goal="gain", goal_intensity="lean")
        slices = slice_targets_for_profile(profile, 2)
        assert slices.calorie_adjustment == 250
