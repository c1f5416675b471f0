"""
Tests for projection, pace classification and safety assessment.
"""
import pytest

from services.weight_cut.constants import LogType, Pace, Phase, Protocol, SafetyLevel
from services.weight_cut.drift_analytics import DriftMetrics
from services.weight_cut.projection import (
    assess_safety,
    build_cut_status,
    classify_pace,
    latest_weight,
    project_weigh_in_weight,
)
from tests.weight_cut_helpers import TODAY, at, make_log, make_profile


class TestProjection:
    """current - (overnight + session) x days"""

    def test_dict_rates(self):
        assert project_weigh_in_weight(170, {"overnight": 1.0, "session": 2.0}, 3) == pytest.approx(161)

    def test_metrics_rates(self):
        assert project_weigh_in_weight(170, DriftMetrics(overnight=1.0), 2) == pytest.approx(168)

    def test_missing_rates_count_as_zero(self):
        assert project_weigh_in_weight(170, None, 4) == 170
        assert project_weigh_in_weight(170, {"overnight": None, "session": 1.5}, 2) == pytest.approx(167)

    def test_past_weigh_in(self):
        assert project_weigh_in_weight(170, {"overnight": 1.0, "session": 2.0}, -2) == 170

    def test_no_weight(self):
        assert project_weigh_in_weight(None, {"overnight": 1.0}, 3) is None


class TestPace:

    @pytest.mark.parametrize("current,pace", [
        (170.0, Pace.AHEAD),
        (170.6, Pace.ON_TRACK),
        (172.0, Pace.ON_TRACK),
        (173.5, Pace.ON_TRACK),
        (174.0, Pace.BEHIND),
    ])
    def test_band(self, current, pace):
        assert classify_pace(current, 172, 2, 165) == pace

    def test_water_loading_widens_band(self):
        """Day 5, 165 class: 1.5 + 3 lb bonus"""
        assert classify_pace(176, 180, 5, 165, Protocol.RAPID_CUT) == Pace.ON_TRACK
        assert classify_pace(184, 180, 5, 165, Protocol.RAPID_CUT) == Pace.ON_TRACK
        assert classify_pace(185, 180, 5, 165, Protocol.RAPID_CUT) == Pace.BEHIND

    def test_no_widening_without_protocol(self):
        assert classify_pace(176, 180, 5, 165) == Pace.AHEAD
        assert classify_pace(182, 180, 5, 165) == Pace.BEHIND

    def test_no_widening_without_bonus(self):
        assert classify_pace(176, 180, 5, 165, Protocol.HOLD_WEIGHT) == Pace.AHEAD

    def test_explicit_tolerance(self):
        assert classify_pace(173, 172, 2, 165, tolerance=0.5) == Pace.BEHIND

    def test_no_weight(self):
        assert classify_pace(None, 172, 2) is None


class TestSafety:

    @pytest.mark.parametrize("current,level,message", [
        (169.0, SafetyLevel.DANGER, "Extreme cut required"),
        (167.5, SafetyLevel.WARNING, "Aggressive cut needed"),
        (166.0, SafetyLevel.CAUTION, "Final push"),
    ])
    def test_final_24_hours(self, current, level, message):
        result = assess_safety(current, 165, 1)
        assert result.level == level
        assert result.message == message

    @pytest.mark.parametrize("current,level", [
        (178.0, SafetyLevel.DANGER),
        (176.0, SafetyLevel.WARNING),
        (174.0, SafetyLevel.CAUTION),
    ])
    def test_final_48_hours(self, current, level):
        assert assess_safety(current, 172, 2).level == level

    def test_far_out_large_delta(self):
        result = assess_safety(186, 180, 5)
        assert result.level == SafetyLevel.CAUTION
        assert result.message == "Significant weight to lose"

    def test_far_out_small_delta(self):
        assert assess_safety(182, 180, 5).level == SafetyLevel.SAFE

    def test_large_percentage_is_warning_far_out(self):
        """12 lbs on a 130 target is 9.2%"""
        result = assess_safety(142, 130, 5)
        assert result.level == SafetyLevel.WARNING
        assert result.message == "Large cut planned"
        assert "9.2%" in result.detail

    def test_large_percentage_does_not_lower_danger(self):
        assert assess_safety(142, 130, 1).level == SafetyLevel.DANGER

    def test_on_target(self):
        assert assess_safety(164, 165, 1).level == SafetyLevel.SAFE
        assert assess_safety(165, 165, 1).message == "On target"

    def test_well_under_suggests_rehydrating(self):
        assert "rehydrat" in assess_safety(160, 165, 1).detail

    def test_after_weigh_in(self):
        result = assess_safety(175, 165, -1)
        assert result.level == SafetyLevel.SAFE
        assert result.message == "Weigh-in complete"

    def test_spar_is_tracking_only(self):
        result = assess_safety(190, 165, 1, Protocol.SPAR)
        assert result.level == SafetyLevel.SAFE
        assert result.message == "Nutrition tracking mode"

    def test_unknown_protocol_assessed(self):
        assert assess_safety(169, 165, 1, "42").level == SafetyLevel.DANGER


class TestCutStatus:

    def test_from_logs(self, profile, overnight_pair):
        status = build_cut_status(profile, overnight_pair, TODAY)
        assert status.current_weight == 169.0
        assert status.days_until == 5
        assert status.phase == Phase.LOAD
        assert status.drift.overnight == pytest.approx(1.0)
        assert status.projected_weight == pytest.approx(164.0)
        assert status.projected_over_class == pytest.approx(-1.0)
        assert status.pace == Pace.AHEAD
        assert status.safety.level == SafetyLevel.SAFE

    def test_without_logs_uses_profile_weight(self, profile):
        status = build_cut_status(profile, [], TODAY)
        assert status.current_weight == 172
        assert status.projected_weight == 172
        assert status.drift.overnight is None

    def test_latest_weight_prefers_morning(self):
        logs = [
            make_log(at(TODAY, 6), 169.0, LogType.MORNING),
            make_log(at(TODAY, 17), 167.0, LogType.POST_SESSION),
        ]
        assert latest_weight(logs) == 169.0

    def test_latest_weight_falls_back_to_any(self):
        logs = [make_log(at(TODAY, 17), 167.0, LogType.POST_SESSION)]
        assert latest_weight(logs) == 167.0
        assert latest_weight([]) is None

    def test_behind_but_safe_can_disagree(self):
        """Pace and safety are independent reads"""
        profile = make_profile(days_out=10, current_weight=182)
        status = build_cut_status(profile, [], TODAY)
        assert status.pace == Pace.BEHIND
        assert status.safety.level == SafetyLevel.SAFE
