"""
Tests for the weekly plan generator.

The plan is seven consecutive calendar days, each computed from its own
days-until-weigh-in.
"""
from datetime import timedelta

import pytest

from services.weight_cut.constants import LogType, Pace, Phase, Protocol
from services.weight_cut.target_calculator import compute_targets
from services.weight_cut.weekly_plan import build_weekly_plan, plan_window_start
from tests.weight_cut_helpers import TODAY, at, day_offset, make_log, make_profile


class TestCompetitionWeek:
    """Weigh-in 5 days out: the window is exactly the competition week"""

    def test_days_and_phases(self, profile):
        plan = build_weekly_plan(profile, today=TODAY)
        assert len(plan) == 7
        assert [d.days_until for d in plan] == [5, 4, 3, 2, 1, 0, -1]
        assert [d.phase for d in plan] == [
            Phase.LOAD, Phase.LOAD, Phase.LOAD,
            Phase.RESTRICT, Phase.CRITICAL, Phase.COMPETE, Phase.RECOVER,
        ]

    def test_calendar_order(self, profile):
        plan = build_weekly_plan(profile, today=TODAY)
        assert [d.date for d in plan] == [TODAY + timedelta(days=i) for i in range(7)]

    def test_flags(self, profile):
        plan = build_weekly_plan(profile, today=TODAY)
        assert [d.is_today for d in plan] == [True] + [False] * 6
        assert [d.is_tomorrow for d in plan] == [False, True] + [False] * 5
        assert [d.is_critical_checkpoint for d in plan].index(True) == 4
        assert sum(d.is_critical_checkpoint for d in plan) == 1

    def test_day_labels_are_weekday_names(self, profile):
        plan = build_weekly_plan(profile, today=TODAY)
        assert plan[0].day_label == "Mon"
        assert plan[6].day_label == "Sun"

    def test_each_day_matches_its_own_targets(self, profile):
        for day in build_weekly_plan(profile, today=TODAY):
            targets = compute_targets(profile, day.date)
            assert day.weight == targets.weight
            assert day.hydration == targets.hydration
            assert day.macros == targets.macros
            assert day.focus == targets.focus


class TestWindow:

    def test_pinned_mid_week(self):
        """2 days out: the window still starts 5 days before weigh-in"""
        profile = make_profile(days_out=2)
        assert plan_window_start(profile, TODAY) == day_offset(-3)
        plan = build_weekly_plan(profile, today=TODAY)
        assert plan[3].is_today
        assert plan[0].days_until == 5

    def test_day_after_weigh_in(self):
        profile = make_profile(days_out=-1)
        plan = build_weekly_plan(profile, today=TODAY)
        assert plan[6].is_today
        assert not any(d.is_tomorrow for d in plan)
        assert plan[6].phase == Phase.RECOVER

    def test_far_out_starts_today(self):
        profile = make_profile(days_out=10)
        plan = build_weekly_plan(profile, today=TODAY)
        assert plan[0].date == TODAY
        assert [d.days_until for d in plan] == [10, 9, 8, 7, 6, 5, 4]

    def test_long_after_weigh_in_starts_today(self):
        profile = make_profile(days_out=-3)
        plan = build_weekly_plan(profile, today=TODAY)
        assert plan[0].is_today
        assert all(d.phase == Phase.RECOVER for d in plan)

    def test_simulated_date(self):
        profile = make_profile(days_out=5, simulated_date=TODAY)
        plan = build_weekly_plan(profile)
        assert plan[0].date == TODAY
        assert plan[0].is_today

    @pytest.mark.parametrize("days_out", [-4, -1, 0, 3, 5, 6, 20])
    def test_always_seven_consecutive_days(self, days_out):
        plan = build_weekly_plan(make_profile(days_out=days_out), today=TODAY)
        assert len(plan) == 7
        for prev, nxt in zip(plan, plan[1:]):
            assert nxt.date - prev.date == timedelta(days=1)
            assert nxt.days_until == prev.days_until - 1


class TestMorningWeights:

    def test_pace_from_morning_log(self, profile):
        """176 vs 180 target on a load day: inside the widened 4.5 lb band"""
        logs = [
            make_log(at(TODAY, 6), 176.0, LogType.MORNING),
            make_log(at(day_offset(1), 6), 172.0, LogType.MORNING),
        ]
        plan = build_weekly_plan(profile, logs, today=TODAY)
        assert plan[0].morning_weight == 176.0
        assert plan[0].pace == Pace.ON_TRACK
        assert plan[1].pace == Pace.AHEAD
        assert plan[2].morning_weight is None
        assert plan[2].pace is None

    def test_last_morning_of_the_day_wins(self, profile):
        logs = [
            make_log(at(TODAY, 7), 175.0, LogType.MORNING),
            make_log(at(TODAY, 5), 177.0, LogType.MORNING),
        ]
        plan = build_weekly_plan(profile, logs, today=TODAY)
        assert plan[0].morning_weight == 175.0

    def test_other_log_types_ignored(self, profile):
        logs = [make_log(at(TODAY, 16), 170.0, LogType.POST_SESSION)]
        plan = build_weekly_plan(profile, logs, today=TODAY)
        assert plan[0].morning_weight is None


class TestDeterminism:

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_same_inputs_same_plan(self, protocol):
        profile = make_profile(days_out=3, protocol=protocol)
        assert build_weekly_plan(profile, today=TODAY) == build_weekly_plan(profile, today=TODAY)
