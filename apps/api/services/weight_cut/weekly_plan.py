"""
Weekly Plan Generator

Seven consecutive calendar days of targets. Inside the competition week
(5 days out through the day after weigh-in) the window is pinned to that
week; otherwise it starts today.

Each day is computed from its own days-until-weigh-in, never from its
weekday. Weekday names are display labels only.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from services.weight_cut.constants import LogType, Pace, Phase
from services.weight_cut.drift_analytics import sort_logs
from services.weight_cut.models import AthleteProfile, WeightLogEntry
from services.weight_cut.projection import classify_pace
from services.weight_cut.target_calculator import (
    HydrationTarget,
    MacroTarget,
    WeightTarget,
    compute_targets,
    days_until_weigh_in,
    resolve_today,
)

logger = logging.getLogger(__name__)

PLAN_LENGTH_DAYS = 7
COMPETITION_WEEK_START = 5   # days out
COMPETITION_WEEK_END = -1


@dataclass
class DayPlan:
    date: date
    day_label: str
    days_until: int
    phase: Phase
    weight: WeightTarget
    hydration: HydrationTarget
    macros: MacroTarget
    notes: str
    focus: str
    is_today: bool = False
    is_tomorrow: bool = False
    is_critical_checkpoint: bool = False
    morning_weight: Optional[float] = None
    pace: Optional[Pace] = None


def plan_window_start(profile: AthleteProfile, today: date) -> date:
    days = days_until_weigh_in(profile, today)
    if COMPETITION_WEEK_END <= days <= COMPETITION_WEEK_START:
        return profile.weigh_in_date - timedelta(days=COMPETITION_WEEK_START)
    return today


def _morning_weights(logs: Iterable[WeightLogEntry]) -> Dict[date, float]:
    """Last morning reading per calendar date."""
    weights = {}
    for entry in sort_logs(logs):
        if entry.log_type == LogType.MORNING:
            weights[entry.timestamp.date()] = entry.weight
    return weights


def build_weekly_plan(
    profile: AthleteProfile,
    logs: Iterable[WeightLogEntry] = (),
    today: Optional[date] = None,
) -> List[DayPlan]:
    """
    Build the 7-day plan in calendar order.

    Returns the same plan for the same inputs; nothing is cached or stored.
    """
    today = resolve_today(profile, today)
    start = plan_window_start(profile, today)
    tomorrow = today + timedelta(days=1)
    mornings = _morning_weights(logs)

    plan = []
    for offset in range(PLAN_LENGTH_DAYS):
        day = start + timedelta(days=offset)
        targets = compute_targets(profile, day)
        morning = mornings.get(day)

        plan.append(DayPlan(
            date=day,
            day_label=day.strftime("%a"),
            days_until=targets.days_until,
            phase=targets.phase,
            weight=targets.weight,
            hydration=targets.hydration,
            macros=targets.macros,
            notes=targets.notes,
            focus=targets.focus,
            is_today=day == today,
            is_tomorrow=day == tomorrow,
            is_critical_checkpoint=targets.days_until == 1,
            morning_weight=morning,
            pace=classify_pace(
                morning,
                targets.weight.target,
                targets.days_until,
                profile.target_weight_class,
                targets.protocol,
            ),
        ))

    logger.debug("Weekly plan for %s starts %s (today %s)", profile.name, start, today)
    return plan
