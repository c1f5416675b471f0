"""
Projection & Safety Assessment

Three independent reads on where an athlete stands:

    projection  linear extrapolation of daily drift + session loss
    pace        current weight vs. today's target (ahead / on-track / behind)
    safety      how risky the remaining cut is (safe .. danger)

Pace and safety are computed separately and may disagree: an athlete can
be behind today's target and still be safe.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

from core.cut_config import cut_config
from services.weight_cut.constants import (
    CAUTION_DELTA_LBS,
    CRITICAL_DAYS_THRESHOLD,
    CUT_SCORE_SLEEP_NIGHTS,
    DANGER_DELTA_24H_LBS,
    DANGER_DELTA_48H_LBS,
    LogType,
    MAX_SAFE_TOTAL_CUT_PERCENT,
    Pace,
    Phase,
    Protocol,
    SafetyLevel,
    WARNING_DELTA_24H_LBS,
    WARNING_DELTA_48H_LBS,
)
from services.weight_cut.cut_score import CutScore, CutScoreInput, compute_cut_score
from services.weight_cut.drift_analytics import DriftMetrics, compute_drift_and_sweat_rates, sort_logs
from services.weight_cut.models import AthleteProfile, DailyTrackingRecord, WeightLogEntry
from services.weight_cut.protocol_table import get_protocol, is_water_loading_day, water_load_bonus
from services.weight_cut.target_calculator import (
    WeightTarget,
    compute_hydration_target,
    compute_macro_targets,
    compute_target_weight,
    days_until_weigh_in,
    resolve_today,
)
from services.weight_cut.phase_classifier import classify_phase

logger = logging.getLogger(__name__)

_LEVEL_ORDER = [SafetyLevel.SAFE, SafetyLevel.CAUTION, SafetyLevel.WARNING, SafetyLevel.DANGER]
_MAINTENANCE_ONLY = frozenset({Protocol.SPAR})


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class SafetyAssessment:
    level: SafetyLevel
    message: str
    detail: Optional[str] = None


@dataclass
class CutStatus:
    """Everything the coaching prompt needs about the current cut."""

    date: date
    days_until: int
    phase: Phase
    current_weight: Optional[float]
    target: WeightTarget
    drift: DriftMetrics
    projected_weight: Optional[float]
    projected_over_class: Optional[float]
    pace: Optional[Pace]
    safety: Optional[SafetyAssessment]
    cut_score: Optional[CutScore] = None   # None on and after weigh-in day


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------


def project_weigh_in_weight(
    current_weight: Optional[float],
    rates: Union[DriftMetrics, dict, None],
    days_remaining: int,
) -> Optional[float]:
    """
    current - (overnight + session) x days remaining.

    A missing rate counts as 0. Past weigh-in, no further loss is projected.
    Returns None when there is no weight to project from.
    """
    if current_weight is None:
        return None

    if isinstance(rates, dict):
        overnight, session = rates.get("overnight"), rates.get("session")
    elif rates is not None:
        overnight, session = rates.overnight, rates.session
    else:
        overnight = session = None

    daily_loss = (overnight or 0) + (session or 0)
    return current_weight - daily_loss * max(0, days_remaining)


# ---------------------------------------------------------------------------
# Pace
# ---------------------------------------------------------------------------


def classify_pace(
    current_weight: Optional[float],
    target_weight: float,
    days_until: int,
    target_weight_class: Optional[float] = None,
    protocol: Union[Protocol, str, None] = None,
    tolerance: Optional[float] = None,
) -> Optional[Pace]:
    """
    Compare current weight with today's target.

    The band is +/- on_track_buffer_lbs. On water-loading days it widens by
    the class's water-load bonus since carrying extra water is the plan.
    Without a protocol the band is never widened.
    """
    if current_weight is None:
        return None

    tol = cut_config.on_track_buffer_lbs if tolerance is None else tolerance
    if protocol is not None and is_water_loading_day(protocol, days_until):
        weight_class = target_weight_class if target_weight_class is not None else target_weight
        tol += water_load_bonus(weight_class)

    diff = current_weight - target_weight
    if diff < -tol:
        return Pace.AHEAD
    if diff > tol:
        return Pace.BEHIND
    return Pace.ON_TRACK


# ---------------------------------------------------------------------------
# Safety
# ---------------------------------------------------------------------------


def _at_least(assessment: SafetyAssessment, level: SafetyLevel, message: str, detail: str) -> SafetyAssessment:
    if _LEVEL_ORDER.index(assessment.level) >= _LEVEL_ORDER.index(level):
        return assessment
    return SafetyAssessment(level, message, detail)


def _is_maintenance_only(protocol) -> bool:
    if protocol is None:
        return False
    try:
        return Protocol(protocol) in _MAINTENANCE_ONLY
    except ValueError:
        return False


def assess_safety(
    current_weight: float,
    target_weight: float,
    days_remaining: int,
    protocol: Union[Protocol, str, None] = None,
) -> SafetyAssessment:
    """
    Classify the remaining cut into safe / caution / warning / danger.

    Absolute-delta thresholds tighten inside the final 48 and 24 hours.
    Separately, a cut of more than MAX_SAFE_TOTAL_CUT_PERCENT of the
    target is at least a warning, however far out.
    """
    if _is_maintenance_only(protocol):
        return SafetyAssessment(SafetyLevel.SAFE, "Nutrition tracking mode")

    delta = current_weight - target_weight

    if delta <= 0:
        return SafetyAssessment(
            SafetyLevel.SAFE,
            "On target",
            "Consider rehydrating slightly" if delta < -2 else None,
        )

    if days_remaining < 0:
        return SafetyAssessment(SafetyLevel.SAFE, "Weigh-in complete", "Focus on recovery.")

    if days_remaining <= 1:
        if delta > DANGER_DELTA_24H_LBS:
            result = SafetyAssessment(
                SafetyLevel.DANGER,
                "Extreme cut required",
                f"{delta:.1f} lbs in <24h is dangerous. Consider moving up a weight class.",
            )
        elif delta > WARNING_DELTA_24H_LBS:
            result = SafetyAssessment(
                SafetyLevel.WARNING, "Aggressive cut needed", "Water cut only. No food until after weigh-in."
            )
        else:
            result = SafetyAssessment(
                SafetyLevel.CAUTION, "Final push", "Sip water only. Stay warm to maintain sweat."
            )
    elif days_remaining <= CRITICAL_DAYS_THRESHOLD:
        if delta > DANGER_DELTA_48H_LBS:
            result = SafetyAssessment(
                SafetyLevel.DANGER,
                "Behind schedule",
                f"{delta:.1f} lbs with {days_remaining} days is risky. Extra workouts critical.",
            )
        elif delta > WARNING_DELTA_48H_LBS:
            result = SafetyAssessment(
                SafetyLevel.WARNING, "Tight timeline", "Limit sodium. Extra cardio recommended."
            )
        else:
            result = SafetyAssessment(SafetyLevel.CAUTION, "On pace", "Stay disciplined with nutrition.")
    elif delta > CAUTION_DELTA_LBS:
        result = SafetyAssessment(
            SafetyLevel.CAUTION, "Significant weight to lose", "Stay consistent with daily targets."
        )
    else:
        result = SafetyAssessment(SafetyLevel.SAFE, "On track")

    if target_weight > 0:
        percent_over = delta / target_weight * 100
        if percent_over > MAX_SAFE_TOTAL_CUT_PERCENT:
            result = _at_least(
                result,
                SafetyLevel.WARNING,
                "Large cut planned",
                f"{percent_over:.1f}% cut is aggressive. Monitor energy levels.",
            )

    return result


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def latest_weight(logs: Iterable[WeightLogEntry]) -> Optional[float]:
    """Most recent morning/check-in weight, else the most recent of any type."""
    ordered = sort_logs(logs)
    if not ordered:
        return None
    for entry in reversed(ordered):
        if entry.log_type in (LogType.MORNING, LogType.CHECK_IN):
            return entry.weight
    return ordered[-1].weight


def recent_sleep_hours(logs: Iterable[WeightLogEntry], nights: int = CUT_SCORE_SLEEP_NIGHTS):
    """Reported sleep from morning readings, newest first."""
    hours = [
        entry.sleep_hours
        for entry in reversed(sort_logs(logs))
        if entry.log_type == LogType.MORNING and entry.sleep_hours is not None and entry.sleep_hours > 0
    ]
    return hours[:nights]


def cut_score_input(
    profile: AthleteProfile,
    day: date,
    logs: Iterable[WeightLogEntry],
    drift: DriftMetrics,
    current_weight: Optional[float],
    projected_weight: Optional[float],
    tracking: Optional[DailyTrackingRecord] = None,
) -> CutScoreInput:
    """
    Cut score readings from the log and today's tracking record.

    Food servings only count for portion protocols, where the target is
    a slice count. A tracking record for another date is ignored.
    """
    days = days_until_weigh_in(profile, day)
    gross = None
    if drift.overnight is not None or drift.session is not None:
        gross = (drift.overnight or 0) + (drift.session or 0)

    inp = CutScoreInput(
        target_weight=profile.target_weight_class,
        days_remaining=days,
        projected_weight=projected_weight,
        current_weight=current_weight,
        gross_daily_loss=gross,
        recent_sleep_hours=recent_sleep_hours(logs),
        avg_overnight_drift=drift.overnight,
    )

    if tracking is not None and tracking.date == day:
        slices = compute_macro_targets(profile, day).slices
        inp.water_consumed_oz = tracking.water_consumed_oz
        inp.water_target_oz = compute_hydration_target(profile, day).ounces
        if slices is not None:
            inp.food_servings_target = slices.protein + slices.carb + slices.veg + slices.fruit + slices.fat
            inp.food_servings_logged = (
                tracking.protein_slices
                + tracking.carb_slices
                + tracking.veg_slices
                + tracking.fruit_slices
                + tracking.fat_slices
            )

    return inp


def build_cut_status(
    profile: AthleteProfile,
    logs: Iterable[WeightLogEntry] = (),
    today: Optional[date] = None,
    tracking: Optional[DailyTrackingRecord] = None,
) -> CutStatus:
    """
    Drift, projection, pace, safety and cut score resolved against one date.

    The latest logged weight wins over the profile's stored weight.
    """
    logs = list(logs)
    day = resolve_today(profile, today)
    days = days_until_weigh_in(profile, day)
    protocol = get_protocol(profile.protocol).protocol

    drift = compute_drift_and_sweat_rates(logs, today=day)
    current = latest_weight(logs)
    if current is None:
        current = profile.current_weight

    target = compute_target_weight(profile, day)
    projected = project_weigh_in_weight(current, drift, days)

    pace = classify_pace(current, target.target, days, profile.target_weight_class, protocol)
    safety = assess_safety(current, target.target, days, protocol) if current is not None else None

    cut_score = None
    if days > 0:
        inp = cut_score_input(profile, day, logs, drift, current, projected, tracking)
        cut_score = compute_cut_score(inp)

    logger.debug(
        "Cut status for %s: %d days out, current=%s target=%s projected=%s",
        profile.name, days, current, target.target, projected,
    )

    return CutStatus(
        date=day,
        days_until=days,
        phase=classify_phase(days, protocol),
        current_weight=current,
        target=target,
        drift=drift,
        projected_weight=projected,
        projected_over_class=None if projected is None else projected - profile.target_weight_class,
        pace=pace,
        safety=safety,
        cut_score=cut_score,
    )
