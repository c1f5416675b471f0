"""
Cut Score

A 0-100 read on whether an athlete is tracking to make weight and to
wrestle well once they get there. Three pillars:

    weight     projected gap to target (walk-around gap 6+ days out)
    recovery   sleep, overnight drift, feel rating, wearable data
    protocol   food servings and water against today's targets

Weight always scores. Recovery and protocol only count when they have
data; otherwise their share moves to weight (CUT_SCORE_WEIGHTS). Inside
the final 5 days a projection over target caps the total, so good sleep
and clean eating cannot hide a missed weight.

Meant for the days before weigh-in, not weigh-in day itself.
"""

import logging
from dataclasses import dataclass, field
from statistics import mean, pstdev
from typing import List, Optional, Tuple

from services.units import round_to_int
from services.weight_cut.constants import (
    CUT_SCORE_FLOOR,
    CUT_SCORE_LABELS,
    CUT_SCORE_PROJECTION_CAPS,
    CUT_SCORE_PROJECTION_GAPS,
    CUT_SCORE_SLEEP_NIGHTS,
    CUT_SCORE_WEIGHTS,
    DataTier,
    ScoreZone,
    WALK_AROUND_MULTIPLIER,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0

# Beyond this many days out the cut has not started; score walk-around weight
TRAINING_PHASE_AFTER_DAYS = 5

# Before this hour, low intake is expected
MIDDAY_HOUR = 12


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class CutScoreInput:
    target_weight: float
    days_remaining: int
    projected_weight: Optional[float] = None
    current_weight: Optional[float] = None
    gross_daily_loss: Optional[float] = None     # overnight drift + practice loss

    # Recovery
    recent_sleep_hours: List[float] = field(default_factory=list)   # newest first
    avg_overnight_drift: Optional[float] = None
    feel_rating: Optional[int] = None            # 1 (terrible) .. 5 (great)
    bed_time: Optional[str] = None               # "HH:MM"
    wake_time: Optional[str] = None
    hrv: Optional[float] = None                  # ms
    resting_heart_rate: Optional[float] = None   # bpm
    sleep_score: Optional[float] = None          # 0-100
    strain_score: Optional[float] = None         # 0-100
    recovery_score: Optional[float] = None       # 0-100

    # Protocol
    food_servings_logged: float = 0
    food_servings_target: float = 0
    water_consumed_oz: float = 0
    water_target_oz: float = 0
    correct_food_types: Optional[bool] = None
    meal_timing_score: Optional[float] = None    # 0-100
    macro_compliance_score: Optional[float] = None

    @property
    def in_training_phase(self) -> bool:
        return self.days_remaining > TRAINING_PHASE_AFTER_DAYS and self.current_weight is not None

    @property
    def walk_around_gap(self) -> Optional[float]:
        if self.current_weight is None:
            return None
        return self.current_weight - self.target_weight * WALK_AROUND_MULTIPLIER

    @property
    def sleep_nights(self) -> List[float]:
        return list(self.recent_sleep_hours[:CUT_SCORE_SLEEP_NIGHTS])


@dataclass
class PillarScore:
    raw: float           # 0-100 before weighting
    weighted: float
    weight: float        # share of the total, 0-1
    has_data: bool
    tier: DataTier


@dataclass
class CutScore:
    score: int
    label: str
    zone: ScoreZone
    rationale: str
    weight: PillarScore
    recovery: PillarScore
    protocol: PillarScore


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


# ---------------------------------------------------------------------------
# Data tiers and weights
# ---------------------------------------------------------------------------


def recovery_tier(inp: CutScoreInput) -> DataTier:
    if any(v is not None for v in (inp.hrv, inp.resting_heart_rate, inp.sleep_score, inp.recovery_score)):
        return DataTier.PREMIUM
    if any(v is not None for v in (inp.bed_time, inp.wake_time, inp.feel_rating)):
        return DataTier.ENHANCED
    if inp.recent_sleep_hours or inp.avg_overnight_drift is not None:
        return DataTier.BASIC
    return DataTier.NONE


def protocol_tier(inp: CutScoreInput) -> DataTier:
    if inp.macro_compliance_score is not None:
        return DataTier.PREMIUM
    if inp.correct_food_types is not None or inp.meal_timing_score is not None:
        return DataTier.ENHANCED
    if inp.food_servings_logged > 0 or inp.water_consumed_oz > 0:
        return DataTier.BASIC
    return DataTier.NONE


def pillar_weights(recovery: DataTier, protocol: DataTier) -> Tuple[float, float, float]:
    """(weight, recovery, protocol) shares summing to 1."""
    return CUT_SCORE_WEIGHTS[(recovery != DataTier.NONE, protocol != DataTier.NONE)]


# ---------------------------------------------------------------------------
# Pillars
# ---------------------------------------------------------------------------


def _walk_around_score(gap: float) -> float:
    if gap <= 0:
        return 85
    if gap < 2:
        return 75
    if gap < 4:
        return 60
    if gap < 6:
        return 45
    return 30


def _capacity_score(used: float) -> float:
    if used < 0.5:
        return 85
    if used < 0.75:
        return 65
    if used < 1.0:
        return 45
    if used < 1.25:
        return 25
    return 10


def weight_pillar(inp: CutScoreInput) -> float:
    """
    Training phase (6+ days out): distance above walk-around weight, since
    being well over class is expected before the cut starts.

    Competition week: projected gap to target, or with no projection the
    current gap measured against remaining loss capacity.
    """
    if inp.in_training_phase:
        return _walk_around_score(inp.walk_around_gap)

    if inp.projected_weight is not None:
        gap = inp.projected_weight - inp.target_weight
        if gap <= 0:
            return 100
        for limit, score in CUT_SCORE_PROJECTION_GAPS:
            if gap < limit:
                return score
        return CUT_SCORE_FLOOR

    if inp.current_weight is None:
        return NEUTRAL_SCORE

    gap = inp.current_weight - inp.target_weight
    if gap <= 0:
        return 100

    if inp.gross_daily_loss and inp.gross_daily_loss > 0 and inp.days_remaining > 0:
        return _capacity_score(gap / (inp.gross_daily_loss * inp.days_remaining))

    if gap < 2:
        return 65
    if gap < 5:
        return 40
    return 15


def recovery_pillar(inp: CutScoreInput, tier: DataTier) -> float:
    """Starts neutral at 50; each available signal pushes it up or down."""
    score = NEUTRAL_SCORE

    nights = inp.sleep_nights
    if nights:
        avg = mean(nights)
        if avg >= 8:
            score += 20
        elif avg >= 7:
            score += 10
        elif avg >= 6:
            pass
        elif avg >= 5:
            score -= 10
        else:
            score -= 20

        if len(nights) >= 3:
            spread = pstdev(nights)
            if spread < 0.5:
                score += 5
            elif spread > 1.5:
                score -= 5

    drift = inp.avg_overnight_drift
    if drift is not None:
        if drift >= 1.5:
            score += 10
        elif drift >= 1.0:
            score += 5
        elif drift < 0.5:
            score -= 10   # possible dehydration

    if tier in (DataTier.ENHANCED, DataTier.PREMIUM) and inp.feel_rating is not None:
        if inp.feel_rating >= 4:
            score += 10
        elif inp.feel_rating == 2:
            score -= 10
        elif inp.feel_rating < 2:
            score -= 15

    if tier == DataTier.PREMIUM:
        if inp.recovery_score is not None:
            # Wearable composite outweighs everything above
            score = score * 0.3 + inp.recovery_score * 0.7
        else:
            if inp.hrv is not None:
                if inp.hrv >= 70:
                    score += 10
                elif inp.hrv >= 50:
                    score += 5
                elif inp.hrv < 30:
                    score -= 10
            if inp.resting_heart_rate is not None:
                if inp.resting_heart_rate <= 55:
                    score += 5
                elif inp.resting_heart_rate >= 80:
                    score -= 10
                elif inp.resting_heart_rate >= 70:
                    score -= 5
            if inp.sleep_score is not None:
                if inp.sleep_score >= 80:
                    score += 10
                elif inp.sleep_score >= 60:
                    score += 5
                elif inp.sleep_score < 40:
                    score -= 10

        if inp.strain_score is not None:
            if inp.strain_score > 80:
                score -= 10
            elif inp.strain_score > 60:
                score -= 5

    return _clamp(score)


def _compliance_points(consumed: float, target: float) -> float:
    if target <= 0 or consumed <= 0:
        return 0
    ratio = consumed / target
    if 0.9 <= ratio <= 1.1:
        return 20
    if 0.75 <= ratio <= 1.25:
        return 10
    if ratio < 0.5:
        return -15
    if ratio > 1.5:
        return -10
    return 0


def protocol_pillar(inp: CutScoreInput, tier: DataTier) -> float:
    """Food servings and water against target, +/-10 each for timing and macros."""
    score = NEUTRAL_SCORE
    score += _compliance_points(inp.food_servings_logged, inp.food_servings_target)
    score += _compliance_points(inp.water_consumed_oz, inp.water_target_oz)

    if tier in (DataTier.ENHANCED, DataTier.PREMIUM):
        if inp.correct_food_types is True:
            score += 10
        elif inp.correct_food_types is False:
            score -= 10
        if inp.meal_timing_score is not None:
            score += (inp.meal_timing_score - 50) * 0.2

    if tier == DataTier.PREMIUM and inp.macro_compliance_score is not None:
        score += (inp.macro_compliance_score - 50) * 0.2

    return _clamp(score)


# ---------------------------------------------------------------------------
# Labels and rationale
# ---------------------------------------------------------------------------


def score_label(score: float) -> Tuple[str, ScoreZone]:
    for minimum, label, zone in CUT_SCORE_LABELS:
        if score >= minimum:
            return label, zone
    return CUT_SCORE_LABELS[-1][1], CUT_SCORE_LABELS[-1][2]


def _weight_rationale(inp: CutScoreInput) -> str:
    if inp.in_training_phase:
        gap = inp.walk_around_gap
        if gap <= 2:
            return "Holding near walk-around weight."
        if gap <= 5:
            return f"{gap:.1f} lbs above walk-around. Monitor intake."
        return f"{gap:.1f} lbs above walk-around. Consider adjusting."
    if inp.projected_weight is not None and inp.projected_weight > inp.target_weight:
        return f"Projected {inp.projected_weight - inp.target_weight:.1f} lbs over target at weigh-in."
    if inp.current_weight is not None and inp.current_weight > inp.target_weight:
        return f"{inp.current_weight - inp.target_weight:.1f} lbs over target. Keep tracking."
    return "On track to make weight."


def _recovery_rationale(inp: CutScoreInput) -> str:
    nights = inp.sleep_nights
    if nights:
        avg = mean(nights)
        if avg < 6:
            return f"Averaging {avg:.1f} hrs sleep. Rest is critical for performance."
        if avg < 7:
            return f"Averaging {avg:.1f} hrs sleep. Aim for 7-8 hrs."
    if inp.avg_overnight_drift is not None and inp.avg_overnight_drift < 0.5:
        return "Low overnight drift. Could indicate dehydration."
    if inp.feel_rating is not None and inp.feel_rating <= 2:
        return "Not feeling great. Recovery matters for performance."
    if inp.recovery_score is not None and inp.recovery_score < 40:
        return f"Recovery score is {inp.recovery_score:.0f}%. Body needs rest."
    return "Recovery looks good. Keep it up."


def _protocol_rationale(inp: CutScoreInput, hour: Optional[int]) -> str:
    # Unknown time of day is read as afternoon
    past_midday = hour is None or hour >= MIDDAY_HOUR
    if past_midday and inp.water_target_oz > 0 and inp.water_consumed_oz < inp.water_target_oz * 0.5:
        return "Water intake is well below target for today."
    if past_midday and inp.food_servings_target > 0 and inp.food_servings_logged < inp.food_servings_target * 0.5:
        return "Food intake is well below target. Follow the plan."
    if inp.food_servings_target > 0 and inp.food_servings_logged > inp.food_servings_target * 1.5:
        return "Eating significantly over target for today."
    if not past_midday:
        return "Morning. Start fueling when ready."
    return "Stay on the nutrition plan."


def _rationale(inp: CutScoreInput, pillars, hour: Optional[int]) -> str:
    """Explain the weakest pillar that has data."""
    active = sorted(
        ((name, pillar) for name, pillar in pillars if pillar.has_data),
        key=lambda item: item[1].raw,
    )
    if not active:
        return "Log your weight to get started."

    weakest = active[0][0]
    if weakest == "weight":
        return _weight_rationale(inp)
    if weakest == "recovery":
        return _recovery_rationale(inp)
    return _protocol_rationale(inp, hour)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _projection_cap(inp: CutScoreInput) -> Optional[float]:
    if inp.days_remaining > TRAINING_PHASE_AFTER_DAYS or inp.projected_weight is None:
        return None
    gap = inp.projected_weight - inp.target_weight
    if gap <= 0:
        return None
    for above, cap in CUT_SCORE_PROJECTION_CAPS:
        if gap > above:
            return cap
    return None


def compute_cut_score(inp: CutScoreInput, hour: Optional[int] = None) -> CutScore:
    """
    Weighted blend of the three pillars, 0-100.

    Args:
        inp: Weight, recovery and protocol readings for today
        hour: Local hour of day (0-23) for intake messages; None reads as afternoon

    Returns:
        CutScore with per-pillar breakdown, label, zone and a one-line rationale
    """
    r_tier = recovery_tier(inp)
    p_tier = protocol_tier(inp)
    w_share, r_share, p_share = pillar_weights(r_tier, p_tier)

    weight_raw = weight_pillar(inp)
    recovery_raw = recovery_pillar(inp, r_tier) if r_tier != DataTier.NONE else NEUTRAL_SCORE
    protocol_raw = protocol_pillar(inp, p_tier) if p_tier != DataTier.NONE else NEUTRAL_SCORE

    weight = PillarScore(weight_raw, weight_raw * w_share, w_share, True, DataTier.BASIC)
    recovery = PillarScore(recovery_raw, recovery_raw * r_share, r_share, r_tier != DataTier.NONE, r_tier)
    protocol = PillarScore(protocol_raw, protocol_raw * p_share, p_share, p_tier != DataTier.NONE, p_tier)

    total = weight.weighted + recovery.weighted + protocol.weighted
    cap = _projection_cap(inp)
    if cap is not None and total > cap:
        logger.debug("Cut score %.1f capped at %d: projected over target", total, cap)
        total = cap

    score = round_to_int(_clamp(total))
    label, zone = score_label(score)

    return CutScore(
        score=score,
        label=label,
        zone=zone,
        rationale=_rationale(inp, [("weight", weight), ("recovery", recovery), ("protocol", protocol)], hour),
        weight=weight,
        recovery=recovery,
        protocol=protocol,
    )
