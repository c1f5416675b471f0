"""
Protocol recommendation, checkpoint ranges and post-weigh-in rehydration.
"""

from dataclasses import dataclass
from typing import Optional

from services.units import round_half_up, round_to_int
from services.weight_cut.constants import (
    EXTREME_CUT_TRIGGER_PERCENT,
    Protocol,
    REHYDRATION_FLUID_OZ_PER_LB,
    REHYDRATION_GLYCOGEN_NOTE,
    REHYDRATION_SODIUM_MG_PER_LB,
    WALK_AROUND_MULTIPLIER,
)

# Checkpoint bands as fractions above the weight class
WALK_AROUND_RANGE = (1.06, 1.07)
MID_WEEK_RANGE = (1.04, 1.05)
CRITICAL_CHECKPOINT_RANGE = (1.02, 1.03)


@dataclass
class ProtocolRecommendation:
    protocol: Protocol
    reason: str
    warning: Optional[str] = None


@dataclass
class RehydrationPlan:
    fluid_oz_min: int
    fluid_oz_max: int
    sodium_mg_min: int
    sodium_mg_max: int
    glycogen: str


@dataclass
class CheckpointRange:
    label: str
    min_weight: float
    max_weight: float


def recommend_protocol(current_weight: float, target_weight_class: float) -> ProtocolRecommendation:
    """
    Suggest a protocol from how far the athlete sits above the class.

        under class          -> Build
        > 12% over           -> Extreme Cut (2-4 weeks max)
        above walk-around    -> Rapid Cut
        otherwise            -> Hold Weight
    """
    walk_around = target_weight_class * WALK_AROUND_MULTIPLIER
    lbs_over_class = current_weight - target_weight_class
    lbs_over_walk_around = current_weight - walk_around
    percent_over = lbs_over_class / target_weight_class * 100 if target_weight_class > 0 else 0.0

    if current_weight < target_weight_class:
        return ProtocolRecommendation(
            Protocol.BUILD,
            f"You're {abs(lbs_over_class):.1f} lbs under your target class. "
            "Build Phase will help you gain muscle safely.",
        )

    if percent_over > EXTREME_CUT_TRIGGER_PERCENT:
        return ProtocolRecommendation(
            Protocol.EXTREME_CUT,
            f"You're {percent_over:.1f}% over your competition weight "
            f"({lbs_over_walk_around:.1f} lbs above walk-around). "
            "Extreme Cut Phase will burn fat without sacrificing performance.",
            warning="Run 2-4 weeks max, then transition to Rapid Cut or Hold Weight.",
        )

    if current_weight > walk_around:
        return ProtocolRecommendation(
            Protocol.RAPID_CUT,
            f"You're {lbs_over_walk_around:.1f} lbs above your walk-around weight "
            f"({walk_around:.1f} lbs). Rapid Cut Phase manages your weekly cut while preserving performance.",
        )

    return ProtocolRecommendation(
        Protocol.HOLD_WEIGHT,
        "You're at your walk-around weight. Hold Weight Phase keeps you competition-ready while training hard.",
    )


def rehydration_plan(lbs_lost: float) -> RehydrationPlan:
    """Fluids and sodium to take back after weigh-in, per lb cut."""
    lbs = max(0.0, lbs_lost or 0.0)
    fluid_min, fluid_max = REHYDRATION_FLUID_OZ_PER_LB
    sodium_min, sodium_max = REHYDRATION_SODIUM_MG_PER_LB
    return RehydrationPlan(
        fluid_oz_min=round_to_int(lbs * fluid_min),
        fluid_oz_max=round_to_int(lbs * fluid_max),
        sodium_mg_min=round_to_int(lbs * sodium_min),
        sodium_mg_max=round_to_int(lbs * sodium_max),
        glycogen=REHYDRATION_GLYCOGEN_NOTE if lbs > 0 else "",
    )


def checkpoints(target_weight_class: float):
    return [
        CheckpointRange(
            label,
            round_half_up(target_weight_class * low),
            round_half_up(target_weight_class * high),
        )
        for label, (low, high) in (
            ("Walk-around", WALK_AROUND_RANGE),
            ("Mid-week", MID_WEEK_RANGE),
            ("Critical checkpoint", CRITICAL_CHECKPOINT_RANGE),
        )
    ]
