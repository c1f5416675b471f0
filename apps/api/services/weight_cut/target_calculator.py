"""
Target Calculator

Today's prescriptive targets for an athlete: weight, hydration and macros.

Every calculation is driven by one number, days until weigh-in, looked up
against the active protocol's bucket table. "Today" is always explicit:
callers pass it, or the profile's simulated date stands in, and only the
outermost caller falls back to the real clock.

Weight:     round(class x multiplier) (+ water-load bonus on days 3-5, P1/P2)
Hydration:  oz/lb x current weight, capped at max_daily_water_oz
Macros:     bucket gram ranges, or SPAR slices for portion protocols,
            cut back on days 1-3 when the athlete is well over class
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from core.cut_config import cut_config
from services.units import oz_to_gallons, round_half_up, round_to_int
from services.weight_cut.constants import (
    FluidType,
    MACRO_REDUCTION_DAY_MULTIPLIER,
    MACRO_REDUCTION_DAYS,
    MACRO_REDUCTION_TIERS,
    NutritionMode,
    Phase,
    Protocol,
    WATER_LOAD_BONUS_MIN,
)
from services.weight_cut.models import AthleteProfile
from services.weight_cut.phase_classifier import classify_phase, protocol_phase_label
from services.weight_cut.protocol_table import (
    MacroRule,
    get_protocol,
    is_water_loading_day,
    lookup_bucket,
    water_load_bonus,
)
from services.weight_cut.spar_calculator import SliceTargets, slice_targets_for_profile

logger = logging.getLogger(__name__)

SIPS_ONLY_MAX_OZ_PER_LB = 0.1


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class WeightTarget:
    base: float
    target: float
    water_load_bonus: int = 0
    range_min: Optional[float] = None   # only set while water loading
    range_max: Optional[float] = None
    multiplier: float = 1.0


@dataclass
class HydrationTarget:
    amount: str          # "1.25 gal" | "Sips only" | "Rehydrate"
    ounces: int
    fluid_type: FluidType
    oz_per_lb: float
    sodium_mg: int
    sodium_label: str
    note: str


@dataclass
class MacroTarget:
    carbs_min: int
    carbs_max: int
    protein_min: int
    protein_max: int
    ratio: str
    warning: Optional[str] = None
    slices: Optional[SliceTargets] = None


@dataclass
class DailyTargets:
    date: date
    days_until: int
    protocol: Protocol
    phase: Phase
    weight: WeightTarget
    hydration: HydrationTarget
    macros: MacroTarget
    notes: str
    focus: str           # protocol food-focus label, e.g. "MAX FAT BURN"


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_today(profile: AthleteProfile, today: Optional[date] = None) -> date:
    """Explicit today, then the profile's simulated date, then the real clock."""
    if today is not None:
        return _as_date(today)
    if profile.simulated_date is not None:
        return _as_date(profile.simulated_date)
    return date.today()


def days_until_weigh_in(profile: AthleteProfile, today: Optional[date] = None) -> int:
    """Whole calendar days from today to weigh-in (negative after)."""
    return (_as_date(profile.weigh_in_date) - resolve_today(profile, today)).days


# ---------------------------------------------------------------------------
# Weight
# ---------------------------------------------------------------------------


def compute_target_weight(profile: AthleteProfile, today: Optional[date] = None) -> WeightTarget:
    """
    Target scale weight for the day.

    Protocols with a water-load bonus carry extra lbs on days 3-5: the
    target is base + bonus and the acceptable range is base+2 .. base+bonus.
    """
    days = days_until_weigh_in(profile, today)
    definition = get_protocol(profile.protocol)
    bucket = lookup_bucket(definition.protocol, days)

    base = round_half_up(profile.target_weight_class * bucket.weight_multiplier, definition.weight_precision)

    if is_water_loading_day(definition.protocol, days):
        bonus = water_load_bonus(profile.target_weight_class)
        return WeightTarget(
            base=base,
            target=base + bonus,
            water_load_bonus=bonus,
            range_min=base + WATER_LOAD_BONUS_MIN,
            range_max=base + bonus,
            multiplier=bucket.weight_multiplier,
        )

    return WeightTarget(base=base, target=base, multiplier=bucket.weight_multiplier)


# ---------------------------------------------------------------------------
# Hydration
# ---------------------------------------------------------------------------


def format_water_amount(ounces: float, oz_per_lb: float, fluid_type: FluidType) -> str:
    if fluid_type == FluidType.REHYDRATE:
        return "Rehydrate"
    if oz_per_lb <= SIPS_ONLY_MAX_OZ_PER_LB:
        return "Sips only"
    # Nearest quarter gallon
    gallons = round_half_up(oz_to_gallons(ounces) * 4) / 4
    return f"{gallons} gal"


def compute_hydration_target(
    profile: AthleteProfile,
    today: Optional[date] = None,
    max_daily_oz: Optional[int] = None,
) -> HydrationTarget:
    """
    Water target for the day. Ounces never exceed the daily cap,
    whatever the athlete's weight or protocol.
    """
    cap = cut_config.max_daily_water_oz if max_daily_oz is None else max_daily_oz
    days = days_until_weigh_in(profile, today)
    rule = lookup_bucket(profile.protocol, days).hydration

    ounces = min(round_to_int(rule.oz_per_lb * profile.current_weight), cap)
    ounces = max(ounces, 0)

    return HydrationTarget(
        amount=format_water_amount(ounces, rule.oz_per_lb, rule.fluid_type),
        ounces=ounces,
        fluid_type=rule.fluid_type,
        oz_per_lb=rule.oz_per_lb,
        sodium_mg=rule.sodium_mg,
        sodium_label=rule.sodium_label,
        note=rule.note,
    )


# ---------------------------------------------------------------------------
# Macros
# ---------------------------------------------------------------------------


def _protein_range(rule: MacroRule, target_weight_class: float) -> Tuple[int, int]:
    if rule.protein_per_lb is not None:
        grams = round_to_int(rule.protein_per_lb * target_weight_class)
        return grams, grams
    return int(rule.protein_min), int(rule.protein_max)


def reduction_tier(current_weight: float, target_weight_class: float, days: int):
    """
    Restriction tier for days 1-3, or None.

    Effective % over = % over class x day multiplier (1.5 / 1.2 / 1.0).
    """
    first, last = MACRO_REDUCTION_DAYS
    if not first <= days <= last or not current_weight or target_weight_class <= 0:
        return None

    pct_over = (current_weight - target_weight_class) / target_weight_class * 100
    effective = pct_over * MACRO_REDUCTION_DAY_MULTIPLIER[days]

    for tier in MACRO_REDUCTION_TIERS:
        if effective >= tier[0]:
            return tier
    return None


def _apply_reduction(target: MacroTarget, tier) -> MacroTarget:
    _, carb_min_f, carb_max_f, protein_min_f, protein_max_f, warning = tier
    carbs_min = round_to_int(target.carbs_min * carb_min_f)
    carbs_max = round_to_int(target.carbs_max * carb_max_f)
    protein_min = round_to_int(target.protein_min * protein_min_f)
    protein_max = round_to_int(target.protein_max * protein_max_f)
    slices = None

    if target.slices is not None:
        # Whole slices come first; the gram ceiling is what they add up to
        slices = target.slices.scaled(protein_max_f, carb_max_f)
        carbs_max = round_to_int(slices.carb_grams)
        protein_max = round_to_int(slices.protein_grams)
        carbs_min = min(carbs_min, carbs_max)
        protein_min = min(protein_min, protein_max)

    return MacroTarget(
        carbs_min=carbs_min,
        carbs_max=carbs_max,
        protein_min=protein_min,
        protein_max=protein_max,
        ratio=target.ratio,
        warning=warning,
        slices=slices,
    )


def compute_macro_targets(profile: AthleteProfile, today: Optional[date] = None) -> MacroTarget:
    """
    Carb/protein targets for the day.

    Gram protocols read the bucket's MacroRule (g/lb protein is applied to
    the weight class). Portion protocols derive grams from slice targets.
    """
    days = days_until_weigh_in(profile, today)
    definition = get_protocol(profile.protocol)
    bucket = lookup_bucket(definition.protocol, days)

    if definition.nutrition_mode == NutritionMode.SLICES or bucket.macros is None:
        slices = slice_targets_for_profile(
            profile, days, competition=definition.protocol == Protocol.SPAR_COMPETITION
        )
        carbs = round_to_int(slices.carb_grams)
        protein = round_to_int(slices.protein_grams)
        target = MacroTarget(
            carbs_min=carbs,
            carbs_max=carbs,
            protein_min=protein,
            protein_max=protein,
            ratio=definition.macro_ratio,
            slices=slices,
        )
    else:
        rule = bucket.macros
        protein_min, protein_max = _protein_range(rule, profile.target_weight_class)
        target = MacroTarget(
            carbs_min=int(rule.carbs_min),
            carbs_max=int(rule.carbs_max),
            protein_min=protein_min,
            protein_max=protein_max,
            ratio=rule.ratio,
        )

    tier = reduction_tier(profile.current_weight, profile.target_weight_class, days)
    if tier is not None:
        logger.info(
            "Macro reduction '%s' at %d days out (%.1f lbs vs class %.0f)",
            tier[-1], days, profile.current_weight, profile.target_weight_class,
        )
        target = _apply_reduction(target, tier)

    return target


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


def compute_targets(profile: AthleteProfile, today: Optional[date] = None) -> DailyTargets:
    """All of today's targets, resolved against one fixed date."""
    day = resolve_today(profile, today)
    days = days_until_weigh_in(profile, day)
    definition = get_protocol(profile.protocol)

    return DailyTargets(
        date=day,
        days_until=days,
        protocol=definition.protocol,
        phase=classify_phase(days, definition.protocol),
        weight=compute_target_weight(profile, day),
        hydration=compute_hydration_target(profile, day),
        macros=compute_macro_targets(profile, day),
        notes=lookup_bucket(definition.protocol, days).notes,
        focus=protocol_phase_label(definition.protocol, days).label,
    )
