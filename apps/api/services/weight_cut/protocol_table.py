"""
Protocol Table

Static prescription data per protocol and per days-until-weigh-in bucket:
weight multiplier, hydration rule, macro rule and guidance note.

Every protocol's buckets must tile the whole integer axis exactly once.
validate_protocol_table() enforces that when this module is imported, so a
day count with no matching bucket cannot exist at runtime.

Usage:
    bucket = lookup_bucket("2", days_until=3)
    bucket.weight_multiplier   # 1.05
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from core.cut_config import cut_config
from core.exceptions import ProtocolTableError
from services.weight_cut.constants import (
    FluidType,
    NutritionMode,
    Protocol,
    WATER_LOAD_BONUS_TIERS,
    WATER_LOADING_DAYS,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HydrationRule:
    oz_per_lb: float
    fluid_type: FluidType
    sodium_mg: int
    sodium_label: str
    note: str


@dataclass(frozen=True)
class MacroRule:
    """
    Gram prescription for one bucket.

    Protein is either a fixed gram range or a g/lb rate applied to the
    weight class (protein_per_lb set, protein_min/max ignored).
    """
    carbs_min: float
    carbs_max: float
    protein_min: float = 0
    protein_max: float = 0
    protein_per_lb: Optional[float] = None
    ratio: str = "Maintenance"


@dataclass(frozen=True)
class ProtocolBucket:
    """Inclusive [min_days, max_days]; None means unbounded on that side."""
    min_days: Optional[int]
    max_days: Optional[int]
    weight_multiplier: float
    hydration: HydrationRule
    macros: Optional[MacroRule]   # None for portion-based protocols
    notes: str

    def contains(self, days: int) -> bool:
        if self.min_days is not None and days < self.min_days:
            return False
        if self.max_days is not None and days > self.max_days:
            return False
        return True


@dataclass(frozen=True)
class ProtocolDefinition:
    protocol: Protocol
    name: str
    short_name: str
    is_cutting: bool
    uses_water_load_bonus: bool
    nutrition_mode: NutritionMode
    macro_ratio: str
    buckets: Tuple[ProtocolBucket, ...]
    weight_precision: int = 0


# ---------------------------------------------------------------------------
# Shared schedules
# ---------------------------------------------------------------------------

RECOVER = (None, -1)
BEYOND_WEEK = (6, None)


def _day(n: int) -> Tuple[int, int]:
    return (n, n)


_SALT_LOAD = "High — salt-load"

# Water-load schedule (keyed by the bucket range it belongs to)
WATER_SCHEDULE: Dict[Tuple[Optional[int], Optional[int]], HydrationRule] = {
    RECOVER: HydrationRule(0.75, FluidType.REGULAR, 3000, "Normal — replenish", "Rehydrate fully, drink to thirst"),
    _day(0): HydrationRule(0.0, FluidType.REHYDRATE, 0, "Reintroduce post weigh-in", "Nothing until weigh-in, then rehydrate"),
    _day(1): HydrationRule(0.08, FluidType.SIP_ONLY, 1000, "Minimal — under 1,000mg", "Sips only. Do not gulp. Monitor drift."),
    _day(2): HydrationRule(0.3, FluidType.DISTILLED, 2500, "Normal — stop adding salt", "Switch to distilled. Flush phase."),
    _day(3): HydrationRule(1.5, FluidType.REGULAR, 5000, _SALT_LOAD, "Peak hydration"),
    _day(4): HydrationRule(1.5, FluidType.REGULAR, 5000, _SALT_LOAD, "Increase diuresis"),
    _day(5): HydrationRule(1.2, FluidType.REGULAR, 5000, _SALT_LOAD, "Start the water load"),
    BEYOND_WEEK: HydrationRule(1.2, FluidType.REGULAR, 3000, "Normal", "Baseline hydration"),
}

STEADY_HYDRATION = HydrationRule(0.75, FluidType.REGULAR, 3000, "Normal", "No water manipulation — hydrate normally")

FULL_RECOVERY = MacroRule(300, 450, protein_per_lb=1.4, ratio="Full Recovery")
MAINTENANCE_MACROS = MacroRule(300, 450, 75, 100, ratio="Maintenance")


def _water_bucket(days_range, multiplier, macros, notes) -> ProtocolBucket:
    return ProtocolBucket(
        min_days=days_range[0],
        max_days=days_range[1],
        weight_multiplier=multiplier,
        hydration=WATER_SCHEDULE[days_range],
        macros=macros,
        notes=notes,
    )


def _steady_bucket(days_range, multiplier, macros, notes) -> ProtocolBucket:
    return ProtocolBucket(
        min_days=days_range[0],
        max_days=days_range[1],
        weight_multiplier=multiplier,
        hydration=STEADY_HYDRATION,
        macros=macros,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

# Protocols 1, 2 and 6 share the competition-week descent
_CUT_MULTIPLIERS = {
    RECOVER: 1.07,
    _day(0): 1.00,
    _day(1): 1.03,
    _day(2): 1.04,
    _day(3): 1.05,
    _day(4): 1.06,
    _day(5): 1.07,
    BEYOND_WEEK: 1.07,
}

_EXTREME_CUT_BUCKETS = (
    _water_bucket(RECOVER, _CUT_MULTIPLIERS[RECOVER], FULL_RECOVERY,
                  "Eat everything — full recovery refeed"),
    _water_bucket(_day(0), 1.00, MacroRule(150, 300, protein_per_lb=1.0, ratio="Low Carb / Protein Refeed"),
                  "Post-weigh-in refuel. Fast carbs between matches."),
    _water_bucket(_day(1), 1.03, MacroRule(200, 300, protein_per_lb=0.2, ratio="Fructose + MCT (Evening Protein)"),
                  "Fructose + evening protein only"),
    _water_bucket(_day(2), 1.04, MacroRule(250, 400, 0, 0, ratio="Fructose Only (60:40)"),
                  "Fructose only — zero protein for FGF21 activation"),
    _water_bucket(_day(3), 1.05, MacroRule(250, 400, 0, 0, ratio="Fructose Only (60:40)"),
                  "Fructose only — zero protein for FGF21 activation"),
    _water_bucket(_day(4), 1.06, MacroRule(250, 400, 0, 0, ratio="Fructose Only (60:40)"),
                  "Fructose only — zero protein for FGF21 activation"),
    _water_bucket(_day(5), 1.07, MacroRule(250, 400, 0, 0, ratio="Fructose Only (60:40)"),
                  "Fructose only — zero protein for FGF21 activation"),
    _water_bucket(BEYOND_WEEK, 1.07, MAINTENANCE_MACROS,
                  "Moderate protein + fructose carbs"),
)

_RAPID_CUT_BUCKETS = (
    _water_bucket(RECOVER, 1.07, FULL_RECOVERY,
                  "Eat everything — full recovery refeed"),
    _water_bucket(_day(0), 1.00, MacroRule(200, 400, protein_per_lb=0.5, ratio="Fast Carbs (Between Matches)"),
                  "Post-weigh-in refuel. Fast carbs between matches."),
    _water_bucket(_day(1), 1.03, MacroRule(300, 400, 60, 60, ratio="Glucose Heavy (Switch to Starch)"),
                  "Switch to glucose/starch. Collagen + seafood protein. Zero fiber."),
    _water_bucket(_day(2), 1.04, MacroRule(300, 400, 60, 60, ratio="Glucose Heavy (Switch to Starch)"),
                  "Switch to glucose/starch. Collagen + seafood protein. Zero fiber."),
    _water_bucket(_day(3), 1.05, MacroRule(325, 450, 25, 25, ratio="Fructose Heavy (60:40)"),
                  "Fructose heavy — collagen + leucine at dinner"),
    _water_bucket(_day(4), 1.06, MacroRule(325, 450, 0, 0, ratio="Fructose Heavy (60:40)"),
                  "Fructose only — zero protein for maximum fat loss"),
    _water_bucket(_day(5), 1.07, MacroRule(325, 450, 0, 0, ratio="Fructose Heavy (60:40)"),
                  "Fructose only — zero protein for maximum fat loss"),
    _water_bucket(BEYOND_WEEK, 1.07, MAINTENANCE_MACROS,
                  "Moderate protein + fructose carbs"),
)

_HOLD_WEIGHT_BUCKETS = (
    _water_bucket(RECOVER, 1.05, FULL_RECOVERY,
                  "Eat everything — full recovery refeed"),
    _water_bucket(_day(0), 1.00, MacroRule(200, 400, protein_per_lb=0.5, ratio="Competition Day"),
                  "Post-weigh-in refuel. Fast carbs between matches."),
    _water_bucket(_day(1), 1.03, MacroRule(300, 450, 100, 100, ratio="Performance (Glucose)"),
                  "Glucose emphasis — full protein for performance"),
    _water_bucket(_day(2), 1.04, MacroRule(300, 450, 100, 100, ratio="Performance (Glucose)"),
                  "Glucose emphasis — full protein for performance"),
    _water_bucket(_day(3), 1.05, MacroRule(300, 450, 75, 75, ratio="Mixed Fructose/Glucose"),
                  "Mixed fructose/glucose — moderate protein"),
    _water_bucket(_day(4), 1.05, MacroRule(300, 450, 75, 75, ratio="Mixed Fructose/Glucose"),
                  "Mixed fructose/glucose — moderate protein"),
    _water_bucket(_day(5), 1.05, MacroRule(300, 450, 25, 25, ratio="Fructose Heavy"),
                  "Fructose heavy — brief FGF21 activation"),
    _water_bucket(BEYOND_WEEK, 1.05, MacroRule(300, 450, 100, 100, ratio="Maintenance"),
                  "Full protein + balanced carbs"),
)

_BUILD_BUCKETS = (
    _steady_bucket(RECOVER, 1.00, MacroRule(300, 450, protein_per_lb=1.6, ratio="Full Recovery (Max Protein)"),
                   "Eat everything — full recovery refeed"),
    _steady_bucket(_day(0), 1.00, MacroRule(200, 400, protein_per_lb=0.8, ratio="Competition Day"),
                   "Post-weigh-in refuel. Fast carbs between matches."),
    _steady_bucket((1, 4), 1.00, MacroRule(350, 600, 125, 125, ratio="Glucose Emphasis"),
                   "Glucose/starch carbs — high protein for growth"),
    _steady_bucket(_day(5), 1.00, MacroRule(350, 600, 100, 100, ratio="Balanced Carbs"),
                   "Balanced carbs — moderate protein"),
    _steady_bucket(BEYOND_WEEK, 1.00, MacroRule(350, 600, 125, 150, ratio="Build Phase"),
                   "Off-season building — high protein, high carbs"),
)

_SPAR_BUCKETS = (
    _steady_bucket((None, None), 1.00, None,
                   "All macros — hit your portion targets"),
)

_SPAR_COMPETITION_BUCKETS = (
    _water_bucket(RECOVER, 1.07, None, "Recovery — full refeed to restore glycogen and energy"),
    _water_bucket(_day(0), 1.00, None, "Competition day — refuel for performance"),
    _water_bucket(_day(1), 1.03, None, "Light portions, restrict water"),
    _water_bucket(_day(2), 1.04, None, "Light portions, restrict water"),
    _water_bucket(_day(3), 1.05, None, "Balanced portions, peak hydration"),
    _water_bucket(_day(4), 1.06, None, "Balanced portions, peak hydration"),
    _water_bucket(_day(5), 1.07, None, "Balanced portions, peak hydration"),
    _water_bucket(BEYOND_WEEK, 1.07, None, "SPAR portions, auto-adjusting for walk-around"),
)


PROTOCOL_TABLE: Dict[Protocol, ProtocolDefinition] = {
    Protocol.EXTREME_CUT: ProtocolDefinition(
        protocol=Protocol.EXTREME_CUT,
        name="Extreme Cut Phase",
        short_name="Extreme Cut",
        is_cutting=True,
        uses_water_load_bonus=True,
        nutrition_mode=NutritionMode.GRAMS,
        macro_ratio="40/40/20",
        buckets=_EXTREME_CUT_BUCKETS,
    ),
    Protocol.RAPID_CUT: ProtocolDefinition(
        protocol=Protocol.RAPID_CUT,
        name="Rapid Cut Phase",
        short_name="Rapid Cut",
        is_cutting=True,
        uses_water_load_bonus=True,
        nutrition_mode=NutritionMode.GRAMS,
        macro_ratio="35/40/25",
        buckets=_RAPID_CUT_BUCKETS,
    ),
    Protocol.HOLD_WEIGHT: ProtocolDefinition(
        protocol=Protocol.HOLD_WEIGHT,
        name="Hold Weight Phase",
        short_name="Hold Weight",
        is_cutting=False,
        uses_water_load_bonus=False,
        nutrition_mode=NutritionMode.GRAMS,
        macro_ratio="40/35/25",
        buckets=_HOLD_WEIGHT_BUCKETS,
    ),
    Protocol.BUILD: ProtocolDefinition(
        protocol=Protocol.BUILD,
        name="Build Phase",
        short_name="Build",
        is_cutting=False,
        uses_water_load_bonus=False,
        nutrition_mode=NutritionMode.GRAMS,
        macro_ratio="45/30/25",
        buckets=_BUILD_BUCKETS,
    ),
    Protocol.SPAR: ProtocolDefinition(
        protocol=Protocol.SPAR,
        name="SPAR Nutrition",
        short_name="SPAR",
        is_cutting=False,
        uses_water_load_bonus=False,
        nutrition_mode=NutritionMode.SLICES,
        macro_ratio="Portions",
        buckets=_SPAR_BUCKETS,
    ),
    Protocol.SPAR_COMPETITION: ProtocolDefinition(
        protocol=Protocol.SPAR_COMPETITION,
        name="SPAR Competition",
        short_name="SPAR Comp",
        is_cutting=True,
        uses_water_load_bonus=False,
        nutrition_mode=NutritionMode.SLICES,
        macro_ratio="Portions",
        buckets=_SPAR_COMPETITION_BUCKETS,
    ),
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _sort_key(bucket: ProtocolBucket) -> float:
    return float("-inf") if bucket.min_days is None else bucket.min_days


def validate_buckets(protocol: Protocol, buckets: Tuple[ProtocolBucket, ...]) -> None:
    """
    Check buckets tile (-inf, +inf) with no gap and no overlap.

    Raises:
        ProtocolTableError: naming the protocol and the offending boundary
    """
    if not buckets:
        raise ProtocolTableError(f"Protocol {protocol.value} has no buckets")

    ordered = sorted(buckets, key=_sort_key)

    if ordered[0].min_days is not None:
        raise ProtocolTableError(
            f"Protocol {protocol.value}: no bucket below {ordered[0].min_days} days"
        )
    if ordered[-1].max_days is not None:
        raise ProtocolTableError(
            f"Protocol {protocol.value}: no bucket above {ordered[-1].max_days} days"
        )

    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.max_days is None or nxt.min_days is None:
            raise ProtocolTableError(f"Protocol {protocol.value}: unbounded bucket overlaps another")
        if prev.min_days is not None and prev.max_days < prev.min_days:
            raise ProtocolTableError(
                f"Protocol {protocol.value}: empty bucket [{prev.min_days}, {prev.max_days}]"
            )
        if nxt.min_days <= prev.max_days:
            raise ProtocolTableError(
                f"Protocol {protocol.value}: buckets overlap at {nxt.min_days} days"
            )
        if nxt.min_days > prev.max_days + 1:
            raise ProtocolTableError(
                f"Protocol {protocol.value}: gap between {prev.max_days} and {nxt.min_days} days"
            )


def validate_protocol_table(table: Dict[Protocol, ProtocolDefinition] = None) -> None:
    table = PROTOCOL_TABLE if table is None else table
    missing = [p.value for p in Protocol if p not in table]
    if missing:
        raise ProtocolTableError(f"Protocols missing from table: {', '.join(missing)}")
    for protocol, definition in table.items():
        validate_buckets(protocol, definition.buckets)


validate_protocol_table()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def coerce_protocol(protocol: Union[Protocol, str, int, None]) -> Protocol:
    """Map a stored protocol id to the enum, falling back to the configured default."""
    if isinstance(protocol, Protocol):
        return protocol
    try:
        return Protocol(str(protocol))
    except ValueError:
        logger.warning(
            "Unknown protocol id %r, using default protocol %s",
            protocol, cut_config.default_protocol,
        )
        return Protocol(cut_config.default_protocol)


def get_protocol(protocol: Union[Protocol, str, int, None]) -> ProtocolDefinition:
    return PROTOCOL_TABLE[coerce_protocol(protocol)]


def lookup_bucket(protocol: Union[Protocol, str, int, None], days_until: int) -> ProtocolBucket:
    """
    Return the unique bucket covering days_until for this protocol.

    Never raises: if nothing matches (only possible for a table that
    bypassed validation) the widest-out maintenance bucket is used.
    """
    definition = get_protocol(protocol)
    days = int(days_until)
    for bucket in definition.buckets:
        if bucket.contains(days):
            return bucket

    fallback = max(definition.buckets, key=lambda b: float("inf") if b.max_days is None else b.max_days)
    logger.warning(
        "No bucket for protocol %s at %d days, falling back to maintenance",
        definition.protocol.value, days,
    )
    return fallback


def water_load_bonus(target_weight_class: float) -> int:
    """Extra lbs a water-loading athlete is expected to carry, by class tier."""
    for min_class, bonus in WATER_LOAD_BONUS_TIERS:
        if target_weight_class >= min_class:
            return bonus
    return WATER_LOAD_BONUS_TIERS[-1][1]


def is_water_loading_day(protocol: Union[Protocol, str, None], days_until: int) -> bool:
    """True on days 3-5 for protocols that carry the water-load bonus."""
    definition = get_protocol(protocol)
    if not definition.uses_water_load_bonus:
        return False
    first, last = WATER_LOADING_DAYS
    return first <= days_until <= last
