"""
Constants for the weight cut engine.

Enumerations for everything the store persists as a tag, plus the
fixed thresholds the protocol tables and analytics are built on.
Tunable thresholds live in core.cut_config instead.
"""

from enum import Enum
from typing import Dict, Tuple


class Protocol(str, Enum):
    """Cutting strategies (values are the ids persisted on the profile)."""
    EXTREME_CUT = "1"
    RAPID_CUT = "2"
    HOLD_WEIGHT = "3"      # a.k.a. Optimal Cut
    BUILD = "4"            # a.k.a. Gain
    SPAR = "5"             # portion-based maintenance
    SPAR_COMPETITION = "6" # portion tracking + competition water loading


class Phase(str, Enum):
    """Derived phase of the competition week. Never stored."""
    MAINTENANCE = "maintenance"
    LOAD = "load"
    RESTRICT = "restrict"
    CRITICAL = "critical"
    COMPETE = "compete"
    RECOVER = "recover"


class FluidType(str, Enum):
    REGULAR = "regular"
    DISTILLED = "distilled"
    SIP_ONLY = "sip_only"
    REHYDRATE = "rehydrate"


class LogType(str, Enum):
    """Measurement tags on weight log entries."""
    MORNING = "morning"
    PRE_SESSION = "pre-session"
    POST_SESSION = "post-session"
    BEFORE_BED = "before-bed"
    EXTRA_BEFORE = "extra-session-before"
    EXTRA_AFTER = "extra-session-after"
    CHECK_IN = "check-in"


class NutritionMode(str, Enum):
    """Which representation of intake was written last."""
    GRAMS = "grams"
    SLICES = "slices"


class SliceCategory(str, Enum):
    PROTEIN = "protein"
    CARB = "carb"
    VEG = "veg"
    FRUIT = "fruit"
    FAT = "fat"


class SafetyLevel(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    WARNING = "warning"
    DANGER = "danger"


class Pace(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on-track"
    BEHIND = "behind"


class DataTier(str, Enum):
    """How much data a cut score pillar was computed from."""
    NONE = "none"
    BASIC = "basic"
    ENHANCED = "enhanced"
    PREMIUM = "premium"


class ScoreZone(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


# Wrestling weight classes (lbs)
WEIGHT_CLASSES: Tuple[int, ...] = (125, 133, 141, 149, 157, 165, 174, 184, 197, 285)

# Walk-around weight = class x this
WALK_AROUND_MULTIPLIER = 1.07

# Days-until window in which the water load is running
WATER_LOADING_DAYS = (3, 5)

# Water-load bonus (lbs above baseline) by weight-class tier.
# (inclusive lower bound of the class, bonus), heaviest tier first.
WATER_LOAD_BONUS_TIERS = (
    (175, 4),
    (150, 3),
    (0, 2),
)

# Lower edge of the water-load range, whatever the tier
WATER_LOAD_BONUS_MIN = 2

# Safety thresholds
MAX_SAFE_TOTAL_CUT_PERCENT = 8.0
MAX_SAFE_WEEKLY_LOSS_PERCENT = 1.5
CRITICAL_DAYS_THRESHOLD = 2
DANGER_DELTA_24H_LBS = 3.0
WARNING_DELTA_24H_LBS = 2.0
DANGER_DELTA_48H_LBS = 5.0
WARNING_DELTA_48H_LBS = 3.0
CAUTION_DELTA_LBS = 5.0

# Protocol recommendation: over this % above class needs the extreme cut
EXTREME_CUT_TRIGGER_PERCENT = 12.0

# Weight-adjusted macro reductions on restriction days (days 1-3).
# Effective % over class is scaled by how close weigh-in is.
MACRO_REDUCTION_DAYS = (1, 3)
MACRO_REDUCTION_DAY_MULTIPLIER: Dict[int, float] = {1: 1.5, 2: 1.2, 3: 1.0}

# (effective % over, carb min factor, carb max factor,
#  protein min factor, protein max factor, warning)
MACRO_REDUCTION_TIERS = (
    (10.0, 0.0, 0.0, 0.0, 0.0, "DO NOT EAT"),
    (7.0, 0.0, 0.15, 0.0, 0.2, "Survival only"),
    (5.0, 0.3, 0.4, 0.5, 0.5, "Heavy restriction"),
    (3.0, 0.6, 0.7, 0.8, 0.8, "Moderate reduction"),
)

# Overnight drift pairing window (hours, open interval)
OVERNIGHT_WINDOW_HOURS = (4.0, 16.0)

# Practice pairing window (hours, open interval)
SESSION_WINDOW_HOURS = (0.25, 6.0)

# Extra workouts: after must follow before within this many hours
EXTRA_WORKOUT_WINDOW_HOURS = 3.0

# Rehydration after weigh-in, per lb lost
REHYDRATION_FLUID_OZ_PER_LB = (16, 24)
REHYDRATION_SODIUM_MG_PER_LB = (500, 700)
REHYDRATION_GLYCOGEN_NOTE = "40-50g Dextrose/Rice Cakes"

# Canonical grams per slice. Every slice<->gram conversion uses this table.
SLICE_GRAMS: Dict[SliceCategory, float] = {
    SliceCategory.PROTEIN: 25,   # g protein per palm
    SliceCategory.CARB: 26,      # g carbohydrate per fist
    SliceCategory.VEG: 8,        # g carbohydrate per veg fist
    SliceCategory.FRUIT: 25,     # g carbohydrate per piece
    SliceCategory.FAT: 14,       # g fat per thumb
}

# kcal per slice
SLICE_CALORIES: Dict[SliceCategory, float] = {
    SliceCategory.PROTEIN: 125,
    SliceCategory.CARB: 104,
    SliceCategory.VEG: 32,
    SliceCategory.FRUIT: 100,
    SliceCategory.FAT: 126,
}

FIXED_VEG_SLICES = 5
FIXED_FRUIT_SLICES = 2

MIN_SLICES: Dict[SliceCategory, int] = {
    SliceCategory.PROTEIN: 2,
    SliceCategory.CARB: 1,
    SliceCategory.FAT: 1,
}

# Calorie floor for any portion plan
MIN_DAILY_CALORIES = 1200

# Cut score pillar weights (weight, recovery, protocol), keyed on which of
# recovery / protocol have data. A pillar without data gives its share to weight.
CUT_SCORE_WEIGHTS: Dict[Tuple[bool, bool], Tuple[float, float, float]] = {
    (True, True): (0.60, 0.25, 0.15),
    (True, False): (0.75, 0.25, 0.0),
    (False, True): (0.80, 0.0, 0.20),
    (False, False): (1.0, 0.0, 0.0),
}

# (minimum score, label, zone), best first
CUT_SCORE_LABELS = (
    (90, "Dialed In", ScoreZone.GREEN),
    (75, "On Track", ScoreZone.GREEN),
    (60, "Manageable", ScoreZone.YELLOW),
    (50, "Tight", ScoreZone.YELLOW),
    (35, "Needs Work", ScoreZone.RED),
    (20, "Behind", ScoreZone.RED),
    (0, "Critical", ScoreZone.RED),
)

# Projection gap (lbs over target) -> weight pillar score, comp week
CUT_SCORE_PROJECTION_GAPS = (
    (0.5, 90), (1.0, 75), (1.5, 60), (2.0, 50), (3.0, 40), (4.0, 25), (5.0, 15),
)
CUT_SCORE_FLOOR = 10

# Projected-over caps: (gap above, max score). Only inside the final 5 days.
CUT_SCORE_PROJECTION_CAPS = ((3.0, 40), (1.0, 55), (0.0, 75))

# Sleep nights averaged for the recovery pillar
CUT_SCORE_SLEEP_NIGHTS = 5
