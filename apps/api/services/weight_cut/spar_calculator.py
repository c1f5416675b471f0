"""
SPAR Portion Calculator

Daily "slice" targets for the portion-based protocols (SPAR Nutrition and
SPAR Competition). A slice is a fixed-calorie hand portion:

    protein = palm, carb = fist, veg = fist, fruit = piece, fat = thumb

Calculation:
    1. BMR: Mifflin-St Jeor, or Cunningham when body fat % is known
    2. TDEE = BMR x activity multiplier (training sessions x workday activity)
    3. + calorie adjustment (goal config, or the competition adjuster)
       floored at MIN_DAILY_CALORIES
    4. Protein anchored to bodyweight (g/lb)
    5. Fixed 5 veg + 2 fruit; the remainder split between fat and carbs
    6. Grams -> whole slices, with per-category minimums

Sources:
    Mifflin MD, et al. Am J Clin Nutr. 1990;51(2):241-247
    Cunningham JJ. Am J Clin Nutr. 1991;54(6):963-969
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from services.units import lbs_to_kg, inches_to_cm, round_to_int
from services.weight_cut.constants import (
    FIXED_FRUIT_SLICES,
    FIXED_VEG_SLICES,
    MIN_DAILY_CALORIES,
    MIN_SLICES,
    SLICE_CALORIES,
    SLICE_GRAMS,
    SliceCategory,
    WALK_AROUND_MULTIPLIER,
)

logger = logging.getLogger(__name__)


# Activity multiplier: training sessions/week x workday activity
ACTIVITY_MATRIX: Dict[str, Dict[str, float]] = {
    "1-2": {"mostly_sitting": 1.2, "on_feet_some": 1.35, "on_feet_most": 1.35},
    "3-4": {"mostly_sitting": 1.35, "on_feet_some": 1.55, "on_feet_most": 1.55},
    "5-6": {"mostly_sitting": 1.55, "on_feet_some": 1.55, "on_feet_most": 1.725},
    "7+": {"mostly_sitting": 1.55, "on_feet_some": 1.725, "on_feet_most": 1.725},
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55


@dataclass(frozen=True)
class SparGoalConfig:
    protein_per_lb: float
    calorie_adjustment: int
    fat_percent: float     # of calories left after protein + fixed veg/fruit
    carb_percent: float


SPAR_GOAL_CONFIGS: Dict[str, SparGoalConfig] = {
    "lose_lean": SparGoalConfig(0.85, -250, 50, 50),
    "lose_aggressive": SparGoalConfig(0.85, -500, 50, 50),
    "maintain_general": SparGoalConfig(0.65, 0, 45, 55),
    "maintain_performance": SparGoalConfig(0.75, 0, 30, 70),
    "gain_lean": SparGoalConfig(0.95, 250, 30, 70),
    "gain_aggressive": SparGoalConfig(0.95, 500, 30, 70),
}

# Competition adjuster (SPAR Competition)
CAL_PER_LB_OVER_WALK_AROUND = 150
MIN_COMPETITION_DEFICIT = -250
MAX_COMPETITION_DEFICIT = -750
WATER_CUT_DEFICIT = -500
COMPETITION_SURPLUS = 250
RECOVERY_SURPLUS = 500

_FIXED_VEG_CARBS = FIXED_VEG_SLICES * SLICE_GRAMS[SliceCategory.VEG]
_FIXED_FRUIT_CARBS = FIXED_FRUIT_SLICES * SLICE_GRAMS[SliceCategory.FRUIT]
_FIXED_CALORIES = (
    FIXED_VEG_SLICES * SLICE_CALORIES[SliceCategory.VEG]
    + FIXED_FRUIT_SLICES * SLICE_CALORIES[SliceCategory.FRUIT]
)


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class SliceTargets:
    """Whole-slice daily targets plus the intermediate numbers for display."""

    protein: int
    carb: int
    veg: int
    fruit: int
    fat: int

    bmr: int = 0
    tdee: int = 0
    adjusted_tdee: int = 0
    calorie_adjustment: int = 0
    protein_per_lb: float = 0.0

    @property
    def total_calories(self) -> int:
        return int(
            self.protein * SLICE_CALORIES[SliceCategory.PROTEIN]
            + self.carb * SLICE_CALORIES[SliceCategory.CARB]
            + self.veg * SLICE_CALORIES[SliceCategory.VEG]
            + self.fruit * SLICE_CALORIES[SliceCategory.FRUIT]
            + self.fat * SLICE_CALORIES[SliceCategory.FAT]
        )

    @property
    def protein_grams(self) -> float:
        return self.protein * SLICE_GRAMS[SliceCategory.PROTEIN]

    @property
    def carb_grams(self) -> float:
        """Carbohydrate from carb, veg and fruit slices combined."""
        return (
            self.carb * SLICE_GRAMS[SliceCategory.CARB]
            + self.veg * SLICE_GRAMS[SliceCategory.VEG]
            + self.fruit * SLICE_GRAMS[SliceCategory.FRUIT]
        )

    def scaled(self, protein_factor: float, carb_factor: float) -> "SliceTargets":
        """
        Copy with protein slices scaled by protein_factor and every
        carbohydrate slice (carb, veg, fruit) by carb_factor, rounded to
        whole slices.
        """
        zero_food = protein_factor == 0 and carb_factor == 0
        return SliceTargets(
            protein=round_to_int(self.protein * protein_factor),
            carb=round_to_int(self.carb * carb_factor),
            veg=round_to_int(self.veg * carb_factor),
            fruit=round_to_int(self.fruit * carb_factor),
            fat=0 if zero_food else self.fat,
            bmr=self.bmr,
            tdee=self.tdee,
            adjusted_tdee=self.adjusted_tdee,
            calorie_adjustment=self.calorie_adjustment,
            protein_per_lb=self.protein_per_lb,
        )


@dataclass
class CompetitionAdjustment:
    calorie_adjustment: int
    spar_goal: str
    goal_intensity: str
    reason: str


# ---------------------------------------------------------------------------
# Energy
# ---------------------------------------------------------------------------


def calculate_bmr(weight_lbs: float, height_inches: float, age: int, sex: str) -> float:
    """Mifflin-St Jeor. Male: +5, female: -161."""
    weight_kg = lbs_to_kg(weight_lbs)
    height_cm = inches_to_cm(height_inches)
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex == "male" else base - 161


def calculate_cunningham_bmr(weight_lbs: float, body_fat_percent: float) -> float:
    """Cunningham: 500 + 22 x lean mass (kg)."""
    lean_mass_kg = lbs_to_kg(weight_lbs) * (1 - body_fat_percent / 100)
    return 500 + 22 * lean_mass_kg


def activity_multiplier(training_sessions: str, workday_activity: str) -> float:
    return ACTIVITY_MATRIX.get(training_sessions, {}).get(workday_activity, DEFAULT_ACTIVITY_MULTIPLIER)


def goal_config_key(goal: str, goal_intensity: Optional[str] = None, maintain_priority: Optional[str] = None) -> str:
    if goal in ("lose", "gain"):
        return f"{goal}_{goal_intensity or 'aggressive'}"
    return f"maintain_{maintain_priority or 'general'}"


# ---------------------------------------------------------------------------
# Competition adjuster
# ---------------------------------------------------------------------------


def _scaled_deficit(lbs_over: float) -> int:
    deficit = -round_to_int(lbs_over * CAL_PER_LB_OVER_WALK_AROUND)
    return max(MAX_COMPETITION_DEFICIT, min(MIN_COMPETITION_DEFICIT, deficit))


def competition_calorie_adjustment(
    current_weight: float,
    target_weight_class: float,
    days_until_weigh_in: int,
) -> CompetitionAdjustment:
    """
    Calorie adjustment for SPAR Competition by days out and distance
    above walk-around weight (class x 1.07).

    | Period            | At/below walk-around | Over walk-around              |
    |-------------------|----------------------|-------------------------------|
    | Training (6+)     | 0                    | -150/lb, clamped [-750, -250] |
    | Water load (3-5)  | -250                 | -150/lb, clamped [-750, -250] |
    | Water cut (1-2)   | -500                 | -500                          |
    | Competition (0)   | +250                 | +250                          |
    | Recovery (<0)     | +500                 | +500                          |
    """
    walk_around = target_weight_class * WALK_AROUND_MULTIPLIER
    lbs_over = current_weight - walk_around
    is_over = lbs_over > 0

    if days_until_weigh_in < 0:
        return CompetitionAdjustment(
            RECOVERY_SURPLUS, "gain", "aggressive",
            "Recovery — full refeed to restore glycogen and energy",
        )
    if days_until_weigh_in == 0:
        return CompetitionAdjustment(
            COMPETITION_SURPLUS, "gain", "lean", "Competition day — refuel for performance"
        )
    if days_until_weigh_in <= 2:
        return CompetitionAdjustment(
            WATER_CUT_DEFICIT, "lose", "aggressive", "Water cut — minimal portions, restrict water"
        )

    if days_until_weigh_in <= 5:
        if not is_over:
            return CompetitionAdjustment(
                MIN_COMPETITION_DEFICIT, "lose", "lean", "Water load — balanced portions, peak hydration"
            )
        deficit = _scaled_deficit(lbs_over)
        return CompetitionAdjustment(
            deficit, "lose", "aggressive" if deficit <= -500 else "lean",
            f"Water load — {lbs_over:.1f} lbs over walk-around",
        )

    if not is_over:
        return CompetitionAdjustment(0, "maintain", "lean", "Training — at walk-around weight, maintaining")

    deficit = _scaled_deficit(lbs_over)
    return CompetitionAdjustment(
        deficit, "lose", "aggressive" if deficit <= -500 else "lean",
        f"Training — {lbs_over:.1f} lbs over walk-around ({abs(deficit)} cal deficit)",
    )


# ---------------------------------------------------------------------------
# Slice calculation
# ---------------------------------------------------------------------------


def calculate_slices(
    weight_lbs: float,
    height_inches: float,
    age: int,
    sex: str = "male",
    training_sessions: str = "5-6",
    workday_activity: str = "on_feet_some",
    goal: str = "maintain",
    goal_intensity: Optional[str] = None,
    maintain_priority: Optional[str] = None,
    body_fat_percent: Optional[float] = None,
    calorie_adjustment: Optional[int] = None,
) -> SliceTargets:
    """
    Calculate daily slice targets.

    Args:
        calorie_adjustment: Overrides the goal config's adjustment
            (the competition adjuster passes its value here)

    Returns:
        SliceTargets with minimums applied (protein 2, carb 1, fat 1)
    """
    if body_fat_percent is not None and 0 < body_fat_percent < 100:
        bmr = calculate_cunningham_bmr(weight_lbs, body_fat_percent)
    else:
        bmr = calculate_bmr(weight_lbs, height_inches, age, sex)

    tdee = bmr * activity_multiplier(training_sessions, workday_activity)

    key = goal_config_key(goal, goal_intensity, maintain_priority)
    config = SPAR_GOAL_CONFIGS.get(key, SPAR_GOAL_CONFIGS["maintain_general"])
    adjustment = config.calorie_adjustment if calorie_adjustment is None else calorie_adjustment

    adjusted_tdee = max(MIN_DAILY_CALORIES, tdee + adjustment)

    protein_grams = weight_lbs * config.protein_per_lb
    remaining_cal = adjusted_tdee - protein_grams * 4 - _FIXED_CALORIES

    split_total = config.fat_percent + config.carb_percent
    fat_grams = remaining_cal * (config.fat_percent / split_total) / 9
    carb_grams_total = remaining_cal * (config.carb_percent / split_total) / 4
    starch_carb_grams = max(0.0, carb_grams_total - _FIXED_VEG_CARBS - _FIXED_FRUIT_CARBS)

    protein = round_to_int(protein_grams / SLICE_GRAMS[SliceCategory.PROTEIN])
    carb = round_to_int(starch_carb_grams / SLICE_GRAMS[SliceCategory.CARB])
    fat = round_to_int(fat_grams / SLICE_GRAMS[SliceCategory.FAT])

    logger.debug(
        "SPAR slices: bmr=%.0f tdee=%.0f adjusted=%.0f config=%s",
        bmr, tdee, adjusted_tdee, key,
    )

    return SliceTargets(
        protein=max(MIN_SLICES[SliceCategory.PROTEIN], protein),
        carb=max(MIN_SLICES[SliceCategory.CARB], carb),
        veg=FIXED_VEG_SLICES,
        fruit=FIXED_FRUIT_SLICES,
        fat=max(MIN_SLICES[SliceCategory.FAT], fat),
        bmr=round_to_int(bmr),
        tdee=round_to_int(tdee),
        adjusted_tdee=round_to_int(adjusted_tdee),
        calorie_adjustment=int(adjustment),
        protein_per_lb=config.protein_per_lb,
    )


def slice_targets_for_profile(profile, days_until_weigh_in: int, competition: bool = False) -> SliceTargets:
    """
    Slice targets for an athlete profile.

    With competition=True the goal and calorie adjustment come from the
    competition adjuster instead of the profile's SPAR goal.
    """
    goal = profile.spar_goal
    intensity = profile.goal_intensity
    adjustment = None

    if competition:
        comp = competition_calorie_adjustment(
            profile.current_weight, profile.target_weight_class, days_until_weigh_in
        )
        goal, intensity, adjustment = comp.spar_goal, comp.goal_intensity, comp.calorie_adjustment

    return calculate_slices(
        weight_lbs=profile.current_weight,
        height_inches=profile.height_inches,
        age=profile.age,
        sex=profile.sex,
        training_sessions=profile.training_sessions,
        workday_activity=profile.workday_activity,
        goal=goal,
        goal_intensity=intensity,
        maintain_priority=profile.maintain_priority,
        body_fat_percent=profile.body_fat_percent,
        calorie_adjustment=adjustment,
    )
