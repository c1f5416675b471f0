"""
Unit Conversion & Weight Validation

Mass, length and volume conversions used by the weight cut engine,
plus bounds-checked weight validation. Scale readings are rejected here,
before they ever reach target or analytics math.

All engine math runs in pounds / fluid ounces / grams.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real
from typing import Any, Optional

from core.exceptions import InvalidWeightError

# Mass
LBS_TO_KG = 0.45359237          # exact SI definition
KG_TO_LBS = 1 / LBS_TO_KG

# Length
INCHES_TO_CM = 2.54
CM_TO_INCHES = 1 / INCHES_TO_CM

# Volume (US customary)
OZ_TO_ML = 29.5735
ML_TO_OZ = 1 / OZ_TO_ML
GAL_TO_OZ = 128

# Plausible scale range for a competitive wrestler
MIN_WEIGHT_LBS = 50
MAX_WEIGHT_LBS = 400


def lbs_to_kg(lbs: float) -> float:
    return lbs * LBS_TO_KG


def kg_to_lbs(kg: float) -> float:
    return kg * KG_TO_LBS


def inches_to_cm(inches: float) -> float:
    return inches * INCHES_TO_CM


def cm_to_inches(cm: float) -> float:
    return cm * CM_TO_INCHES


def oz_to_ml(oz: float) -> float:
    return oz * OZ_TO_ML


def ml_to_oz(ml: float) -> float:
    return ml * ML_TO_OZ


def oz_to_gallons(oz: float) -> float:
    return oz / GAL_TO_OZ


def gallons_to_oz(gallons: float) -> float:
    return gallons * GAL_TO_OZ


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half away from zero (the way coaches round on paper).

    Python's built-in round() uses banker's rounding, which would turn
    164.5 into 164.

    Examples:
        >>> round_half_up(164.5)
        165.0
        >>> round_half_up(2.25, 1)
        2.3
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float) -> int:
    """round_half_up() for whole counts (ounces, slices, grams)."""
    return int(round_half_up(value))


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a checkbox value is not a weight
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(float(value))


def is_valid_weight(value: Any) -> bool:
    """
    Check a scale reading is a finite number inside the plausible range.

    Args:
        value: Weight in pounds (anything the UI might hand us)

    Returns:
        True if MIN_WEIGHT_LBS <= value <= MAX_WEIGHT_LBS
    """
    if not _is_number(value):
        return False
    return MIN_WEIGHT_LBS <= float(value) <= MAX_WEIGHT_LBS


def get_weight_validation_error(value: Any) -> Optional[str]:
    """Return a user-facing message for an invalid weight, or None if valid."""
    if not _is_number(value):
        return "Please enter a valid number"
    if float(value) < MIN_WEIGHT_LBS:
        return f"Weight must be at least {MIN_WEIGHT_LBS} lbs"
    if float(value) > MAX_WEIGHT_LBS:
        return f"Weight must be less than {MAX_WEIGHT_LBS} lbs"
    return None


def validate_weight(value: Any) -> float:
    """
    Validate a weight and return it as a float.

    Raises:
        InvalidWeightError: if the value is missing, non-numeric or out of range
    """
    error = get_weight_validation_error(value)
    if error is not None:
        raise InvalidWeightError(error, value=value)
    return float(value)
