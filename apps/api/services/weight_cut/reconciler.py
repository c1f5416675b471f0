"""
Slice <-> Gram Reconciler

A tracking record holds intake twice: gram totals and slice counts. The
representation written last is authoritative and the other side is
recomputed from SLICE_GRAMS, the single conversion table.

The derived side is only overwritten when it is off by more than the
tolerance (5 g, or a whole slice), so rounding never causes churn and a
second pass with no writes in between changes nothing.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from core.cut_config import cut_config
from services.units import round_to_int
from services.weight_cut.constants import NutritionMode, SLICE_GRAMS, SliceCategory
from services.weight_cut.models import DailyTrackingRecord

logger = logging.getLogger(__name__)

_SLICE_FIELDS = {
    SliceCategory.PROTEIN: "protein_slices",
    SliceCategory.CARB: "carb_slices",
    SliceCategory.VEG: "veg_slices",
    SliceCategory.FRUIT: "fruit_slices",
    SliceCategory.FAT: "fat_slices",
}


@dataclass
class ReconcileResult:
    mode: Optional[NutritionMode]
    changed: List[str] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.changed


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def slices_to_grams(slices: float, category: Union[SliceCategory, str]) -> float:
    return slices * SLICE_GRAMS[SliceCategory(category)]


def grams_to_slices(grams: float, category: Union[SliceCategory, str]) -> int:
    """Whole slices, rounded half up. Negative grams count as zero."""
    return round_to_int(max(0.0, grams) / SLICE_GRAMS[SliceCategory(category)])


def expected_carb_grams(record: DailyTrackingRecord) -> float:
    """Carbohydrate implied by the carb, veg and fruit slices."""
    return (
        slices_to_grams(record.carb_slices, SliceCategory.CARB)
        + slices_to_grams(record.veg_slices, SliceCategory.VEG)
        + slices_to_grams(record.fruit_slices, SliceCategory.FRUIT)
    )


def expected_protein_grams(record: DailyTrackingRecord) -> float:
    return slices_to_grams(record.protein_slices, SliceCategory.PROTEIN)


# ---------------------------------------------------------------------------
# Reconcile
# ---------------------------------------------------------------------------


def _reconcile_grams_from_slices(record: DailyTrackingRecord, tolerance: float) -> List[str]:
    changed = []
    carbs = expected_carb_grams(record)
    protein = expected_protein_grams(record)

    if abs(record.carbs_consumed - carbs) > tolerance:
        record.carbs_consumed = carbs
        changed.append("carbs_consumed")
    if abs(record.protein_consumed - protein) > tolerance:
        record.protein_consumed = protein
        changed.append("protein_consumed")
    return changed


def _reconcile_slices_from_grams(record: DailyTrackingRecord) -> List[str]:
    changed = []

    protein_slices = grams_to_slices(record.protein_consumed, SliceCategory.PROTEIN)

    # Veg and fruit are logged as slices only; carb slices take the rest
    fixed_carbs = (
        slices_to_grams(record.veg_slices, SliceCategory.VEG)
        + slices_to_grams(record.fruit_slices, SliceCategory.FRUIT)
    )
    carb_slices = grams_to_slices(record.carbs_consumed - fixed_carbs, SliceCategory.CARB)

    if abs(record.protein_slices - protein_slices) >= 1:
        record.protein_slices = protein_slices
        changed.append("protein_slices")
    if abs(record.carb_slices - carb_slices) >= 1:
        record.carb_slices = carb_slices
        changed.append("carb_slices")
    return changed


def reconcile_tracking(
    record: DailyTrackingRecord,
    gram_tolerance: Optional[float] = None,
) -> ReconcileResult:
    """
    Bring the derived representation in line with the last-written one.

    Mutates the record in place. With no last-written mode there is
    nothing to reconcile against and the record is left alone.
    """
    mode = record.last_written_mode
    if mode is None:
        return ReconcileResult(mode=None)

    tolerance = cut_config.reconcile_gram_tolerance if gram_tolerance is None else gram_tolerance

    if mode == NutritionMode.SLICES:
        changed = _reconcile_grams_from_slices(record, tolerance)
    else:
        changed = _reconcile_slices_from_grams(record)

    if changed:
        logger.info("Reconciled %s for %s from %s", ", ".join(changed), record.date, mode.value)

    return ReconcileResult(mode=mode, changed=changed)


# ---------------------------------------------------------------------------
# Direct writes
# ---------------------------------------------------------------------------


def log_grams(
    record: DailyTrackingRecord,
    carbs: Optional[float] = None,
    protein: Optional[float] = None,
) -> DailyTrackingRecord:
    """Write gram totals and mark grams as the authoritative side."""
    if carbs is not None:
        record.carbs_consumed = max(0.0, carbs)
    if protein is not None:
        record.protein_consumed = max(0.0, protein)
    record.last_written_mode = NutritionMode.GRAMS
    return record


def log_slices(record: DailyTrackingRecord, **slices: int) -> DailyTrackingRecord:
    """
    Write slice counts and mark slices as the authoritative side.

    Example:
        log_slices(record, protein=4, carb=3)

    Raises:
        ValueError: for an unknown slice category
    """
    for name, count in slices.items():
        attr = _SLICE_FIELDS[SliceCategory(name)]
        setattr(record, attr, max(0, int(count)))
    record.last_written_mode = NutritionMode.SLICES
    return record
