"""
Tests for the slice <-> gram reconciler.
"""
import pytest

from services.weight_cut.constants import NutritionMode, SliceCategory
from services.weight_cut.models import DailyTrackingRecord
from services.weight_cut.reconciler import (
    expected_carb_grams,
    grams_to_slices,
    log_grams,
    log_slices,
    reconcile_tracking,
    slices_to_grams,
)
from tests.weight_cut_helpers import TODAY


class TestConversions:

    def test_canonical_grams(self):
        assert slices_to_grams(1, SliceCategory.CARB) == 26
        assert slices_to_grams(2, "protein") == 50

    def test_grams_to_whole_slices(self):
        assert grams_to_slices(100, SliceCategory.PROTEIN) == 4
        assert grams_to_slices(39, SliceCategory.CARB) == 2    # 1.5 rounds up
        assert grams_to_slices(-10, SliceCategory.CARB) == 0

    @pytest.mark.parametrize("category", list(SliceCategory))
    def test_round_trip_within_one_slice(self, category):
        """grams -> slices -> grams never drifts by more than half a slice"""
        for grams in range(0, 400, 7):
            back = slices_to_grams(grams_to_slices(grams, category), category)
            assert abs(back - grams) <= slices_to_grams(1, category) / 2

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            grams_to_slices(10, "dessert")


class TestReconcileFromSlices:
    """Slices written last: gram totals follow"""

    def test_grams_recomputed(self, tracking_record):
        log_slices(tracking_record, protein=4, carb=3, veg=2, fruit=1)
        result = reconcile_tracking(tracking_record)
        assert result.mode == NutritionMode.SLICES
        assert tracking_record.carbs_consumed == 119   # 78 + 16 + 25
        assert tracking_record.protein_consumed == 100
        assert set(result.changed) == {"carbs_consumed", "protein_consumed"}

    def test_within_tolerance_untouched(self):
        record = DailyTrackingRecord(date=TODAY, carbs_consumed=122, protein_consumed=98)
        log_slices(record, protein=4, carb=3, veg=2, fruit=1)
        result = reconcile_tracking(record)
        assert result.is_noop
        assert record.carbs_consumed == 122

    def test_second_pass_is_noop(self, tracking_record):
        log_slices(tracking_record, protein=4, carb=3)
        reconcile_tracking(tracking_record)
        assert reconcile_tracking(tracking_record).is_noop


class TestReconcileFromGrams:
    """Grams written last: slice counts follow"""

    def test_slices_recomputed(self, tracking_record):
        log_grams(tracking_record, carbs=130, protein=100)
        result = reconcile_tracking(tracking_record)
        assert result.mode == NutritionMode.GRAMS
        assert tracking_record.protein_slices == 4
        assert tracking_record.carb_slices == 5

    def test_veg_and_fruit_come_off_carbs(self):
        record = DailyTrackingRecord(date=TODAY, veg_slices=2, fruit_slices=1)
        log_grams(record, carbs=119)
        reconcile_tracking(record)
        assert record.carb_slices == 3
        assert record.veg_slices == 2
        assert expected_carb_grams(record) == 119

    def test_second_pass_is_noop(self, tracking_record):
        log_grams(tracking_record, carbs=211, protein=87)
        reconcile_tracking(tracking_record)
        assert reconcile_tracking(tracking_record).is_noop

    def test_grams_never_rewritten(self, tracking_record):
        log_grams(tracking_record, carbs=211, protein=87)
        reconcile_tracking(tracking_record)
        assert tracking_record.carbs_consumed == 211
        assert tracking_record.protein_consumed == 87


class TestWrites:

    def test_no_mode_nothing_to_do(self, tracking_record):
        result = reconcile_tracking(tracking_record)
        assert result.mode is None
        assert result.is_noop

    def test_log_grams_clamps(self, tracking_record):
        log_grams(tracking_record, carbs=-20)
        assert tracking_record.carbs_consumed == 0
        assert tracking_record.last_written_mode == NutritionMode.GRAMS

    def test_log_slices_clamps(self, tracking_record):
        log_slices(tracking_record, fat=-1)
        assert tracking_record.fat_slices == 0
        assert tracking_record.last_written_mode == NutritionMode.SLICES

    def test_log_slices_unknown_category(self, tracking_record):
        with pytest.raises(ValueError):
            log_slices(tracking_record, dessert=2)

    def test_mode_string_coerced(self):
        record = DailyTrackingRecord(date=TODAY, last_written_mode="slices")
        assert record.last_written_mode == NutritionMode.SLICES
