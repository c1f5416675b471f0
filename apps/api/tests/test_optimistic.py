"""
Tests for optimistic updates with rollback.
"""
import pytest

from core.exceptions import OptimisticUpdateError
from services.weight_cut.constants import LogType
from services.weight_cut.models import TrackingSnapshot
from services.weight_cut.optimistic import apply_optimistic, persist_optimistic
from services.weight_cut.reconciler import log_slices
from tests.weight_cut_helpers import TODAY, at, make_log


class TestApplyOptimistic:

    def test_write_visible_immediately(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, protein=4))
        assert tracking_record.protein_slices == 4
        assert update.is_pending

    def test_rollback_restores_same_object(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, protein=4))
        update.rollback()
        assert tracking_record.protein_slices == 0
        assert tracking_record.last_written_mode is None
        assert update.snapshot is tracking_record

    def test_commit_keeps_write(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, carb=2))
        update.commit()
        assert tracking_record.carb_slices == 2
        assert update.state == "committed"

    def test_idempotent(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, carb=2))
        update.rollback()
        update.rollback()
        assert update.state == "rolled_back"

    def test_commit_after_rollback_rejected(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, carb=2))
        update.rollback()
        with pytest.raises(OptimisticUpdateError):
            update.commit()

    def test_rollback_after_commit_rejected(self, tracking_record):
        update = apply_optimistic(tracking_record, lambda r: log_slices(r, carb=2))
        update.commit()
        with pytest.raises(OptimisticUpdateError):
            update.rollback()

    def test_failing_mutation_restores(self):
        snapshot = {"water": 40}

        def mutate(s):
            s["water"] = 80
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            apply_optimistic(snapshot, mutate)
        assert snapshot == {"water": 40}

    def test_list_snapshot(self):
        logs = [1, 2]
        update = apply_optimistic(logs, lambda l: l.append(3))
        update.rollback()
        assert logs == [1, 2]

    def test_tracking_snapshot(self, profile, overnight_pair):
        """A rejected log write disappears from the in-memory snapshot"""
        snapshot = TrackingSnapshot(profile=profile, logs=list(overnight_pair))
        extra = make_log(at(TODAY, 16), 167.5, LogType.POST_SESSION)

        update = apply_optimistic(snapshot, lambda s: s.logs.append(extra))
        assert len(snapshot.logs) == 3
        update.rollback()
        assert [entry.weight for entry in snapshot.logs] == [170.0, 169.0]
        assert snapshot.profile == profile


class TestPersistOptimistic:

    def test_success_commits(self, tracking_record):
        assert persist_optimistic(tracking_record, lambda r: log_slices(r, veg=3), lambda r: True)
        assert tracking_record.veg_slices == 3

    def test_rejected_rolls_back(self, tracking_record):
        assert not persist_optimistic(tracking_record, lambda r: log_slices(r, veg=3), lambda r: False)
        assert tracking_record.veg_slices == 0

    def test_exception_rolls_back(self, tracking_record):
        def persist(_):
            raise ConnectionError("offline")

        assert not persist_optimistic(tracking_record, lambda r: log_slices(r, veg=3), persist)
        assert tracking_record.veg_slices == 0
