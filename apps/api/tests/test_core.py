"""
Tests for configuration, structured logging and API errors.
"""
import json
import logging

from core.cut_config import CutConfig
from core.exceptions import InvalidWeightError, ValidationError, WeightCutError
from core.logging import JSONFormatter


class TestCutConfig:

    def test_defaults(self):
        config = CutConfig()
        assert config.on_track_buffer_lbs == 1.5
        assert config.max_daily_water_oz == 320
        assert config.max_sweat_rate_lbs_per_hr == 6.0
        assert config.default_protocol == "2"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CUT_MAX_DAILY_WATER_OZ", "256")
        monkeypatch.setenv("CUT_ON_TRACK_BUFFER_LBS", "2.0")
        config = CutConfig()
        assert config.max_daily_water_oz == 256
        assert config.on_track_buffer_lbs == 2.0


class TestJSONFormatter:

    def _record(self, **extra):
        record = logging.LogRecord(
            name="services.weight_cut.reconciler",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="Reconciled %s",
            args=("carbs_consumed",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "services.weight_cut.reconciler"
        assert data["message"] == "Reconciled carbs_consumed"

    def test_extra_fields_merged(self):
        record = self._record(extra_fields={"path": "/v1/weight-cut/reconcile", "status_code": 200})
        data = json.loads(JSONFormatter().format(record))
        assert data["path"] == "/v1/weight-cut/reconcile"
        assert data["status_code"] == 200


class TestExceptions:

    def test_validation_error_code(self):
        error = ValidationError("Weight must be at least 50 lbs", field="current_weight")
        assert error.status_code == 422
        assert error.error_code == "VALIDATION_ERROR_CURRENT_WEIGHT"

    def test_validation_error_without_field(self):
        assert ValidationError("bad").error_code == "VALIDATION_ERROR"

    def test_invalid_weight_hierarchy(self):
        error = InvalidWeightError("too light", value=12)
        assert isinstance(error, WeightCutError)
        assert isinstance(error, ValueError)
        assert error.value == 12
