"""
Pytest configuration and fixtures

The weight cut engine is pure: every test builds its own snapshot
(profile, logs, tracking record) and passes "today" explicitly.
Nothing touches the real clock or any store.
"""
import pytest
import sys
import os
from datetime import timedelta

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.weight_cut.constants import LogType
from services.weight_cut.models import DailyTrackingRecord
from tests.weight_cut_helpers import TODAY, at, make_log, make_profile


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def profile():
    """165 class, Rapid Cut, 5 days out, 172 lbs."""
    return make_profile()


@pytest.fixture
def overnight_pair():
    """Before-bed 22:00 at 170.0, morning 06:00 at 169.0 (8 h, 1.0 lb)."""
    yesterday = TODAY - timedelta(days=1)
    return [
        make_log(at(yesterday, 22), 170.0, LogType.BEFORE_BED),
        make_log(at(TODAY, 6), 169.0, LogType.MORNING),
    ]


@pytest.fixture
def tracking_record():
    return DailyTrackingRecord(date=TODAY)
