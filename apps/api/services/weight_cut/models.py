"""
Snapshot models for the weight cut engine.

These are in-memory snapshots of what the sync layer persists. The engine
only reads them (the reconciler is the one narrow writer, on tracking
records). Derived values (phases, targets, plans) are never stored here.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from services.weight_cut.constants import LogType, NutritionMode, Protocol


@dataclass
class AthleteProfile:
    """
    Static athlete profile.

    weigh_in_date is the anchor for every days-until calculation.
    simulated_date, when set, stands in for "today" (demo / coach preview).
    The portion-plan fields only matter for the SPAR protocols.
    """
    name: str
    current_weight: float
    target_weight_class: float
    weigh_in_date: date
    protocol: Union[Protocol, str] = Protocol.RAPID_CUT
    simulated_date: Optional[date] = None

    # Portion (SPAR) inputs
    sex: str = "male"
    age: int = 17
    height_inches: float = 68.0
    training_sessions: str = "5-6"         # '1-2' | '3-4' | '5-6' | '7+'
    workday_activity: str = "on_feet_some" # 'mostly_sitting' | 'on_feet_some' | 'on_feet_most'
    spar_goal: str = "maintain"            # 'lose' | 'maintain' | 'gain'
    goal_intensity: Optional[str] = None   # 'lean' | 'aggressive'
    maintain_priority: Optional[str] = None  # 'general' | 'performance'
    body_fat_percent: Optional[float] = None


@dataclass
class WeightLogEntry:
    """One scale reading."""
    timestamp: datetime
    weight: float
    log_type: LogType
    id: Optional[str] = None
    duration_minutes: Optional[float] = None  # reported session length (post-session)
    sleep_hours: Optional[float] = None       # reported sleep (morning)

    def __post_init__(self):
        if not isinstance(self.log_type, LogType):
            self.log_type = LogType(self.log_type)


@dataclass
class DailyTrackingRecord:
    """Per-date intake totals. Fields default to zero when absent."""
    date: date
    water_consumed_oz: float = 0
    carbs_consumed: float = 0
    protein_consumed: float = 0
    protein_slices: int = 0
    carb_slices: int = 0
    veg_slices: int = 0
    fruit_slices: int = 0
    fat_slices: int = 0
    last_written_mode: Optional[NutritionMode] = None

    def __post_init__(self):
        if self.last_written_mode is not None and not isinstance(self.last_written_mode, NutritionMode):
            self.last_written_mode = NutritionMode(self.last_written_mode)


@dataclass
class TrackingSnapshot:
    """What the UI layer holds in memory between syncs."""
    profile: AthleteProfile
    logs: list = field(default_factory=list)
    tracking: dict = field(default_factory=dict)  # date -> DailyTrackingRecord
