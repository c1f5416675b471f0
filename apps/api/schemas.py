from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, date, timezone
from typing import Optional, List

from services.weight_cut.constants import (
    DataTier,
    FluidType,
    LogType,
    NutritionMode,
    Pace,
    Phase,
    Protocol,
    SafetyLevel,
    ScoreZone,
)
from services.weight_cut.cut_score import CutScoreInput
from services.weight_cut.models import AthleteProfile, DailyTrackingRecord, WeightLogEntry


# ---------------------------------------------------------------------------
# Snapshot inputs
# ---------------------------------------------------------------------------


class AthleteProfileIn(BaseModel):
    """Profile snapshot as the sync layer stores it"""
    name: str = "Athlete"
    current_weight: float
    target_weight_class: float
    weigh_in_date: date
    protocol: str = Protocol.RAPID_CUT.value
    simulated_date: Optional[date] = None

    # SPAR inputs (portion protocols only)
    sex: str = "male"
    age: int = 17
    height_inches: float = 68.0
    training_sessions: str = "5-6"
    workday_activity: str = "on_feet_some"
    spar_goal: str = "maintain"
    goal_intensity: Optional[str] = None
    maintain_priority: Optional[str] = None
    body_fat_percent: Optional[float] = None

    def to_profile(self) -> AthleteProfile:
        return AthleteProfile(**self.model_dump())


class WeightLogIn(BaseModel):
    timestamp: datetime
    weight: float
    log_type: LogType
    id: Optional[str] = None
    duration_minutes: Optional[float] = None
    sleep_hours: Optional[float] = None

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v):
        # Offset timestamps become naive UTC so every log compares
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    def to_entry(self) -> WeightLogEntry:
        return WeightLogEntry(**self.model_dump())


class DailyTrackingIn(BaseModel):
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

    def to_record(self) -> DailyTrackingRecord:
        return DailyTrackingRecord(**self.model_dump())


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class PhaseRequest(BaseModel):
    days_until_weigh_in: int
    protocol: str = Protocol.RAPID_CUT.value


class TargetsRequest(BaseModel):
    profile: AthleteProfileIn
    today: Optional[date] = None


class WeeklyPlanRequest(BaseModel):
    profile: AthleteProfileIn
    logs: List[WeightLogIn] = Field(default_factory=list)
    today: Optional[date] = None


class AnalyticsRequest(BaseModel):
    logs: List[WeightLogIn] = Field(default_factory=list)
    today: Optional[date] = None


class ProjectionRequest(BaseModel):
    current_weight: Optional[float] = None
    overnight: Optional[float] = None
    session: Optional[float] = None
    days_remaining: int


class CutStatusRequest(BaseModel):
    profile: AthleteProfileIn
    logs: List[WeightLogIn] = Field(default_factory=list)
    today: Optional[date] = None
    tracking: Optional[DailyTrackingIn] = None


class CutScoreRequest(BaseModel):
    """Readings for a one-off cut score; everything past days_remaining is optional"""
    target_weight: float
    days_remaining: int
    projected_weight: Optional[float] = None
    current_weight: Optional[float] = None
    gross_daily_loss: Optional[float] = None
    recent_sleep_hours: List[float] = Field(default_factory=list)
    avg_overnight_drift: Optional[float] = None
    feel_rating: Optional[int] = Field(default=None, ge=1, le=5)
    bed_time: Optional[str] = None
    wake_time: Optional[str] = None
    hrv: Optional[float] = None
    resting_heart_rate: Optional[float] = None
    sleep_score: Optional[float] = Field(default=None, ge=0, le=100)
    strain_score: Optional[float] = Field(default=None, ge=0, le=100)
    recovery_score: Optional[float] = Field(default=None, ge=0, le=100)
    food_servings_logged: float = 0
    food_servings_target: float = 0
    water_consumed_oz: float = 0
    water_target_oz: float = 0
    correct_food_types: Optional[bool] = None
    meal_timing_score: Optional[float] = Field(default=None, ge=0, le=100)
    macro_compliance_score: Optional[float] = Field(default=None, ge=0, le=100)
    hour: Optional[int] = Field(default=None, ge=0, le=23)

    def to_input(self) -> CutScoreInput:
        return CutScoreInput(**self.model_dump(exclude={"hour"}))


class SafetyRequest(BaseModel):
    current_weight: float
    target_weight: float
    days_remaining: int
    protocol: Optional[str] = None


class ReconcileRequest(BaseModel):
    tracking: DailyTrackingIn


class RecommendationRequest(BaseModel):
    current_weight: float
    target_weight_class: float
    lbs_lost: Optional[float] = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class PhaseResponse(BaseModel):
    days_until_weigh_in: int
    protocol: Protocol
    phase: Phase
    label: str
    emoji: str
    color: str
    focus: str
    food_tip: str


class WeightTargetResponse(BaseModel):
    base: float
    target: float
    water_load_bonus: int = 0
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    multiplier: float

    model_config = ConfigDict(from_attributes=True)


class HydrationTargetResponse(BaseModel):
    amount: str
    ounces: int
    fluid_type: FluidType
    oz_per_lb: float
    sodium_mg: int
    sodium_label: str
    note: str

    model_config = ConfigDict(from_attributes=True)


class SliceTargetsResponse(BaseModel):
    protein: int
    carb: int
    veg: int
    fruit: int
    fat: int
    bmr: int
    tdee: int
    adjusted_tdee: int
    calorie_adjustment: int
    total_calories: int

    model_config = ConfigDict(from_attributes=True)


class MacroTargetResponse(BaseModel):
    carbs_min: int
    carbs_max: int
    protein_min: int
    protein_max: int
    ratio: str
    warning: Optional[str] = None
    slices: Optional[SliceTargetsResponse] = None

    model_config = ConfigDict(from_attributes=True)


class DailyTargetsResponse(BaseModel):
    date: date
    days_until: int
    protocol: Protocol
    phase: Phase
    weight: WeightTargetResponse
    hydration: HydrationTargetResponse
    macros: MacroTargetResponse
    notes: str
    focus: str

    model_config = ConfigDict(from_attributes=True)


class DayPlanResponse(BaseModel):
    date: date
    day_label: str
    days_until: int
    phase: Phase
    weight: WeightTargetResponse
    hydration: HydrationTargetResponse
    macros: MacroTargetResponse
    notes: str
    focus: str
    is_today: bool
    is_tomorrow: bool
    is_critical_checkpoint: bool
    morning_weight: Optional[float] = None
    pace: Optional[Pace] = None

    model_config = ConfigDict(from_attributes=True)


class DriftMetricsResponse(BaseModel):
    overnight: Optional[float] = None
    session: Optional[float] = None
    overnight_rate: Optional[float] = None
    session_rate: Optional[float] = None
    overnight_pairs: int = 0
    session_pairs: int = 0
    extra_avg_loss: Optional[float] = None
    extra_count: int = 0
    today_extra_count: int = 0
    today_extra_loss: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class ProjectionResponse(BaseModel):
    projected_weight: Optional[float] = None


class SafetyResponse(BaseModel):
    level: SafetyLevel
    message: str
    detail: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PillarScoreResponse(BaseModel):
    raw: float
    weighted: float
    weight: float
    has_data: bool
    tier: DataTier

    model_config = ConfigDict(from_attributes=True)


class CutScoreResponse(BaseModel):
    score: int
    label: str
    zone: ScoreZone
    rationale: str
    weight: PillarScoreResponse
    recovery: PillarScoreResponse
    protocol: PillarScoreResponse

    model_config = ConfigDict(from_attributes=True)


class CutStatusResponse(BaseModel):
    date: date
    days_until: int
    phase: Phase
    current_weight: Optional[float] = None
    target: WeightTargetResponse
    drift: DriftMetricsResponse
    projected_weight: Optional[float] = None
    projected_over_class: Optional[float] = None
    pace: Optional[Pace] = None
    safety: Optional[SafetyResponse] = None
    cut_score: Optional[CutScoreResponse] = None

    model_config = ConfigDict(from_attributes=True)


class ReconcileResponse(BaseModel):
    mode: Optional[NutritionMode] = None
    changed: List[str]
    tracking: DailyTrackingIn


class CheckpointResponse(BaseModel):
    label: str
    min_weight: float
    max_weight: float

    model_config = ConfigDict(from_attributes=True)


class RehydrationResponse(BaseModel):
    fluid_oz_min: int
    fluid_oz_max: int
    sodium_mg_min: int
    sodium_mg_max: int
    glycogen: str

    model_config = ConfigDict(from_attributes=True)


class RecommendationResponse(BaseModel):
    protocol: Protocol
    reason: str
    warning: Optional[str] = None
    checkpoints: List[CheckpointResponse]
    rehydration: Optional[RehydrationResponse] = None


class ProtocolSummaryResponse(BaseModel):
    id: str
    name: str
    short_name: str
    is_cutting: bool
    uses_water_load_bonus: bool
    nutrition_mode: NutritionMode
    macro_ratio: str
