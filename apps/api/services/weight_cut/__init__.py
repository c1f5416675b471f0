# Weight Cut Engine
#
# Table-driven planning and projection for making weight.
#
# Architecture:
# - Protocol table validated at import (every day count has one bucket)
# - Phase classifier and target calculator keyed on days-until-weigh-in
# - Weekly plan built from the target calculator, one day at a time
# - Drift / sweat-rate analytics and projection from the weight log
# - Slice <-> gram reconciler for dual-mode intake tracking
# - Cut score: weight, recovery and protocol pillars blended to 0-100
#
# Everything here is pure and synchronous. "Today" is passed in explicitly.

from .constants import (
    DataTier,
    FluidType,
    LogType,
    NutritionMode,
    Pace,
    Phase,
    Protocol,
    SafetyLevel,
    ScoreZone,
    SliceCategory,
)
from .models import AthleteProfile, DailyTrackingRecord, TrackingSnapshot, WeightLogEntry
from .protocol_table import PROTOCOL_TABLE, lookup_bucket, validate_protocol_table
from .phase_classifier import classify_phase, phase_style, protocol_phase_label
from .target_calculator import (
    compute_hydration_target,
    compute_macro_targets,
    compute_target_weight,
    compute_targets,
    days_until_weigh_in,
)
from .weekly_plan import DayPlan, build_weekly_plan
from .reconciler import reconcile_tracking
from .drift_analytics import DriftMetrics, compute_drift_and_sweat_rates
from .cut_score import CutScore, CutScoreInput, compute_cut_score
from .projection import assess_safety, build_cut_status, classify_pace, project_weigh_in_weight
from .recommendation import recommend_protocol
from .optimistic import apply_optimistic, persist_optimistic

__all__ = [
    # Models
    'AthleteProfile',
    'WeightLogEntry',
    'DailyTrackingRecord',
    'TrackingSnapshot',

    # Tables and classification
    'PROTOCOL_TABLE',
    'lookup_bucket',
    'validate_protocol_table',
    'classify_phase',
    'phase_style',
    'protocol_phase_label',

    # Targets
    'days_until_weigh_in',
    'compute_target_weight',
    'compute_hydration_target',
    'compute_macro_targets',
    'compute_targets',
    'DayPlan',
    'build_weekly_plan',

    # Tracking and analytics
    'reconcile_tracking',
    'DriftMetrics',
    'compute_drift_and_sweat_rates',
    'project_weigh_in_weight',
    'classify_pace',
    'assess_safety',
    'build_cut_status',
    'CutScore',
    'CutScoreInput',
    'compute_cut_score',
    'recommend_protocol',
    'apply_optimistic',
    'persist_optimistic',

    # Constants
    'Protocol',
    'Phase',
    'FluidType',
    'LogType',
    'NutritionMode',
    'SliceCategory',
    'SafetyLevel',
    'Pace',
    'DataTier',
    'ScoreZone',
]
