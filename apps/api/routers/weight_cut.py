"""
Weight Cut API Endpoints

Stateless planning and analytics for making weight. Every request carries
its own snapshot (profile, logs, tracking record); nothing is stored here.
The sync layer owns persistence and calls these to recompute after each
confirmed write.
"""

import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter

from core.exceptions import InvalidWeightError, ValidationError
from schemas import (
    AnalyticsRequest,
    CutScoreRequest,
    CutScoreResponse,
    CutStatusRequest,
    CutStatusResponse,
    DailyTargetsResponse,
    DailyTrackingIn,
    DayPlanResponse,
    DriftMetricsResponse,
    PhaseRequest,
    PhaseResponse,
    ProjectionRequest,
    ProjectionResponse,
    ProtocolSummaryResponse,
    RecommendationRequest,
    RecommendationResponse,
    ReconcileRequest,
    ReconcileResponse,
    SafetyRequest,
    SafetyResponse,
    TargetsRequest,
    WeeklyPlanRequest,
)
from services.units import validate_weight
from services.weight_cut.cut_score import compute_cut_score
from services.weight_cut.drift_analytics import compute_drift_and_sweat_rates
from services.weight_cut.phase_classifier import classify_phase, phase_style, protocol_phase_label
from services.weight_cut.projection import assess_safety, build_cut_status, project_weigh_in_weight
from services.weight_cut.protocol_table import PROTOCOL_TABLE, coerce_protocol
from services.weight_cut.recommendation import checkpoints, recommend_protocol, rehydration_plan
from services.weight_cut.reconciler import reconcile_tracking
from services.weight_cut.target_calculator import compute_targets
from services.weight_cut.weekly_plan import build_weekly_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/weight-cut", tags=["Weight Cut"])


def _check_weight(value, field: str) -> float:
    try:
        return validate_weight(value)
    except InvalidWeightError as e:
        raise ValidationError(str(e), field=field)


def _check_profile(profile_in):
    _check_weight(profile_in.current_weight, "current_weight")
    _check_weight(profile_in.target_weight_class, "target_weight_class")
    return profile_in.to_profile()


def _check_logs(logs_in):
    entries = []
    for log in logs_in:
        _check_weight(log.weight, "weight")
        entries.append(log.to_entry())
    return entries


@router.get("/protocols", response_model=List[ProtocolSummaryResponse])
def list_protocols():
    """All protocols with their display names and tracking mode."""
    return [
        ProtocolSummaryResponse(
            id=definition.protocol.value,
            name=definition.name,
            short_name=definition.short_name,
            is_cutting=definition.is_cutting,
            uses_water_load_bonus=definition.uses_water_load_bonus,
            nutrition_mode=definition.nutrition_mode,
            macro_ratio=definition.macro_ratio,
        )
        for definition in PROTOCOL_TABLE.values()
    ]


@router.post("/phase", response_model=PhaseResponse)
def get_phase(request: PhaseRequest):
    protocol = coerce_protocol(request.protocol)
    phase = classify_phase(request.days_until_weigh_in, protocol)
    style = phase_style(phase)
    focus = protocol_phase_label(protocol, request.days_until_weigh_in)
    return PhaseResponse(
        days_until_weigh_in=request.days_until_weigh_in,
        protocol=protocol,
        phase=phase,
        label=style.label,
        emoji=style.emoji,
        color=style.color,
        focus=focus.label,
        food_tip=focus.food_tip,
    )


@router.post("/targets", response_model=DailyTargetsResponse)
def get_targets(request: TargetsRequest):
    """Today's weight, hydration and macro targets."""
    profile = _check_profile(request.profile)
    targets = compute_targets(profile, request.today)
    return DailyTargetsResponse.model_validate(targets)


@router.post("/weekly-plan", response_model=List[DayPlanResponse])
def get_weekly_plan(request: WeeklyPlanRequest):
    """Seven-day plan anchored to the competition week."""
    profile = _check_profile(request.profile)
    plan = build_weekly_plan(profile, _check_logs(request.logs), request.today)
    return [DayPlanResponse.model_validate(day) for day in plan]


@router.post("/analytics", response_model=DriftMetricsResponse)
def get_analytics(request: AnalyticsRequest):
    """Overnight drift, session sweat loss and extra workouts from the log."""
    metrics = compute_drift_and_sweat_rates(_check_logs(request.logs), today=request.today)
    return DriftMetricsResponse.model_validate(metrics)


@router.post("/projection", response_model=ProjectionResponse)
def get_projection(request: ProjectionRequest):
    if request.current_weight is not None:
        _check_weight(request.current_weight, "current_weight")
    projected = project_weigh_in_weight(
        request.current_weight,
        {"overnight": request.overnight, "session": request.session},
        request.days_remaining,
    )
    return ProjectionResponse(projected_weight=projected)


@router.post("/status", response_model=CutStatusResponse)
def get_cut_status(request: CutStatusRequest):
    """Drift, projection, pace, safety and cut score in one call."""
    profile = _check_profile(request.profile)
    tracking = request.tracking.to_record() if request.tracking is not None else None
    status = build_cut_status(profile, _check_logs(request.logs), request.today, tracking)
    return CutStatusResponse.model_validate(status)


@router.post("/cut-score", response_model=CutScoreResponse)
def get_cut_score(request: CutScoreRequest):
    """0-100 score from weight, recovery and protocol readings."""
    _check_weight(request.target_weight, "target_weight")
    if request.current_weight is not None:
        _check_weight(request.current_weight, "current_weight")
    result = compute_cut_score(request.to_input(), hour=request.hour)
    return CutScoreResponse.model_validate(result)


@router.post("/safety", response_model=SafetyResponse)
def get_safety(request: SafetyRequest):
    current = _check_weight(request.current_weight, "current_weight")
    target = _check_weight(request.target_weight, "target_weight")
    assessment = assess_safety(current, target, request.days_remaining, request.protocol)
    return SafetyResponse.model_validate(assessment)


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile(request: ReconcileRequest):
    """
    Reconcile slice and gram totals on a tracking record.

    Returns the corrected record; the caller persists it.
    """
    record = request.tracking.to_record()
    result = reconcile_tracking(record)
    return ReconcileResponse(
        mode=result.mode,
        changed=result.changed,
        tracking=DailyTrackingIn(**asdict(record)),
    )


@router.post("/recommendation", response_model=RecommendationResponse)
def get_recommendation(request: RecommendationRequest):
    current = _check_weight(request.current_weight, "current_weight")
    weight_class = _check_weight(request.target_weight_class, "target_weight_class")

    recommendation = recommend_protocol(current, weight_class)
    rehydration = rehydration_plan(request.lbs_lost) if request.lbs_lost is not None else None

    return RecommendationResponse(
        protocol=recommendation.protocol,
        reason=recommendation.reason,
        warning=recommendation.warning,
        checkpoints=[asdict(c) for c in checkpoints(weight_class)],
        rehydration=asdict(rehydration) if rehydration is not None else None,
    )
