"""
Phase Classifier

Maps signed days-until-weigh-in to a competition-week phase.

    <0   Recover
     0   Compete
     1   Critical   (the checkpoint day)
     2   Restrict
    3-5  Load
    6+   Maintenance

Non-cutting protocols (Hold Weight, Build, SPAR) never water load or
restrict, so every pre-competition day is Maintenance for them.
"""

from dataclasses import dataclass
from typing import Dict, Union

from services.weight_cut.constants import Phase, Protocol


NON_CUTTING_PROTOCOLS = frozenset({Protocol.HOLD_WEIGHT, Protocol.BUILD, Protocol.SPAR})


@dataclass(frozen=True)
class PhaseStyle:
    label: str
    emoji: str
    color: str      # theme color token, not a CSS class


@dataclass(frozen=True)
class ProtocolPhaseLabel:
    """Protocol-specific food focus for a day ("MAX FAT BURN", "WATER LOAD")."""
    label: str
    emoji: str
    color: str
    food_tip: str


PHASE_STYLES: Dict[Phase, PhaseStyle] = {
    Phase.MAINTENANCE: PhaseStyle("Maintain", "💪", "blue"),
    Phase.LOAD: PhaseStyle("Load", "🌊", "primary"),
    Phase.RESTRICT: PhaseStyle("Restrict", "💧", "violet"),
    Phase.CRITICAL: PhaseStyle("Critical", "⚠️", "rose"),
    Phase.COMPETE: PhaseStyle("Compete", "🏆", "yellow"),
    Phase.RECOVER: PhaseStyle("Recover", "🟢", "cyan"),
}


def _is_cutting(protocol: Union[Protocol, str, None]) -> bool:
    try:
        return Protocol(protocol) not in NON_CUTTING_PROTOCOLS
    except ValueError:
        # Unknown ids get the full competition-week treatment
        return True


def classify_phase(days_until_weigh_in: int, protocol: Union[Protocol, str, None] = None) -> Phase:
    """
    Classify a day of the competition week. Total over all integers.

    Args:
        days_until_weigh_in: weigh-in date minus today (negative after weigh-in)
        protocol: Protocol id; None classifies as a cutting protocol
    """
    days = int(days_until_weigh_in)

    if days < 0:
        return Phase.RECOVER
    if days == 0:
        return Phase.COMPETE
    if protocol is not None and not _is_cutting(protocol):
        return Phase.MAINTENANCE
    if days == 1:
        return Phase.CRITICAL
    if days == 2:
        return Phase.RESTRICT
    if days <= 5:
        return Phase.LOAD
    return Phase.MAINTENANCE


def phase_style(phase: Union[Phase, str]) -> PhaseStyle:
    try:
        return PHASE_STYLES[Phase(phase)]
    except ValueError:
        return PHASE_STYLES[Phase.LOAD]


# ---------------------------------------------------------------------------
# Protocol food-focus labels
# ---------------------------------------------------------------------------

_RECOVERY = ProtocolPhaseLabel("RECOVERY", "🟢", "green", "Eat everything — full recovery refeed")
_COMPETITION = ProtocolPhaseLabel(
    "COMPETITION DAY", "🏆", "yellow", "Post-weigh-in refuel. Fast carbs between matches."
)


def protocol_phase_label(protocol: Union[Protocol, str, None], days_until_weigh_in: int) -> ProtocolPhaseLabel:
    """Food-focus label for the protocol on this day."""
    days = int(days_until_weigh_in)
    if days < 0:
        return _RECOVERY
    if days == 0:
        return _COMPETITION

    try:
        protocol = Protocol(protocol)
    except ValueError:
        protocol = Protocol.SPAR

    if protocol == Protocol.EXTREME_CUT:
        if days == 1:
            return ProtocolPhaseLabel("PERFORMANCE PREP", "⚡", "blue", "Fructose + evening protein only")
        if days <= 5:
            return ProtocolPhaseLabel(
                "MAX FAT BURN", "🔥", "red", "Fructose only — zero protein for FGF21 activation"
            )
        return ProtocolPhaseLabel("EXTREME CUT", "🔥", "red", "Moderate protein + fructose carbs")

    if protocol == Protocol.RAPID_CUT:
        if days <= 2:
            return ProtocolPhaseLabel(
                "PERFORMANCE", "⚡", "blue", "Switch to glucose/starch. Collagen + seafood protein."
            )
        if days == 3:
            return ProtocolPhaseLabel(
                "CUT → PERFORMANCE", "🔶", "orange", "Fructose heavy — collagen + leucine at dinner"
            )
        if days <= 5:
            return ProtocolPhaseLabel("CUT", "🔥", "red", "Fructose only — zero protein for maximum fat loss")
        return ProtocolPhaseLabel("RAPID CUT", "⚡", "primary", "Moderate protein + fructose carbs")

    if protocol == Protocol.HOLD_WEIGHT:
        if days <= 2:
            return ProtocolPhaseLabel(
                "PERFORMANCE", "⚡", "blue", "Glucose emphasis — full protein for performance"
            )
        if days <= 4:
            return ProtocolPhaseLabel("MIXED", "🔶", "orange", "Mixed fructose/glucose — moderate protein")
        if days == 5:
            return ProtocolPhaseLabel(
                "FGF21 ACTIVATION", "🔥", "red", "Fructose heavy — brief FGF21 activation"
            )
        return ProtocolPhaseLabel("HOLD WEIGHT", "🏆", "primary", "Full protein + balanced carbs")

    if protocol == Protocol.BUILD:
        if days <= 4:
            return ProtocolPhaseLabel(
                "GLUCOSE EMPHASIS", "⚡", "blue", "Glucose/starch carbs — high protein for growth"
            )
        if days == 5:
            return ProtocolPhaseLabel("BALANCED", "🔶", "orange", "Balanced carbs — moderate protein")
        return ProtocolPhaseLabel("BUILD", "💪", "green", "Off-season building — high protein, high carbs")

    if protocol == Protocol.SPAR_COMPETITION:
        if days <= 2:
            return ProtocolPhaseLabel("WATER CUT", "💧", "blue", "Light portions, restrict water")
        if days <= 5:
            return ProtocolPhaseLabel("WATER LOAD", "🌊", "cyan", "Balanced portions, peak hydration")
        return ProtocolPhaseLabel("TRAINING", "💪", "purple", "SPAR portions, auto-adjusting for walk-around")

    return ProtocolPhaseLabel("BALANCED", "🥗", "primary", "All macros — hit your portion targets")
