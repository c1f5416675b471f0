"""
Drift & Sweat-Rate Analytics

Retrospective rates from the weight log:

    Overnight drift   morning reading vs. the post-session / before-bed
                      reading the night before (4-16 h earlier)
    Session loss      post-session reading vs. the pre-session reading
                      that opened it (15 min - 6 h earlier)
    Extra workouts    extra-session-before -> extra-session-after pairs,
                      same calendar day, within 3 h

Only weight actually lost counts; a pair that shows a gain is skipped.
Every output is None when no pair qualifies. None means "not enough
data", never zero.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence, Set

from core.cut_config import cut_config
from services.weight_cut.constants import (
    EXTRA_WORKOUT_WINDOW_HOURS,
    LogType,
    OVERNIGHT_WINDOW_HOURS,
    SESSION_WINDOW_HOURS,
)
from services.weight_cut.models import WeightLogEntry

logger = logging.getLogger(__name__)

OVERNIGHT_START_TYPES = frozenset({LogType.POST_SESSION, LogType.BEFORE_BED})


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass
class DriftMetrics:
    """Average losses (lbs) and rates (lbs/hr); None when no pairs qualified."""

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


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _hours_between(earlier: WeightLogEntry, later: WeightLogEntry) -> float:
    return (later.timestamp - earlier.timestamp).total_seconds() / 3600


def _mean(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def sort_logs(logs: Iterable[WeightLogEntry]) -> List[WeightLogEntry]:
    """Oldest first. Stable, so same-timestamp entries keep input order."""
    return sorted(logs, key=lambda entry: entry.timestamp)


def _find_preceding(
    ordered: List[WeightLogEntry],
    index: int,
    types: frozenset,
    used: Set[int],
) -> Optional[int]:
    """Index of the nearest earlier unused entry of one of these types."""
    for j in range(index - 1, -1, -1):
        if j in used:
            continue
        if ordered[j].log_type in types:
            return j
    return None


# ---------------------------------------------------------------------------
# Scans
# ---------------------------------------------------------------------------


def _overnight_pairs(ordered: List[WeightLogEntry]):
    low, high = OVERNIGHT_WINDOW_HOURS
    used: Set[int] = set()
    losses, rates = [], []

    for i, entry in enumerate(ordered):
        if entry.log_type != LogType.MORNING:
            continue
        j = _find_preceding(ordered, i, OVERNIGHT_START_TYPES, used)
        if j is None:
            continue

        gap = _hours_between(ordered[j], entry)
        if not low < gap < high:
            continue

        drift = ordered[j].weight - entry.weight
        if drift <= 0:
            continue

        used.add(j)
        losses.append(drift)
        hours = entry.sleep_hours if _positive(entry.sleep_hours) else gap
        rates.append(drift / hours)

    return losses, rates


def _session_pairs(ordered: List[WeightLogEntry], max_rate: float):
    low, high = SESSION_WINDOW_HOURS
    used: Set[int] = set()
    losses, rates = [], []

    for i, entry in enumerate(ordered):
        if entry.log_type != LogType.POST_SESSION:
            continue
        j = _find_preceding(ordered, i, frozenset({LogType.PRE_SESSION}), used)
        if j is None:
            continue

        gap = _hours_between(ordered[j], entry)
        if not low < gap < high:
            continue

        loss = ordered[j].weight - entry.weight
        if loss <= 0:
            continue

        hours = entry.duration_minutes / 60 if _positive(entry.duration_minutes) else gap
        rate = loss / hours
        if rate > max_rate:
            logger.debug(
                "Discarding session pair %s -> %s: %.2f lbs/hr exceeds %.1f",
                ordered[j].timestamp, entry.timestamp, rate, max_rate,
            )
            continue

        used.add(j)
        losses.append(loss)
        rates.append(rate)

    return losses, rates


def _extra_workouts(ordered: List[WeightLogEntry]):
    used: Set[int] = set()
    pairs = []   # (date, loss)

    for i, after in enumerate(ordered):
        if after.log_type != LogType.EXTRA_AFTER:
            continue
        j = _find_preceding(ordered, i, frozenset({LogType.EXTRA_BEFORE}), used)
        if j is None:
            continue

        before = ordered[j]
        if before.timestamp.date() != after.timestamp.date():
            continue
        if _hours_between(before, after) > EXTRA_WORKOUT_WINDOW_HOURS:
            continue

        used.add(j)
        loss = before.weight - after.weight
        if loss > 0:
            pairs.append((after.timestamp.date(), loss))

    return pairs


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def compute_drift_and_sweat_rates(
    logs: Iterable[WeightLogEntry],
    today: Optional[date] = None,
    max_sweat_rate: Optional[float] = None,
) -> DriftMetrics:
    """
    Scan the log and average every qualifying pair.

    Args:
        logs: Entries in any order
        today: Date for the today_extra_* fields (defaults to the date of
            the most recent entry)
        max_sweat_rate: lbs/hr ceiling for session pairs (config default 6.0)
    """
    ordered = sort_logs(logs)
    if not ordered:
        return DriftMetrics()

    ceiling = cut_config.max_sweat_rate_lbs_per_hr if max_sweat_rate is None else max_sweat_rate

    overnight_losses, overnight_rates = _overnight_pairs(ordered)
    session_losses, session_rates = _session_pairs(ordered, ceiling)
    extras = _extra_workouts(ordered)

    day = today if today is not None else ordered[-1].timestamp.date()
    todays = [loss for extra_date, loss in extras if extra_date == day]

    return DriftMetrics(
        overnight=_mean(overnight_losses),
        session=_mean(session_losses),
        overnight_rate=_mean(overnight_rates),
        session_rate=_mean(session_rates),
        overnight_pairs=len(overnight_losses),
        session_pairs=len(session_losses),
        extra_avg_loss=_mean([loss for _, loss in extras]),
        extra_count=len(extras),
        today_extra_count=len(todays),
        today_extra_loss=sum(todays),
    )
