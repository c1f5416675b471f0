"""
Optimistic updates with rollback.

The UI applies a write to its in-memory snapshot right away, persists it
in the background, and restores the pre-write state if the store rejects
it. The engine's pure functions never see any of this; they just
recompute from whatever snapshot they are handed.

Usage:
    update = apply_optimistic(record, lambda r: log_slices(r, protein=4))
    if store.save(record):
        update.commit()
    else:
        update.rollback()
"""

import copy
import logging
from typing import Any, Callable

from core.exceptions import OptimisticUpdateError

logger = logging.getLogger(__name__)

PENDING = "pending"
COMMITTED = "committed"
ROLLED_BACK = "rolled_back"


def _restore(target: Any, saved: Any) -> None:
    """Copy saved state back into target without replacing the object."""
    if isinstance(target, dict):
        target.clear()
        target.update(copy.deepcopy(saved))
    elif isinstance(target, list):
        target[:] = copy.deepcopy(saved)
    else:
        target.__dict__.clear()
        target.__dict__.update(copy.deepcopy(saved.__dict__))


class OptimisticUpdate:
    """
    Handle for one applied-but-unconfirmed write.

    commit() and rollback() are each idempotent and mutually exclusive.
    """

    def __init__(self, snapshot: Any, saved: Any):
        self.snapshot = snapshot
        self._saved = saved
        self.state = PENDING

    @property
    def is_pending(self) -> bool:
        return self.state == PENDING

    def commit(self) -> None:
        if self.state == COMMITTED:
            return
        if self.state == ROLLED_BACK:
            raise OptimisticUpdateError("Cannot commit an update that was rolled back")
        self.state = COMMITTED
        self._saved = None

    def rollback(self) -> None:
        if self.state == ROLLED_BACK:
            return
        if self.state == COMMITTED:
            raise OptimisticUpdateError("Cannot roll back an update that was committed")
        _restore(self.snapshot, self._saved)
        self.state = ROLLED_BACK
        self._saved = None


def apply_optimistic(snapshot: Any, mutate: Callable[[Any], Any]) -> OptimisticUpdate:
    """
    Save the current state of snapshot, then apply mutate to it in place.

    If mutate itself raises, the snapshot is restored before re-raising.
    """
    saved = copy.deepcopy(snapshot)
    update = OptimisticUpdate(snapshot, saved)
    try:
        mutate(snapshot)
    except Exception:
        update.rollback()
        raise
    return update


def persist_optimistic(
    snapshot: Any,
    mutate: Callable[[Any], Any],
    persist: Callable[[Any], bool],
) -> bool:
    """
    Apply mutate, then persist. Commit on success, roll back on failure.

    Args:
        persist: Caller's store write; returns True on success. An
            exception counts as failure.

    Returns:
        True if the write was committed
    """
    update = apply_optimistic(snapshot, mutate)
    try:
        ok = bool(persist(snapshot))
    except Exception as e:
        logger.warning("Persist failed, rolling back optimistic update: %s", e)
        update.rollback()
        return False

    if not ok:
        logger.warning("Persist rejected, rolling back optimistic update")
        update.rollback()
        return False

    update.commit()
    return True
