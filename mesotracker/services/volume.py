"""Volume adjustment: soreness + pump feedback -> per-muscle-group set delta.

Fresh muscles with a weak pump get the biggest volume bump; any real soreness
limits growth, and extreme soreness removes a set.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from mesotracker.core.constants import MAX_SETS_PER_EXERCISE_PER_SESSION
from mesotracker.core.enums import PumpLevel, SorenessLevel
from mesotracker.services.log_entry import WorkoutLogEntry

logger = logging.getLogger(__name__)

SET_DELTA_TABLE: dict[SorenessLevel, dict[PumpLevel, int]] = {
    SorenessLevel.NONE: {PumpLevel.NONE: 3, PumpLevel.MEDIUM: 2, PumpLevel.AMAZING: 1},
    SorenessLevel.MEDIUM: {PumpLevel.NONE: 1, PumpLevel.MEDIUM: 1, PumpLevel.AMAZING: 1},
    SorenessLevel.VERY_SORE: {PumpLevel.NONE: 0, PumpLevel.MEDIUM: 0, PumpLevel.AMAZING: 0},
    SorenessLevel.EXTREMELY_SORE: {PumpLevel.NONE: -1, PumpLevel.MEDIUM: -1, PumpLevel.AMAZING: -1},
}


def set_delta(soreness: SorenessLevel | None, pump: PumpLevel | None) -> int:
    """Signed set change for a muscle group. No soreness answer means no adjustment."""
    if soreness is None:
        return 0
    return SET_DELTA_TABLE[soreness][pump or PumpLevel.MEDIUM]


class VolumeAdjustment(BaseModel):
    """Outcome of adjusting one muscle group."""

    muscle_group: str
    delta: int
    applied: int = 0
    exercise_name: str | None = None
    notice: str | None = None


def pick_exercise_to_grow(entries: list[WorkoutLogEntry]) -> WorkoutLogEntry | None:
    """Fewest current sets, first encountered on ties."""
    best: WorkoutLogEntry | None = None
    for entry in entries:
        if best is None or entry.current_sets < best.current_sets:
            best = entry
    return best


def pick_exercise_to_shrink(entries: list[WorkoutLogEntry]) -> WorkoutLogEntry | None:
    """Most current sets, first encountered on ties."""
    best: WorkoutLogEntry | None = None
    for entry in entries:
        if best is None or entry.current_sets > best.current_sets:
            best = entry
    return best


def apply_volume_adjustment(
    entries: list[WorkoutLogEntry],
    muscle_group: str,
    delta: int,
    *,
    week: int,
    duration_weeks: int,
    weekly_sets_logged: int,
    weekly_set_ceiling: int,
) -> VolumeAdjustment:
    """
    Apply `delta` to one exercise of `muscle_group` among today's `entries`.
    Growth is skipped (with a notice) when this week's logged sets plus today's base
    sets plus the delta would exceed the weekly ceiling, and never takes an exercise
    past the per-exercise set cap.
    """
    result = VolumeAdjustment(muscle_group=muscle_group, delta=delta)
    group = [e for e in entries if e.muscle_group == muscle_group]
    if delta == 0 or not group:
        return result

    if delta > 0:
        todays_base = sum(e.current_sets for e in group)
        projected = weekly_sets_logged + todays_base + delta
        if projected > weekly_set_ceiling:
            result.notice = (
                f"{muscle_group}: adding {delta} set(s) would reach {projected} sets this week "
                f"(limit {weekly_set_ceiling}). Volume kept as is."
            )
            logger.info("Skipping volume increase: %s", result.notice)
            return result
        target = pick_exercise_to_grow(group)
        room = MAX_SETS_PER_EXERCISE_PER_SESSION - target.current_sets
        applied = min(delta, max(0, room))
        if applied < delta:
            result.notice = (
                f"{muscle_group}: {target.exercise_name} is capped at "
                f"{MAX_SETS_PER_EXERCISE_PER_SESSION} sets; added {applied} of {delta}."
            )
            logger.info("Volume increase capped: %s", result.notice)
        if applied:
            target.add_sets(applied, week, duration_weeks)
            result.exercise_name = target.exercise_name
        result.applied = applied
        return result

    target = pick_exercise_to_shrink(group)
    result.applied = -target.remove_sets(-delta)
    result.exercise_name = target.exercise_name
    return result
