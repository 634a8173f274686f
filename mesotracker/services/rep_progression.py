"""Rep progression: this week's expected reps from last week's reps and effort."""

from __future__ import annotations

from collections.abc import Sequence

from mesotracker.core.constants import DELOAD_DIVISOR


def next_reps(previous_actual_reps: int, previous_intensity: int, current_target_intensity: int) -> int:
    """
    Expected reps = last reps + (this week's target RPE - last week's RPE), at least 1.
    Finishing last week below target leaves room to add reps; overshooting removes them.
    """
    return max(1, previous_actual_reps + (current_target_intensity - previous_intensity))


def best_set_index(reps: Sequence[int], intensities: Sequence[int]) -> int | None:
    """Index of the set with the most reps, ties broken by the lowest intensity (then first)."""
    best: int | None = None
    for i, r in enumerate(reps):
        rpe = intensities[i] if i < len(intensities) else None
        if best is None:
            best = i
            continue
        best_rpe = intensities[best] if best < len(intensities) else None
        if r > reps[best]:
            best = i
        elif r == reps[best] and rpe is not None and (best_rpe is None or rpe < best_rpe):
            best = i
    return best


def deload_sets(sets: int) -> int:
    return max(1, round(sets / DELOAD_DIVISOR))


def deload_reps(reps: int) -> int:
    return max(1, round(reps / DELOAD_DIVISOR))
