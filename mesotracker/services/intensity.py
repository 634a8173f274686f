"""Target intensity (RPE) schedule across a mesocycle.

Week 1 establishes a baseline at RPE 7. Effort then ramps: 8 with a last set at
9 in weeks 2-3, 9 with a last set at 10 in weeks 4-5, and 10 on every set in
week 6. The final week of a plan is the deload week and drops back to 7
whatever its number.
"""

from __future__ import annotations

from mesotracker.core.constants import BASELINE_INTENSITY


def is_deload_week(week: int, duration_weeks: int) -> bool:
    return week == duration_weeks


def target_intensity(week: int, set_index: int, total_sets: int, duration_weeks: int) -> int:
    """Target RPE for set `set_index` (0-based) of an exercise with `total_sets` sets."""
    if week == 1:
        return BASELINE_INTENSITY
    if is_deload_week(week, duration_weeks):
        return BASELINE_INTENSITY

    is_last_set = set_index == total_sets - 1
    if week in (2, 3):
        return 9 if is_last_set else 8
    if week in (4, 5):
        return 10 if is_last_set else 9
    if week == 6:
        return 10
    return BASELINE_INTENSITY


def target_intensities(week: int, total_sets: int, duration_weeks: int) -> list[int]:
    return [target_intensity(week, i, total_sets, duration_weeks) for i in range(total_sets)]
