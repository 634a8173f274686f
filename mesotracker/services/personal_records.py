"""Personal records: heaviest set per exercise (more reps wins at equal weight)."""

from __future__ import annotations

from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.personal_record import PersonalRecord


def best_lift(record: PerformanceRecord) -> tuple[float, int] | None:
    """(weight, reps) of the heaviest completed set, or None when nothing was lifted."""
    best: tuple[float, int] | None = None
    for weight, reps in zip(record.weight_used or [], record.actual_reps or []):
        if weight is None or reps is None or reps <= 0:
            continue
        candidate = (float(weight), int(reps))
        if best is None or candidate > best:
            best = candidate
    return best


def is_new_record(existing: PersonalRecord | None, weight: float, reps: int) -> bool:
    if existing is None:
        return True
    return (weight, reps) > (float(existing.max_weight), int(existing.max_reps))
