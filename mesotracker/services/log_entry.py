"""In-session workout log entry: one exercise's prescription and entered results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from mesotracker.core.constants import BASELINE_INTENSITY, MAX_INTENSITY, MIN_INTENSITY
from mesotracker.schemas.plan import ExerciseTemplate
from mesotracker.services.intensity import target_intensity
from mesotracker.services.rep_progression import best_set_index, next_reps


class WorkoutLogEntry(BaseModel):
    """
    Per-set lists (expected_reps, actual_reps, weights, prefilled_weights, intensity)
    are index-aligned and always exactly current_sets long. Every mutating method
    ends with ensure_array_integrity().
    """

    exercise_name: str
    muscle_group: str
    planned_sets: int = Field(..., ge=1)
    planned_reps: int = Field(..., ge=1)
    current_sets: int = Field(..., ge=1)
    expected_reps: list[int] = Field(default_factory=list)
    actual_reps: list[int] = Field(default_factory=list)
    weights: list[float | None] = Field(default_factory=list)
    prefilled_weights: list[float] = Field(default_factory=list)  # snapshot at initialization
    intensity: list[int] = Field(default_factory=list)
    completed: bool = False

    @classmethod
    def baseline(cls, template: ExerciseTemplate, sets: int | None = None, reps: int | None = None) -> "WorkoutLogEntry":
        """Zeroed entry from template defaults: weights 0, reps 0, intensity 7."""
        n = max(1, sets if sets is not None else template.default_sets)
        expected = max(1, reps if reps is not None else template.default_reps)
        return cls(
            exercise_name=template.exercise_name,
            muscle_group=template.muscle_group,
            planned_sets=template.default_sets,
            planned_reps=template.default_reps,
            current_sets=n,
            expected_reps=[expected] * n,
            actual_reps=[0] * n,
            weights=[0.0] * n,
            prefilled_weights=[0.0] * n,
            intensity=[BASELINE_INTENSITY] * n,
        )

    # ── Invariant ────────────────────────────────────────────────────────

    def ensure_array_integrity(self) -> None:
        """Pad (repeating the last value) or truncate every per-set list to current_sets."""
        self.current_sets = max(1, self.current_sets)
        n = self.current_sets
        self.expected_reps = _fit(self.expected_reps, n, self.planned_reps)
        self.actual_reps = _fit(self.actual_reps, n, 0, repeat_last=False)
        self.weights = _fit(self.weights, n, 0.0)
        self.prefilled_weights = _fit(self.prefilled_weights, n, 0.0)
        self.intensity = _fit(self.intensity, n, BASELINE_INTENSITY)

    # ── Set count changes ────────────────────────────────────────────────

    def add_sets(self, count: int, week: int, duration_weeks: int) -> None:
        """
        Append `count` sets. Each new set targets the schedule's RPE for its position and
        expects reps derived from the best existing set (most expected reps, lowest RPE).
        """
        for _ in range(max(0, count)):
            new_index = self.current_sets
            target = target_intensity(week, new_index, new_index + 1, duration_weeks)
            ref = best_set_index(self.expected_reps, self.intensity)
            if ref is None:
                expected = self.planned_reps
            else:
                expected = next_reps(self.expected_reps[ref], self.intensity[ref], target)
            last_weight = self.weights[-1] if self.weights else 0.0
            last_prefill = self.prefilled_weights[-1] if self.prefilled_weights else 0.0

            self.actual_reps.append(0)
            self.weights.append(last_weight)
            self.prefilled_weights.append(last_prefill)
            self.intensity.append(target)
            self.expected_reps.append(expected)
            self.current_sets += 1
        self.completed = False
        self.ensure_array_integrity()

    def remove_sets(self, count: int) -> int:
        """Drop up to `count` sets from the tail, never below one set. Returns sets removed."""
        removed = min(max(0, count), self.current_sets - 1)
        self.current_sets -= removed
        self.ensure_array_integrity()
        return removed

    # ── Entry-level edits ────────────────────────────────────────────────

    def _check_index(self, set_index: int) -> None:
        if not 0 <= set_index < self.current_sets:
            raise ValueError(f"Set {set_index + 1} does not exist for {self.exercise_name}")

    def weight_change_needs_confirmation(self, set_index: int, weight: float, week: int, epsilon: float) -> bool:
        """Week >= 2 only: a weight far from the prefilled one must be confirmed."""
        self._check_index(set_index)
        if week < 2:
            return False
        return abs(float(weight) - float(self.prefilled_weights[set_index])) > epsilon

    def set_weight(self, set_index: int, weight: float | None) -> None:
        self._check_index(set_index)
        if weight is not None and weight < 0:
            raise ValueError("Weight cannot be negative")
        self.weights[set_index] = weight

    def keep_prefilled_weight(self, set_index: int) -> None:
        self._check_index(set_index)
        self.weights[set_index] = self.prefilled_weights[set_index]

    def set_reps(self, set_index: int, reps: int) -> None:
        self._check_index(set_index)
        if reps < 0:
            raise ValueError("Reps cannot be negative")
        self.actual_reps[set_index] = reps

    def set_intensity(self, set_index: int, rpe: int, week: int) -> None:
        self._check_index(set_index)
        if week >= 2:
            raise ValueError("Intensity is prescribed after week 1 and cannot be edited")
        if not MIN_INTENSITY <= rpe <= MAX_INTENSITY:
            raise ValueError("Intensity must be between 1 and 10")
        self.intensity[set_index] = rpe

    # ── Completion ───────────────────────────────────────────────────────

    def is_complete(self, week: int) -> bool:
        """Every set has reps > 0 and a weight; week 1 also needs a valid RPE per set."""
        if any(r <= 0 for r in self.actual_reps):
            return False
        if any(w is None for w in self.weights):
            return False
        if week == 1 and any(not MIN_INTENSITY <= x <= MAX_INTENSITY for x in self.intensity):
            return False
        return True

    def refresh_completed(self, week: int) -> bool:
        self.completed = self.is_complete(week)
        return self.completed


def _fit(values: list, n: int, fill, repeat_last: bool = True) -> list:
    if len(values) >= n:
        return list(values[:n])
    pad = values[-1] if (repeat_last and values) else fill
    return list(values) + [pad] * (n - len(values))
