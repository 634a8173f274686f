"""Workout plan schemas: authored structure, typed day templates, API payloads."""

from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mesotracker.core.constants import (
    DEFAULT_TEMPLATE_REPS,
    DEFAULT_TEMPLATE_SETS,
    MAX_SETS_PER_EXERCISE_PER_SESSION,
)

DAY_KEY_PATTERN = re.compile(r"^(?:day)?(\d+)$", re.IGNORECASE)


def parse_day_key(key: str | int) -> int | None:
    """'day3' / '3' / 3 -> 3. None for anything else."""
    if isinstance(key, int):
        return key if key >= 1 else None
    match = DAY_KEY_PATTERN.match(str(key).strip())
    if not match:
        return None
    day = int(match.group(1))
    return day if day >= 1 else None


# ── Authored structure (as stored in workout_plans.structure) ────────────

class TemplateExerciseIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sets: int = Field(DEFAULT_TEMPLATE_SETS, ge=1, le=MAX_SETS_PER_EXERCISE_PER_SESSION)
    reps: int = Field(DEFAULT_TEMPLATE_REPS, ge=1, le=100)


class MuscleGroupBlockIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    muscle_group: str = Field(..., alias="muscleGroup", min_length=1, max_length=100)
    exercises: list[TemplateExerciseIn] = Field(..., min_length=1)


# ── Typed templates consumed by the progression engine ───────────────────

class ExerciseTemplate(BaseModel):
    """One exercise slot in a day, with its muscle group and template defaults."""

    model_config = ConfigDict(frozen=True)

    exercise_name: str
    muscle_group: str
    default_sets: int = Field(..., ge=1)
    default_reps: int = Field(..., ge=1)


class DayTemplate(BaseModel):
    """Ordered exercises for one day index of the cycle."""

    model_config = ConfigDict(frozen=True)

    day: int
    exercises: tuple[ExerciseTemplate, ...] = ()

    def muscle_groups(self) -> list[str]:
        """Muscle groups in first-appearance order."""
        seen: dict[str, None] = {}
        for ex in self.exercises:
            seen.setdefault(ex.muscle_group, None)
        return list(seen)

    def exercises_for(self, muscle_group: str) -> list[ExerciseTemplate]:
        return [ex for ex in self.exercises if ex.muscle_group == muscle_group]


# ── API payloads ─────────────────────────────────────────────────────────

class WorkoutPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    program_type: str = Field(default="hypertrophy", max_length=50)
    duration_weeks: int = Field(..., ge=1, le=16)
    days_per_week: int = Field(..., ge=1, le=7)


class WorkoutPlanCreate(WorkoutPlanBase):
    """Plan authored by the plan builder. Keys are 'day1'..'dayN' (N = days_per_week)."""

    structure: dict[str, list[MuscleGroupBlockIn]]

    @field_validator("structure")
    @classmethod
    def _day_keys(cls, value: dict[str, list[MuscleGroupBlockIn]]) -> dict[str, list[MuscleGroupBlockIn]]:
        for key in value:
            if parse_day_key(key) is None:
                raise ValueError(f"Invalid day key {key!r}; expected 'day1', 'day2', ...")
        if not any(blocks for blocks in value.values()):
            raise ValueError("Add at least one workout day before saving the plan.")
        return value

    @model_validator(mode="after")
    def _days_within_week(self) -> "WorkoutPlanCreate":
        for key in self.structure:
            if parse_day_key(key) > self.days_per_week:
                raise ValueError(f"{key} is beyond days_per_week={self.days_per_week}")
        return self

    def structure_json(self) -> dict:
        """Normalized JSON for storage: 'dayN' keys, camelCase muscleGroup."""
        return {
            f"day{parse_day_key(key)}": [block.model_dump(by_alias=True) for block in blocks]
            for key, blocks in self.structure.items()
        }


class WorkoutPlanRead(WorkoutPlanBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    structure: dict
    created_at: datetime
