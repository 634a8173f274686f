"""Mesocycle lifecycle and personal record schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from mesotracker.schemas.plan import DayTemplate


class CycleStart(BaseModel):
    plan_id: UUID


class ActiveCycleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID
    plan_name: str | None = None
    current_week: int
    current_day: int
    duration_weeks: int | None = None
    days_per_week: int | None = None
    is_deload_week: bool = False
    started_at: datetime | None = None
    today: DayTemplate | None = None


class CompletedMesocycleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID | None = None
    plan_name: str
    start_date: date
    end_date: date
    total_weeks: int
    total_days: int
    mesocycle_data: dict | None = None


class CalendarEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workout_date: date
    status: str
    workout_summary: dict | None = None


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exercise_name: str
    muscle_group: str
    max_weight: float
    max_reps: int
    weight_unit: str
    achieved_date: date
