"""WorkoutPlan model - mesocycle template authored by the plan builder."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mesotracker.db.base import Base, JSONType


class WorkoutPlan(Base):
    """A program: duration, days per week and the per-day structure.

    structure is stored as authored: {"day1": [{"muscleGroup": ..., "exercises": [...]}], ...}.
    The final week (week_number == duration_weeks) is always the deload week.
    """

    __tablename__ = "workout_plans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # NULL for built-in plans available to everyone
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    program_type: Mapped[str] = mapped_column(String(50), nullable=False, default="hypertrophy")
    duration_weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    days_per_week: Mapped[int] = mapped_column(Integer, nullable=False)
    structure: Mapped[dict] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
