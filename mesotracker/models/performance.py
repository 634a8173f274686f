"""PerformanceRecord model - append-only per-exercise history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mesotracker.db.base import Base, JSONType


class PerformanceRecord(Base):
    """One exercise occurrence on a (week, day) of one run of a plan.

    actual_reps, weight_used and intensity are index-aligned lists whose length
    equals actual_sets.
    """

    __tablename__ = "performance_records"
    __table_args__ = (
        Index(
            "ix_performance_records_lookup",
            "user_id",
            "plan_id",
            "exercise_name",
            "muscle_group",
        ),
        Index("ix_performance_records_week", "user_id", "plan_id", "week_number", "day_number"),
        Index("ix_performance_records_cycle", "cycle_id", "week_number", "day_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    plan_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # ActiveCycle.id of the run this was logged in; restarting a plan starts a fresh history
    cycle_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    workout_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    muscle_group: Mapped[str] = mapped_column(String(100), nullable=False)

    planned_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_reps: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)
    weight_used: Mapped[list[float]] = mapped_column(JSONType, nullable=False, default=list)
    intensity: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)  # RPE per set
    weight_unit: Mapped[str] = mapped_column(String(10), nullable=False, default="kg")

    pump_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_sore: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_add_sets: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
