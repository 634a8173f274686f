"""Soreness (SC) and pump (MPC) feedback records."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mesotracker.db.base import Base


class SorenessRecord(Base):
    """Soreness reported before training a muscle group. healed == (level == none)."""

    __tablename__ = "muscle_soreness"
    __table_args__ = (Index("ix_muscle_soreness_user_group", "user_id", "muscle_group", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    workout_date: Mapped[date] = mapped_column(Date, nullable=False)
    muscle_group: Mapped[str] = mapped_column(String(100), nullable=False)
    soreness_level: Mapped[str] = mapped_column(String(20), nullable=False)
    healed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )


class PumpRecord(Base):
    """Pump reported after completing a muscle group."""

    __tablename__ = "pump_feedback"
    __table_args__ = (Index("ix_pump_feedback_user_group", "user_id", "muscle_group", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    workout_date: Mapped[date] = mapped_column(Date, nullable=False)
    muscle_group: Mapped[str] = mapped_column(String(100), nullable=False)
    pump_level: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
