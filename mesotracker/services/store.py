"""Persistence interface used by the progression engine, and its SQLAlchemy implementation.

Every method is its own unit of work, so a record written mid-session (e.g. a
soreness answer) is durable even if the session is abandoned right after.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Protocol

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mesotracker.core.enums import PumpLevel
from mesotracker.models.cycle import ActiveCycle, CompletedMesocycle, WorkoutCalendarEntry
from mesotracker.models.feedback import PumpRecord, SorenessRecord
from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.personal_record import PersonalRecord
from mesotracker.models.plan import WorkoutPlan
from mesotracker.services.personal_records import best_lift, is_new_record


class ProgressionStore(Protocol):
    """Reads and append-only writes the progression engine needs.

    History reads are scoped to one run of a plan (`cycle_id`), so a restarted plan
    starts from a clean slate.
    """

    async def get_plan(self, plan_id: uuid.UUID) -> WorkoutPlan | None: ...

    async def get_active_cycle(self, user_id: uuid.UUID) -> ActiveCycle | None: ...

    async def performance_history(
        self,
        user_id: uuid.UUID,
        plan_id: uuid.UUID,
        cycle_id: uuid.UUID,
        exercise_name: str,
        muscle_group: str,
        before_week: int,
        before_day: int,
    ) -> list[PerformanceRecord]:
        """Records of this run strictly before (before_week, before_day), ordered week desc, day desc."""
        ...

    async def trained_muscle_groups(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, cycle_id: uuid.UUID, before_week: int, before_day: int
    ) -> set[str]: ...

    async def weekly_sets_logged(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, cycle_id: uuid.UUID, week: int, muscle_group: str
    ) -> int: ...

    async def latest_pump(self, user_id: uuid.UUID, muscle_group: str) -> PumpLevel | None: ...

    async def add_soreness(self, record: SorenessRecord) -> None: ...

    async def add_pump(self, record: PumpRecord) -> None: ...

    async def add_performance_records(self, records: list[PerformanceRecord]) -> None: ...

    async def update_personal_records(
        self, user_id: uuid.UUID, records: list[PerformanceRecord], achieved: date
    ) -> None: ...

    async def advance_cycle(
        self,
        user_id: uuid.UUID,
        next_week: int,
        next_day: int,
        calendar_entry: WorkoutCalendarEntry,
        archive: CompletedMesocycle | None = None,
    ) -> None:
        """Move the active cycle forward, store the day summary, archive + remove when finished."""
        ...


def _before(week: int, day: int):
    return or_(
        PerformanceRecord.week_number < week,
        and_(PerformanceRecord.week_number == week, PerformanceRecord.day_number < day),
    )


def performance_snapshot(record: PerformanceRecord) -> dict:
    """JSON-safe dict of a performance record (archives, summaries)."""
    return {
        "week_number": record.week_number,
        "day_number": record.day_number,
        "exercise_name": record.exercise_name,
        "muscle_group": record.muscle_group,
        "planned_sets": record.planned_sets,
        "planned_reps": record.planned_reps,
        "actual_sets": record.actual_sets,
        "actual_reps": list(record.actual_reps or []),
        "weight_used": list(record.weight_used or []),
        "intensity": list(record.intensity or []),
        "weight_unit": record.weight_unit,
        "pump_level": record.pump_level,
        "workout_name": record.workout_name,
    }


class SqlAlchemyProgressionStore:
    """ProgressionStore over an async session factory (PostgreSQL via asyncpg)."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get_plan(self, plan_id: uuid.UUID) -> WorkoutPlan | None:
        async with self._session_maker() as db:
            result = await db.execute(select(WorkoutPlan).where(WorkoutPlan.id == plan_id))
            return result.scalar_one_or_none()

    async def get_active_cycle(self, user_id: uuid.UUID) -> ActiveCycle | None:
        async with self._session_maker() as db:
            result = await db.execute(select(ActiveCycle).where(ActiveCycle.user_id == user_id))
            return result.scalar_one_or_none()

    async def performance_history(
        self,
        user_id: uuid.UUID,
        plan_id: uuid.UUID,
        cycle_id: uuid.UUID,
        exercise_name: str,
        muscle_group: str,
        before_week: int,
        before_day: int,
    ) -> list[PerformanceRecord]:
        async with self._session_maker() as db:
            result = await db.execute(
                select(PerformanceRecord)
                .where(
                    PerformanceRecord.user_id == user_id,
                    PerformanceRecord.plan_id == plan_id,
                    PerformanceRecord.cycle_id == cycle_id,
                    PerformanceRecord.exercise_name == exercise_name,
                    PerformanceRecord.muscle_group == muscle_group,
                    _before(before_week, before_day),
                )
                .order_by(
                    PerformanceRecord.week_number.desc(),
                    PerformanceRecord.day_number.desc(),
                    PerformanceRecord.created_at.desc(),
                )
            )
            return list(result.scalars().all())

    async def trained_muscle_groups(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, cycle_id: uuid.UUID, before_week: int, before_day: int
    ) -> set[str]:
        async with self._session_maker() as db:
            result = await db.execute(
                select(PerformanceRecord.muscle_group)
                .where(
                    PerformanceRecord.user_id == user_id,
                    PerformanceRecord.plan_id == plan_id,
                    PerformanceRecord.cycle_id == cycle_id,
                    _before(before_week, before_day),
                )
                .distinct()
            )
            return set(result.scalars().all())

    async def weekly_sets_logged(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, cycle_id: uuid.UUID, week: int, muscle_group: str
    ) -> int:
        async with self._session_maker() as db:
            result = await db.execute(
                select(func.coalesce(func.sum(PerformanceRecord.actual_sets), 0)).where(
                    PerformanceRecord.user_id == user_id,
                    PerformanceRecord.plan_id == plan_id,
                    PerformanceRecord.cycle_id == cycle_id,
                    PerformanceRecord.week_number == week,
                    PerformanceRecord.muscle_group == muscle_group,
                )
            )
            return int(result.scalar() or 0)

    async def latest_pump(self, user_id: uuid.UUID, muscle_group: str) -> PumpLevel | None:
        async with self._session_maker() as db:
            result = await db.execute(
                select(PumpRecord.pump_level)
                .where(PumpRecord.user_id == user_id, PumpRecord.muscle_group == muscle_group)
                .order_by(PumpRecord.workout_date.desc(), PumpRecord.created_at.desc())
                .limit(1)
            )
            level = result.scalar_one_or_none()
            return PumpLevel(level) if level else None

    async def add_soreness(self, record: SorenessRecord) -> None:
        async with self._session_maker() as db, db.begin():
            db.add(record)

    async def add_pump(self, record: PumpRecord) -> None:
        async with self._session_maker() as db, db.begin():
            db.add(record)

    async def add_performance_records(self, records: list[PerformanceRecord]) -> None:
        async with self._session_maker() as db, db.begin():
            db.add_all(records)

    async def update_personal_records(
        self, user_id: uuid.UUID, records: list[PerformanceRecord], achieved: date
    ) -> None:
        async with self._session_maker() as db, db.begin():
            for record in records:
                lift = best_lift(record)
                if lift is None:
                    continue
                weight, reps = lift
                result = await db.execute(
                    select(PersonalRecord).where(
                        PersonalRecord.user_id == user_id,
                        PersonalRecord.exercise_name == record.exercise_name,
                    )
                )
                existing = result.scalar_one_or_none()
                if not is_new_record(existing, weight, reps):
                    continue
                if existing is None:
                    db.add(
                        PersonalRecord(
                            user_id=user_id,
                            exercise_name=record.exercise_name,
                            muscle_group=record.muscle_group,
                            max_weight=weight,
                            max_reps=reps,
                            weight_unit=record.weight_unit,
                            achieved_date=achieved,
                        )
                    )
                else:
                    existing.max_weight = weight
                    existing.max_reps = reps
                    existing.achieved_date = achieved

    async def advance_cycle(
        self,
        user_id: uuid.UUID,
        next_week: int,
        next_day: int,
        calendar_entry: WorkoutCalendarEntry,
        archive: CompletedMesocycle | None = None,
    ) -> None:
        async with self._session_maker() as db, db.begin():
            db.add(calendar_entry)
            result = await db.execute(select(ActiveCycle).where(ActiveCycle.user_id == user_id))
            cycle = result.scalar_one_or_none()
            if cycle is None:
                return
            if archive is None:
                cycle.current_week = next_week
                cycle.current_day = next_day
                return

            if archive.mesocycle_data is None:
                rows = await db.execute(
                    select(PerformanceRecord)
                    .where(PerformanceRecord.user_id == user_id, PerformanceRecord.cycle_id == cycle.id)
                    .order_by(PerformanceRecord.week_number, PerformanceRecord.day_number)
                )
                archive.mesocycle_data = {
                    "workouts": [performance_snapshot(r) for r in rows.scalars().all()]
                }
            db.add(archive)
            await db.execute(delete(ActiveCycle).where(ActiveCycle.id == cycle.id))
