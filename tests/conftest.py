"""Shared fixtures: in-memory progression store, scripted soreness prompter, plan builders, SQLite DB."""

from __future__ import annotations

import asyncio
import uuid
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from mesotracker.core.enums import PumpLevel, SorenessLevel
from mesotracker.db.base import Base
from mesotracker.models import *  # noqa: F401, F403 - register all models
from mesotracker.models.cycle import ActiveCycle, CompletedMesocycle, WorkoutCalendarEntry
from mesotracker.models.feedback import PumpRecord, SorenessRecord
from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.personal_record import PersonalRecord
from mesotracker.models.plan import WorkoutPlan
from mesotracker.services.elicitation import PromptSkipped
from mesotracker.services.personal_records import best_lift, is_new_record

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
CYCLE_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")


def make_plan(structure: dict, duration_weeks: int = 5, days_per_week: int = 2, name: str = "Test Plan") -> WorkoutPlan:
    return WorkoutPlan(
        id=uuid.uuid4(),
        user_id=USER_ID,
        name=name,
        program_type="hypertrophy",
        duration_weeks=duration_weeks,
        days_per_week=days_per_week,
        structure=structure,
    )


def make_record(
    plan: WorkoutPlan,
    week: int,
    day: int,
    exercise: str,
    muscle_group: str,
    reps: list[int],
    weights: list[float],
    intensity: list[int],
    pump: str = "medium",
    cycle_id: uuid.UUID = CYCLE_ID,
) -> PerformanceRecord:
    return PerformanceRecord(
        id=uuid.uuid4(),
        user_id=USER_ID,
        plan_id=plan.id,
        cycle_id=cycle_id,
        workout_name=plan.name,
        week_number=week,
        day_number=day,
        exercise_name=exercise,
        muscle_group=muscle_group,
        planned_sets=len(reps),
        planned_reps=reps[0] if reps else 8,
        actual_sets=len(reps),
        actual_reps=reps,
        weight_used=weights,
        intensity=intensity,
        weight_unit="kg",
        pump_level=pump,
        is_sore=False,
        can_add_sets=False,
    )


class FakeStore:
    """In-memory ProgressionStore. Add a method name to `failures` to make that call raise."""

    def __init__(self):
        self.plans: dict[uuid.UUID, WorkoutPlan] = {}
        self.cycles: dict[uuid.UUID, ActiveCycle] = {}
        self.performance: list[PerformanceRecord] = []
        self.soreness: list[SorenessRecord] = []
        self.pumps: list[PumpRecord] = []
        self.calendar: list[WorkoutCalendarEntry] = []
        self.archives: list[CompletedMesocycle] = []
        self.personal_records: dict[str, PersonalRecord] = {}
        self.failures: set[str] = set()

    def _check(self, name: str) -> None:
        if name in self.failures:
            raise RuntimeError(f"simulated {name} failure")

    # seeding helpers
    def add_plan(self, plan: WorkoutPlan) -> WorkoutPlan:
        self.plans[plan.id] = plan
        return plan

    def start_cycle(
        self, plan: WorkoutPlan, week: int = 1, day: int = 1, cycle_id: uuid.UUID = CYCLE_ID
    ) -> ActiveCycle:
        cycle = ActiveCycle(
            id=cycle_id,
            user_id=USER_ID,
            plan_id=plan.id,
            current_week=week,
            current_day=day,
            started_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
        )
        self.cycles[USER_ID] = cycle
        return cycle

    # ProgressionStore
    async def get_plan(self, plan_id):
        self._check("get_plan")
        return self.plans.get(plan_id)

    async def get_active_cycle(self, user_id):
        self._check("get_active_cycle")
        return self.cycles.get(user_id)

    async def performance_history(
        self, user_id, plan_id, cycle_id, exercise_name, muscle_group, before_week, before_day
    ):
        self._check("performance_history")
        rows = [
            r
            for r in self.performance
            if r.user_id == user_id
            and r.plan_id == plan_id
            and r.cycle_id == cycle_id
            and r.exercise_name == exercise_name
            and r.muscle_group == muscle_group
            and (r.week_number, r.day_number) < (before_week, before_day)
        ]
        return sorted(rows, key=lambda r: (r.week_number, r.day_number), reverse=True)

    async def trained_muscle_groups(self, user_id, plan_id, cycle_id, before_week, before_day):
        self._check("trained_muscle_groups")
        return {
            r.muscle_group
            for r in self.performance
            if r.user_id == user_id
            and r.plan_id == plan_id
            and r.cycle_id == cycle_id
            and (r.week_number, r.day_number) < (before_week, before_day)
        }

    async def weekly_sets_logged(self, user_id, plan_id, cycle_id, week, muscle_group):
        self._check("weekly_sets_logged")
        return sum(
            r.actual_sets
            for r in self.performance
            if r.user_id == user_id
            and r.plan_id == plan_id
            and r.cycle_id == cycle_id
            and r.week_number == week
            and r.muscle_group == muscle_group
        )

    async def latest_pump(self, user_id, muscle_group):
        self._check("latest_pump")
        for record in reversed(self.pumps):
            if record.user_id == user_id and record.muscle_group == muscle_group:
                return PumpLevel(record.pump_level)
        return None

    async def add_soreness(self, record):
        self._check("add_soreness")
        self.soreness.append(record)

    async def add_pump(self, record):
        self._check("add_pump")
        self.pumps.append(record)

    async def add_performance_records(self, records):
        self._check("add_performance_records")
        self.performance.extend(records)

    async def update_personal_records(self, user_id, records, achieved):
        self._check("update_personal_records")
        for record in records:
            lift = best_lift(record)
            if lift is None:
                continue
            existing = self.personal_records.get(record.exercise_name)
            if is_new_record(existing, *lift):
                self.personal_records[record.exercise_name] = PersonalRecord(
                    user_id=user_id,
                    exercise_name=record.exercise_name,
                    muscle_group=record.muscle_group,
                    max_weight=lift[0],
                    max_reps=lift[1],
                    weight_unit=record.weight_unit,
                    achieved_date=achieved,
                )

    async def advance_cycle(self, user_id, next_week, next_day, calendar_entry, archive=None):
        self._check("advance_cycle")
        self.calendar.append(calendar_entry)
        cycle = self.cycles.get(user_id)
        if cycle is None:
            return
        if archive is None:
            cycle.current_week = next_week
            cycle.current_day = next_day
            return
        self.archives.append(archive)
        del self.cycles[user_id]


class ScriptedPrompter:
    """Answers soreness prompts from a dict. Missing groups are skipped; "hang" never answers."""

    def __init__(self, answers: dict[str, SorenessLevel | str] | None = None):
        self.answers = answers or {}
        self.asked: list[str] = []

    async def ask(self, muscle_group: str) -> SorenessLevel:
        self.asked.append(muscle_group)
        answer = self.answers.get(muscle_group)
        if answer == "hang":
            await asyncio.Event().wait()
        if answer is None:
            raise PromptSkipped()
        return SorenessLevel(answer)


TWO_DAY_STRUCTURE = {
    "day1": [
        {"muscleGroup": "Chest", "exercises": [{"name": "Bench Press", "sets": 3, "reps": 8}]},
        {
            "muscleGroup": "Back",
            "exercises": [{"name": "Barbell Row", "sets": 2, "reps": 10}, {"name": "Pull Up", "sets": 3, "reps": 8}],
        },
    ],
    "day2": [
        {"muscleGroup": "Chest", "exercises": [{"name": "Incline Press", "sets": 2, "reps": 10}]},
        {"muscleGroup": "Quads", "exercises": [{"name": "Back Squat", "sets": 3, "reps": 6}]},
    ],
}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def plan(store: FakeStore) -> WorkoutPlan:
    return store.add_plan(make_plan(TWO_DAY_STRUCTURE, duration_weeks=5, days_per_week=2))


@pytest.fixture
def today() -> date:
    return date(2026, 2, 2)


@pytest.fixture
async def session_maker():
    """Session factory over an in-memory SQLite database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()
