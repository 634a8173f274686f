"""Training-day session: drives one day from loading through completion.

idle -> loading_template -> loading_cycle_state -> awaiting_soreness
     -> computing_prescriptions -> ready -> submitting -> idle | cycle_complete

Initialization runs as a background task so soreness prompts can be answered
over HTTP: each prompt is a Future the task awaits, and request handlers wait
on a Condition until the session reaches a state worth reporting.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date

from pydantic import BaseModel

from mesotracker.core.constants import MAX_SETS_PER_EXERCISE_PER_SESSION
from mesotracker.core.enums import CalendarStatus, PumpLevel, SessionState, SorenessLevel
from mesotracker.core.errors import (
    IncompleteMuscleGroupError,
    MesotrackerError,
    NoActiveCycleError,
    PersistenceError,
    PlanNotFoundError,
    SessionStateError,
)
from mesotracker.models.cycle import ActiveCycle, CompletedMesocycle, WorkoutCalendarEntry
from mesotracker.models.feedback import PumpRecord
from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.plan import WorkoutPlan
from mesotracker.schemas.plan import DayTemplate
from mesotracker.services.day_initializer import DayInitializer
from mesotracker.services.elicitation import PromptSkipped
from mesotracker.services.log_entry import WorkoutLogEntry
from mesotracker.services.store import ProgressionStore
from mesotracker.services.template import day_template
from mesotracker.services.volume import VolumeAdjustment

logger = logging.getLogger(__name__)

_TRANSIENT = {
    SessionState.LOADING_TEMPLATE,
    SessionState.LOADING_CYCLE_STATE,
    SessionState.COMPUTING_PRESCRIPTIONS,
    SessionState.SUBMITTING,
}


class WeightConfirmation(BaseModel):
    """A weight edit that differs from the prefilled weight and was not applied yet."""

    exercise_index: int
    set_index: int
    prefilled_weight: float
    proposed_weight: float


class TrainingSession:
    def __init__(
        self,
        store: ProgressionStore,
        user_id: uuid.UUID,
        plan_id: uuid.UUID,
        *,
        weekly_set_ceiling: int,
        prompt_timeout: float,
        weight_epsilon: float,
        today: date | None = None,
    ):
        self.id = uuid.uuid4()
        self.store = store
        self.user_id = user_id
        self.plan_id = plan_id
        self.weight_epsilon = weight_epsilon
        self.today = today or date.today()
        self.initializer = DayInitializer(
            store, weekly_set_ceiling=weekly_set_ceiling, prompt_timeout=prompt_timeout
        )

        self.state = SessionState.IDLE
        self.error: str | None = None
        self.plan: WorkoutPlan | None = None
        self.cycle: ActiveCycle | None = None
        self.template: DayTemplate | None = None
        self.week = 0
        self.day = 0
        self.is_deload = False
        self.entries: list[WorkoutLogEntry] = []
        self.soreness: dict[str, SorenessLevel] = {}
        self.adjustments: dict[str, VolumeAdjustment] = {}
        self.notices: list[str] = []
        self.completed_groups: dict[str, PumpLevel] = {}
        self._saving_groups: set[str] = set()
        self.day_finished = False
        self.next_week: int | None = None
        self.next_day: int | None = None

        self.pending_prompt: str | None = None
        self._prompt: asyncio.Future | None = None
        self._changed = asyncio.Condition()
        self._task: asyncio.Task | None = None

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self.initialize())
        return self._task

    async def _set_state(self, state: SessionState) -> None:
        async with self._changed:
            self.state = state
            self._changed.notify_all()

    def _is_settled(self) -> bool:
        if self.state in _TRANSIENT:
            return False
        if self.state == SessionState.AWAITING_SORENESS:
            return self.pending_prompt is not None
        if self.state == SessionState.IDLE:
            return self.day_finished
        return True

    async def wait_until_settled(self, timeout: float | None = None) -> SessionState:
        """Block until the session is ready, failed, finished, or waiting on a prompt."""

        async def _wait() -> None:
            async with self._changed:
                await self._changed.wait_for(self._is_settled)

        await asyncio.wait_for(_wait(), timeout)
        return self.state

    async def initialize(self) -> None:
        try:
            await self._set_state(SessionState.LOADING_TEMPLATE)
            plan = await self.store.get_plan(self.plan_id)
            if plan is None:
                raise PlanNotFoundError()
            self.plan = plan

            await self._set_state(SessionState.LOADING_CYCLE_STATE)
            cycle = await self.store.get_active_cycle(self.user_id)
            if cycle is None or cycle.plan_id != plan.id:
                raise NoActiveCycleError()
            self.cycle = cycle
            self.week, self.day = cycle.current_week, cycle.current_day
            self.template = day_template(plan.structure, self.day)

            await self._set_state(SessionState.AWAITING_SORENESS)
            self.soreness = await self.initializer.collect_soreness(
                self.user_id, plan, cycle.id, self.template, self.week, self.day, self, self.today
            )

            await self._set_state(SessionState.COMPUTING_PRESCRIPTIONS)
            prescription = await self.initializer.compute(
                self.user_id, plan, cycle.id, self.template, self.week, self.day, self.soreness
            )
            self.entries = prescription.entries
            self.is_deload = prescription.is_deload
            self.adjustments = {a.muscle_group: a for a in prescription.adjustments}
            self.notices = prescription.notices
            logger.info(
                "Session %s ready: plan=%s week=%s day=%s exercises=%d",
                self.id,
                plan.id,
                self.week,
                self.day,
                len(self.entries),
            )
            await self._set_state(SessionState.READY)
        except asyncio.CancelledError:
            logger.info("Session %s abandoned during initialization", self.id)
            raise
        except MesotrackerError as e:
            self.error = e.message
            await self._set_state(SessionState.FAILED)
        except Exception:
            logger.exception("Session %s failed to initialize", self.id)
            self.error = MesotrackerError.message
            await self._set_state(SessionState.FAILED)

    async def abandon(self) -> None:
        """Stop the session. Feedback already answered stays saved; nothing else is written."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    # ── Soreness prompts ─────────────────────────────────────────────────

    async def ask(self, muscle_group: str) -> SorenessLevel:
        loop = asyncio.get_running_loop()
        self._prompt = loop.create_future()
        async with self._changed:
            self.pending_prompt = muscle_group
            self._changed.notify_all()
        try:
            return await self._prompt
        finally:
            self.pending_prompt = None
            self._prompt = None

    def answer_soreness(self, muscle_group: str, level: SorenessLevel | None) -> None:
        """Answer (or skip, with level None) the prompt currently shown."""
        if self.pending_prompt is None or self._prompt is None or self._prompt.done():
            raise SessionStateError("No soreness question is waiting for an answer.")
        if muscle_group != self.pending_prompt:
            raise SessionStateError(f"The current soreness question is about {self.pending_prompt}.")
        self.pending_prompt = None
        if level is None:
            self._prompt.set_exception(PromptSkipped())
        else:
            self._prompt.set_result(SorenessLevel(level))

    # ── Entry edits ──────────────────────────────────────────────────────

    def _require_ready(self) -> None:
        if self.state != SessionState.READY:
            raise SessionStateError()

    def entry(self, exercise_index: int) -> WorkoutLogEntry:
        self._require_ready()
        if not 0 <= exercise_index < len(self.entries):
            raise ValueError(f"Exercise {exercise_index} does not exist in today's workout")
        entry = self.entries[exercise_index]
        if entry.muscle_group in self.completed_groups:
            raise SessionStateError(f"{entry.muscle_group} is already completed.")
        if entry.muscle_group in self._saving_groups:
            raise SessionStateError(f"{entry.muscle_group} is being saved.")
        return entry

    def update_set(
        self,
        exercise_index: int,
        set_index: int,
        *,
        weight: float | None = None,
        reps: int | None = None,
        intensity: int | None = None,
        confirm_weight_change: bool | None = None,
    ) -> WeightConfirmation | None:
        """
        Apply set edits. A week 2+ weight that differs from the prefilled value needs
        confirm_weight_change: None returns a WeightConfirmation without applying the
        weight, True applies it, False restores the prefilled weight.
        """
        entry = self.entry(exercise_index)
        confirmation = None
        if weight is not None:
            if entry.weight_change_needs_confirmation(set_index, weight, self.week, self.weight_epsilon):
                if confirm_weight_change is None:
                    confirmation = WeightConfirmation(
                        exercise_index=exercise_index,
                        set_index=set_index,
                        prefilled_weight=entry.prefilled_weights[set_index],
                        proposed_weight=weight,
                    )
                elif confirm_weight_change:
                    entry.set_weight(set_index, weight)
                else:
                    entry.keep_prefilled_weight(set_index)
            else:
                entry.set_weight(set_index, weight)
        if reps is not None:
            entry.set_reps(set_index, reps)
        if intensity is not None:
            entry.set_intensity(set_index, intensity, self.week)
        entry.ensure_array_integrity()
        entry.refresh_completed(self.week)
        return confirmation

    def add_set(self, exercise_index: int) -> WorkoutLogEntry:
        entry = self.entry(exercise_index)
        if entry.current_sets >= MAX_SETS_PER_EXERCISE_PER_SESSION:
            raise ValueError(f"At most {MAX_SETS_PER_EXERCISE_PER_SESSION} sets per exercise")
        entry.add_sets(1, self.week, self.plan.duration_weeks)
        return entry

    def remove_set(self, exercise_index: int) -> WorkoutLogEntry:
        entry = self.entry(exercise_index)
        if entry.remove_sets(1) == 0:
            raise ValueError("An exercise needs at least one set")
        entry.refresh_completed(self.week)
        return entry

    # ── Completion ───────────────────────────────────────────────────────

    def muscle_groups(self) -> list[str]:
        return list(dict.fromkeys(e.muscle_group for e in self.entries))

    def group_is_complete(self, muscle_group: str) -> bool:
        group = [e for e in self.entries if e.muscle_group == muscle_group]
        return bool(group) and all(e.is_complete(self.week) for e in group)

    def _performance_record(self, entry: WorkoutLogEntry, pump: PumpLevel) -> PerformanceRecord:
        soreness = self.soreness.get(entry.muscle_group)
        adjustment = self.adjustments.get(entry.muscle_group)
        return PerformanceRecord(
            user_id=self.user_id,
            plan_id=self.plan.id,
            cycle_id=self.cycle.id,
            workout_name=self.plan.name,
            week_number=self.week,
            day_number=self.day,
            exercise_name=entry.exercise_name,
            muscle_group=entry.muscle_group,
            planned_sets=entry.planned_sets,
            planned_reps=entry.planned_reps,
            actual_sets=entry.current_sets,
            actual_reps=list(entry.actual_reps),
            weight_used=[float(w or 0) for w in entry.weights],
            intensity=list(entry.intensity),
            weight_unit="kg",
            pump_level=pump.value,
            is_sore=soreness is not None and soreness != SorenessLevel.NONE,
            can_add_sets=adjustment is not None and adjustment.applied > 0,
        )

    async def _save_group(self, muscle_group: str, pump: PumpLevel, records: list[PerformanceRecord]) -> None:
        try:
            await self.store.add_pump(
                PumpRecord(
                    user_id=self.user_id,
                    workout_date=self.today,
                    muscle_group=muscle_group,
                    pump_level=pump.value,
                )
            )
        except Exception:
            logger.exception("Failed to save pump feedback for %s; continuing", muscle_group)

        try:
            await self.store.add_performance_records(records)
        except Exception as e:
            logger.exception("Failed to save performance for %s", muscle_group)
            raise PersistenceError() from e

        try:
            await self.store.update_personal_records(self.user_id, records, self.today)
        except Exception:
            logger.exception("Failed to update personal records for %s; continuing", muscle_group)

    async def complete_muscle_group(self, muscle_group: str, pump: PumpLevel) -> None:
        """Persist one finished muscle group; advances the day when it was the last one."""
        self._require_ready()
        if muscle_group not in self.muscle_groups():
            raise ValueError(f"{muscle_group} is not trained today")
        if muscle_group in self.completed_groups:
            raise SessionStateError(f"{muscle_group} is already completed.")
        if muscle_group in self._saving_groups:
            raise SessionStateError(f"{muscle_group} is being saved.")
        group = [e for e in self.entries if e.muscle_group == muscle_group]
        for entry in group:
            entry.ensure_array_integrity()
            entry.refresh_completed(self.week)
        if not all(e.completed for e in group):
            raise IncompleteMuscleGroupError()

        pump = PumpLevel(pump)
        records = [self._performance_record(e, pump) for e in group]
        # Claimed before the first await so an overlapping call for the same group is refused
        self._saving_groups.add(muscle_group)
        try:
            await self._save_group(muscle_group, pump, records)
        finally:
            self._saving_groups.discard(muscle_group)

        self.completed_groups[muscle_group] = pump
        if len(self.completed_groups) == len(self.muscle_groups()):
            await self.advance_day()

    def _day_summary(self) -> dict:
        return {
            "plan_id": str(self.plan.id),
            "plan_name": self.plan.name,
            "week": self.week,
            "day": self.day,
            "is_deload": self.is_deload,
            "exercises": [
                {
                    "exercise_name": e.exercise_name,
                    "muscle_group": e.muscle_group,
                    "sets": e.current_sets,
                    "reps": list(e.actual_reps),
                    "weights": [float(w or 0) for w in e.weights],
                    "intensity": list(e.intensity),
                }
                for e in self.entries
            ],
            "soreness": {mg: level.value for mg, level in self.soreness.items()},
            "pump": {mg: level.value for mg, level in self.completed_groups.items()},
        }

    async def advance_day(self) -> None:
        """Move the cycle to the next day; archive the mesocycle after its last week."""
        self._require_ready()
        if len(self.completed_groups) < len(self.muscle_groups()):
            raise IncompleteMuscleGroupError("Complete every muscle group before finishing the day.")

        next_week, next_day = self.week, self.day + 1
        if next_day > self.plan.days_per_week:
            next_week, next_day = self.week + 1, 1

        archive = None
        if next_week > self.plan.duration_weeks:
            started = self.cycle.started_at.date() if self.cycle.started_at else self.today
            archive = CompletedMesocycle(
                user_id=self.user_id,
                plan_id=self.plan.id,
                plan_name=self.plan.name,
                start_date=started,
                end_date=self.today,
                total_weeks=self.plan.duration_weeks,
                total_days=self.plan.duration_weeks * self.plan.days_per_week,
            )
        calendar_entry = WorkoutCalendarEntry(
            user_id=self.user_id,
            workout_date=self.today,
            status=CalendarStatus.COMPLETED.value,
            workout_summary=self._day_summary(),
        )

        await self._set_state(SessionState.SUBMITTING)
        try:
            await self.store.advance_cycle(self.user_id, next_week, next_day, calendar_entry, archive)
        except Exception as e:
            logger.exception("Failed to advance cycle for user %s", self.user_id)
            await self._set_state(SessionState.READY)
            raise PersistenceError() from e

        self.next_week, self.next_day = next_week, next_day
        self.day_finished = True
        logger.info(
            "User %s finished week %s day %s%s",
            self.user_id,
            self.week,
            self.day,
            " (mesocycle complete)" if archive else "",
        )
        await self._set_state(SessionState.CYCLE_COMPLETE if archive else SessionState.IDLE)


class SessionRegistry:
    """In-memory sessions, one per user. Starting a new one abandons the old."""

    def __init__(self):
        self._sessions: dict[uuid.UUID, TrainingSession] = {}

    def get(self, user_id: uuid.UUID) -> TrainingSession | None:
        return self._sessions.get(user_id)

    async def replace(self, session: TrainingSession) -> TrainingSession:
        old = self._sessions.pop(session.user_id, None)
        if old is not None:
            await old.abandon()
        self._sessions[session.user_id] = session
        session.start()
        return session

    async def discard(self, user_id: uuid.UUID) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        await session.abandon()
        return True

    async def close_all(self) -> None:
        for user_id in list(self._sessions):
            await self.discard(user_id)
