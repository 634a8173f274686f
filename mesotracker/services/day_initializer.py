"""Day initializer: builds a training day's set-by-set prescriptions.

Week 1 is a baseline week with no lookups. From week 2 on, each exercise starts
from its most recent logged occurrence (same day index preferred, so a lift
trained twice a week progresses per slot), expected reps follow the RPE
schedule, and muscle groups then gain or lose sets from soreness and pump
feedback. The final week is a deload at about one third of sets and reps.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date

from pydantic import BaseModel, Field

from mesotracker.core.constants import BASELINE_INTENSITY, MAX_SETS_PER_EXERCISE_PER_SESSION
from mesotracker.core.enums import PumpLevel, SorenessLevel
from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.plan import WorkoutPlan
from mesotracker.schemas.plan import DayTemplate, ExerciseTemplate
from mesotracker.services.elicitation import SorenessPrompter, elicit_soreness, soreness_queue
from mesotracker.services.intensity import is_deload_week, target_intensities
from mesotracker.services.log_entry import WorkoutLogEntry
from mesotracker.services.rep_progression import best_set_index, deload_reps, deload_sets, next_reps
from mesotracker.services.store import ProgressionStore
from mesotracker.services.volume import VolumeAdjustment, apply_volume_adjustment, set_delta

logger = logging.getLogger(__name__)


class DayPrescription(BaseModel):
    """Finalized entries for one training day plus the feedback that shaped them."""

    week: int
    day: int
    is_deload: bool = False
    entries: list[WorkoutLogEntry] = Field(default_factory=list)
    soreness: dict[str, SorenessLevel] = Field(default_factory=dict)
    adjustments: list[VolumeAdjustment] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)


def pick_previous(history: Sequence[PerformanceRecord], day: int) -> PerformanceRecord | None:
    """Most recent record on the same day index, else the most recent one overall.

    `history` is ordered newest first (week desc, day desc).
    """
    for record in history:
        if record.day_number == day:
            return record
    return history[0] if history else None


def _at(values: Sequence | None, index: int):
    if values and index < len(values):
        return values[index]
    return None


def _prefill_weight(weights: Sequence | None, index: int) -> float:
    w = _at(weights, index)
    if w is None:
        w = _at(weights, 0)
    return float(w) if w is not None else 0.0


def _logged_sets(record: PerformanceRecord) -> int:
    n = int(record.actual_sets or len(record.actual_reps or []))
    return min(max(1, n), MAX_SETS_PER_EXERCISE_PER_SESSION)


def progressed_entry(
    template: ExerciseTemplate, previous: PerformanceRecord, week: int, duration_weeks: int
) -> WorkoutLogEntry:
    """Same set count as last time; expected reps shift by the change in target RPE."""
    n = _logged_sets(previous)
    targets = target_intensities(week, n, duration_weeks)
    expected = [
        next_reps(
            _at(previous.actual_reps, i) or template.default_reps,
            _at(previous.intensity, i) or BASELINE_INTENSITY,
            targets[i],
        )
        for i in range(n)
    ]
    weights = [_prefill_weight(previous.weight_used, i) for i in range(n)]
    return WorkoutLogEntry(
        exercise_name=template.exercise_name,
        muscle_group=template.muscle_group,
        planned_sets=template.default_sets,
        planned_reps=template.default_reps,
        current_sets=n,
        expected_reps=expected,
        actual_reps=[0] * n,
        weights=weights,
        prefilled_weights=list(weights),
        intensity=targets,
    )


def deload_entry(
    template: ExerciseTemplate, previous: PerformanceRecord, week: int, duration_weeks: int
) -> WorkoutLogEntry:
    """A third of last time's sets, each at a third of the best set's reps, RPE 7."""
    n = deload_sets(_logged_sets(previous))
    reps = list(previous.actual_reps or [])
    best = best_set_index(reps, list(previous.intensity or []))
    best_reps = reps[best] if best is not None and reps[best] > 0 else template.default_reps
    weights = [_prefill_weight(previous.weight_used, i) for i in range(n)]
    return WorkoutLogEntry(
        exercise_name=template.exercise_name,
        muscle_group=template.muscle_group,
        planned_sets=template.default_sets,
        planned_reps=template.default_reps,
        current_sets=n,
        expected_reps=[deload_reps(best_reps)] * n,
        actual_reps=[0] * n,
        weights=weights,
        prefilled_weights=list(weights),
        intensity=target_intensities(week, n, duration_weeks),
    )


class DayInitializer:
    """Composes soreness elicitation, rep progression and volume adjustment for one day."""

    def __init__(self, store: ProgressionStore, *, weekly_set_ceiling: int, prompt_timeout: float):
        self.store = store
        self.weekly_set_ceiling = weekly_set_ceiling
        self.prompt_timeout = prompt_timeout

    async def prepare(
        self,
        user_id: uuid.UUID,
        plan: WorkoutPlan,
        cycle_id: uuid.UUID,
        template: DayTemplate,
        week: int,
        day: int,
        prompter: SorenessPrompter,
        today: date | None = None,
    ) -> DayPrescription:
        """Full initialization: soreness prompts, prescriptions, volume adjustment."""
        soreness = await self.collect_soreness(user_id, plan, cycle_id, template, week, day, prompter, today)
        return await self.compute(user_id, plan, cycle_id, template, week, day, soreness)

    async def collect_soreness(
        self,
        user_id: uuid.UUID,
        plan: WorkoutPlan,
        cycle_id: uuid.UUID,
        template: DayTemplate,
        week: int,
        day: int,
        prompter: SorenessPrompter,
        today: date | None = None,
    ) -> dict[str, SorenessLevel]:
        queue = await soreness_queue(self.store, user_id, plan.id, cycle_id, template, week, day)
        if not queue:
            return {}
        return await elicit_soreness(
            queue, prompter, self.store, user_id, today or date.today(), self.prompt_timeout
        )

    async def compute(
        self,
        user_id: uuid.UUID,
        plan: WorkoutPlan,
        cycle_id: uuid.UUID,
        template: DayTemplate,
        week: int,
        day: int,
        soreness: dict[str, SorenessLevel],
    ) -> DayPrescription:
        deload = is_deload_week(week, plan.duration_weeks) and week >= 2
        prescription = DayPrescription(week=week, day=day, is_deload=deload, soreness=soreness)

        for ex in template.exercises:
            prescription.entries.append(await self.build_entry(user_id, plan, cycle_id, ex, week, day))

        if week >= 2 and not deload:
            prescription.adjustments = await self.adjust_volume(
                user_id, plan, cycle_id, prescription.entries, soreness, week
            )
            prescription.notices = [a.notice for a in prescription.adjustments if a.notice]

        for entry in prescription.entries:
            entry.ensure_array_integrity()
        return prescription

    async def build_entry(
        self,
        user_id: uuid.UUID,
        plan: WorkoutPlan,
        cycle_id: uuid.UUID,
        template: ExerciseTemplate,
        week: int,
        day: int,
    ) -> WorkoutLogEntry:
        if week == 1:
            return WorkoutLogEntry.baseline(template)

        deload = is_deload_week(week, plan.duration_weeks)
        try:
            history = await self.store.performance_history(
                user_id, plan.id, cycle_id, template.exercise_name, template.muscle_group, week, day
            )
        except Exception:
            logger.exception(
                "History lookup failed for %s (%s); using template defaults",
                template.exercise_name,
                template.muscle_group,
            )
            history = []

        previous = pick_previous(history, day)
        if previous is None:
            if deload:
                return WorkoutLogEntry.baseline(
                    template,
                    sets=deload_sets(template.default_sets),
                    reps=deload_reps(template.default_reps),
                )
            return WorkoutLogEntry.baseline(template)
        if deload:
            return deload_entry(template, previous, week, plan.duration_weeks)
        return progressed_entry(template, previous, week, plan.duration_weeks)

    async def adjust_volume(
        self,
        user_id: uuid.UUID,
        plan: WorkoutPlan,
        cycle_id: uuid.UUID,
        entries: list[WorkoutLogEntry],
        soreness: dict[str, SorenessLevel],
        week: int,
    ) -> list[VolumeAdjustment]:
        adjustments: list[VolumeAdjustment] = []
        groups = list(dict.fromkeys(e.muscle_group for e in entries))
        for muscle_group in groups:
            sc = soreness.get(muscle_group)
            if sc is None:
                continue
            pump = await self._pump_for(user_id, muscle_group)
            delta = set_delta(sc, pump)
            weekly = 0
            if delta > 0:
                try:
                    weekly = await self.store.weekly_sets_logged(
                        user_id, plan.id, cycle_id, week, muscle_group
                    )
                except Exception:
                    logger.exception("Weekly volume lookup failed for %s; assuming 0", muscle_group)
            adjustments.append(
                apply_volume_adjustment(
                    entries,
                    muscle_group,
                    delta,
                    week=week,
                    duration_weeks=plan.duration_weeks,
                    weekly_sets_logged=weekly,
                    weekly_set_ceiling=self.weekly_set_ceiling,
                )
            )
        return adjustments

    async def _pump_for(self, user_id: uuid.UUID, muscle_group: str) -> PumpLevel:
        try:
            pump = await self.store.latest_pump(user_id, muscle_group)
        except Exception:
            logger.exception("Pump lookup failed for %s; assuming medium", muscle_group)
            return PumpLevel.MEDIUM
        return pump or PumpLevel.MEDIUM
