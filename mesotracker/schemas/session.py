"""Training-day session schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from mesotracker.core.constants import MAX_INTENSITY, MIN_INTENSITY
from mesotracker.core.enums import PumpLevel, SessionState, SorenessLevel
from mesotracker.services.log_entry import WorkoutLogEntry
from mesotracker.services.training_session import TrainingSession, WeightConfirmation


class SessionStart(BaseModel):
    """Start today's session. plan_id defaults to the active cycle's plan."""

    plan_id: UUID | None = None


class SorenessAnswer(BaseModel):
    muscle_group: str = Field(..., min_length=1)
    # None skips the question
    soreness_level: SorenessLevel | None = None


class SetUpdate(BaseModel):
    weight: float | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    intensity: int | None = Field(None, ge=MIN_INTENSITY, le=MAX_INTENSITY)
    # Week 2+: None asks first, True keeps the new weight, False restores the prefilled one
    confirm_weight_change: bool | None = None


class MuscleGroupComplete(BaseModel):
    pump_level: PumpLevel


class MuscleGroupStatus(BaseModel):
    muscle_group: str
    completable: bool
    completed: bool
    pump_level: PumpLevel | None = None


class SessionRead(BaseModel):
    id: UUID
    state: SessionState
    plan_id: UUID
    plan_name: str | None = None
    week: int
    day: int
    is_deload: bool
    pending_soreness_prompt: str | None = None
    entries: list[WorkoutLogEntry] = Field(default_factory=list)
    muscle_groups: list[MuscleGroupStatus] = Field(default_factory=list)
    soreness: dict[str, SorenessLevel] = Field(default_factory=dict)
    notices: list[str] = Field(default_factory=list)
    error: str | None = None
    next_week: int | None = None
    next_day: int | None = None

    @classmethod
    def from_session(cls, session: TrainingSession) -> "SessionRead":
        groups = [
            MuscleGroupStatus(
                muscle_group=mg,
                completable=session.group_is_complete(mg),
                completed=mg in session.completed_groups,
                pump_level=session.completed_groups.get(mg),
            )
            for mg in session.muscle_groups()
        ]
        return cls(
            id=session.id,
            state=session.state,
            plan_id=session.plan_id,
            plan_name=session.plan.name if session.plan else None,
            week=session.week,
            day=session.day,
            is_deload=session.is_deload,
            pending_soreness_prompt=session.pending_prompt,
            entries=session.entries,
            muscle_groups=groups,
            soreness=session.soreness,
            notices=session.notices,
            error=session.error,
            next_week=session.next_week,
            next_day=session.next_day,
        )


class SetUpdateResult(BaseModel):
    entry: WorkoutLogEntry
    confirmation_required: WeightConfirmation | None = None
