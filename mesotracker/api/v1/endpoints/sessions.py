"""Training-day sessions: soreness prompts, set logging and day completion."""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException

from mesotracker.api.deps import get_registry, get_store, get_user_id, http_error, session_options
from mesotracker.core.errors import MesotrackerError, NoActiveCycleError
from mesotracker.schemas.session import (
    MuscleGroupComplete,
    SessionRead,
    SessionStart,
    SetUpdate,
    SetUpdateResult,
    SorenessAnswer,
)
from mesotracker.services.store import ProgressionStore
from mesotracker.services.training_session import SessionRegistry, TrainingSession

logger = logging.getLogger(__name__)

router = APIRouter()

# How long a request waits for the session to reach a reportable state
SETTLE_TIMEOUT_SECONDS = 15.0


def _current(registry: SessionRegistry, user_id: uuid.UUID) -> TrainingSession:
    session = registry.get(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="No training session in progress")
    return session


async def _settled(session: TrainingSession) -> SessionRead:
    try:
        await session.wait_until_settled(SETTLE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("Session %s still %s after %ss", session.id, session.state.value, SETTLE_TIMEOUT_SECONDS)
    return SessionRead.from_session(session)


@router.post("", response_model=SessionRead, status_code=201)
async def start_session(
    payload: SessionStart,
    user_id: uuid.UUID = Depends(get_user_id),
    store: ProgressionStore = Depends(get_store),
    registry: SessionRegistry = Depends(get_registry),
):
    """Open today's training day. Replaces any session the user already has open."""
    plan_id = payload.plan_id
    if plan_id is None:
        cycle = await store.get_active_cycle(user_id)
        if cycle is None:
            raise http_error(NoActiveCycleError())
        plan_id = cycle.plan_id
    session = TrainingSession(store, user_id, plan_id, **session_options())
    await registry.replace(session)
    return await _settled(session)


@router.get("/current", response_model=SessionRead)
async def get_session(
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    return SessionRead.from_session(_current(registry, user_id))


@router.post("/current/soreness", response_model=SessionRead)
async def answer_soreness(
    payload: SorenessAnswer,
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """Answer the pending soreness question; omit soreness_level to skip it."""
    session = _current(registry, user_id)
    try:
        session.answer_soreness(payload.muscle_group, payload.soreness_level)
    except MesotrackerError as e:
        raise http_error(e)
    return await _settled(session)


@router.patch(
    "/current/exercises/{exercise_index}/sets/{set_index}",
    response_model=SetUpdateResult,
)
async def update_set(
    exercise_index: int,
    set_index: int,
    payload: SetUpdate,
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    session = _current(registry, user_id)
    try:
        confirmation = session.update_set(exercise_index, set_index, **payload.model_dump())
    except MesotrackerError as e:
        raise http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SetUpdateResult(entry=session.entries[exercise_index], confirmation_required=confirmation)


@router.post("/current/exercises/{exercise_index}/sets", response_model=SessionRead)
async def add_set(
    exercise_index: int,
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    session = _current(registry, user_id)
    try:
        session.add_set(exercise_index)
    except MesotrackerError as e:
        raise http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionRead.from_session(session)


@router.delete("/current/exercises/{exercise_index}/sets", response_model=SessionRead)
async def remove_set(
    exercise_index: int,
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """Remove the last set of an exercise."""
    session = _current(registry, user_id)
    try:
        session.remove_set(exercise_index)
    except MesotrackerError as e:
        raise http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionRead.from_session(session)


@router.post("/current/muscle-groups/{muscle_group}/complete", response_model=SessionRead)
async def complete_muscle_group(
    muscle_group: str,
    payload: MuscleGroupComplete,
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """Save a finished muscle group with its pump rating. The last one finishes the day."""
    session = _current(registry, user_id)
    try:
        await session.complete_muscle_group(muscle_group, payload.pump_level)
    except MesotrackerError as e:
        raise http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SessionRead.from_session(session)


@router.post("/current/advance", response_model=SessionRead)
async def advance_day(
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """Finish the day explicitly: retries a failed advance, or closes a day with no exercises."""
    session = _current(registry, user_id)
    try:
        await session.advance_day()
    except MesotrackerError as e:
        raise http_error(e)
    return SessionRead.from_session(session)


@router.delete("/current", status_code=204)
async def abandon_session(
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """Leave the day. Soreness already answered stays saved; the cycle does not move."""
    if not await registry.discard(user_id):
        raise HTTPException(status_code=404, detail="No training session in progress")
