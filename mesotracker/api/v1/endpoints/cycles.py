"""Mesocycle lifecycle: start, current position, end early, history."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mesotracker.api.deps import get_registry, get_user_id
from mesotracker.core.errors import ActiveCycleExistsError
from mesotracker.db.session import get_db
from mesotracker.models.cycle import ActiveCycle, CompletedMesocycle, WorkoutCalendarEntry
from mesotracker.models.plan import WorkoutPlan
from mesotracker.schemas.cycle import (
    ActiveCycleRead,
    CalendarEntryRead,
    CompletedMesocycleRead,
    CycleStart,
)
from mesotracker.services.intensity import is_deload_week
from mesotracker.services.template import day_template
from mesotracker.services.training_session import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


def _cycle_read(cycle: ActiveCycle, plan: WorkoutPlan) -> ActiveCycleRead:
    return ActiveCycleRead(
        id=cycle.id,
        plan_id=cycle.plan_id,
        plan_name=plan.name,
        current_week=cycle.current_week,
        current_day=cycle.current_day,
        duration_weeks=plan.duration_weeks,
        days_per_week=plan.days_per_week,
        is_deload_week=is_deload_week(cycle.current_week, plan.duration_weeks),
        started_at=cycle.started_at,
        today=day_template(plan.structure, cycle.current_day),
    )


@router.post("", response_model=ActiveCycleRead, status_code=201)
async def start_cycle(
    payload: CycleStart,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Start a plan at week 1 day 1. Only one active mesocycle per user."""
    result = await db.execute(select(WorkoutPlan).where(WorkoutPlan.id == payload.plan_id))
    plan = result.scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Workout plan not found")
    existing = await db.execute(select(ActiveCycle.id).where(ActiveCycle.user_id == user_id))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail=ActiveCycleExistsError.message)

    cycle = ActiveCycle(user_id=user_id, plan_id=plan.id, current_week=1, current_day=1)
    db.add(cycle)
    try:
        await db.flush()
    except IntegrityError:
        # Concurrent start won the unique(user_id) race
        raise HTTPException(status_code=409, detail=ActiveCycleExistsError.message)
    await db.refresh(cycle)
    logger.info("User %s started plan %s", user_id, plan.id)
    return _cycle_read(cycle, plan)


@router.get("/current", response_model=ActiveCycleRead)
async def current_cycle(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    result = await db.execute(select(ActiveCycle).where(ActiveCycle.user_id == user_id))
    cycle = result.scalar_one_or_none()
    if not cycle:
        raise HTTPException(status_code=404, detail="No active mesocycle")
    plan_result = await db.execute(select(WorkoutPlan).where(WorkoutPlan.id == cycle.plan_id))
    plan = plan_result.scalar_one_or_none()
    if not plan:
        logger.warning("Removing active cycle %s: plan %s no longer exists", cycle.id, cycle.plan_id)
        await db.execute(delete(ActiveCycle).where(ActiveCycle.id == cycle.id))
        await db.commit()
        raise HTTPException(status_code=404, detail="The plan for your mesocycle no longer exists")
    return _cycle_read(cycle, plan)


@router.delete("/current", status_code=204)
async def end_cycle(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    registry: SessionRegistry = Depends(get_registry),
):
    """End the mesocycle early. Logged history stays; nothing is archived."""
    result = await db.execute(delete(ActiveCycle).where(ActiveCycle.user_id == user_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="No active mesocycle")
    await registry.discard(user_id)
    logger.info("User %s ended their mesocycle early", user_id)


@router.get("/completed", response_model=list[CompletedMesocycleRead])
async def completed_cycles(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    result = await db.execute(
        select(CompletedMesocycle)
        .where(CompletedMesocycle.user_id == user_id)
        .order_by(CompletedMesocycle.end_date.desc(), CompletedMesocycle.created_at.desc())
    )
    return list(result.scalars().all())


@router.get("/calendar", response_model=list[CalendarEntryRead])
async def calendar(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    limit: int = 100,
):
    """Finished training days, newest first."""
    result = await db.execute(
        select(WorkoutCalendarEntry)
        .where(WorkoutCalendarEntry.user_id == user_id)
        .order_by(WorkoutCalendarEntry.workout_date.desc(), WorkoutCalendarEntry.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
