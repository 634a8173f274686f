"""Workout plans - authored mesocycle templates."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from mesotracker.api.deps import get_user_id
from mesotracker.db.session import get_db
from mesotracker.models.cycle import ActiveCycle
from mesotracker.models.plan import WorkoutPlan
from mesotracker.schemas.plan import WorkoutPlanCreate, WorkoutPlanRead

router = APIRouter()


@router.get("", response_model=list[WorkoutPlanRead])
async def list_plans(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    skip: int = 0,
    limit: int = 50,
):
    """Built-in plans plus the user's own, newest first."""
    result = await db.execute(
        select(WorkoutPlan)
        .where(or_(WorkoutPlan.user_id.is_(None), WorkoutPlan.user_id == user_id))
        .order_by(WorkoutPlan.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


@router.post("", response_model=WorkoutPlanRead, status_code=201)
async def create_plan(
    payload: WorkoutPlanCreate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    plan = WorkoutPlan(
        user_id=user_id,
        name=payload.name,
        program_type=payload.program_type,
        duration_weeks=payload.duration_weeks,
        days_per_week=payload.days_per_week,
        structure=payload.structure_json(),
    )
    db.add(plan)
    await db.flush()
    await db.refresh(plan)
    return plan


@router.get("/{plan_id}", response_model=WorkoutPlanRead)
async def get_plan(plan_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(WorkoutPlan).where(WorkoutPlan.id == plan_id))
    plan = result.scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Workout plan not found")
    return plan


@router.delete("/{plan_id}", status_code=204)
async def delete_plan(
    plan_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    """Delete one of the user's plans. Refused while it drives an active cycle."""
    result = await db.execute(select(WorkoutPlan).where(WorkoutPlan.id == plan_id))
    plan = result.scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Workout plan not found")
    if plan.user_id != user_id:
        raise HTTPException(status_code=403, detail="Built-in and other users' plans cannot be deleted")
    active = await db.execute(select(ActiveCycle.id).where(ActiveCycle.plan_id == plan_id).limit(1))
    if active.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="End the active mesocycle before deleting its plan")
    await db.delete(plan)
    await db.flush()
