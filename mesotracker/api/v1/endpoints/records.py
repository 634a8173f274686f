"""Personal records - heaviest set per exercise."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mesotracker.api.deps import get_user_id
from mesotracker.db.session import get_db
from mesotracker.models.personal_record import PersonalRecord
from mesotracker.schemas.cycle import PersonalRecordRead

router = APIRouter()


@router.get("", response_model=list[PersonalRecordRead])
async def list_records(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    muscle_group: str | None = None,
):
    """Grouped by muscle group, heaviest first within each group."""
    q = select(PersonalRecord).where(PersonalRecord.user_id == user_id)
    if muscle_group:
        q = q.where(PersonalRecord.muscle_group == muscle_group)
    result = await db.execute(
        q.order_by(PersonalRecord.muscle_group, PersonalRecord.max_weight.desc(), PersonalRecord.exercise_name)
    )
    return list(result.scalars().all())
