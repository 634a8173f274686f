"""Shared endpoint dependencies and domain-error translation."""

import uuid

from fastapi import Header, HTTPException, Request

from mesotracker.core.config import get_settings
from mesotracker.core.constants import DEFAULT_USER_ID
from mesotracker.core.errors import (
    ActiveCycleExistsError,
    IncompleteMuscleGroupError,
    MesotrackerError,
    NoActiveCycleError,
    PersistenceError,
    PlanNotFoundError,
    SessionStateError,
)
from mesotracker.db.session import async_session_maker
from mesotracker.services.store import ProgressionStore, SqlAlchemyProgressionStore
from mesotracker.services.training_session import SessionRegistry

_STATUS = {
    PlanNotFoundError: 404,
    NoActiveCycleError: 404,
    ActiveCycleExistsError: 409,
    SessionStateError: 409,
    IncompleteMuscleGroupError: 400,
    PersistenceError: 503,
}


def http_error(e: MesotrackerError) -> HTTPException:
    return HTTPException(status_code=_STATUS.get(type(e), 500), detail=e.message)


def get_user_id(x_user_id: str | None = Header(default=None)) -> uuid.UUID:
    """Single-user for now: X-User-Id header, else the default user."""
    try:
        return uuid.UUID(x_user_id or DEFAULT_USER_ID)
    except ValueError:
        raise HTTPException(status_code=400, detail="X-User-Id must be a UUID")


def get_store() -> ProgressionStore:
    return SqlAlchemyProgressionStore(async_session_maker)


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def session_options() -> dict:
    settings = get_settings()
    return {
        "weekly_set_ceiling": settings.weekly_set_ceiling,
        "prompt_timeout": settings.soreness_prompt_timeout_seconds,
        "weight_epsilon": settings.weight_override_epsilon,
    }
