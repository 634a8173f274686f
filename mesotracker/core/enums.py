"""Shared enums for models and API."""

from enum import Enum


class SorenessLevel(str, Enum):
    """Residual soreness reported before training a muscle group (SC)."""

    NONE = "none"
    MEDIUM = "medium"
    VERY_SORE = "very_sore"
    EXTREMELY_SORE = "extremely_sore"


class PumpLevel(str, Enum):
    """Muscle pump reported after finishing a muscle group (MPC)."""

    NONE = "none"
    MEDIUM = "medium"
    AMAZING = "amazing"


class SessionState(str, Enum):
    """Lifecycle of a training-day session."""

    IDLE = "idle"
    LOADING_TEMPLATE = "loading_template"
    LOADING_CYCLE_STATE = "loading_cycle_state"
    AWAITING_SORENESS = "awaiting_soreness"
    COMPUTING_PRESCRIPTIONS = "computing_prescriptions"
    READY = "ready"
    SUBMITTING = "submitting"
    CYCLE_COMPLETE = "cycle_complete"
    FAILED = "failed"


class CalendarStatus(str, Enum):
    """Status stored on a workout calendar entry."""

    COMPLETED = "completed"
