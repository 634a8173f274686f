"""Domain errors raised by the progression services.

Endpoints translate these into HTTP errors; messages are safe to show to users.
"""


class MesotrackerError(Exception):
    """Base class for domain errors."""

    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class PlanNotFoundError(MesotrackerError):
    message = "Workout plan not found."


class NoActiveCycleError(MesotrackerError):
    message = "No active mesocycle. Start a plan first."


class ActiveCycleExistsError(MesotrackerError):
    message = "You already have an active mesocycle. Please end it first."


class SessionStateError(MesotrackerError):
    """Operation not allowed in the session's current state."""

    message = "This training day is not ready for that action."


class IncompleteMuscleGroupError(MesotrackerError):
    message = "Fill in every set before completing this muscle group."


class PersistenceError(MesotrackerError):
    """A primary write failed; the caller may retry."""

    message = "Could not save your workout. Please try again."
