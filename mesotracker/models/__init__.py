"""ORM models - import all so Base.metadata is complete for migrations."""

from mesotracker.models.cycle import ActiveCycle, CompletedMesocycle, WorkoutCalendarEntry
from mesotracker.models.feedback import PumpRecord, SorenessRecord
from mesotracker.models.performance import PerformanceRecord
from mesotracker.models.personal_record import PersonalRecord
from mesotracker.models.plan import WorkoutPlan

__all__ = [
    "ActiveCycle",
    "CompletedMesocycle",
    "PerformanceRecord",
    "PersonalRecord",
    "PumpRecord",
    "SorenessRecord",
    "WorkoutCalendarEntry",
    "WorkoutPlan",
]
