"""Domain model and result records."""

from .models import (
    AircraftType,
    AirfieldModel,
    AutoInduction,
    ClearanceEnvelope,
    Hangar,
    HangarBay,
    HangarDoor,
    Induction,
)
from .results import (
    Conflict,
    ExportModel,
    RejectionReason,
    RuleResult,
    ScheduledInduction,
    ScheduleResult,
    UnscheduledInduction,
    ValidationReport,
    Violation,
)

__all__ = [
    "AircraftType",
    "AirfieldModel",
    "AutoInduction",
    "ClearanceEnvelope",
    "Hangar",
    "HangarBay",
    "HangarDoor",
    "Induction",
    "Conflict",
    "ExportModel",
    "RejectionReason",
    "RuleResult",
    "ScheduledInduction",
    "ScheduleResult",
    "UnscheduledInduction",
    "ValidationReport",
    "Violation",
]
