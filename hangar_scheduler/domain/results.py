"""Result records produced by the rule checkers, scheduler and builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from hangar_scheduler.data_io import to_jsonable

from .evidence import Evidence, TimeWindow
from .models import AutoInduction


@dataclass(frozen=True)
class RuleResult:
    ok: bool
    rule_id: str
    message: str
    evidence: Evidence

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class ScheduledInduction:
    """A concrete placement: hangar, bays, optional door and time window.

    Used for scheduler output (``kind="auto"``) and for manual inductions
    entering conflict detection (``kind="manual"``).
    """

    id: str
    aircraft: str
    hangar: str
    bays: Tuple[str, ...]
    start: datetime
    end: datetime
    door: Optional[str] = None
    kind: str = "auto"


@dataclass(frozen=True)
class RejectionReason:
    rule_id: str
    message: str
    evidence: Evidence
    hangar: Optional[str] = None


@dataclass(frozen=True)
class UnscheduledInduction:
    id: str
    induction: AutoInduction


@dataclass
class ScheduleResult:
    scheduled: List[ScheduledInduction] = field(default_factory=list)
    unscheduled: List[UnscheduledInduction] = field(default_factory=list)
    rejection_reasons: Dict[str, List[RejectionReason]] = field(default_factory=dict)

    def reasons_for(self, induction_id: str) -> List[RejectionReason]:
        return self.rejection_reasons.get(induction_id, [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheduled": to_jsonable(self.scheduled),
            "unscheduled": [
                {"id": u.id, "aircraft": u.induction.aircraft_name} for u in self.unscheduled
            ],
            "rejectionReasons": {
                k: to_jsonable(v) for k, v in sorted(self.rejection_reasons.items())
            },
        }


@dataclass(frozen=True)
class InductionRef:
    id: Optional[str]
    aircraft: str

    @property
    def label(self) -> str:
        return self.id or self.aircraft


@dataclass(frozen=True)
class Conflict:
    rule_id: str
    induction1: InductionRef
    induction2: InductionRef
    hangar: str
    intersecting_bays: Tuple[str, ...]
    overlap_interval: TimeWindow
    message: str


@dataclass(frozen=True)
class ViolationSubject:
    type: str
    name: str
    id: Optional[str] = None


@dataclass(frozen=True)
class Violation:
    rule_id: str
    severity: str
    message: str
    subject: ViolationSubject
    evidence: Evidence


@dataclass
class ValidationSummary:
    total_violations: int
    by_rule_id: Dict[str, int]
    by_severity: Dict[str, int]


@dataclass
class ValidationReport:
    violations: List[Violation]
    summary: ValidationSummary
    timestamp: Optional[datetime] = None

    @property
    def has_errors(self) -> bool:
        return self.summary.by_severity.get("errors", 0) > 0

    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class DerivedInductionProperties:
    wingspan_eff: float
    length_eff: float
    tail_eff: float
    bays_required: int
    connected: bool


@dataclass
class ExportedInduction:
    id: str
    kind: str
    aircraft: str
    hangar: str
    bays: Tuple[str, ...]
    start: datetime
    end: datetime
    derived: DerivedInductionProperties
    door: Optional[str] = None
    conflicts: List[str] = field(default_factory=list)


@dataclass
class ExportedUnscheduledAuto:
    id: str
    aircraft: str
    reason_rule_id: str
    evidence: Any
    preferred_hangar: Optional[str] = None


@dataclass
class AutoScheduleExport:
    scheduled: List[ExportedInduction]
    unscheduled: List[ExportedUnscheduledAuto]


@dataclass
class ExportModel:
    airfield_name: str
    inductions: List[ExportedInduction]
    adjacency_mode_by_hangar: Dict[str, str]
    auto_schedule: Optional[AutoScheduleExport] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "airfieldName": self.airfield_name,
            "inductions": to_jsonable(self.inductions),
        }
        if self.auto_schedule is not None:
            out["autoSchedule"] = to_jsonable(self.auto_schedule)
        out["derived"] = {"adjacencyModeByHangar": dict(self.adjacency_mode_by_hangar)}
        return out
