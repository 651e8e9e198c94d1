"""Rule identifiers and the structured evidence attached to each rule result.

Each evidence class belongs to exactly one rule id (``rule_id`` class
attribute), so ``Evidence`` is a closed union that consumers can dispatch on.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional, Tuple, Union

DOOR_FIT = "SFR11_DOOR_FIT"
BAY_FIT = "SFR12_BAY_FIT"
CONTIGUITY = "SFR13_CONTIGUITY"
BAY_OWNERSHIP = "SFR14_BAY_OWNERSHIP"
DOOR_OWNERSHIP = "SFR15_DOOR_OWNERSHIP"
TIME_OVERLAP = "SFR16_TIME_OVERLAP"
PRECEDENCE_CYCLE = "SFR18_PRECEDENCE_CYCLE"
SCHEDULING_FAILED = "SCHED_FAILED"
NO_SUITABLE_BAY_SET = "NO_SUITABLE_BAY_SET"
INVALID_AIRCRAFT_REF = "INVALID_AIRCRAFT_REF"
DERIVED_BAYS_REQUIRED = "DERIVED_BAYS_REQUIRED"


@dataclass(frozen=True)
class DoorFitEvidence:
    rule_id: ClassVar[str] = DOOR_FIT

    aircraft_name: str
    door_name: str
    door_width: float
    door_height: float
    raw_wingspan: float
    raw_tail_height: float
    effective_wingspan: float
    effective_tail_height: float
    wingspan_fits: bool
    height_fits: bool
    failed_constraints: Tuple[str, ...] = ()
    clearance_name: Optional[str] = None


@dataclass(frozen=True)
class BaySetFitEvidence:
    rule_id: ClassVar[str] = BAY_FIT

    aircraft_name: str
    bay_names: Tuple[str, ...]
    bay_count: int
    sum_width: float
    min_depth: float
    min_height: float
    limiting_depth_bay: Optional[str]
    limiting_height_bay: Optional[str]
    effective_wingspan: float
    effective_length: float
    effective_tail_height: float
    width_fits: bool
    depth_fits: bool
    height_fits: bool
    failed_constraints: Tuple[str, ...] = ()
    clearance_name: Optional[str] = None


@dataclass(frozen=True)
class ContiguityEvidence:
    rule_id: ClassVar[str] = CONTIGUITY

    bay_names: Tuple[str, ...]
    bay_count: int
    connected: bool
    reachable_count: int
    reachable_bays: Tuple[str, ...]
    unreachable_bays: Tuple[str, ...]
    derived_from_grid: bool
    grid_edges_used: int
    explicit_edges_used: int


@dataclass(frozen=True)
class BayOwnershipEvidence:
    rule_id: ClassVar[str] = BAY_OWNERSHIP

    bay_name: str
    hangar_name: str
    hangar_bays: Tuple[str, ...]


@dataclass(frozen=True)
class DoorOwnershipEvidence:
    rule_id: ClassVar[str] = DOOR_OWNERSHIP

    door_name: str
    hangar_name: str
    hangar_doors: Tuple[str, ...]


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class TimeOverlapEvidence:
    """Pairwise overlap between two time windows (and, for conflicts, bays)."""

    rule_id: ClassVar[str] = TIME_OVERLAP

    period1: TimeWindow
    period2: TimeWindow
    overlaps: bool
    overlap_interval: Optional[TimeWindow] = None


@dataclass(frozen=True)
class InductionSide:
    id: Optional[str]
    aircraft: str
    hangar: str
    bays: Tuple[str, ...]
    time_window: TimeWindow


@dataclass(frozen=True)
class ConflictEvidence:
    rule_id: ClassVar[str] = TIME_OVERLAP

    induction1: InductionSide
    induction2: InductionSide
    overlap_interval: TimeWindow
    intersecting_bays: Tuple[str, ...]


@dataclass(frozen=True)
class RejectedDoor:
    door_name: str
    failed_constraints: Tuple[str, ...]


@dataclass(frozen=True)
class NoSuitableDoorEvidence:
    rule_id: ClassVar[str] = DOOR_FIT

    hangar: str
    rejected_doors: Tuple[RejectedDoor, ...]


@dataclass(frozen=True)
class RejectedBaySet:
    rule_id: str
    message: str
    bay_names: Tuple[str, ...]


@dataclass(frozen=True)
class NoSuitableBaySetEvidence:
    rule_id: ClassVar[str] = NO_SUITABLE_BAY_SET

    hangar: str
    bays_required: int
    rejected_sets: Tuple[RejectedBaySet, ...]


@dataclass(frozen=True)
class SlotConflictEvidence:
    rule_id: ClassVar[str] = TIME_OVERLAP

    hangar: str
    bays: Tuple[str, ...]
    requested_window: TimeWindow
    conflicting_inductions: Tuple[str, ...]


@dataclass(frozen=True)
class UnresolvedAircraftEvidence:
    rule_id: ClassVar[str] = INVALID_AIRCRAFT_REF

    auto_induction_id: str


@dataclass(frozen=True)
class RejectionSummary:
    rule_id: str
    message: str
    hangar: Optional[str] = None
    conflicting_with: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class SchedulingFailedEvidence:
    rule_id: ClassVar[str] = SCHEDULING_FAILED

    auto_induction_id: str
    aircraft: str
    duration: float
    rejection_reasons: Tuple[RejectionSummary, ...]
    preferred_hangar: Optional[str] = None
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None


Evidence = Union[
    DoorFitEvidence,
    BaySetFitEvidence,
    ContiguityEvidence,
    BayOwnershipEvidence,
    DoorOwnershipEvidence,
    TimeOverlapEvidence,
    ConflictEvidence,
    NoSuitableDoorEvidence,
    NoSuitableBaySetEvidence,
    SlotConflictEvidence,
    UnresolvedAircraftEvidence,
    SchedulingFailedEvidence,
]
