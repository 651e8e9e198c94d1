"""Airfield domain model: aircraft, hangars, bays, doors and inductions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple

from hangar_scheduler.data_io import to_iso


@dataclass(frozen=True)
class ClearanceEnvelope:
    """Safety margins added to raw aircraft dimensions during fit checks."""

    name: str
    lateral_margin: float = 0.0
    longitudinal_margin: float = 0.0
    vertical_margin: float = 0.0


@dataclass(frozen=True)
class AircraftType:
    """Aircraft geometry in metres, with an optional default clearance."""

    name: str
    wingspan: float
    length: float
    height: float
    tail_height: Optional[float] = None
    clearance: Optional[ClearanceEnvelope] = None

    @property
    def raw_tail_height(self) -> float:
        return self.tail_height if self.tail_height is not None else self.height


@dataclass(frozen=True)
class HangarDoor:
    name: str
    width: float
    height: float


@dataclass(frozen=True)
class HangarBay:
    """A parking slot. ``adjacent`` lists neighbouring bay names."""

    name: str
    width: float
    depth: float
    height: float
    row: Optional[int] = None
    col: Optional[int] = None
    adjacent: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Hangar:
    name: str
    doors: Sequence[HangarDoor] = ()
    bays: Sequence[HangarBay] = ()
    rows: Optional[int] = None
    cols: Optional[int] = None

    def bay(self, name: str) -> Optional[HangarBay]:
        for b in self.bays:
            if b.name == name:
                return b
        return None

    def door(self, name: str) -> Optional[HangarDoor]:
        for d in self.doors:
            if d.name == name:
                return d
        return None

    @property
    def has_grid(self) -> bool:
        return self.rows is not None and self.cols is not None


@dataclass(frozen=True)
class Induction:
    """A manually fixed placement.

    ``aircraft`` and ``hangar`` are ``None`` when the reference could not be
    resolved; such inductions are skipped by feasibility checks.
    """

    aircraft: Optional[AircraftType]
    hangar: Optional[Hangar]
    bays: Sequence[HangarBay]
    start: datetime
    end: datetime
    door: Optional[HangarDoor] = None
    id: Optional[str] = None
    clearance: Optional[ClearanceEnvelope] = None

    @property
    def effective_clearance(self) -> Optional[ClearanceEnvelope]:
        if self.clearance is not None:
            return self.clearance
        return self.aircraft.clearance if self.aircraft is not None else None

    @property
    def is_resolved(self) -> bool:
        return self.aircraft is not None and self.hangar is not None

    @property
    def key(self) -> str:
        """Stable identity: explicit id, else aircraft name and start time."""
        if self.id:
            return self.id
        name = self.aircraft.name if self.aircraft is not None else "unknown"
        return f"{name}_{to_iso(self.start)}"


@dataclass(frozen=True)
class AutoInduction:
    """A placement whose hangar, door, bays and time the scheduler decides.

    ``duration`` is in minutes. ``preceding`` holds ids of inductions that must
    end before this one starts.
    """

    aircraft: Optional[AircraftType]
    duration: float
    id: Optional[str] = None
    preferred_hangar: Optional[Hangar] = None
    preceding: Tuple[str, ...] = ()
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None
    clearance: Optional[ClearanceEnvelope] = None

    @property
    def effective_clearance(self) -> Optional[ClearanceEnvelope]:
        if self.clearance is not None:
            return self.clearance
        return self.aircraft.clearance if self.aircraft is not None else None

    @property
    def aircraft_name(self) -> str:
        return self.aircraft.name if self.aircraft is not None else "unknown"


@dataclass(frozen=True)
class AirfieldModel:
    """Fully reference-resolved snapshot consumed by one analysis call."""

    name: str
    hangars: Sequence[Hangar] = ()
    aircraft: Sequence[AircraftType] = ()
    clearances: Sequence[ClearanceEnvelope] = ()
    inductions: Sequence[Induction] = ()
    auto_inductions: Sequence[AutoInduction] = ()

    def hangar(self, name: str) -> Optional[Hangar]:
        for h in self.hangars:
            if h.name == name:
                return h
        return None
