"""Feasibility engine: aggregates rule checks for a single induction."""

from __future__ import annotations

from typing import List, Optional, Sequence

from hangar_scheduler.constraints import (
    check_bay_fit,
    check_bay_ownership,
    check_bay_set_fit,
    check_contiguity,
    check_door_fit,
    check_door_ownership,
)
from hangar_scheduler.domain.models import (
    AircraftType,
    ClearanceEnvelope,
    Hangar,
    HangarBay,
    HangarDoor,
    Induction,
)
from hangar_scheduler.domain.results import RuleResult
from hangar_scheduler.services.adjacency import build_adjacency_graph
from hangar_scheduler.services.dimensions import calculate_effective_dimensions


class FeasibilityEngine:
    """
    Runs the geometric rules for one placement.

    Stateless; one instance can be shared freely.
    """

    def validate_induction(
        self,
        aircraft: AircraftType,
        hangar: Hangar,
        bays: Sequence[HangarBay],
        door: Optional[HangarDoor] = None,
        clearance: Optional[ClearanceEnvelope] = None,
    ) -> List[RuleResult]:
        """
        Validate a placement against every applicable rule.

        Order: door fit (if a door is given), bay-set fit, contiguity (more
        than one bay), bay ownership (one result per bay), door ownership.

        Args:
            aircraft: Aircraft being placed
            hangar: Target hangar
            bays: Selected bays
            door: Optional entry door
            clearance: Optional clearance envelope

        Returns:
            All results in check order; callers filter on ``ok``
        """
        effective = calculate_effective_dimensions(aircraft, clearance)
        results: List[RuleResult] = []

        if door is not None:
            results.append(check_door_fit(effective, door, aircraft.name))

        results.append(check_bay_set_fit(effective, bays, aircraft.name))

        if len(bays) > 1:
            graph = build_adjacency_graph(hangar)
            results.append(check_contiguity([b.name for b in bays], graph))

        for bay in bays:
            results.append(check_bay_ownership(bay, hangar))
        if door is not None:
            results.append(check_door_ownership(door, hangar))

        return results

    def validate(self, induction: Induction) -> List[RuleResult]:
        """Validate a manual induction; unresolved ones yield no results."""
        if not induction.is_resolved:
            return []
        return self.validate_induction(
            induction.aircraft,
            induction.hangar,
            induction.bays,
            door=induction.door,
            clearance=induction.effective_clearance,
        )

    def find_suitable_bays(
        self,
        aircraft: AircraftType,
        hangar: Hangar,
        clearance: Optional[ClearanceEnvelope] = None,
    ) -> List[HangarBay]:
        """Single bays that fit the aircraft on their own, in declared order."""
        effective = calculate_effective_dimensions(aircraft, clearance)
        return [bay for bay in hangar.bays if check_bay_fit(effective, bay, aircraft.name).ok]


def validate_induction(
    aircraft: AircraftType,
    hangar: Hangar,
    bays: Sequence[HangarBay],
    door: Optional[HangarDoor] = None,
    clearance: Optional[ClearanceEnvelope] = None,
) -> List[RuleResult]:
    return FeasibilityEngine().validate_induction(aircraft, hangar, bays, door, clearance)


def find_suitable_bays(
    aircraft: AircraftType,
    hangar: Hangar,
    clearance: Optional[ClearanceEnvelope] = None,
) -> List[HangarBay]:
    return FeasibilityEngine().find_suitable_bays(aircraft, hangar, clearance)
