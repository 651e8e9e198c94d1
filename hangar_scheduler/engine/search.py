"""Search primitives: suitable doors, suitable bay sets and the search window."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from hangar_scheduler.config import SchedulerConfig
from hangar_scheduler.constraints import check_bay_set_fit, check_contiguity, check_door_fit
from hangar_scheduler.domain.models import (
    AircraftType,
    AirfieldModel,
    ClearanceEnvelope,
    Hangar,
    HangarBay,
    HangarDoor,
)
from hangar_scheduler.domain.results import RuleResult
from hangar_scheduler.services.adjacency import AdjacencyGraph, build_adjacency_graph
from hangar_scheduler.services.dimensions import (
    BaysRequired,
    calculate_bays_required,
    calculate_effective_dimensions,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_BAYS_PER_SET = 5


@dataclass
class DoorSearchResult:
    doors: List[HangarDoor] = field(default_factory=list)
    rejections: List[RuleResult] = field(default_factory=list)


@dataclass
class BaySetSearchResult:
    bay_sets: List[Tuple[HangarBay, ...]]
    rejections: List[RuleResult]
    bays_required: BaysRequired
    adjacency: AdjacencyGraph


@dataclass(frozen=True)
class SearchWindow:
    start: datetime
    end: datetime


def find_suitable_doors(
    aircraft: AircraftType,
    hangar: Hangar,
    clearance: Optional[ClearanceEnvelope] = None,
) -> DoorSearchResult:
    """Check every door in declared order; callers take the first passing one."""
    effective = calculate_effective_dimensions(aircraft, clearance)
    result = DoorSearchResult()
    for door in hangar.doors:
        check = check_door_fit(effective, door, aircraft.name)
        if check.ok:
            result.doors.append(door)
        else:
            result.rejections.append(check)
    return result


def find_connected_sets_of_size(
    bays: Sequence[HangarBay],
    graph: AdjacencyGraph,
    target_size: int,
) -> List[Tuple[HangarBay, ...]]:
    """
    Enumerate connected bay subsets of exactly ``target_size`` bays.

    Breadth-first expansion from every starting bay: a candidate grows by any
    neighbour of any member not already in it. Candidates are deduplicated
    across start points by their sorted-name signature, and a partial set is
    only expanded once.

    Args:
        bays: Hangar bays in declared order (start points)
        graph: Adjacency graph of the hangar
        target_size: Number of bays per subset

    Returns:
        Subsets in discovery order, each as a tuple sorted by bay name
    """
    if target_size < 1:
        return []

    by_name: Dict[str, HangarBay] = {b.name: b for b in bays}
    results: List[Tuple[HangarBay, ...]] = []
    found: Set[FrozenSet[str]] = set()
    expanded: Set[FrozenSet[str]] = set()

    for start in bays:
        queue = deque([frozenset((start.name,))])
        while queue:
            current = queue.popleft()

            if len(current) == target_size:
                if current not in found:
                    found.add(current)
                    results.append(tuple(by_name[n] for n in sorted(current)))
                continue

            if current in expanded:
                continue
            expanded.add(current)

            frontier = sorted(
                {n for member in current for n in graph.neighbors(member)} - current
            )
            for neighbor in frontier:
                if neighbor in by_name:
                    queue.append(current | {neighbor})

    return results


def find_suitable_bay_sets(
    aircraft: AircraftType,
    hangar: Hangar,
    clearance: Optional[ClearanceEnvelope] = None,
    max_bays_per_set: int = DEFAULT_MAX_BAYS_PER_SET,
) -> BaySetSearchResult:
    """
    Find contiguous bay sets that fit the aircraft.

    Set sizes are tried from the bays-required lower bound upwards; the first
    size that yields any connected candidate ends the enumeration.

    Args:
        aircraft: Aircraft to place
        hangar: Hangar to search
        clearance: Optional clearance envelope
        max_bays_per_set: Largest set size considered

    Returns:
        BaySetSearchResult; ``bay_sets`` sorted by (size, sorted bay names)
    """
    effective = calculate_effective_dimensions(aircraft, clearance)
    required = calculate_bays_required(effective, hangar)
    graph = build_adjacency_graph(hangar)

    logger.debug("Bay search in %s for %s: %s", hangar.name, aircraft.name, required.calculation)
    logger.debug(
        "Adjacency: grid=%s, grid_edges=%d, explicit_edges=%d",
        graph.grid_derived,
        graph.grid_edges,
        graph.explicit_edges,
    )

    candidates: List[Tuple[HangarBay, ...]] = []
    upper = min(max_bays_per_set, len(hangar.bays))
    for size in range(max(1, required.bays_required), upper + 1):
        candidates = find_connected_sets_of_size(hangar.bays, graph, size)
        if candidates:
            logger.debug("Found %d connected sets of size %d", len(candidates), size)
            break

    suitable: List[Tuple[HangarBay, ...]] = []
    rejections: List[RuleResult] = []
    for bay_set in candidates:
        contiguity = check_contiguity([b.name for b in bay_set], graph)
        if not contiguity.ok:
            rejections.append(contiguity)
            continue
        fit = check_bay_set_fit(effective, bay_set, aircraft.name)
        if fit.ok:
            suitable.append(bay_set)
        else:
            rejections.append(fit)

    suitable.sort(key=lambda s: (len(s), sorted(b.name for b in s)))
    return BaySetSearchResult(
        bay_sets=suitable,
        rejections=rejections,
        bays_required=required,
        adjacency=graph,
    )


def calculate_search_window(model: AirfieldModel, config: Optional[SchedulerConfig] = None) -> SearchWindow:
    cfg = config or SchedulerConfig()
    if model.inductions:
        baseline = min(ind.start for ind in model.inductions)
    else:
        baseline = cfg.default_start_time
    return SearchWindow(start=baseline, end=baseline + cfg.search_horizon)
