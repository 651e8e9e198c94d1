"""Rule checkers: pure predicates returning structured ``RuleResult`` values."""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .domain.evidence import (
    BAY_FIT,
    BAY_OWNERSHIP,
    CONTIGUITY,
    DOOR_FIT,
    DOOR_OWNERSHIP,
    TIME_OVERLAP,
    BayOwnershipEvidence,
    BaySetFitEvidence,
    ContiguityEvidence,
    DoorFitEvidence,
    DoorOwnershipEvidence,
    TimeOverlapEvidence,
    TimeWindow,
)
from .domain.models import Hangar, HangarBay, HangarDoor
from .domain.results import RuleResult
from .services.adjacency import AdjacencyGraph
from .services.dimensions import EffectiveDimensions


def check_door_fit(effective: EffectiveDimensions, door: HangarDoor, aircraft_name: str) -> RuleResult:
    wingspan_fits = effective.wingspan <= door.width
    height_fits = effective.tail_height <= door.height
    ok = wingspan_fits and height_fits

    failed: List[str] = []
    if not wingspan_fits:
        failed.append(f"effective wingspan {effective.wingspan:.2f}m > door width {door.width}m")
    if not height_fits:
        failed.append(f"effective tail height {effective.tail_height:.2f}m > door height {door.height}m")

    if ok:
        message = f"Aircraft {aircraft_name} fits through door {door.name}"
    else:
        message = f"Aircraft {aircraft_name} does NOT fit through door {door.name}: {', '.join(failed)}"

    return RuleResult(
        ok=ok,
        rule_id=DOOR_FIT,
        message=message,
        evidence=DoorFitEvidence(
            aircraft_name=aircraft_name,
            door_name=door.name,
            door_width=door.width,
            door_height=door.height,
            raw_wingspan=effective.raw_wingspan,
            raw_tail_height=effective.raw_tail_height,
            effective_wingspan=effective.wingspan,
            effective_tail_height=effective.tail_height,
            wingspan_fits=wingspan_fits,
            height_fits=height_fits,
            failed_constraints=tuple(failed),
            clearance_name=effective.clearance_name,
        ),
    )


def check_bay_set_fit(
    effective: EffectiveDimensions, bays: Sequence[HangarBay], aircraft_name: str
) -> RuleResult:
    """
    Check an aircraft against a set of bays it would straddle.

    Widths add up across the set; the shallowest and lowest bay bind depth
    and height.

    Args:
        effective: Effective aircraft dimensions
        bays: Selected bays (order is preserved in the evidence)
        aircraft_name: Name used in messages

    Returns:
        RuleResult with BaySetFitEvidence
    """
    names = tuple(b.name for b in bays)
    if not bays:
        return RuleResult(
            ok=False,
            rule_id=BAY_FIT,
            message="No bays provided",
            evidence=BaySetFitEvidence(
                aircraft_name=aircraft_name,
                bay_names=(),
                bay_count=0,
                sum_width=0.0,
                min_depth=0.0,
                min_height=0.0,
                limiting_depth_bay=None,
                limiting_height_bay=None,
                effective_wingspan=effective.wingspan,
                effective_length=effective.length,
                effective_tail_height=effective.tail_height,
                width_fits=False,
                depth_fits=False,
                height_fits=False,
                failed_constraints=("no bays provided",),
                clearance_name=effective.clearance_name,
            ),
        )

    sum_width = sum(b.width for b in bays)
    # first bay wins ties
    depth_bay = min(bays, key=lambda b: b.depth)
    height_bay = min(bays, key=lambda b: b.height)

    width_fits = sum_width >= effective.wingspan
    depth_fits = depth_bay.depth >= effective.length
    height_fits = height_bay.height >= effective.tail_height
    ok = width_fits and depth_fits and height_fits

    failed: List[str] = []
    if not width_fits:
        failed.append(f"sum width {sum_width:.2f}m < wingspan {effective.wingspan:.2f}m")
    if not depth_fits:
        failed.append(
            f"min depth {depth_bay.depth:.2f}m ({depth_bay.name}) < length {effective.length:.2f}m"
        )
    if not height_fits:
        failed.append(
            f"min height {height_bay.height:.2f}m ({height_bay.name}) < tail height {effective.tail_height:.2f}m"
        )

    if ok:
        message = f"Aircraft {aircraft_name} fits in bay set [{', '.join(names)}]"
    else:
        message = f"Aircraft {aircraft_name} does NOT fit: {'; '.join(failed)}"

    return RuleResult(
        ok=ok,
        rule_id=BAY_FIT,
        message=message,
        evidence=BaySetFitEvidence(
            aircraft_name=aircraft_name,
            bay_names=names,
            bay_count=len(bays),
            sum_width=sum_width,
            min_depth=depth_bay.depth,
            min_height=height_bay.height,
            limiting_depth_bay=depth_bay.name,
            limiting_height_bay=height_bay.name,
            effective_wingspan=effective.wingspan,
            effective_length=effective.length,
            effective_tail_height=effective.tail_height,
            width_fits=width_fits,
            depth_fits=depth_fits,
            height_fits=height_fits,
            failed_constraints=tuple(failed),
            clearance_name=effective.clearance_name,
        ),
    )


def check_bay_fit(effective: EffectiveDimensions, bay: HangarBay, aircraft_name: str) -> RuleResult:
    return check_bay_set_fit(effective, [bay], aircraft_name)


def check_contiguity(bay_names: Sequence[str], graph: AdjacencyGraph) -> RuleResult:
    names = tuple(bay_names)

    if len(names) <= 1:
        return RuleResult(
            ok=True,
            rule_id=CONTIGUITY,
            message="Single bay requires no contiguity check",
            evidence=ContiguityEvidence(
                bay_names=names,
                bay_count=len(names),
                connected=True,
                reachable_count=len(names),
                reachable_bays=names,
                unreachable_bays=(),
                derived_from_grid=graph.grid_derived,
                grid_edges_used=graph.grid_edges,
                explicit_edges_used=graph.explicit_edges,
            ),
        )

    # BFS restricted to edges with both endpoints in the selection
    selected = set(names)
    visited = {names[0]}
    order = [names[0]]
    queue = deque([names[0]])
    while queue:
        current = queue.popleft()
        for neighbor in graph.neighbors(current):
            if neighbor in selected and neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                queue.append(neighbor)

    ok = len(visited) == len(selected)
    if ok:
        message = f"Bay set [{', '.join(names)}] is contiguous"
    else:
        message = (
            f"Bay set [{', '.join(names)}] is NOT contiguous: "
            f"only {len(visited)}/{len(selected)} reachable"
        )

    return RuleResult(
        ok=ok,
        rule_id=CONTIGUITY,
        message=message,
        evidence=ContiguityEvidence(
            bay_names=names,
            bay_count=len(names),
            connected=ok,
            reachable_count=len(visited),
            reachable_bays=tuple(order),
            unreachable_bays=tuple(n for n in names if n not in visited),
            derived_from_grid=graph.grid_derived,
            grid_edges_used=graph.grid_edges,
            explicit_edges_used=graph.explicit_edges,
        ),
    )


def overlap_interval(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> Optional[Tuple[datetime, datetime]]:
    # half-open intervals: touching endpoints do not overlap
    if start_a < end_b and start_b < end_a:
        return max(start_a, start_b), min(end_a, end_b)
    return None


def check_time_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> RuleResult:
    interval = overlap_interval(start_a, end_a, start_b, end_b)
    overlaps = interval is not None
    window = TimeWindow(*interval) if interval else None
    if overlaps:
        message = f"Time overlap detected: {interval[0].isoformat()} to {interval[1].isoformat()}"
    else:
        message = "No time overlap"

    return RuleResult(
        ok=not overlaps,
        rule_id=TIME_OVERLAP,
        message=message,
        evidence=TimeOverlapEvidence(
            period1=TimeWindow(start_a, end_a),
            period2=TimeWindow(start_b, end_b),
            overlaps=overlaps,
            overlap_interval=window,
        ),
    )


def check_bay_ownership(bay: HangarBay, hangar: Hangar) -> RuleResult:
    ok = bay in hangar.bays
    verb = "belongs" if ok else "does not belong"
    return RuleResult(
        ok=ok,
        rule_id=BAY_OWNERSHIP,
        message=f"Bay {bay.name} {verb} to hangar {hangar.name}",
        evidence=BayOwnershipEvidence(
            bay_name=bay.name,
            hangar_name=hangar.name,
            hangar_bays=tuple(b.name for b in hangar.bays),
        ),
    )


def check_door_ownership(door: HangarDoor, hangar: Hangar) -> RuleResult:
    ok = door in hangar.doors
    verb = "belongs" if ok else "does not belong"
    return RuleResult(
        ok=ok,
        rule_id=DOOR_OWNERSHIP,
        message=f"Door {door.name} {verb} to hangar {hangar.name}",
        evidence=DoorOwnershipEvidence(
            door_name=door.name,
            hangar_name=hangar.name,
            hangar_doors=tuple(d.name for d in hangar.doors),
        ),
    )
