"""Pairwise conflict detection over placements."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from hangar_scheduler.constraints import overlap_interval
from hangar_scheduler.domain.evidence import TIME_OVERLAP, TimeWindow
from hangar_scheduler.domain.models import Induction
from hangar_scheduler.domain.results import Conflict, InductionRef, ScheduledInduction


def placement_from_induction(induction: Induction) -> ScheduledInduction:
    """Convert a resolved manual induction into a placement."""
    return ScheduledInduction(
        id=induction.key,
        aircraft=induction.aircraft.name,
        hangar=induction.hangar.name,
        bays=tuple(b.name for b in induction.bays),
        start=induction.start,
        end=induction.end,
        door=induction.door.name if induction.door is not None else None,
        kind="manual",
    )


def manual_placements(inductions: Iterable[Induction]) -> List[ScheduledInduction]:
    return [placement_from_induction(ind) for ind in inductions if ind.is_resolved]


def detect_conflicts(placements: Sequence[ScheduledInduction]) -> List[Conflict]:
    """
    Find every pair that shares a hangar, at least one bay and overlapping time.

    Args:
        placements: Placements in a deterministic order

    Returns:
        One Conflict per offending pair, in pair order
    """
    conflicts: List[Conflict] = []

    for i, a in enumerate(placements):
        for b in placements[i + 1:]:
            if a.hangar != b.hangar:
                continue
            shared = sorted(set(a.bays) & set(b.bays))
            if not shared:
                continue
            interval = overlap_interval(a.start, a.end, b.start, b.end)
            if interval is None:
                continue

            start, end = interval
            conflicts.append(
                Conflict(
                    rule_id=TIME_OVERLAP,
                    induction1=InductionRef(id=a.id, aircraft=a.aircraft),
                    induction2=InductionRef(id=b.id, aircraft=b.aircraft),
                    hangar=a.hangar,
                    intersecting_bays=tuple(shared),
                    overlap_interval=TimeWindow(start, end),
                    message=(
                        f"Inductions {a.id or a.aircraft} and {b.id or b.aircraft} "
                        f"conflict in hangar {a.hangar} on bays [{', '.join(shared)}] "
                        f"during {start.isoformat()} to {end.isoformat()}"
                    ),
                )
            )

    return conflicts
