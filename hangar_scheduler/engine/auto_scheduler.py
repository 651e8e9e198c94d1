"""Greedy auto-scheduler for auto-inductions.

Auto-inductions are processed in precedence (topological) order. Each one takes
the first hangar, in candidate order, where a door and a contiguous bay set fit
and the slot at the earliest start is free. Only when no hangar is free then is
the start moved past the conflicting placements, hangar by hangar. Placements
are never revisited, so an early choice can crowd out a later induction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from hangar_scheduler.config import SchedulerConfig
from hangar_scheduler.constraints import overlap_interval
from hangar_scheduler.data_io import minutes
from hangar_scheduler.domain.evidence import (
    DOOR_FIT,
    INVALID_AIRCRAFT_REF,
    NO_SUITABLE_BAY_SET,
    TIME_OVERLAP,
    NoSuitableBaySetEvidence,
    NoSuitableDoorEvidence,
    RejectedBaySet,
    RejectedDoor,
    SlotConflictEvidence,
    TimeWindow,
    UnresolvedAircraftEvidence,
)
from hangar_scheduler.domain.models import AirfieldModel, AutoInduction, Hangar
from hangar_scheduler.domain.results import (
    RejectionReason,
    ScheduledInduction,
    ScheduleResult,
    UnscheduledInduction,
)
from hangar_scheduler.errors import PrecedenceCycleError

from .conflicts import manual_placements
from .search import SearchWindow, calculate_search_window, find_suitable_bay_sets, find_suitable_doors

logger = logging.getLogger(__name__)


def assign_auto_ids(autos: Sequence[AutoInduction]) -> List[str]:
    """Explicit id, else ``auto_<aircraft>``; repeats get ``_2``, ``_3``..."""
    ids: List[str] = []
    used = {a.id for a in autos if a.id}
    for auto in autos:
        if auto.id:
            ids.append(auto.id)
            continue
        base = f"auto_{auto.aircraft_name}"
        candidate, n = base, 1
        while candidate in used:
            n += 1
            candidate = f"{base}_{n}"
        used.add(candidate)
        ids.append(candidate)
    return ids


def build_precedence_graph(autos: Sequence[AutoInduction], ids: Sequence[str]) -> Dict[str, List[str]]:
    """Map each auto-induction id to the auto-induction ids it must follow.

    References to unknown ids (or to manual inductions) do not order
    auto-inductions and are left out.
    """
    known = set(ids)
    graph: Dict[str, List[str]] = {}
    for auto_id, auto in zip(ids, autos):
        deps: List[str] = []
        for ref in auto.preceding:
            if ref in known and ref not in deps:
                deps.append(ref)
        graph[auto_id] = deps
    return graph


def topological_order(ids: Sequence[str], graph: Dict[str, List[str]]) -> List[str]:
    """
    Depth-first post-order over the precedence graph with an explicit stack.

    Predecessors come before the inductions that reference them; otherwise the
    declared order is kept.

    Raises:
        PrecedenceCycleError: If the graph contains a cycle
    """
    order: List[str] = []
    done = set()

    for root in ids:
        if root in done:
            continue
        path = [root]
        visiting = {root}
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(graph.get(root, ())))]

        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if dep in done:
                    continue
                if dep in visiting:
                    raise PrecedenceCycleError(path[path.index(dep):] + [dep])
                visiting.add(dep)
                path.append(dep)
                stack.append((dep, iter(graph.get(dep, ()))))
                break
            else:
                stack.pop()
                path.pop()
                visiting.discard(node)
                done.add(node)
                order.append(node)

    return order


@dataclass
class ScheduleState:
    """Placements accepted so far in one scheduling call."""

    placements: List[ScheduledInduction] = field(default_factory=list)

    def add(self, placement: ScheduledInduction) -> None:
        self.placements.append(placement)

    def end_of(self, induction_id: str) -> Optional[datetime]:
        ends = [p.end for p in self.placements if p.id == induction_id]
        return max(ends) if ends else None

    def conflicting(
        self, hangar: str, bays: Sequence[str], start: datetime, end: datetime
    ) -> List[ScheduledInduction]:
        wanted = set(bays)
        return [
            p
            for p in self.placements
            if p.hangar == hangar
            and wanted.intersection(p.bays)
            and overlap_interval(start, end, p.start, p.end) is not None
        ]


class AutoScheduler:
    """
    Topologically ordered greedy scheduler.

    Holds only configuration; every call to ``schedule`` builds its own state.
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()

    def schedule(self, model: AirfieldModel) -> ScheduleResult:
        """
        Place every auto-induction of the model.

        Args:
            model: Reference-resolved airfield model

        Returns:
            ScheduleResult with scheduled placements, unscheduled inductions and
            their rejection reasons keyed by induction id

        Raises:
            PrecedenceCycleError: If precedence references form a cycle
        """
        autos = list(model.auto_inductions)
        ids = assign_auto_ids(autos)
        by_id = dict(zip(ids, autos))
        order = topological_order(ids, build_precedence_graph(autos, ids))

        window = calculate_search_window(model, self.config)
        state = ScheduleState(manual_placements(model.inductions))
        result = ScheduleResult()

        logger.info(
            "Scheduling %d auto-inductions from %s (%d fixed placements)",
            len(autos),
            window.start.isoformat(),
            len(state.placements),
        )

        for auto_id in order:
            auto = by_id[auto_id]
            placement, rejections = self._try_schedule(auto_id, auto, model, state, window)
            if placement is not None:
                state.add(placement)
                result.scheduled.append(placement)
                logger.info(
                    "Scheduled %s in %s bays [%s] from %s",
                    auto_id,
                    placement.hangar,
                    ", ".join(placement.bays),
                    placement.start.isoformat(),
                )
                for reason in rejections:
                    logger.debug("%s passed over: %s (%s)", auto_id, reason.rule_id, reason.message)
            else:
                result.rejection_reasons[auto_id] = rejections
                result.unscheduled.append(UnscheduledInduction(id=auto_id, induction=auto))
                logger.info(
                    "Could not schedule %s: %s",
                    auto_id,
                    ", ".join(r.rule_id for r in rejections),
                )

        return result

    def _candidate_hangars(self, auto: AutoInduction, model: AirfieldModel) -> List[Hangar]:
        # preferred hangar only, no fallback
        if auto.preferred_hangar is not None:
            return [auto.preferred_hangar]
        return list(model.hangars)

    def _earliest_start(self, auto: AutoInduction, state: ScheduleState, window: SearchWindow) -> datetime:
        start = window.start
        if auto.not_before is not None and auto.not_before > start:
            start = auto.not_before

        for ref in auto.preceding:
            dep_end = state.end_of(ref)
            if dep_end is not None and dep_end > start:
                start = dep_end

        duration = minutes(auto.duration)
        if auto.not_after is not None and start + duration > auto.not_after:
            # may land before not_before; left as is
            start = auto.not_after - duration
        return start

    def _try_schedule(
        self,
        auto_id: str,
        auto: AutoInduction,
        model: AirfieldModel,
        state: ScheduleState,
        window: SearchWindow,
    ) -> Tuple[Optional[ScheduledInduction], List[RejectionReason]]:
        aircraft = auto.aircraft
        if aircraft is None:
            return None, [
                RejectionReason(
                    rule_id=INVALID_AIRCRAFT_REF,
                    message="Aircraft reference not resolved",
                    evidence=UnresolvedAircraftEvidence(auto_induction_id=auto_id),
                )
            ]

        clearance = auto.effective_clearance
        duration = minutes(auto.duration)
        rejections: List[RejectionReason] = []
        fitting: List[Tuple[Hangar, str, Tuple[str, ...]]] = []

        for hangar in self._candidate_hangars(auto, model):
            # 1. Door fit
            door_result = find_suitable_doors(aircraft, hangar, clearance)
            if not door_result.doors:
                rejections.append(
                    RejectionReason(
                        rule_id=DOOR_FIT,
                        message=f"No suitable doors in hangar {hangar.name}",
                        hangar=hangar.name,
                        evidence=NoSuitableDoorEvidence(
                            hangar=hangar.name,
                            rejected_doors=tuple(
                                RejectedDoor(
                                    door_name=r.evidence.door_name,
                                    failed_constraints=r.evidence.failed_constraints,
                                )
                                for r in door_result.rejections
                            ),
                        ),
                    )
                )
                continue

            # 2. Bay sets
            bay_result = find_suitable_bay_sets(
                aircraft, hangar, clearance, max_bays_per_set=self.config.max_bays_per_set
            )
            if not bay_result.bay_sets:
                sample = bay_result.rejections[: self.config.rejected_set_sample_size]
                rejections.append(
                    RejectionReason(
                        rule_id=NO_SUITABLE_BAY_SET,
                        message=f"No suitable bay sets in hangar {hangar.name}",
                        hangar=hangar.name,
                        evidence=NoSuitableBaySetEvidence(
                            hangar=hangar.name,
                            bays_required=bay_result.bays_required.bays_required,
                            rejected_sets=tuple(
                                RejectedBaySet(
                                    rule_id=r.rule_id,
                                    message=r.message,
                                    bay_names=r.evidence.bay_names,
                                )
                                for r in sample
                            ),
                        ),
                    )
                )
                continue

            fitting.append(
                (hangar, door_result.doors[0].name, tuple(b.name for b in bay_result.bay_sets[0]))
            )

        # 3. Time slot: every fitting hangar at the earliest start
        earliest = self._earliest_start(auto, state, window)
        for hangar, door, bays in fitting:
            clashes = state.conflicting(hangar.name, bays, earliest, earliest + duration)
            if not clashes:
                placement = self._placement(auto_id, aircraft.name, hangar, door, bays, earliest, duration)
                return placement, rejections
            rejections.append(self._slot_rejection(hangar, bays, earliest, duration, clashes))

        if not self.config.advance_on_conflict:
            return None, rejections

        # 4. No hangar free at the earliest start: move past conflicts, hangars in declared order
        for hangar, door, bays in fitting:
            start = earliest
            clashes = state.conflicting(hangar.name, bays, start, start + duration)
            while clashes:
                # clashes overlap [start, end), so every clash ends after start
                start = max(p.end for p in clashes)
                if auto.not_after is not None and start + duration > auto.not_after:
                    break
                if start >= window.end:
                    break
                clashes = state.conflicting(hangar.name, bays, start, start + duration)
                if not clashes:
                    placement = self._placement(auto_id, aircraft.name, hangar, door, bays, start, duration)
                    return placement, rejections
                rejections.append(self._slot_rejection(hangar, bays, start, duration, clashes))

        return None, rejections

    @staticmethod
    def _placement(
        auto_id: str,
        aircraft: str,
        hangar: Hangar,
        door: str,
        bays: Tuple[str, ...],
        start: datetime,
        duration: timedelta,
    ) -> ScheduledInduction:
        return ScheduledInduction(
            id=auto_id,
            aircraft=aircraft,
            hangar=hangar.name,
            bays=bays,
            start=start,
            end=start + duration,
            door=door,
            kind="auto",
        )

    @staticmethod
    def _slot_rejection(
        hangar: Hangar,
        bays: Tuple[str, ...],
        start: datetime,
        duration: timedelta,
        clashes: Sequence[ScheduledInduction],
    ) -> RejectionReason:
        return RejectionReason(
            rule_id=TIME_OVERLAP,
            message=f"Time slot conflict in hangar {hangar.name}",
            hangar=hangar.name,
            evidence=SlotConflictEvidence(
                hangar=hangar.name,
                bays=bays,
                requested_window=TimeWindow(start, start + duration),
                conflicting_inductions=tuple(p.id for p in clashes),
            ),
        )
