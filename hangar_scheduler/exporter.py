"""Export model builder: enriched, deterministically ordered induction records."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .constraints import check_contiguity
from .domain.models import AircraftType, AirfieldModel, ClearanceEnvelope, Hangar
from .domain.results import (
    AutoScheduleExport,
    DerivedInductionProperties,
    ExportedInduction,
    ExportedUnscheduledAuto,
    ExportModel,
    ScheduledInduction,
    ScheduleResult,
)
from .engine.auto_scheduler import assign_auto_ids
from .engine.conflicts import detect_conflicts, placement_from_induction
from .services.adjacency import build_adjacency_graph
from .services.dimensions import calculate_bays_required, calculate_effective_dimensions

UNKNOWN_REASON = "SCHED_FAILED"


def _derive(
    aircraft: AircraftType,
    hangar: Hangar,
    bay_names: Sequence[str],
    clearance: Optional[ClearanceEnvelope],
) -> DerivedInductionProperties:
    effective = calculate_effective_dimensions(aircraft, clearance)
    required = calculate_bays_required(effective, hangar)
    contiguity = check_contiguity(bay_names, build_adjacency_graph(hangar))
    return DerivedInductionProperties(
        wingspan_eff=effective.wingspan,
        length_eff=effective.length,
        tail_eff=effective.tail_height,
        bays_required=required.bays_required,
        connected=contiguity.ok,
    )


def _exported(placement: ScheduledInduction, derived: DerivedInductionProperties) -> ExportedInduction:
    return ExportedInduction(
        id=placement.id,
        kind=placement.kind,
        aircraft=placement.aircraft,
        hangar=placement.hangar,
        door=placement.door,
        bays=placement.bays,
        start=placement.start,
        end=placement.end,
        derived=derived,
    )


def _by_start_then_id(records: List[ExportedInduction]) -> List[ExportedInduction]:
    return sorted(records, key=lambda r: (r.start, r.id))


def build_export_model(model: AirfieldModel, schedule_result: Optional[ScheduleResult] = None) -> ExportModel:
    """
    Build the export model for a model and an optional auto-schedule.

    Manual inductions with unresolved aircraft or hangar are left out. Conflict
    lists are computed once over manual and scheduled placements together.

    Args:
        model: Reference-resolved airfield model
        schedule_result: Output of the auto-scheduler, if it ran

    Returns:
        ExportModel
    """
    adjacency_modes = {h.name: build_adjacency_graph(h).mode for h in model.hangars}

    # 1. Manual inductions
    placements: List[ScheduledInduction] = []
    records: List[ExportedInduction] = []
    for induction in model.inductions:
        if not induction.is_resolved:
            continue
        placement = placement_from_induction(induction)
        derived = _derive(induction.aircraft, induction.hangar, placement.bays, induction.effective_clearance)
        placements.append(placement)
        records.append(_exported(placement, derived))

    # 2. Scheduled auto-inductions
    auto_schedule: Optional[AutoScheduleExport] = None
    scheduled_records: List[ExportedInduction] = []
    if schedule_result is not None:
        autos = list(model.auto_inductions)
        auto_by_id = dict(zip(assign_auto_ids(autos), autos))
        for placement in schedule_result.scheduled:
            auto = auto_by_id.get(placement.id)
            hangar = model.hangar(placement.hangar)
            if auto is None or auto.aircraft is None or hangar is None:
                continue
            derived = _derive(auto.aircraft, hangar, placement.bays, auto.effective_clearance)
            placements.append(placement)
            scheduled_records.append(_exported(placement, derived))

        unscheduled: List[ExportedUnscheduledAuto] = []
        for u in schedule_result.unscheduled:
            reasons = schedule_result.reasons_for(u.id)
            if reasons:
                reason_rule_id, evidence = reasons[0].rule_id, reasons[0].evidence
            else:
                reason_rule_id = UNKNOWN_REASON
                evidence = {"message": "No suitable hangar/bay/time slot found"}
            unscheduled.append(
                ExportedUnscheduledAuto(
                    id=u.id,
                    aircraft=u.induction.aircraft_name,
                    preferred_hangar=(
                        u.induction.preferred_hangar.name if u.induction.preferred_hangar else None
                    ),
                    reason_rule_id=reason_rule_id,
                    evidence=evidence,
                )
            )
        auto_schedule = AutoScheduleExport(
            scheduled=_by_start_then_id(scheduled_records),
            unscheduled=sorted(unscheduled, key=lambda r: r.id),
        )

    # 3. Conflicts over the combined set, symmetric
    conflict_map: Dict[str, List[str]] = {}
    for conflict in detect_conflicts(placements):
        a, b = conflict.induction1.label, conflict.induction2.label
        for left, right in ((a, b), (b, a)):
            ids = conflict_map.setdefault(left, [])
            if right not in ids:
                ids.append(right)

    all_records = records + scheduled_records
    for record in all_records:
        record.conflicts = sorted(conflict_map.get(record.id, []))

    return ExportModel(
        airfield_name=model.name,
        inductions=_by_start_then_id(all_records),
        adjacency_mode_by_hangar=adjacency_modes,
        auto_schedule=auto_schedule,
    )
