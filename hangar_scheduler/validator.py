from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import pandas as pd

from .constraints import check_bay_set_fit, check_contiguity, check_door_fit
from .domain.evidence import (
    DOOR_FIT,
    NO_SUITABLE_BAY_SET,
    SCHEDULING_FAILED,
    TIME_OVERLAP,
    ConflictEvidence,
    InductionSide,
    RejectionSummary,
    SchedulingFailedEvidence,
    SlotConflictEvidence,
    TimeWindow,
)
from .domain.models import AirfieldModel
from .domain.results import (
    RejectionReason,
    ScheduledInduction,
    ScheduleResult,
    ValidationReport,
    ValidationSummary,
    Violation,
    ViolationSubject,
)
from .engine.conflicts import detect_conflicts, manual_placements
from .services.adjacency import build_adjacency_graph
from .services.dimensions import calculate_effective_dimensions
from .services.utilization import calculate_utilization, placements_frame

if TYPE_CHECKING:
    from .engine.orchestrator import AnalysisResult


def _violation_sort_key(v: Violation):
    # subjects with an id sort before those without
    return (
        v.rule_id,
        v.subject.type,
        v.subject.name,
        0 if v.subject.id else 1,
        v.subject.id or "",
    )


def sort_violations(violations: Sequence[Violation]) -> List[Violation]:
    return sorted(violations, key=_violation_sort_key)


def _manual_violations(model: AirfieldModel) -> List[Violation]:
    violations: List[Violation] = []
    for induction in model.inductions:
        if not induction.is_resolved:
            continue
        aircraft = induction.aircraft
        effective = calculate_effective_dimensions(aircraft, induction.effective_clearance)
        subject = ViolationSubject(type="Induction", name=aircraft.name, id=induction.id)

        checks = []
        if induction.door is not None:
            checks.append(check_door_fit(effective, induction.door, aircraft.name))
        if induction.bays:
            checks.append(check_bay_set_fit(effective, induction.bays, aircraft.name))
            if len(induction.bays) > 1:
                graph = build_adjacency_graph(induction.hangar)
                checks.append(check_contiguity([b.name for b in induction.bays], graph))

        for check in checks:
            if not check.ok:
                violations.append(
                    Violation(
                        rule_id=check.rule_id,
                        severity="error",
                        message=check.message,
                        subject=subject,
                        evidence=check.evidence,
                    )
                )
    return violations


def _conflict_violations(model: AirfieldModel) -> List[Violation]:
    placements = manual_placements(model.inductions)
    by_id: Dict[str, ScheduledInduction] = {p.id: p for p in placements}

    def side(ref_id: str) -> InductionSide:
        p = by_id[ref_id]
        return InductionSide(
            id=p.id,
            aircraft=p.aircraft,
            hangar=p.hangar,
            bays=p.bays,
            time_window=TimeWindow(p.start, p.end),
        )

    violations: List[Violation] = []
    for conflict in detect_conflicts(placements):
        violations.append(
            Violation(
                rule_id=TIME_OVERLAP,
                severity="error",
                message=conflict.message,
                subject=ViolationSubject(
                    type="Induction",
                    name=conflict.induction1.aircraft,
                    id=conflict.induction1.id,
                ),
                evidence=ConflictEvidence(
                    induction1=side(conflict.induction1.id),
                    induction2=side(conflict.induction2.id),
                    overlap_interval=conflict.overlap_interval,
                    intersecting_bays=conflict.intersecting_bays,
                ),
            )
        )
    return violations


def _failure_message(auto_id: str, aircraft: str, reasons: Sequence[RejectionReason]) -> str:
    message = f"Auto-induction '{auto_id}' for {aircraft} could not be scheduled"
    if not reasons:
        return message
    primary = reasons[0]
    if primary.rule_id == TIME_OVERLAP:
        conflicting: Sequence[str] = ()
        if isinstance(primary.evidence, SlotConflictEvidence):
            conflicting = primary.evidence.conflicting_inductions
        return f"{message}: time slot conflict with {', '.join(conflicting) or 'other inductions'}"
    if primary.rule_id == DOOR_FIT:
        return f"{message}: no suitable doors found (aircraft too large)"
    if primary.rule_id == NO_SUITABLE_BAY_SET:
        return f"{message}: no suitable bay configuration available"
    return f"{message}: {primary.message}"


def _scheduling_violations(schedule_result: ScheduleResult) -> List[Violation]:
    violations: List[Violation] = []
    for unscheduled in schedule_result.unscheduled:
        auto = unscheduled.induction
        aircraft = auto.aircraft.name if auto.aircraft is not None else "Unknown"
        reasons = schedule_result.reasons_for(unscheduled.id)
        violations.append(
            Violation(
                rule_id=SCHEDULING_FAILED,
                severity="warning",
                message=_failure_message(unscheduled.id, aircraft, reasons),
                subject=ViolationSubject(type="AutoInduction", name=aircraft, id=unscheduled.id),
                evidence=SchedulingFailedEvidence(
                    auto_induction_id=unscheduled.id,
                    aircraft=aircraft,
                    duration=auto.duration,
                    preferred_hangar=auto.preferred_hangar.name if auto.preferred_hangar else None,
                    not_before=auto.not_before,
                    not_after=auto.not_after,
                    rejection_reasons=tuple(
                        RejectionSummary(
                            rule_id=r.rule_id,
                            message=r.message,
                            hangar=r.hangar,
                            conflicting_with=(
                                r.evidence.conflicting_inductions
                                if isinstance(r.evidence, SlotConflictEvidence)
                                else None
                            ),
                        )
                        for r in reasons
                    ),
                ),
            )
        )
    return violations


def build_validation_report(
    model: AirfieldModel,
    schedule_result: Optional[ScheduleResult] = None,
    generated_at: Optional[datetime] = None,
) -> ValidationReport:
    """
    Collect every violation of the model into one deterministic report.

    Args:
        model: Reference-resolved airfield model
        schedule_result: Auto-schedule outcome; unscheduled entries become warnings
        generated_at: Optional report timestamp (omitted when not given)

    Returns:
        ValidationReport with sorted violations and per-rule/per-severity counts
    """
    # 1. Geometry of manual inductions
    violations = _manual_violations(model)
    # 2. Manual time conflicts
    violations.extend(_conflict_violations(model))
    # 3. Scheduling failures
    if schedule_result is not None:
        violations.extend(_scheduling_violations(schedule_result))

    ordered = sort_violations(violations)
    by_rule = Counter(v.rule_id for v in ordered)
    summary = ValidationSummary(
        total_violations=len(ordered),
        by_rule_id=dict(sorted(by_rule.items())),
        by_severity={
            "errors": sum(1 for v in ordered if v.severity == "error"),
            "warnings": sum(1 for v in ordered if v.severity == "warning"),
        },
    )
    return ValidationReport(violations=ordered, summary=summary, timestamp=generated_at)


def summarize_analysis(result: "AnalysisResult") -> str:
    report = result.report
    lines = [f"Airfield: {result.export_model.airfield_name}"]
    lines.append(
        f"Violations: {report.summary.total_violations} "
        f"({report.summary.by_severity.get('errors', 0)} errors, "
        f"{report.summary.by_severity.get('warnings', 0)} warnings)"
    )
    if report.violations:
        vdf = pd.DataFrame(
            [{"rule_id": v.rule_id, "severity": v.severity} for v in report.violations]
        )
        lines.append(vdf.groupby(["rule_id", "severity"]).size().to_string())
    lines.append("")

    placements = list(result.placements)
    if not placements:
        lines.append("No placements.")
        return "\n".join(lines)

    df = placements_frame(placements)
    per_hangar = df.drop_duplicates("id").groupby(["hangar", "kind"]).size().unstack(fill_value=0)
    lines.append("Placements per hangar:")
    lines.append(per_hangar.to_string())
    lines.append("")

    bay_hours = df.groupby(["hangar", "bay"])["hours"].sum()
    lines.append("Occupied hours per bay:")
    lines.append(bay_hours.to_string())
    lines.append("")

    util = calculate_utilization(result.model, placements)
    lines.append("Hangar utilisation (% of schedule span):")
    for hangar, pct in util.by_hangar.items():
        lines.append(f"  {hangar}: {pct:.1f}%")

    if result.schedule_result is not None and result.schedule_result.unscheduled:
        lines.append("")
        lines.append("Unscheduled auto-inductions:")
        for u in result.schedule_result.unscheduled:
            reasons = result.schedule_result.reasons_for(u.id)
            rule = reasons[0].rule_id if reasons else "unknown"
            lines.append(f"  {u.id}: {rule}")
    return "\n".join(lines)
