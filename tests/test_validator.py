"""Tests for conflict detection and the validation report."""

from datetime import datetime, timezone

from conftest import at

from hangar_scheduler.domain.evidence import (
    BAY_FIT,
    CONTIGUITY,
    DOOR_FIT,
    NO_SUITABLE_BAY_SET,
    SCHEDULING_FAILED,
    TIME_OVERLAP,
    ConflictEvidence,
    NoSuitableBaySetEvidence,
    SlotConflictEvidence,
    TimeWindow,
)
from hangar_scheduler.domain.models import AircraftType, Induction
from hangar_scheduler.domain.results import (
    RejectionReason,
    ScheduledInduction,
    ScheduleResult,
    UnscheduledInduction,
    Violation,
    ViolationSubject,
)
from hangar_scheduler.engine.conflicts import detect_conflicts, manual_placements
from hangar_scheduler.validator import build_validation_report, sort_violations


def _placement(id, bays, start, end, hangar="H1"):
    return ScheduledInduction(id=id, aircraft="AC", hangar=hangar, bays=bays, start=at(start), end=at(end))


def test_conflict_needs_hangar_bay_and_time():
    overlapping = [_placement("a", ("B1", "B2"), 0, 10), _placement("b", ("B2", "B3"), 5, 15)]
    conflicts = detect_conflicts(overlapping)
    assert len(conflicts) == 1
    c = conflicts[0]
    assert c.rule_id == TIME_OVERLAP
    assert c.intersecting_bays == ("B2",)
    assert c.overlap_interval == TimeWindow(at(5), at(10))
    assert c.induction1.id == "a" and c.induction2.id == "b"

    # same bay, disjoint time
    assert detect_conflicts([_placement("a", ("B1",), 0, 10), _placement("b", ("B1",), 10, 20)]) == []
    # overlapping time, disjoint bays
    assert detect_conflicts([_placement("a", ("B1",), 0, 10), _placement("b", ("B2",), 0, 10)]) == []
    # same bay name in another hangar
    assert detect_conflicts([_placement("a", ("B1",), 0, 10), _placement("b", ("B1",), 0, 10, hangar="H2")]) == []


def test_conflict_bays_sorted():
    conflicts = detect_conflicts([_placement("a", ("B3", "B1"), 0, 10), _placement("b", ("B1", "B3"), 0, 10)])
    assert conflicts[0].intersecting_bays == ("B1", "B3")


def test_manual_placements_skip_unresolved(grid_hangar, manual_induction):
    ghost = Induction(aircraft=None, hangar=grid_hangar, bays=(), start=at(0), end=at(5))
    placements = manual_placements([manual_induction(id="M1"), ghost])
    assert [p.id for p in placements] == ["M1"]
    assert placements[0].kind == "manual"


def test_clean_model_has_no_violations(make_model, manual_induction):
    report = build_validation_report(make_model(inductions=[manual_induction(id="M1")]))
    assert report.violations == []
    assert report.summary.total_violations == 0
    assert report.summary.by_severity == {"errors": 0, "warnings": 0}
    assert not report.has_errors
    assert report.timestamp is None


def test_geometry_violations(make_model, manual_induction, wide_aircraft):
    too_wide_for_door = AircraftType(name="Jumbo", wingspan=25.0, length=10.0, height=4.0)
    model = make_model(
        inductions=[
            manual_induction(id="M1", aircraft=too_wide_for_door, bays=("B1", "B2")),
            manual_induction(id="M2", aircraft=wide_aircraft, bays=("B1", "B3"), start=100, end=110),
        ]
    )
    report = build_validation_report(model)
    rules = [(v.rule_id, v.subject.id) for v in report.violations]
    assert rules == [(DOOR_FIT, "M1"), (BAY_FIT, "M1"), (CONTIGUITY, "M2")]
    assert all(v.severity == "error" for v in report.violations)
    assert all(v.subject.type == "Induction" for v in report.violations)
    assert report.has_errors
    assert report.summary.by_rule_id == {BAY_FIT: 1, CONTIGUITY: 1, DOOR_FIT: 1}


def test_manual_conflict_violation(make_model, manual_induction):
    model = make_model(
        inductions=[
            manual_induction(id="M1", start=0, end=10),
            manual_induction(id="M2", start=5, end=20),
        ]
    )
    report = build_validation_report(model)
    assert [v.rule_id for v in report.violations] == [TIME_OVERLAP]
    evidence = report.violations[0].evidence
    assert isinstance(evidence, ConflictEvidence)
    assert evidence.induction1.time_window == TimeWindow(at(0), at(10))
    assert evidence.induction2.time_window == TimeWindow(at(5), at(20))
    assert evidence.overlap_interval == TimeWindow(at(5), at(10))
    assert evidence.intersecting_bays == ("B1",)


def test_scheduling_failure_messages(make_model, auto_induction):
    a = auto_induction(id="A")
    b = auto_induction(id="B")
    c = auto_induction(id="C")
    result = ScheduleResult(
        unscheduled=[UnscheduledInduction(id=x.id, induction=x) for x in (a, b, c)],
        rejection_reasons={
            "A": [
                RejectionReason(
                    rule_id=TIME_OVERLAP,
                    message="Time slot conflict in hangar H1",
                    hangar="H1",
                    evidence=SlotConflictEvidence(
                        hangar="H1",
                        bays=("B1",),
                        requested_window=TimeWindow(at(0), at(10)),
                        conflicting_inductions=("M1", "M2"),
                    ),
                )
            ],
            "B": [
                RejectionReason(
                    rule_id=NO_SUITABLE_BAY_SET,
                    message="No suitable bay sets in hangar H1",
                    hangar="H1",
                    evidence=NoSuitableBaySetEvidence(hangar="H1", bays_required=2, rejected_sets=()),
                )
            ],
        },
    )
    report = build_validation_report(make_model(auto_inductions=[a, b, c]), result)

    assert [v.rule_id for v in report.violations] == [SCHEDULING_FAILED] * 3
    assert [v.subject.id for v in report.violations] == ["A", "B", "C"]
    messages = [v.message for v in report.violations]
    assert messages[0] == "Auto-induction 'A' for Cessna could not be scheduled: time slot conflict with M1, M2"
    assert messages[1].endswith(": no suitable bay configuration available")
    assert messages[2] == "Auto-induction 'C' for Cessna could not be scheduled"

    evidence = report.violations[0].evidence
    assert evidence.rejection_reasons[0].conflicting_with == ("M1", "M2")
    assert report.summary.by_severity == {"errors": 0, "warnings": 3}
    assert not report.has_errors


def test_sort_violations_id_before_missing_id():
    def v(rule, name, id=None, type="Induction"):
        return Violation(rule_id=rule, severity="error", message="", subject=ViolationSubject(type, name, id), evidence=None)

    ordered = sort_violations(
        [
            v("SFR13", "A", "2"),
            v("SFR11", "B"),
            v("SFR11", "B", "1"),
            v("SFR11", "A", type="AutoInduction"),
        ]
    )
    assert [(x.rule_id, x.subject.type, x.subject.name, x.subject.id) for x in ordered] == [
        ("SFR11", "AutoInduction", "A", None),
        ("SFR11", "Induction", "B", "1"),
        ("SFR11", "Induction", "B", None),
        ("SFR13", "Induction", "A", "2"),
    ]


def test_report_to_dict(make_model, manual_induction):
    model = make_model(
        inductions=[manual_induction(id="M1", start=0, end=10), manual_induction(id="M2", start=5, end=20)]
    )
    stamp = datetime(2025, 6, 1, tzinfo=timezone.utc)
    data = build_validation_report(model, generated_at=stamp).to_dict()
    assert data["summary"]["totalViolations"] == 1
    assert data["summary"]["bySeverity"] == {"errors": 1, "warnings": 0}
    assert data["violations"][0]["ruleId"] == TIME_OVERLAP
    assert data["violations"][0]["evidence"]["overlapInterval"]["start"] == "2025-01-01T00:05:00+00:00"
    assert data["timestamp"] == "2025-06-01T00:00:00+00:00"
