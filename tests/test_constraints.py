from dataclasses import replace

from conftest import at

from hangar_scheduler.constraints import (
    check_bay_fit,
    check_bay_ownership,
    check_bay_set_fit,
    check_contiguity,
    check_door_fit,
    check_door_ownership,
    check_time_overlap,
    overlap_interval,
)
from hangar_scheduler.domain.evidence import BAY_FIT, CONTIGUITY, DOOR_FIT, TIME_OVERLAP
from hangar_scheduler.domain.models import AircraftType, ClearanceEnvelope, HangarBay, HangarDoor
from hangar_scheduler.services.adjacency import build_adjacency_graph
from hangar_scheduler.services.dimensions import calculate_effective_dimensions


def _effective(wingspan, length=5.0, height=3.0, clearance=None):
    aircraft = AircraftType(name="AC", wingspan=wingspan, length=length, height=height)
    return calculate_effective_dimensions(aircraft, clearance)


def test_door_fit_exact_width_passes_and_narrower_fails():
    clearance = ClearanceEnvelope(name="C", lateral_margin=1.0)
    effective = _effective(10.0, clearance=clearance)

    ok = check_door_fit(effective, HangarDoor(name="D", width=11.0, height=5.0), "AC")
    assert ok.ok
    assert ok.rule_id == DOOR_FIT
    assert ok.evidence.wingspan_fits and ok.evidence.height_fits

    bad = check_door_fit(effective, HangarDoor(name="D", width=10.99, height=5.0), "AC")
    assert not bad.ok
    assert not bad.evidence.wingspan_fits
    assert bad.evidence.height_fits
    assert len(bad.evidence.failed_constraints) == 1
    assert "does NOT fit" in bad.message


def test_door_fit_checks_tail_height():
    aircraft = AircraftType(name="T", wingspan=5.0, length=5.0, height=3.0, tail_height=6.0)
    effective = calculate_effective_dimensions(aircraft)
    result = check_door_fit(effective, HangarDoor(name="D", width=10.0, height=5.0), "T")
    assert not result.ok
    assert not result.evidence.height_fits
    assert result.evidence.raw_tail_height == 6.0


def test_bay_set_width_is_additive():
    bays = [
        HangarBay(name="A", width=4.0, depth=10.0, height=5.0),
        HangarBay(name="B", width=4.0, depth=10.0, height=5.0),
    ]
    assert check_bay_set_fit(_effective(7.9), bays, "AC").ok

    too_wide = check_bay_set_fit(_effective(8.1), bays, "AC")
    assert not too_wide.ok
    assert too_wide.rule_id == BAY_FIT
    assert not too_wide.evidence.width_fits
    assert too_wide.evidence.sum_width == 8.0


def test_bay_set_limiting_bays_first_wins_ties():
    bays = [
        HangarBay(name="A", width=6.0, depth=8.0, height=4.0),
        HangarBay(name="B", width=6.0, depth=8.0, height=3.0),
        HangarBay(name="C", width=6.0, depth=9.0, height=3.0),
    ]
    result = check_bay_set_fit(_effective(10.0, length=8.5, height=2.0), bays, "AC")
    assert not result.ok
    assert result.evidence.limiting_depth_bay == "A"
    assert result.evidence.limiting_height_bay == "B"
    assert not result.evidence.depth_fits
    assert result.evidence.height_fits


def test_empty_bay_set_fails():
    result = check_bay_set_fit(_effective(5.0), [], "AC")
    assert not result.ok
    assert result.message == "No bays provided"


def test_single_bay_fit():
    bay = HangarBay(name="A", width=12.0, depth=10.0, height=5.0)
    assert check_bay_fit(_effective(11.0), bay, "AC").ok
    assert not check_bay_fit(_effective(12.5), bay, "AC").ok


def test_contiguity_chain_and_gap(grid_hangar):
    graph = build_adjacency_graph(grid_hangar)

    chain = check_contiguity(["B1", "B2", "B3"], graph)
    assert chain.ok
    assert chain.rule_id == CONTIGUITY
    assert chain.evidence.derived_from_grid

    gap = check_contiguity(["B1", "B3"], graph)
    assert not gap.ok
    assert gap.evidence.reachable_bays == ("B1",)
    assert gap.evidence.unreachable_bays == ("B3",)
    assert "NOT contiguous" in gap.message


def test_contiguity_single_bay_always_passes(explicit_hangar):
    graph = build_adjacency_graph(explicit_hangar)
    assert check_contiguity(["X3"], graph).ok
    assert check_contiguity([], graph).ok


def test_time_overlap_half_open():
    touching = check_time_overlap(at(10), at(20), at(20), at(30))
    assert touching.ok
    assert not touching.evidence.overlaps
    assert touching.evidence.overlap_interval is None

    overlapping = check_time_overlap(at(10), at(20), at(19), at(25))
    assert not overlapping.ok
    assert overlapping.rule_id == TIME_OVERLAP
    assert overlapping.evidence.overlap_interval.start == at(19)
    assert overlapping.evidence.overlap_interval.end == at(20)


def test_overlap_interval_contained():
    assert overlap_interval(at(0), at(100), at(10), at(20)) == (at(10), at(20))
    assert overlap_interval(at(0), at(10), at(30), at(40)) is None


def test_ownership(grid_hangar, explicit_hangar):
    assert check_bay_ownership(grid_hangar.bays[0], grid_hangar).ok

    foreign = check_bay_ownership(explicit_hangar.bays[0], grid_hangar)
    assert not foreign.ok
    assert foreign.evidence.hangar_bays == ("B1", "B2", "B3")

    assert check_door_ownership(grid_hangar.doors[0], grid_hangar).ok
    assert not check_door_ownership(explicit_hangar.doors[0], grid_hangar).ok


def test_ownership_compares_by_value(grid_hangar):
    """A rebuilt copy of a hangar's bay or door still belongs to it."""
    bay_copy = replace(grid_hangar.bays[1])
    door_copy = replace(grid_hangar.doors[0])
    assert bay_copy is not grid_hangar.bays[1]
    assert check_bay_ownership(bay_copy, grid_hangar).ok
    assert check_door_ownership(door_copy, grid_hangar).ok

    # same name, different geometry: not the hangar's bay
    assert not check_bay_ownership(replace(grid_hangar.bays[1], width=99.0), grid_hangar).ok


def test_rule_result_to_dict_is_camel_case():
    result = check_door_fit(_effective(5.0), HangarDoor(name="D", width=10.0, height=5.0), "AC")
    data = result.to_dict()
    assert data["ruleId"] == DOOR_FIT
    assert data["evidence"]["doorName"] == "D"
    assert "clearanceName" not in data["evidence"]
