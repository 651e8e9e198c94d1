"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from hangar_scheduler.domain.models import (
    AircraftType,
    AirfieldModel,
    AutoInduction,
    ClearanceEnvelope,
    Hangar,
    HangarBay,
    HangarDoor,
    Induction,
)

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def at(minutes: float) -> datetime:
    """Timestamp ``minutes`` after the shared test epoch."""
    return T0 + timedelta(minutes=minutes)


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def small_aircraft():
    return AircraftType(name="Cessna", wingspan=11.0, length=8.3, height=2.7)


@pytest.fixture
def wide_aircraft():
    """Needs two 12m bays side by side."""
    return AircraftType(name="KingAir", wingspan=17.6, length=10.8, height=4.4)


@pytest.fixture
def clearance():
    return ClearanceEnvelope(name="Std", lateral_margin=1.0, longitudinal_margin=1.0, vertical_margin=0.5)


@pytest.fixture
def grid_hangar():
    """One row of three 12m bays, grid-derived adjacency B1-B2-B3."""
    return Hangar(
        name="H1",
        doors=(HangarDoor(name="D1", width=20.0, height=6.0),),
        bays=(
            HangarBay(name="B1", width=12.0, depth=15.0, height=6.0, row=0, col=0),
            HangarBay(name="B2", width=12.0, depth=15.0, height=6.0, row=0, col=1),
            HangarBay(name="B3", width=12.0, depth=15.0, height=6.0, row=0, col=2),
        ),
        rows=1,
        cols=3,
    )


@pytest.fixture
def explicit_hangar():
    """Bays X1-X2 adjacent, X3 isolated; no grid."""
    return Hangar(
        name="H2",
        doors=(HangarDoor(name="D2", width=25.0, height=8.0),),
        bays=(
            HangarBay(name="X1", width=10.0, depth=20.0, height=8.0, adjacent=("X2",)),
            HangarBay(name="X2", width=10.0, depth=20.0, height=8.0),
            HangarBay(name="X3", width=10.0, depth=20.0, height=8.0),
        ),
    )


@pytest.fixture
def make_model(grid_hangar, small_aircraft, wide_aircraft):
    """Factory for models built around the grid hangar."""

    def _make(inductions=(), auto_inductions=(), hangars=None, name="Test Field"):
        return AirfieldModel(
            name=name,
            hangars=tuple(hangars) if hangars is not None else (grid_hangar,),
            aircraft=(small_aircraft, wide_aircraft),
            inductions=tuple(inductions),
            auto_inductions=tuple(auto_inductions),
        )

    return _make


@pytest.fixture
def manual_induction(grid_hangar, small_aircraft):
    """Factory for manual inductions in the grid hangar."""

    def _make(bays=("B1",), start=0, end=10, id=None, aircraft=None, door="D1"):
        return Induction(
            aircraft=aircraft or small_aircraft,
            hangar=grid_hangar,
            bays=tuple(grid_hangar.bay(b) for b in bays),
            start=at(start),
            end=at(end),
            door=grid_hangar.door(door) if door else None,
            id=id,
        )

    return _make


@pytest.fixture
def auto_induction(small_aircraft):
    """Factory for auto-inductions."""

    def _make(id=None, duration=10, aircraft=None, **kwargs):
        return AutoInduction(
            aircraft=aircraft or small_aircraft,
            duration=duration,
            id=id,
            **kwargs,
        )

    return _make


SAMPLE_MODEL_YAML = """
name: Demo Field
clearances:
  - name: Std
    lateral_margin: 1.0
    longitudinal_margin: 1.0
    vertical_margin: 0.5
aircraft:
  - name: Cessna
    wingspan: 11.0
    length: 8.3
    height: 2.7
  - name: KingAir
    wingspan: 17.6
    length: 10.8
    height: 4.4
    clearance: Std
hangars:
  - name: H1
    rows: 1
    cols: 3
    doors:
      - {name: D1, width: 20.0, height: 6.0}
    bays:
      - {name: B1, width: 12.0, depth: 15.0, height: 6.0, row: 0, col: 0}
      - {name: B2, width: 12.0, depth: 15.0, height: 6.0, row: 0, col: 1}
      - {name: B3, width: 12.0, depth: 15.0, height: 6.0, row: 0, col: 2}
inductions:
  - id: M1
    aircraft: Cessna
    hangar: H1
    door: D1
    bays: [B1]
    start: "2025-01-01T00:00:00Z"
    end: "2025-01-01T02:00:00Z"
auto_inductions:
  - id: A1
    aircraft: Cessna
    duration: 60
    preferred_hangar: H1
  - id: A2
    aircraft: KingAir
    duration: 120
    preceding: [A1]
"""


@pytest.fixture
def sample_model_path(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text(SAMPLE_MODEL_YAML, encoding="utf-8")
    return path
