"""Load an airfield model snapshot from YAML or JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from hangar_scheduler.data_io import parse_timestamp
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
from hangar_scheduler.errors import ModelError

logger = logging.getLogger(__name__)


def _require(entry: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in entry or entry[key] is None:
        raise ModelError(f"{where}: missing required field '{key}'")
    return entry[key]


def _number(entry: Mapping[str, Any], key: str, where: str, default: Optional[float] = None) -> Optional[float]:
    if key not in entry or entry[key] is None:
        if default is None:
            raise ModelError(f"{where}: missing required field '{key}'")
        return default
    try:
        return float(entry[key])
    except (TypeError, ValueError) as e:
        raise ModelError(f"{where}: field '{key}' must be a number") from e


def _optional_number(entry: Mapping[str, Any], key: str, where: str) -> Optional[float]:
    if entry.get(key) is None:
        return None
    return _number(entry, key, where)


def _optional_int(entry: Mapping[str, Any], key: str) -> Optional[int]:
    value = entry.get(key)
    return int(value) if value is not None else None


def _timestamp(entry: Mapping[str, Any], key: str, where: str, required: bool = True):
    value = entry.get(key)
    if value is None:
        if required:
            raise ModelError(f"{where}: missing required field '{key}'")
        return None
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise ModelError(f"{where}: field '{key}' is not a valid timestamp") from e


def _entries(data: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ModelError(f"'{key}' must be a list")
    for item in value:
        if not isinstance(item, dict):
            raise ModelError(f"'{key}' entries must be mappings")
    return value


def _build_clearance(entry: Mapping[str, Any]) -> ClearanceEnvelope:
    name = str(_require(entry, "name", "clearance"))
    where = f"clearance {name}"
    return ClearanceEnvelope(
        name=name,
        lateral_margin=_number(entry, "lateral_margin", where, 0.0),
        longitudinal_margin=_number(entry, "longitudinal_margin", where, 0.0),
        vertical_margin=_number(entry, "vertical_margin", where, 0.0),
    )


def _build_hangar(entry: Mapping[str, Any]) -> Hangar:
    name = str(_require(entry, "name", "hangar"))
    doors = []
    for d in entry.get("doors") or []:
        door_name = str(_require(d, "name", f"hangar {name} door"))
        where = f"door {door_name}"
        doors.append(
            HangarDoor(name=door_name, width=_number(d, "width", where), height=_number(d, "height", where))
        )
    bays = []
    for b in entry.get("bays") or []:
        bay_name = str(_require(b, "name", f"hangar {name} bay"))
        where = f"bay {bay_name}"
        bays.append(
            HangarBay(
                name=bay_name,
                width=_number(b, "width", where),
                depth=_number(b, "depth", where),
                height=_number(b, "height", where),
                row=_optional_int(b, "row"),
                col=_optional_int(b, "col"),
                adjacent=tuple(str(n) for n in b.get("adjacent") or ()),
            )
        )
    return Hangar(
        name=name,
        doors=tuple(doors),
        bays=tuple(bays),
        rows=_optional_int(entry, "rows"),
        cols=_optional_int(entry, "cols"),
    )


class _Resolver:
    """Name lookups with warnings for dangling references."""

    def __init__(
        self,
        hangars: Sequence[Hangar],
        aircraft: Sequence[AircraftType],
        clearances: Sequence[ClearanceEnvelope],
    ):
        self.hangars = {h.name: h for h in hangars}
        self.aircraft = {a.name: a for a in aircraft}
        self.clearances = {c.name: c for c in clearances}
        self.all_hangars = list(hangars)

    def _lookup(self, table: Dict[str, Any], name: Optional[str], kind: str, where: str):
        if name is None:
            return None
        found = table.get(str(name))
        if found is None:
            logger.warning("%s: unresolved %s reference '%s'", where, kind, name)
        return found

    def aircraft_ref(self, name, where):
        return self._lookup(self.aircraft, name, "aircraft", where)

    def hangar_ref(self, name, where):
        return self._lookup(self.hangars, name, "hangar", where)

    def clearance_ref(self, name, where):
        return self._lookup(self.clearances, name, "clearance", where)

    def bay_ref(self, name: str, hangar: Optional[Hangar], where: str) -> Optional[HangarBay]:
        # own hangar first, then any hangar so ownership stays checkable
        if hangar is not None and hangar.bay(name) is not None:
            return hangar.bay(name)
        for h in self.all_hangars:
            if h.bay(name) is not None:
                return h.bay(name)
        logger.warning("%s: unresolved bay reference '%s'", where, name)
        return None

    def door_ref(self, name: Optional[str], hangar: Optional[Hangar], where: str) -> Optional[HangarDoor]:
        if name is None:
            return None
        if hangar is not None and hangar.door(name) is not None:
            return hangar.door(name)
        for h in self.all_hangars:
            if h.door(name) is not None:
                return h.door(name)
        logger.warning("%s: unresolved door reference '%s'", where, name)
        return None


def build_model(data: Mapping[str, Any]) -> AirfieldModel:
    """
    Build a reference-resolved AirfieldModel from a parsed document.

    Args:
        data: Mapping with ``name``, ``clearances``, ``aircraft``, ``hangars``,
            ``inductions`` and ``auto_inductions`` (snake_case keys)

    Returns:
        AirfieldModel

    Raises:
        ModelError: If a required field is missing or malformed, or an
            induction would occupy an empty or inverted interval
    """
    if not isinstance(data, dict):
        raise ModelError("Model document must be a mapping")
    name = str(_require(data, "name", "model"))

    # 1. Clearances, aircraft and hangars
    clearances = [_build_clearance(c) for c in _entries(data, "clearances")]
    clearance_by_name = {c.name: c for c in clearances}

    aircraft: List[AircraftType] = []
    for a in _entries(data, "aircraft"):
        ac_name = str(_require(a, "name", "aircraft"))
        where = f"aircraft {ac_name}"
        clearance = None
        if a.get("clearance") is not None:
            clearance = clearance_by_name.get(str(a["clearance"]))
            if clearance is None:
                logger.warning("%s: unresolved clearance reference '%s'", where, a["clearance"])
        aircraft.append(
            AircraftType(
                name=ac_name,
                wingspan=_number(a, "wingspan", where),
                length=_number(a, "length", where),
                height=_number(a, "height", where),
                tail_height=_optional_number(a, "tail_height", where),
                clearance=clearance,
            )
        )

    hangars = [_build_hangar(h) for h in _entries(data, "hangars")]
    resolver = _Resolver(hangars, aircraft, clearances)

    # 2. Manual inductions
    inductions: List[Induction] = []
    for i, entry in enumerate(_entries(data, "inductions")):
        where = f"induction {entry.get('id') or i}"
        hangar = resolver.hangar_ref(_require(entry, "hangar", where), where)
        bays = []
        for bay_name in entry.get("bays") or []:
            bay = resolver.bay_ref(str(bay_name), hangar, where)
            if bay is not None:
                bays.append(bay)
        start = _timestamp(entry, "start", where)
        end = _timestamp(entry, "end", where)
        if end <= start:
            raise ModelError(f"{where}: end must be after start")
        inductions.append(
            Induction(
                aircraft=resolver.aircraft_ref(_require(entry, "aircraft", where), where),
                hangar=hangar,
                bays=tuple(bays),
                start=start,
                end=end,
                door=resolver.door_ref(entry.get("door"), hangar, where),
                id=str(entry["id"]) if entry.get("id") is not None else None,
                clearance=resolver.clearance_ref(entry.get("clearance"), where),
            )
        )

    # 3. Auto-inductions
    autos: List[AutoInduction] = []
    for i, entry in enumerate(_entries(data, "auto_inductions")):
        where = f"auto-induction {entry.get('id') or i}"
        duration = _number(entry, "duration", where)
        if duration <= 0:
            raise ModelError(f"{where}: duration must be positive")
        autos.append(
            AutoInduction(
                aircraft=resolver.aircraft_ref(_require(entry, "aircraft", where), where),
                duration=duration,
                id=str(entry["id"]) if entry.get("id") is not None else None,
                preferred_hangar=resolver.hangar_ref(entry.get("preferred_hangar"), where),
                preceding=tuple(str(p) for p in entry.get("preceding") or ()),
                not_before=_timestamp(entry, "not_before", where, required=False),
                not_after=_timestamp(entry, "not_after", where, required=False),
                clearance=resolver.clearance_ref(entry.get("clearance"), where),
            )
        )

    logger.debug(
        "Loaded model %s: %d hangars, %d aircraft, %d inductions, %d auto-inductions",
        name,
        len(hangars),
        len(aircraft),
        len(inductions),
        len(autos),
    )
    return AirfieldModel(
        name=name,
        hangars=tuple(hangars),
        aircraft=tuple(aircraft),
        clearances=tuple(clearances),
        inductions=tuple(inductions),
        auto_inductions=tuple(autos),
    )


def load_model(path: str | Path) -> AirfieldModel:
    """
    Load a model snapshot file.

    Args:
        path: ``.json`` file, or YAML for any other suffix

    Returns:
        AirfieldModel

    Raises:
        ModelError: If the file is missing, unparsable or incomplete
    """
    path = Path(path)
    if not path.exists():
        raise ModelError(f"Model file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ModelError(f"Could not parse model {path}: {e}") from e

    return build_model(data)
