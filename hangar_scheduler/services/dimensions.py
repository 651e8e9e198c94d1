"""Effective dimensions and the bays-required lower bound."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from hangar_scheduler.domain.evidence import DERIVED_BAYS_REQUIRED
from hangar_scheduler.domain.models import AircraftType, ClearanceEnvelope, Hangar


@dataclass(frozen=True)
class EffectiveDimensions:
    wingspan: float
    length: float
    height: float
    tail_height: float
    raw_wingspan: float
    raw_length: float
    raw_height: float
    raw_tail_height: float
    clearance_name: Optional[str] = None


@dataclass(frozen=True)
class BaysRequired:
    bays_required: int
    rep_bay_width: Optional[float]
    calculation: str
    rule_id: str = DERIVED_BAYS_REQUIRED


def calculate_effective_dimensions(
    aircraft: AircraftType,
    clearance: Optional[ClearanceEnvelope] = None,
) -> EffectiveDimensions:
    """
    Apply clearance margins to raw aircraft dimensions.

    Args:
        aircraft: Aircraft type
        clearance: Optional envelope; all margins are zero without one

    Returns:
        EffectiveDimensions with both effective and raw values
    """
    lateral = clearance.lateral_margin if clearance else 0.0
    longitudinal = clearance.longitudinal_margin if clearance else 0.0
    vertical = clearance.vertical_margin if clearance else 0.0
    raw_tail = aircraft.raw_tail_height

    return EffectiveDimensions(
        wingspan=aircraft.wingspan + lateral,
        length=aircraft.length + longitudinal,
        height=aircraft.height + vertical,
        tail_height=raw_tail + vertical,
        raw_wingspan=aircraft.wingspan,
        raw_length=aircraft.length,
        raw_height=aircraft.height,
        raw_tail_height=raw_tail,
        clearance_name=clearance.name if clearance else None,
    )


def calculate_bays_required(effective: EffectiveDimensions, hangar: Hangar) -> BaysRequired:
    # narrowest bay is the representative width, so this is a lower bound
    widths = [b.width for b in hangar.bays if b.width > 0]
    if not widths:
        return BaysRequired(bays_required=0, rep_bay_width=None, calculation="no bays with positive width")

    rep = min(widths)
    required = math.ceil(effective.wingspan / rep)
    return BaysRequired(
        bays_required=required,
        rep_bay_width=rep,
        calculation=f"ceil({effective.wingspan:.2f} / {rep:.2f}) = {required}",
    )
