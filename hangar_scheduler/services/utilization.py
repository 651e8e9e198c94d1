from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence

import pandas as pd

from hangar_scheduler.domain.models import AirfieldModel
from hangar_scheduler.domain.results import ScheduledInduction


@dataclass
class UtilizationStats:
    # percent of the overall schedule span, summed per placement
    by_hangar: Dict[str, float] = field(default_factory=dict)
    by_bay: Dict[str, Dict[str, float]] = field(default_factory=dict)


def placements_frame(placements: Sequence[ScheduledInduction]) -> pd.DataFrame:
    """One row per (placement, bay) with occupied hours."""
    rows = []
    for p in placements:
        hours = (p.end - p.start).total_seconds() / 3600.0
        for bay in p.bays:
            rows.append(
                {
                    "id": p.id,
                    "kind": p.kind,
                    "aircraft": p.aircraft,
                    "hangar": p.hangar,
                    "bay": bay,
                    "start": p.start,
                    "end": p.end,
                    "hours": hours,
                }
            )
    return pd.DataFrame(rows, columns=["id", "kind", "aircraft", "hangar", "bay", "start", "end", "hours"])


def calculate_utilization(
    model: AirfieldModel, placements: Sequence[ScheduledInduction]
) -> UtilizationStats:
    """
    Occupied-time share of each hangar and bay over the schedule span.

    The span runs from the earliest placement start to the latest end. Every
    hangar and bay of the model appears in the result, unused ones at 0.0.

    Args:
        model: Airfield model supplying hangar and bay names
        placements: Manual and/or scheduled placements

    Returns:
        UtilizationStats with percentages
    """
    stats = UtilizationStats(
        by_hangar={h.name: 0.0 for h in model.hangars},
        by_bay={h.name: {b.name: 0.0 for b in h.bays} for h in model.hangars},
    )
    if not placements:
        return stats

    span_start = min(p.start for p in placements)
    span_end = max(p.end for p in placements)
    span_hours = (span_end - span_start).total_seconds() / 3600.0
    if span_hours <= 0:
        return stats

    per_placement = pd.DataFrame(
        [
            {"hangar": p.hangar, "hours": (p.end - p.start).total_seconds() / 3600.0}
            for p in placements
        ]
    )
    for hangar, hours in per_placement.groupby("hangar")["hours"].sum().items():
        stats.by_hangar[str(hangar)] = float(hours) / span_hours * 100.0

    df = placements_frame(placements)
    for (hangar, bay), hours in df.groupby(["hangar", "bay"])["hours"].sum().items():
        stats.by_bay.setdefault(str(hangar), {})[str(bay)] = float(hours) / span_hours * 100.0
    return stats
