"""CSV export utilities for analysis results."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from hangar_scheduler.data_io import to_iso
from hangar_scheduler.domain.results import ExportModel

COLUMNS = [
    "id",
    "kind",
    "aircraft",
    "hangar",
    "door",
    "bays",
    "start",
    "end",
    "wingspan_eff",
    "length_eff",
    "tail_eff",
    "bays_required",
    "connected",
    "conflicts",
]


def inductions_frame(export_model: ExportModel) -> pd.DataFrame:
    """One row per exported induction; list columns are joined with ';'."""
    rows = []
    for rec in export_model.inductions:
        rows.append(
            {
                "id": rec.id,
                "kind": rec.kind,
                "aircraft": rec.aircraft,
                "hangar": rec.hangar,
                "door": rec.door or "",
                "bays": ";".join(rec.bays),
                "start": to_iso(rec.start),
                "end": to_iso(rec.end),
                "wingspan_eff": rec.derived.wingspan_eff,
                "length_eff": rec.derived.length_eff,
                "tail_eff": rec.derived.tail_eff,
                "bays_required": rec.derived.bays_required,
                "connected": rec.derived.connected,
                "conflicts": ";".join(rec.conflicts),
            }
        )
    return pd.DataFrame(rows, columns=COLUMNS)


def export_inductions_csv(export_model: ExportModel, csv_path: str | Path) -> int:
    """
    Export the inductions of an export model to CSV.

    Args:
        export_model: Built export model
        csv_path: Output CSV path

    Returns:
        Number of inductions exported
    """
    df = inductions_frame(export_model)
    df.to_csv(csv_path, index=False)
    return len(df)
