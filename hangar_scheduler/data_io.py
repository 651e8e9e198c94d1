from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timedelta
from typing import Any

import pandas as pd


def parse_timestamp(value: Any) -> datetime:
    # naive values are taken as UTC; aware values are converted to UTC
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.to_pydatetime()


def to_iso(dt: datetime) -> str:
    ts = pd.Timestamp(dt)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.isoformat()


def minutes(value: float) -> timedelta:
    return timedelta(minutes=float(value))


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_jsonable(obj: Any) -> Any:
    """Convert result dataclasses into the camelCase JSON contract.

    ``None`` fields of dataclasses are omitted so optional members are absent
    rather than null, matching what consumers of the export expect.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        out = {}
        for f in fields(obj):
            value = getattr(obj, f.name)
            if value is None:
                continue
            out[camel_case(f.name)] = to_jsonable(value)
        return out
    if isinstance(obj, datetime):
        return to_iso(obj)
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj
