"""Scheduler configuration loaded from YAML or JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict

import yaml

from .data_io import parse_timestamp
from .errors import ConfigError


@dataclass
class SchedulerConfig:
    # baseline used by the search window when the model has no manual inductions
    default_start_time: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)
    search_window_days: int = 30
    max_bays_per_set: int = 5
    # retry later in the same hangar when the slot is taken
    advance_on_conflict: bool = True
    rejected_set_sample_size: int = 5

    @property
    def search_horizon(self) -> timedelta:
        return timedelta(days=self.search_window_days)


def _coerce(raw: Dict[str, Any]) -> SchedulerConfig:
    known = {f.name for f in fields(SchedulerConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    cfg = SchedulerConfig()
    try:
        if "default_start_time" in raw:
            cfg.default_start_time = parse_timestamp(raw["default_start_time"])
        if "search_window_days" in raw:
            cfg.search_window_days = int(raw["search_window_days"])
        if "max_bays_per_set" in raw:
            cfg.max_bays_per_set = int(raw["max_bays_per_set"])
        if "advance_on_conflict" in raw:
            cfg.advance_on_conflict = bool(raw["advance_on_conflict"])
        if "rejected_set_sample_size" in raw:
            cfg.rejected_set_sample_size = int(raw["rejected_set_sample_size"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e

    if cfg.search_window_days <= 0:
        raise ConfigError("search_window_days must be positive")
    if cfg.max_bays_per_set < 1:
        raise ConfigError("max_bays_per_set must be at least 1")
    return cfg


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load scheduler configuration.

    Args:
        path: YAML (``.yaml``/``.yml``) or JSON file; ``None`` returns defaults

    Returns:
        SchedulerConfig

    Raises:
        ConfigError: If the file is missing, malformed or has unknown keys
    """
    if path is None:
        return SchedulerConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse config {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    # allow the settings to live under a top-level "scheduler" section
    if set(raw) == {"scheduler"} and isinstance(raw["scheduler"], dict):
        raw = raw["scheduler"]
    return _coerce(raw)
