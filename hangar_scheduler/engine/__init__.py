"""Scheduling engine: feasibility, search, auto-scheduler and conflict detection.

The orchestrator is imported from ``hangar_scheduler.engine.orchestrator``
directly since it depends on the report and export builders.
"""

from .auto_scheduler import AutoScheduler, assign_auto_ids, topological_order
from .conflicts import detect_conflicts, manual_placements
from .feasibility import FeasibilityEngine, find_suitable_bays, validate_induction
from .search import calculate_search_window, find_suitable_bay_sets, find_suitable_doors

__all__ = [
    "AutoScheduler",
    "assign_auto_ids",
    "topological_order",
    "detect_conflicts",
    "manual_placements",
    "FeasibilityEngine",
    "find_suitable_bays",
    "validate_induction",
    "calculate_search_window",
    "find_suitable_bay_sets",
    "find_suitable_doors",
]
