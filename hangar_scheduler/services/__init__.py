"""Geometry services shared by the rule checkers and search."""

from .adjacency import AdjacencyGraph, build_adjacency_graph
from .dimensions import (
    BaysRequired,
    EffectiveDimensions,
    calculate_bays_required,
    calculate_effective_dimensions,
)
from .utilization import UtilizationStats, calculate_utilization

__all__ = [
    "AdjacencyGraph",
    "build_adjacency_graph",
    "BaysRequired",
    "EffectiveDimensions",
    "calculate_bays_required",
    "calculate_effective_dimensions",
    "UtilizationStats",
    "calculate_utilization",
]
