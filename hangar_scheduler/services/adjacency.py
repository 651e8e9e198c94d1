"""Bay-to-bay adjacency graph for a hangar."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Set, Tuple

from hangar_scheduler.domain.models import Hangar

logger = logging.getLogger(__name__)


@dataclass
class AdjacencyGraph:
    """Undirected graph keyed by bay name.

    ``grid_edges`` and ``explicit_edges`` count unique undirected pairs
    contributed by each source; a pair may be counted by both.
    """

    edges: Dict[str, Set[str]] = field(default_factory=dict)
    grid_derived: bool = False
    grid_edges: int = 0
    explicit_edges: int = 0

    def neighbors(self, name: str) -> List[str]:
        return sorted(self.edges.get(name, ()))

    def are_adjacent(self, a: str, b: str) -> bool:
        return b in self.edges.get(a, ())

    @property
    def mode(self) -> str:
        return "derived" if self.grid_derived else "explicit"


def build_adjacency_graph(hangar: Hangar) -> AdjacencyGraph:
    graph = AdjacencyGraph(edges={bay.name: set() for bay in hangar.bays})
    grid_pairs: Set[FrozenSet[str]] = set()
    explicit_pairs: Set[FrozenSet[str]] = set()

    # 1. Grid-derived 4-neighbour edges, only when the hangar declares a grid
    if hangar.has_grid:
        graph.grid_derived = True
        by_cell: Dict[Tuple[int, int], str] = {}
        for bay in hangar.bays:
            if bay.row is not None and bay.col is not None:
                by_cell[(bay.row, bay.col)] = bay.name
        for (row, col), name in by_cell.items():
            for cell in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
                other = by_cell.get(cell)
                if other is not None and other != name:
                    graph.edges[name].add(other)
                    graph.edges[other].add(name)
                    grid_pairs.add(frozenset((name, other)))

    # 2. Explicit edges, always bidirectional
    for bay in hangar.bays:
        for other in bay.adjacent:
            if other not in graph.edges:
                logger.debug("Bay %s in hangar %s lists unknown neighbour %s", bay.name, hangar.name, other)
                continue
            if other == bay.name:
                continue
            graph.edges[bay.name].add(other)
            graph.edges[other].add(bay.name)
            explicit_pairs.add(frozenset((bay.name, other)))

    graph.grid_edges = len(grid_pairs)
    graph.explicit_edges = len(explicit_pairs)
    return graph
