"""Bounded depth-first enumeration of simple directed cycles.

The search is exponential on dense graphs; ``max_length`` caps the depth and
``max_visits`` / ``deadline`` cap the total work. Running out of either raises
EnumerationTimeout instead of returning a partial result.
"""
from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

from .errors import EnumerationTimeout, GraphInvariantError
from .models import Graph, RawCycle

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 2
DEFAULT_MAX_LENGTH = 10

# how many edge visits between wall-clock checks
_CLOCK_STRIDE = 1024


class _Budget:
    def __init__(self, max_visits: Optional[int], deadline: Optional[float]):
        self.max_visits = max_visits or None
        self.deadline = deadline
        self.visits = 0

    def tick(self) -> None:
        self.visits += 1
        if self.max_visits is not None and self.visits > self.max_visits:
            raise EnumerationTimeout(f"Cycle search exceeded {self.max_visits} edge visits")
        if self.deadline is not None and self.visits % _CLOCK_STRIDE == 0 and time.monotonic() > self.deadline:
            raise EnumerationTimeout(f"Cycle search ran past its deadline after {self.visits} edge visits")


def _check_bounds(min_length: int, max_length: int) -> None:
    if min_length < 1:
        raise ValueError(f"min_length must be at least 1, got {min_length}")
    if max_length < min_length:
        raise ValueError(f"max_length ({max_length}) must not be below min_length ({min_length})")


def _check_graph(graph: Graph) -> None:
    if len(graph.adjacency) != graph.node_count:
        raise GraphInvariantError(
            f"Adjacency covers {len(graph.adjacency)} nodes but the node table has {graph.node_count}"
        )
    for e, (src, dst) in enumerate(graph.edge_nodes):
        if not (0 <= src < graph.node_count and 0 <= dst < graph.node_count):
            raise GraphInvariantError(f"Edge {e} points outside the node table: {src} -> {dst}")


def iter_cycles(graph: Graph, min_length: int = DEFAULT_MIN_LENGTH, max_length: int = DEFAULT_MAX_LENGTH,
                max_visits: Optional[int] = None, deadline: Optional[float] = None,
                all_rotations: bool = False) -> Iterator[RawCycle]:
    """Yield every simple cycle with ``min_length <= len <= max_length``.

    Each start node runs its own search with a private path and visited set.
    By default a search only walks nodes with a higher index than its start,
    so every cycle comes out once per distinct edge sequence, rooted at its
    lowest-index node. ``all_rotations=True`` drops that restriction and
    yields one copy per rotation as well.
    """
    _check_bounds(min_length, max_length)
    _check_graph(graph)
    budget = _Budget(max_visits, deadline)
    adjacency = graph.adjacency
    edge_nodes = graph.edge_nodes

    for start in range(graph.node_count):
        path_nodes = [start]
        path_edges: list[int] = []
        on_path = {start}
        stack = [iter(adjacency[start])]

        while stack:
            edge = next(stack[-1], None)
            if edge is None:
                stack.pop()
                on_path.discard(path_nodes.pop())
                if path_edges:
                    path_edges.pop()
                continue

            budget.tick()
            target = edge_nodes[edge][1]
            if target == start:
                if len(path_nodes) >= min_length:
                    yield RawCycle(nodes=tuple(path_nodes), edges=tuple(path_edges) + (edge,))
                continue
            if target in on_path or len(path_nodes) >= max_length:
                continue
            if not all_rotations and target < start:
                continue
            path_nodes.append(target)
            path_edges.append(edge)
            on_path.add(target)
            stack.append(iter(adjacency[target]))

    logger.debug("Cycle search over generation %d used %d edge visits", graph.generation, budget.visits)


def enumerate_cycles(graph: Graph, min_length: int = DEFAULT_MIN_LENGTH, max_length: int = DEFAULT_MAX_LENGTH,
                     max_visits: Optional[int] = None, deadline: Optional[float] = None,
                     all_rotations: bool = False) -> list[RawCycle]:
    return list(iter_cycles(graph, min_length, max_length, max_visits, deadline, all_rotations))
