"""In-memory graph records: people, candidacy edges, cycles and report rows."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .errors import GraphInvariantError


@dataclass(frozen=True)
class Person:
    id: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        """Display name when one is set, otherwise the id."""
        return self.display_name if self.display_name else self.id


@dataclass(frozen=True)
class CandidacyEdge:
    source: str
    target: str
    priority: Optional[float] = None


@dataclass(frozen=True)
class Graph:
    """One published generation.

    People live in a node table addressed by index; edges keep their person
    ids for reporting and their node indices in ``edge_nodes`` for the search.
    ``adjacency[i]`` lists the outgoing edge indices of node ``i``.
    """
    people: Tuple[Person, ...] = ()
    index: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    edges: Tuple[CandidacyEdge, ...] = ()
    edge_nodes: Tuple[Tuple[int, int], ...] = ()
    adjacency: Tuple[Tuple[int, ...], ...] = ()
    generation: int = 0

    @property
    def node_count(self) -> int:
        return len(self.people)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def person(self, person_id: str) -> Person:
        try:
            return self.people[self.index[person_id]]
        except KeyError:
            raise GraphInvariantError(f"Unknown person id {person_id!r} in generation {self.generation}")

    def label(self, person_id: str) -> str:
        return self.person(person_id).label


@dataclass(frozen=True)
class RawCycle:
    """A cycle as found by the search: node indices in visit order and the
    edge indices walked, ``edges[i]`` leading from ``nodes[i]`` to the next node."""
    nodes: Tuple[int, ...]
    edges: Tuple[int, ...]

    @property
    def length(self) -> int:
        return len(self.nodes)


@dataclass
class Chain:
    people: list[str]
    length: int
    avg_priority: Optional[float]


@dataclass
class RelationshipRecord:
    from_label: str
    to_label: str
    priority: Optional[float]


@dataclass
class LoadResult:
    node_count: int
    edge_count: int
    generation: int
