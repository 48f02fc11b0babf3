"""Graph store: builds a fresh generation per load and publishes it by swapping one reference."""
import logging
import math
import threading
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .errors import LoadError
from .models import CandidacyEdge, Graph, LoadResult, Person

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("last_write_wins", "keep", "reject")

# accepted spellings for edge endpoints, first match wins
_SOURCE_KEYS = ("from_id", "user_id", "fromId")
_TARGET_KEYS = ("to_id", "target_user_id", "toId")


def _endpoint(record: Mapping[str, Any], keys: tuple, position: int, side: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise LoadError(f"Edge #{position}: {side} id must be a string, got {type(value).__name__}")
        value = str(value)
        if value != value.strip():
            raise LoadError(f"Edge #{position}: {side} id {value!r} has leading or trailing whitespace")
        if value:
            return value
    raise LoadError(f"Edge #{position}: missing {side} id")


def _priority(record: Mapping[str, Any], position: int) -> Optional[float]:
    value = record.get("priority")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LoadError(f"Edge #{position}: priority must be a number or null, got {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise LoadError(f"Edge #{position}: priority must be finite, got {value!r}")
    return value


def _label(labels_by_id: Mapping[str, Any], person_id: str) -> Optional[str]:
    """Malformed labels are tolerated: anything that is not a non-empty string falls back to the id."""
    value = labels_by_id.get(person_id)
    if isinstance(value, str) and value.strip():
        return value
    return None


def build_generation(edges: Iterable[Mapping[str, Any]], labels_by_id: Optional[Mapping[str, Any]],
                     generation: int, duplicate_policy: str = "last_write_wins") -> Graph:
    """Build an immutable Graph from raw edge records without touching any published state."""
    labels_by_id = labels_by_id or {}
    if not isinstance(labels_by_id, Mapping):
        raise LoadError("Labels must be a mapping of id to display name")

    index: dict[str, int] = {}
    people: list[Person] = []
    edges_out: list[CandidacyEdge] = []
    edge_nodes: list[tuple[int, int]] = []
    by_pair: dict[tuple[int, int], int] = {}

    def node_for(person_id: str) -> int:
        i = index.get(person_id)
        if i is None:
            i = len(people)
            index[person_id] = i
            people.append(Person(id=person_id, display_name=_label(labels_by_id, person_id)))
        return i

    for position, record in enumerate(edges):
        if not isinstance(record, Mapping):
            raise LoadError(f"Edge #{position}: expected an object, got {type(record).__name__}")
        source = _endpoint(record, _SOURCE_KEYS, position, "source")
        target = _endpoint(record, _TARGET_KEYS, position, "target")
        priority = _priority(record, position)

        pair = (node_for(source), node_for(target))
        edge = CandidacyEdge(source=source, target=target, priority=priority)
        existing = by_pair.get(pair)
        if existing is not None and duplicate_policy != "keep":
            if duplicate_policy == "reject":
                raise LoadError(f"Edge #{position}: duplicate candidacy {source!r} -> {target!r}")
            edges_out[existing] = edge
            continue
        by_pair[pair] = len(edges_out)
        edges_out.append(edge)
        edge_nodes.append(pair)

    adjacency: list[list[int]] = [[] for _ in people]
    for e, (src, _dst) in enumerate(edge_nodes):
        adjacency[src].append(e)

    return Graph(
        people=tuple(people),
        index=MappingProxyType(index),
        edges=tuple(edges_out),
        edge_nodes=tuple(edge_nodes),
        adjacency=tuple(tuple(a) for a in adjacency),
        generation=generation,
    )


class GraphStore:
    """Holds the single active graph generation.

    ``load`` stages the new graph without the lock and only holds it for the
    swap, so readers calling ``snapshot`` see either the old or the new graph.
    """

    def __init__(self, duplicate_policy: str = "last_write_wins"):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unknown duplicate edge policy {duplicate_policy!r}; expected one of {', '.join(DUPLICATE_POLICIES)}"
            )
        self.duplicate_policy = duplicate_policy
        self._lock = threading.Lock()
        self._graph = Graph()
        self._counter = 0
        self._loaded = False

    @property
    def generation(self) -> int:
        return self._graph.generation

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _next_generation(self) -> int:
        with self._lock:
            self._counter += 1
            return self._counter

    def _publish(self, graph: Graph) -> None:
        with self._lock:
            # a slower load that started earlier must not replace a newer generation
            if graph.generation > self._graph.generation:
                self._graph = graph
                self._loaded = True

    def load(self, edges: Iterable[Mapping[str, Any]],
             labels_by_id: Optional[Mapping[str, Any]] = None) -> LoadResult:
        """Replace the current graph with one built from ``edges``."""
        if edges is None:
            edges = []
        graph = build_generation(edges, labels_by_id, self._next_generation(), self.duplicate_policy)
        self._publish(graph)
        logger.info(
            "Published graph generation %d: %d people, %d candidacies",
            graph.generation, graph.node_count, graph.edge_count,
        )
        return LoadResult(node_count=graph.node_count, edge_count=graph.edge_count,
                          generation=graph.generation)

    def snapshot(self) -> Graph:
        with self._lock:
            return self._graph

    def clear(self) -> None:
        """Publish an empty generation and mark the store as not built."""
        graph = Graph(generation=self._next_generation())
        with self._lock:
            if graph.generation <= self._graph.generation:
                logger.info("Skipped clear %d: generation %d already published", graph.generation, self._graph.generation)
                return
            self._graph = graph
            self._loaded = False
        logger.info("Cleared graph, generation %d", graph.generation)
