"""Chain scoring and deduplication by participant set."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from .errors import GraphInvariantError
from .models import Chain, Graph, RawCycle

KEY_SEPARATOR = "\x1f"
_CENTS = Decimal("0.01")


def average_priority(priorities: Sequence[Optional[float]]) -> Optional[float]:
    """Mean rounded to two decimals, half away from zero. None if any priority is unset."""
    if not priorities or any(p is None for p in priorities):
        return None
    # str() so 0.125 rounds as written, not as its binary approximation
    total = sum((Decimal(str(p)) for p in priorities), Decimal(0))
    mean = total / len(priorities)
    return float(mean.quantize(_CENTS, rounding=ROUND_HALF_UP))


def identity_key(person_ids: Iterable[str]) -> str:
    return KEY_SEPARATOR.join(sorted(person_ids))


def _check_cycle(raw: RawCycle, graph: Graph) -> None:
    k = len(raw.nodes)
    if k == 0 or len(raw.edges) != k:
        raise GraphInvariantError(f"Cycle has {k} nodes but {len(raw.edges)} edges")
    for i, e in enumerate(raw.edges):
        if not 0 <= e < graph.edge_count:
            raise GraphInvariantError(f"Cycle refers to unknown edge {e}")
        if graph.edge_nodes[e] != (raw.nodes[i], raw.nodes[(i + 1) % k]):
            raise GraphInvariantError(
                f"Edge {e} does not link cycle nodes {raw.nodes[i]} -> {raw.nodes[(i + 1) % k]}"
            )


def _sort_key(chain: Chain):
    return chain.length, " ".join(chain.people), chain.people


def score_and_dedupe(raw_cycles: Iterable[RawCycle], graph: Graph, sort: bool = True) -> list[Chain]:
    """Score each cycle and keep the first one seen for every set of people.

    Labels are resolved after the identity key is taken, so two people sharing
    a display name never merge chains.
    """
    seen: set[str] = set()
    chains: list[Chain] = []
    for raw in raw_cycles:
        _check_cycle(raw, graph)
        ids = [graph.people[n].id for n in raw.nodes]
        key = identity_key(ids)
        if key in seen:
            continue
        seen.add(key)
        priorities = [graph.edges[e].priority for e in raw.edges]
        chains.append(Chain(
            people=[graph.people[n].label for n in raw.nodes],
            length=raw.length,
            avg_priority=average_priority(priorities),
        ))
    if sort:
        chains.sort(key=_sort_key)
    return chains
