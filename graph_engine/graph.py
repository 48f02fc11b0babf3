"""Operations exposed to the HTTP gateway and the CLI."""
import logging
import time
from typing import Any, Iterable, Mapping, Optional

from . import config
from .cycles import enumerate_cycles
from .models import Chain, LoadResult, RelationshipRecord
from .report import report_relationships
from .scoring import score_and_dedupe
from .store import GraphStore

logger = logging.getLogger(__name__)


def build_graph(store: GraphStore, applications: Iterable[Mapping[str, Any]],
                users_by_id: Optional[Mapping[str, Any]] = None) -> LoadResult:
    """Replace the loaded graph with the given candidacies."""
    return store.load(applications, users_by_id or {})


def find_chains(store: GraphStore, min_length: Optional[int] = None,
                max_length: Optional[int] = None) -> list[Chain]:
    """Scored, deduplicated chains of the current generation."""
    min_length = config.CHAIN_MIN_LENGTH if min_length is None else min_length
    max_length = config.CHAIN_MAX_LENGTH if max_length is None else max_length
    deadline = None
    if config.CHAIN_TIMEOUT_SECONDS > 0:
        deadline = time.monotonic() + config.CHAIN_TIMEOUT_SECONDS

    graph = store.snapshot()
    started = time.perf_counter()
    raw = enumerate_cycles(
        graph, min_length, max_length,
        max_visits=config.CHAIN_MAX_VISITS or None,
        deadline=deadline,
    )
    chains = score_and_dedupe(raw, graph)
    logger.info(
        "Generation %d: %d chains (%d raw cycles, length %d..%d) in %.3fs",
        graph.generation, len(chains), len(raw), min_length, max_length,
        time.perf_counter() - started,
    )
    return chains


def summarize(store: GraphStore) -> list[RelationshipRecord]:
    graph = store.snapshot()
    rows = report_relationships(graph)
    logger.debug("Generation %d: summary of %d relationships", graph.generation, len(rows))
    return rows
