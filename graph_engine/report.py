"""Flattened relationship listing."""
from .models import Graph, RelationshipRecord


def report_relationships(graph: Graph) -> list[RelationshipRecord]:
    """One row per stored candidacy, sorted by source label then target label.

    Priorities pass through untouched, so 0 and None stay distinct.
    """
    rows = [
        RelationshipRecord(
            from_label=graph.label(edge.source),
            to_label=graph.label(edge.target),
            priority=edge.priority,
        )
        for edge in graph.edges
    ]
    rows.sort(key=lambda r: (r.from_label, r.to_label))
    return rows
