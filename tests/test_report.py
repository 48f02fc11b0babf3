"""Tests for graph_engine/report.py — flattened relationship listing."""
from graph_engine.report import report_relationships
from graph_engine.store import build_generation
from tests.conftest import TRIANGLE, DISCONNECTED, NAMES


def _rows(edges, labels=None, policy="last_write_wins"):
    g = build_generation(edges, labels or {}, generation=1, duplicate_policy=policy)
    return [(r.from_label, r.to_label, r.priority) for r in report_relationships(g)]


class TestReport:
    def test_one_row_per_edge(self):
        assert len(_rows(TRIANGLE)) == len(TRIANGLE)

    def test_sorted_by_labels(self):
        assert _rows(TRIANGLE, NAMES) == [
            ("Alice", "Bruno", 1.0),
            ("Bruno", "Chiara", 0.5),
            ("Chiara", "Alice", 0.75),
        ]

    def test_disconnected(self):
        assert _rows(DISCONNECTED) == [("a", "b", 1), ("c", "d", 2)]

    def test_sorts_on_labels_not_ids(self):
        rows = _rows(DISCONNECTED, {"a": "Zoe", "c": "Ann"})
        assert [r[0] for r in rows] == ["Ann", "Zoe"]

    def test_target_breaks_ties(self):
        edges = [
            {"user_id": "a", "target_user_id": "c"},
            {"user_id": "a", "target_user_id": "b"},
        ]
        assert [r[1] for r in _rows(edges)] == ["b", "c"]

    def test_self_loop_listed_once(self):
        assert _rows([{"user_id": "a", "target_user_id": "a", "priority": 1}]) == [("a", "a", 1)]

    def test_priority_passthrough(self):
        edges = [
            {"user_id": "a", "target_user_id": "b", "priority": 0},
            {"user_id": "b", "target_user_id": "c"},
        ]
        rows = _rows(edges)
        assert rows[0][2] == 0 and rows[0][2] is not None
        assert rows[1][2] is None

    def test_parallel_edges_each_listed(self):
        edges = [
            {"user_id": "a", "target_user_id": "b", "priority": 1},
            {"user_id": "a", "target_user_id": "b", "priority": 2},
        ]
        assert _rows(edges, policy="keep") == [("a", "b", 1), ("a", "b", 2)]
        assert _rows(edges) == [("a", "b", 2)]

    def test_empty(self):
        assert _rows([]) == []
