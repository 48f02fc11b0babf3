"""Tests for graph_engine/cli.py — offline chains/summary commands."""
import json

import pytest

from graph_engine import cli
from tests.conftest import TRIANGLE, NAMES


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "build.json"
    path.write_text(json.dumps({"applications": TRIANGLE, "usersById": NAMES}))
    return path


class TestChains:
    def test_prints_chains(self, request_file, capsys):
        cli.main(["chains", str(request_file)])
        out = json.loads(capsys.readouterr().out)
        assert out == [{"people": ["Alice", "Bruno", "Chiara"], "length": 3, "avgPriority": 0.75}]

    def test_length_bounds(self, request_file, capsys):
        cli.main(["chains", str(request_file), "--max-length", "2"])
        assert json.loads(capsys.readouterr().out) == []

    def test_bare_list_input(self, tmp_path, capsys):
        path = tmp_path / "edges.json"
        path.write_text(json.dumps(TRIANGLE))
        cli.main(["chains", str(path)])
        out = json.loads(capsys.readouterr().out)
        assert out[0]["people"] == ["a", "b", "c"]


class TestSummary:
    def test_prints_rows(self, request_file, capsys):
        cli.main(["summary", str(request_file)])
        out = json.loads(capsys.readouterr().out)
        assert [r["from_name"] for r in out] == ["Alice", "Bruno", "Chiara"]


class TestErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit, match="File not found"):
            cli.main(["summary", str(tmp_path / "nope.json")])

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SystemExit, match="invalid JSON"):
            cli.main(["summary", str(path)])

    def test_load_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"applications": [{"user_id": "a"}]}))
        with pytest.raises(SystemExit, match="missing target id"):
            cli.main(["chains", str(path)])

    def test_reject_duplicates(self, tmp_path):
        path = tmp_path / "dupes.json"
        path.write_text(json.dumps({"applications": TRIANGLE + TRIANGLE[:1]}))
        with pytest.raises(SystemExit, match="duplicate"):
            cli.main(["chains", str(path), "--duplicates", "reject"])

    def test_invalid_bounds(self, request_file):
        with pytest.raises(SystemExit, match="max_length"):
            cli.main(["chains", str(request_file), "--min-length", "5", "--max-length", "3"])
