from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import config, graph
from .errors import GraphEngineError
from .store import GraphStore


def load_request(file_path: Path) -> tuple[list, dict]:
    """Read a build-graph request body (``applications`` + ``usersById``) from a JSON file."""
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SystemExit(f"{file_path}: invalid JSON ({e})")
    if isinstance(data, list):
        return data, {}
    if not isinstance(data, dict):
        raise SystemExit(f"{file_path}: expected an object with 'applications' and 'usersById'")
    return data.get("applications") or [], data.get("usersById") or {}


def _print_json(payload) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _build(args) -> GraphStore:
    file_path = Path(args.file_path)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")
    applications, users_by_id = load_request(file_path)
    store = GraphStore(args.duplicates)
    graph.build_graph(store, applications, users_by_id)
    return store


def cmd_chains(args) -> None:
    store = _build(args)
    chains = graph.find_chains(store, args.min_length, args.max_length)
    _print_json([
        {"people": c.people, "length": c.length, "avgPriority": c.avg_priority} for c in chains
    ])


def cmd_summary(args) -> None:
    store = _build(args)
    _print_json([
        {"from_name": r.from_label, "to_name": r.to_label, "priority": r.priority}
        for r in graph.summarize(store)
    ])


def cmd_serve(args) -> None:
    import uvicorn

    uvicorn.run("graph_engine.main:app", host=args.host, port=args.port, log_level=config.LOG_LEVEL.lower())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="graph-engine", description="Candidacy chain analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("chains", cmd_chains, "List matching chains found in a build request file"),
        ("summary", cmd_summary, "List all relationships in a build request file"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file_path", help="JSON file shaped like a /build-graph request body")
        p.add_argument("--duplicates", default=config.DUPLICATE_EDGE_POLICY,
                       choices=["last_write_wins", "keep", "reject"],
                       help="How to treat repeated candidacies for the same pair")
        p.set_defaults(func=func)
        if name == "chains":
            p.add_argument("--min-length", type=int, default=None)
            p.add_argument("--max-length", type=int, default=None)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=config.HOST)
    serve.add_argument("--port", type=int, default=config.PORT)
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        args.func(args)
    except (GraphEngineError, ValueError) as e:
        raise SystemExit(f"error: {e}")


if __name__ == "__main__":
    main()
