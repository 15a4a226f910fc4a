"""Command-line interface for running WalGraph command batches."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import structlog

from .operations import GraphAnalytics
from .query import QueryExecutor
from .storage import GraphStore
from .utils.logging import configure_logging

logger = structlog.get_logger(__name__)


def _read_batch(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _print_json(data: Dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, default=str))


def analyze(store: GraphStore, top_k: Optional[int] = None) -> Dict[str, Any]:
    """Run all analytics over a store and collect JSON-ready results."""
    analytics = GraphAnalytics(store)
    components = analytics.find_connected_components()
    return {
        "centrality": [s.to_dict() for s in analytics.calculate_degree_centrality(top_k=top_k)],
        "components": components,
        "componentCount": len(components),
        "pagerank": [s.to_dict() for s in analytics.calculate_pagerank(top_k=top_k)],
        "statistics": analytics.get_graph_statistics(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walgraph",
        description="Execute WalGraph command batches against an in-memory graph",
    )
    parser.add_argument("--log-level", default=None, help="Log level (overrides WALGRAPH_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="action", required=True)

    run_parser = subparsers.add_parser("run", help="Execute a command batch and print the result")
    run_parser.add_argument("file", nargs="?", help="Batch file (stdin when omitted or '-')")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Execute a command batch, then print graph analytics"
    )
    analyze_parser.add_argument("file", nargs="?", help="Batch file (stdin when omitted or '-')")
    analyze_parser.add_argument("--top-k", type=int, default=None, help="Limit rankings to the top K nodes")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        text = _read_batch(args.file)
    except OSError as e:
        print(f"❌ Cannot read batch: {e}", file=sys.stderr)
        return 2

    store = GraphStore()
    result = QueryExecutor(store).execute(text)

    if not result.success:
        _print_json(result.to_dict())
        return 1

    if args.action == "analyze":
        _print_json({"execution": result.to_dict(), "analysis": analyze(store, args.top_k)})
    else:
        _print_json(result.to_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
