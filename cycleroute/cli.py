from __future__ import annotations

import argparse
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .errors import CycleRouteError, NoRouteFoundError, normalize_reason_code
from .logging_utils import get_logger, log_event
from .pipeline import run
from .settings import Settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_ROUTE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cycleroute",
        description="Compute the shortest cyclable route between two OSM nodes and write it as a polyline.",
    )
    parser.add_argument("--source-node", type=int, default=None, help="OSM node id to start from.")
    parser.add_argument("--goal-node", type=int, default=None, help="OSM node id to route to.")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the OSM dump, graph cache and result file.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...).")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.source_node is not None:
        overrides["source_node_id"] = args.source_node
    if args.goal_node is not None:
        overrides["goal_node_id"] = args.goal_node
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = settings_from_args(args)
    get_logger(settings.log_level, settings.log_dir)
    try:
        report = run(settings)
    except CycleRouteError as exc:
        log_event(
            "run_failed",
            reason_code=normalize_reason_code(exc.reason_code),
            error_type=type(exc).__name__,
            error_message=str(exc),
            details=exc.details or {},
        )
        return EXIT_NO_ROUTE if isinstance(exc, NoRouteFoundError) else EXIT_FAILED
    print(
        json.dumps(
            {
                "graph_source": report.graph_source,
                "nodes": report.nodes,
                "edges": report.edges,
                "route_nodes": len(report.route.node_ids),
                "distance_m": report.route.distance_m,
                "result_path": str(report.result_path),
                "elapsed_s": report.elapsed_s,
            },
            indent=2,
        )
    )
    return EXIT_OK
