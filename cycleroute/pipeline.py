from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import httpx

from .graph import GraphBuilder, RoadGraph
from .graph_cache import cache_exists, load_graph, save_graph
from .logging_utils import log_event
from .osm_source import ensure_osm_dump, ingest_osm
from .route import Route, reconstruct_route
from .search import shortest_path_tree
from .settings import Settings


@dataclass(frozen=True)
class RunReport:
    graph_source: str
    nodes: int
    edges: int
    settled: int
    route: Route
    result_path: Path
    elapsed_s: float


def _elapsed(started: float) -> float:
    return round(time.monotonic() - started, 3)


def load_or_build_graph(settings: Settings, *, client: httpx.Client | None = None) -> tuple[RoadGraph, str]:
    """Load the cached graph, or build it from the raw dump and cache it."""
    if cache_exists(settings):
        return load_graph(settings), "cache"
    osm_path = ensure_osm_dump(settings, client=client)
    builder = GraphBuilder()
    ingest_osm(osm_path, builder, settings=settings)
    log_event(
        "pre_computation_done",
        nodes=builder.nodes_buffered,
        ways=builder.ways_buffered,
    )
    graph = builder.build()
    save_graph(graph, settings)
    return graph, "osm"


def run(settings: Settings, *, client: httpx.Client | None = None) -> RunReport:
    started = time.monotonic()
    graph, graph_source = load_or_build_graph(settings, client=client)
    log_event(
        "graph_loaded",
        graph_source=graph_source,
        nodes=graph.node_count,
        edges=graph.edge_count,
        elapsed_s=_elapsed(started),
    )

    result = shortest_path_tree(graph.adjacency, settings.source_node_id, settings.goal_node_id)
    log_event(
        "search_completed",
        source_node=result.source,
        goal_node=result.goal,
        reached=result.reached,
        settled=result.settled,
        distance_m=(result.distance_mm / 1000.0) if result.distance_mm is not None else None,
        elapsed_s=_elapsed(started),
    )

    route = reconstruct_route(result, graph.nodes)
    result_path = settings.result_path
    result_path.parent.mkdir(parents=True, exist_ok=True)
    result_path.write_text(route.polyline, encoding="ascii")
    elapsed_s = _elapsed(started)
    log_event(
        "route_written",
        path=str(result_path),
        route_nodes=len(route.node_ids),
        distance_m=route.distance_m,
        elapsed_s=elapsed_s,
    )
    return RunReport(
        graph_source=graph_source,
        nodes=graph.node_count,
        edges=graph.edge_count,
        settled=result.settled,
        route=route,
        result_path=result_path,
        elapsed_s=elapsed_s,
    )
