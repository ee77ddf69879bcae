from __future__ import annotations

import json
import math
from collections.abc import Iterator
from decimal import Decimal
from pathlib import Path
from typing import Any, TextIO

import ijson

from .errors import CacheCorruptionError
from .graph import Adjacency, NodeTable, RoadGraph
from .logging_utils import log_event
from .settings import Settings


def cache_exists(settings: Settings) -> bool:
    return settings.nodes_cache_path.exists() and settings.adjacency_cache_path.exists()


def _write_nodes(fh: TextIO, nodes: NodeTable) -> None:
    fh.write("{")
    for idx, (node_id, (lat, lon)) in enumerate(nodes.items()):
        if idx:
            fh.write(",")
        fh.write(f"{json.dumps(str(node_id))}:{json.dumps({'lat': lat, 'lon': lon})}")
    fh.write("}")


def _write_adjacency(fh: TextIO, adjacency: Adjacency) -> None:
    fh.write("{")
    for idx, (node_id, edges) in enumerate(adjacency.items()):
        if idx:
            fh.write(",")
        fh.write(f"{json.dumps(str(node_id))}:{json.dumps([[to, distance_m] for to, distance_m in edges])}")
    fh.write("}")


def _write_atomic(path: Path, writer: Any, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            writer(fh, payload)
        tmp_path.replace(path)
    finally:
        tmp_path.unlink(missing_ok=True)


def save_graph(graph: RoadGraph, settings: Settings) -> None:
    _write_atomic(settings.nodes_cache_path, _write_nodes, graph.nodes)
    _write_atomic(settings.adjacency_cache_path, _write_adjacency, graph.adjacency)
    log_event(
        "graph_cache_written",
        nodes_path=str(settings.nodes_cache_path),
        adjacency_path=str(settings.adjacency_cache_path),
        nodes=graph.node_count,
        edges=graph.edge_count,
    )


def _corrupt(path: Path, detail: str) -> CacheCorruptionError:
    return CacheCorruptionError(
        reason_code="graph_cache_corrupt",
        message=f"graph cache {path} is corrupt: {detail}",
        details={"path": str(path)},
    )


def _as_float(raw: object) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise TypeError(f"expected a number, got {type(raw).__name__}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite number {value!r}")
    return value


def _as_node_id(raw: object) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise TypeError(f"expected a node id, got {type(raw).__name__}")
    return int(raw)


def _iter_entries(path: Path) -> Iterator[tuple[str, Any]]:
    with path.open("rb") as fh:
        prefix, event, _value = next(ijson.parse(fh), ("", "eof", None))
        if (prefix, event) != ("", "start_map"):
            raise TypeError(f"top-level value must be an object, got {event}")
        fh.seek(0)
        yield from ijson.kvitems(fh, "", use_float=True)


def _load_nodes(path: Path) -> NodeTable:
    nodes: NodeTable = {}
    try:
        for key, raw in _iter_entries(path):
            if not isinstance(raw, dict):
                raise TypeError(f"node {key} is not an object")
            nodes[_as_node_id(key)] = (_as_float(raw["lat"]), _as_float(raw["lon"]))
    except (ijson.JSONError, KeyError, TypeError, ValueError) as exc:
        raise _corrupt(path, f"{type(exc).__name__}: {exc}") from exc
    return nodes


def _load_adjacency(path: Path) -> Adjacency:
    adjacency: Adjacency = {}
    try:
        for key, raw in _iter_entries(path):
            if not isinstance(raw, list):
                raise TypeError(f"adjacency of {key} is not a list")
            edges: list[tuple[int, float]] = []
            for edge in raw:
                if not isinstance(edge, list) or len(edge) != 2:
                    raise TypeError(f"malformed edge {edge!r} from {key}")
                distance_m = _as_float(edge[1])
                if distance_m < 0.0:
                    raise ValueError(f"negative edge weight from {key}")
                edges.append((_as_node_id(edge[0]), distance_m))
            adjacency[_as_node_id(key)] = edges
    except (ijson.JSONError, TypeError, ValueError) as exc:
        raise _corrupt(path, f"{type(exc).__name__}: {exc}") from exc
    return adjacency


def load_graph(settings: Settings) -> RoadGraph:
    """Stream both cache artifacts back into a RoadGraph.

    Parse failures and dangling node references raise CacheCorruptionError.
    """
    nodes = _load_nodes(settings.nodes_cache_path)
    adjacency = _load_adjacency(settings.adjacency_cache_path)
    for node_id, edges in adjacency.items():
        if node_id not in nodes:
            raise _corrupt(settings.adjacency_cache_path, f"node {node_id} missing from node table")
        for to, _distance_m in edges:
            if to not in nodes:
                raise _corrupt(settings.adjacency_cache_path, f"edge {node_id}->{to} targets unknown node")
    graph = RoadGraph(nodes=nodes, adjacency=adjacency)
    log_event(
        "graph_cache_loaded",
        nodes_path=str(settings.nodes_cache_path),
        adjacency_path=str(settings.adjacency_cache_path),
        nodes=graph.node_count,
        edges=graph.edge_count,
    )
    return graph
