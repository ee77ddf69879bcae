from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .errors import DecodeError
from .geo import haversine_m
from .way_filter import is_oneway

NodeTable = dict[int, tuple[float, float]]
Adjacency = dict[int, list[tuple[int, float]]]


@dataclass(frozen=True)
class RawNode:
    id: int
    lat: float
    lon: float


@dataclass(frozen=True)
class RawWay:
    id: int
    nodes: tuple[int, ...]
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RoadGraph:
    """Routable subgraph: node id -> (lat, lon) and node id -> [(neighbor, distance_m)]."""

    nodes: NodeTable
    adjacency: Adjacency

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.adjacency.values())


class GraphBuilder:
    """Collects raw nodes and accepted ways, then assembles a pruned RoadGraph.

    Ways are buffered until ``build`` so that records may arrive in any order.
    """

    def __init__(self) -> None:
        self._nodes: NodeTable = {}
        self._ways: list[RawWay] = []

    @property
    def nodes_buffered(self) -> int:
        return len(self._nodes)

    @property
    def ways_buffered(self) -> int:
        return len(self._ways)

    def add_node(self, node: RawNode) -> None:
        self._nodes[int(node.id)] = (float(node.lat), float(node.lon))

    def add_way(self, way: RawWay) -> None:
        self._ways.append(way)

    def _coords(self, node_id: int, *, way_id: int) -> tuple[float, float]:
        coords = self._nodes.get(node_id)
        if coords is None:
            raise DecodeError(
                reason_code="unknown_node_reference",
                message=f"way {way_id} references node {node_id} which is not in the dump",
                details={"way_id": way_id, "node_id": node_id},
            )
        return coords

    def build(self) -> RoadGraph:
        adjacency: Adjacency = {}
        referenced: set[int] = set()
        for way in self._ways:
            bidirectional = not is_oneway(way.tags)
            refs = way.nodes
            for idx in range(1, len(refs)):
                u = refs[idx - 1]
                v = refs[idx]
                lat1, lon1 = self._coords(u, way_id=way.id)
                lat2, lon2 = self._coords(v, way_id=way.id)
                distance_m = haversine_m(lat1, lon1, lat2, lon2)
                referenced.add(u)
                referenced.add(v)
                adjacency.setdefault(u, []).append((v, distance_m))
                if bidirectional:
                    adjacency.setdefault(v, []).append((u, distance_m))
        nodes = {node_id: coords for node_id, coords in self._nodes.items() if node_id in referenced}
        return RoadGraph(nodes=nodes, adjacency=adjacency)


def build_graph(nodes: Iterable[RawNode], ways: Iterable[RawWay]) -> RoadGraph:
    builder = GraphBuilder()
    for node in nodes:
        builder.add_node(node)
    for way in ways:
        builder.add_way(way)
    return builder.build()
