from __future__ import annotations

from dataclasses import dataclass

from .errors import NoRouteFoundError
from .graph import NodeTable
from .polyline import encode_polyline
from .search import SearchResult

POLYLINE_PRECISION = 5


@dataclass(frozen=True)
class Route:
    node_ids: tuple[int, ...]
    coordinates: tuple[tuple[float, float], ...]
    distance_mm: int
    polyline: str

    @property
    def distance_m(self) -> float:
        return self.distance_mm / 1000.0


def reconstruct_route(result: SearchResult, nodes: NodeTable) -> Route:
    """Walk predecessors from goal back to source and encode the path."""
    source = result.source
    goal = result.goal
    if not result.reached or goal not in result.predecessors:
        raise NoRouteFoundError(
            reason_code="no_route_found",
            message=f"no cyclable route from node {source} to node {goal}",
            details={"source": source, "goal": goal, "settled": result.settled},
        )
    path = [goal]
    current = goal
    while current != source:
        parent = result.predecessors.get(current)
        if parent is None:
            raise NoRouteFoundError(
                reason_code="route_chain_broken",
                message=f"predecessor chain from node {goal} stops at node {current} before reaching {source}",
                details={"source": source, "goal": goal, "stopped_at": current},
            )
        path.append(parent)
        current = parent
    path.reverse()

    coordinates: list[tuple[float, float]] = []
    for node_id in path:
        coords = nodes.get(node_id)
        if coords is None:
            raise NoRouteFoundError(
                reason_code="route_chain_broken",
                message=f"route node {node_id} has no coordinates",
                details={"node_id": node_id},
            )
        lat, lon = coords
        coordinates.append((lon, lat))

    return Route(
        node_ids=tuple(path),
        coordinates=tuple(coordinates),
        distance_mm=int(result.distance_mm or 0),
        polyline=encode_polyline(coordinates, precision=POLYLINE_PRECISION),
    )
