from __future__ import annotations

import heapq
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    source: int
    goal: int
    predecessors: dict[int, int | None]
    distance_mm: int | None
    settled: int

    @property
    def reached(self) -> bool:
        return self.distance_mm is not None


def to_millimeters(distance_m: float) -> int:
    # Half away from zero; weights are never negative.
    return int(math.floor(float(distance_m) * 1000.0 + 0.5))


def shortest_path_tree(
    adjacency: Mapping[int, Sequence[tuple[int, float]]],
    source: int,
    goal: int,
) -> SearchResult:
    """Dijkstra from ``source`` with integer millimeter keys, stopping at ``goal``.

    The frontier holds ``(distance_mm, node)`` so equal distances pop in node id
    order. Stale entries are skipped on pop: a node is settled, and its
    predecessor written, the first time it is popped.
    """
    best_mm: dict[int, int] = {source: 0}
    tentative_parent: dict[int, int | None] = {source: None}
    predecessors: dict[int, int | None] = {}
    heap: list[tuple[int, int]] = [(0, source)]
    while heap:
        dist_mm, node = heapq.heappop(heap)
        if node in predecessors:
            continue
        predecessors[node] = tentative_parent[node]
        if node == goal:
            return SearchResult(
                source=source,
                goal=goal,
                predecessors=predecessors,
                distance_mm=dist_mm,
                settled=len(predecessors),
            )
        for nxt, distance_m in adjacency.get(node, ()):
            if nxt in predecessors:
                continue
            new_mm = dist_mm + to_millimeters(distance_m)
            prior = best_mm.get(nxt)
            if prior is not None and new_mm >= prior:
                continue
            best_mm[nxt] = new_mm
            tentative_parent[nxt] = node
            heapq.heappush(heap, (new_mm, nxt))
    return SearchResult(
        source=source,
        goal=goal,
        predecessors=predecessors,
        distance_mm=None,
        settled=len(predecessors),
    )
