from __future__ import annotations

import pytest

from cycleroute.errors import DecodeError
from cycleroute.geo import haversine_m
from cycleroute.graph import GraphBuilder, RawNode, RawWay, build_graph
from cycleroute.settings import Settings
from cycleroute.way_filter import is_cyclable_way


def _nodes() -> list[RawNode]:
    return [
        RawNode(id=1, lat=35.0000, lon=139.0000),
        RawNode(id=2, lat=35.0010, lon=139.0000),
        RawNode(id=3, lat=35.0010, lon=139.0010),
        RawNode(id=4, lat=35.0020, lon=139.0010),
        RawNode(id=99, lat=36.0, lon=140.0),
    ]


def test_two_way_road_yields_both_directions_with_equal_weight() -> None:
    graph = build_graph(_nodes(), [RawWay(id=10, nodes=(1, 2), tags={"highway": "residential"})])

    assert [to for to, _ in graph.adjacency[1]] == [2]
    assert [to for to, _ in graph.adjacency[2]] == [1]
    assert graph.adjacency[1][0][1] == graph.adjacency[2][0][1]
    assert graph.adjacency[1][0][1] == pytest.approx(haversine_m(35.0, 139.0, 35.001, 139.0))


def test_oneway_road_yields_forward_edges_only() -> None:
    graph = build_graph(
        _nodes(),
        [RawWay(id=10, nodes=(1, 2, 3), tags={"highway": "residential", "oneway": "yes"})],
    )

    assert [to for to, _ in graph.adjacency[1]] == [2]
    assert [to for to, _ in graph.adjacency[2]] == [3]
    assert 3 not in graph.adjacency
    assert graph.edge_count == 2


def test_node_table_is_pruned_to_referenced_nodes() -> None:
    settings = Settings()
    ways = [
        RawWay(id=10, nodes=(1, 2), tags={"highway": "residential"}),
        RawWay(id=11, nodes=(3, 4), tags={"highway": "track", "surface": "dirt"}),
    ]
    accepted = [way for way in ways if is_cyclable_way(way.tags, settings=settings)]
    graph = build_graph(_nodes(), accepted)

    assert set(graph.nodes) == {1, 2}
    assert graph.nodes[1] == (35.0, 139.0)
    for src, edges in graph.adjacency.items():
        assert src in graph.nodes
        assert all(to in graph.nodes for to, _ in edges)


def test_short_ways_contribute_nothing() -> None:
    graph = build_graph(
        _nodes(),
        [
            RawWay(id=10, nodes=(1,), tags={"highway": "residential"}),
            RawWay(id=11, nodes=(), tags={"highway": "residential"}),
        ],
    )
    assert graph.nodes == {}
    assert graph.adjacency == {}


def test_duplicate_segments_keep_parallel_edges() -> None:
    graph = build_graph(
        _nodes(),
        [
            RawWay(id=10, nodes=(1, 2), tags={"highway": "residential"}),
            RawWay(id=11, nodes=(1, 2), tags={"highway": "cycleway"}),
        ],
    )
    assert [to for to, _ in graph.adjacency[1]] == [2, 2]
    assert graph.edge_count == 4


def test_ways_may_arrive_before_nodes() -> None:
    builder = GraphBuilder()
    builder.add_way(RawWay(id=10, nodes=(2, 3), tags={"highway": "residential"}))
    for node in _nodes():
        builder.add_node(node)
    graph = builder.build()
    assert set(graph.nodes) == {2, 3}
    assert builder.nodes_buffered == 5
    assert builder.ways_buffered == 1


def test_unknown_node_reference_is_a_decode_error() -> None:
    with pytest.raises(DecodeError) as excinfo:
        build_graph(_nodes(), [RawWay(id=10, nodes=(1, 404), tags={"highway": "residential"})])
    assert excinfo.value.reason_code == "unknown_node_reference"
    assert excinfo.value.details == {"way_id": 10, "node_id": 404}
