from collections.abc import Iterator

import pytest

from roadnet.domain.entities.geography import Coord, PointRecord, WayRecord
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_builder import (
    Direction,
    GraphBuilder,
    RoadPolicy,
    build_graph,
)
from roadnet.domain.mechanics.mechanics_geodesic import distance_m
from roadnet.errors import GraphLoadError

# ---------- Helpers

A, B, C, D = 1, 2, 3, 4

POINTS = [
    PointRecord(A, Coord(24.8600, 67.0000)),
    PointRecord(B, Coord(24.8600, 67.0010)),
    PointRecord(C, Coord(24.8610, 67.0010)),
    PointRecord(D, Coord(24.8610, 67.0000)),
]


def _graph(*ways: WayRecord, points=POINTS) -> RoadGraph:
    return GraphBuilder().consume([*points, *ways]).build()


def _pairs(g: RoadGraph) -> list[tuple[int, int]]:
    return sorted((u, e.target) for u, edges in g.adjacency.items() for e in edges)


def _way(ids, **tags) -> WayRecord:
    return WayRecord(tuple(ids), tags)


# ---------- Directionality


@pytest.mark.parametrize("value", ["yes", "true", "1"])
def test_oneway_forward_follows_stored_order(value):
    g = _graph(_way([A, B, C], highway="residential", oneway=value))
    assert _pairs(g) == [(A, B), (B, C)]


def test_oneway_reverse_marker_flips_order():
    g = _graph(_way([A, B], highway="primary", oneway="-1"))
    assert _pairs(g) == [(B, A)]


def test_roundabout_is_oneway_in_stored_order():
    g = _graph(_way([A, B, C, A], highway="tertiary", junction="roundabout"))
    assert _pairs(g) == [(A, B), (B, C), (C, A)]


def test_roundabout_wins_over_reverse_oneway_tag():
    g = _graph(_way([A, B], highway="tertiary", junction="roundabout", oneway="-1"))
    assert _pairs(g) == [(A, B)]


def test_untagged_way_is_bidirectional_with_equal_weights():
    g = _graph(_way([A, B], highway="residential", oneway="no"))
    assert _pairs(g) == [(A, B), (B, A)]
    (ab,) = g.edges_from(A)
    (ba,) = g.edges_from(B)
    assert ab.weight_m == ba.weight_m
    assert abs(ab.weight_m - distance_m(POINTS[0].coord, POINTS[1].coord)) < 1e-9


def test_policy_direction_table():
    p = RoadPolicy()
    assert p.direction({}) is Direction.BOTH
    assert p.direction({"oneway": "yes"}) is Direction.FORWARD
    assert p.direction({"oneway": "-1"}) is Direction.REVERSE
    assert p.direction({"oneway": "reversible"}) is Direction.BOTH
    assert p.direction({"junction": "roundabout"}) is Direction.FORWARD


# ---------- Filtering


@pytest.mark.parametrize(
    "tags, reason",
    [
        ({"name": "no category"}, "no_highway"),
        ({"highway": "footway"}, "non_drivable"),
        ({"highway": "steps"}, "non_drivable"),
        ({"highway": "cycleway"}, "non_drivable"),
        ({"highway": "road"}, "unknown_category"),
        ({"highway": "construction"}, "unknown_category"),
        ({"highway": "primary", "access": "no"}, "access_no"),
        ({"highway": "motorway", "motor_vehicle": "no"}, "access_no"),
    ],
)
def test_filtered_ways_contribute_no_edges(tags, reason):
    b = GraphBuilder().consume([*POINTS, WayRecord((A, B, C), tags)])
    assert b.build().edge_count == 0
    assert b.stats.ways_skipped == {reason: 1}
    assert b.stats.ways_kept == 0


def test_access_no_wins_regardless_of_category():
    for hw in ("motorway", "residential", "service", "living_street"):
        g = _graph(_way([A, B], highway=hw, access="no", oneway="yes"))
        assert g.edge_count == 0


def test_link_roads_are_drivable():
    for hw in ("motorway_link", "trunk_link", "primary_link", "secondary_link", "tertiary_link"):
        assert _graph(_way([A, B], highway=hw)).edge_count == 2


# ---------- Missing coordinates & ordering


def test_segment_with_unknown_endpoint_is_skipped_rest_kept():
    # 99 never appears as a point; only C-D survives
    b = GraphBuilder().consume([*POINTS, _way([A, 99, C, D], highway="service")])
    g = b.build()
    assert _pairs(g) == [(C, D), (D, C)]
    assert b.stats.segments_missing_coord == 2
    assert 99 not in g


def test_points_without_valid_location_are_ignored():
    pts = [
        *POINTS,
        PointRecord(10, None),
        PointRecord(11, Coord(95.0, 0.0)),
        PointRecord(12, Coord(float("nan"), 1.0)),
    ]
    b = GraphBuilder().consume([*pts, _way([A, 10, 11, 12, B], highway="residential")])
    g = b.build()
    assert len(g) == 4
    assert g.edge_count == 0
    assert b.stats.points_seen == 7 and b.stats.points_kept == 4


def test_repeated_point_keeps_first_location():
    moved = PointRecord(B, Coord(24.9000, 67.1000))
    b = GraphBuilder().consume([*POINTS, _way([A, B], highway="residential"), moved])
    g = b.build()
    assert g.coord(B) == Coord(24.8600, 67.0010)
    (edge,) = g.edges_from(A)
    assert abs(edge.weight_m - distance_m(g.coord(A), g.coord(B))) < 1e-9
    assert b.stats.points_duplicate == 1 and b.stats.points_kept == 4


def test_way_before_its_points_is_dropped():
    way = _way([A, B], highway="residential")
    g = GraphBuilder().consume([way, *POINTS]).build()
    assert g.edge_count == 0
    assert len(g) == 4


def test_overlapping_ways_keep_parallel_edges():
    g = _graph(
        _way([A, B], highway="residential", oneway="yes"),
        _way([A, B, C], highway="primary", oneway="yes"),
    )
    assert [e.target for e in g.edges_from(A)] == [B, B]
    assert g.edge_count == 3


def test_every_edge_targets_a_known_node():
    g = _graph(
        _way([A, B, C, D, A], highway="residential"),
        _way([B, 77, D], highway="service"),
    )
    for u, edges in g.adjacency.items():
        assert u in g
        for e in edges:
            assert e.target in g
            assert e.weight_m >= 0.0


def test_custom_policy_can_admit_extra_category():
    policy = RoadPolicy(drivable=RoadPolicy().drivable | {"road"})
    g = GraphBuilder(policy).consume([*POINTS, _way([A, B], highway="road")]).build()
    assert g.edge_count == 2


# ---------- Load failures


def test_stream_failure_surfaces_as_load_error():
    def broken() -> Iterator:
        yield from POINTS
        raise OSError("disk went away")

    with pytest.raises(GraphLoadError) as ei:
        build_graph(broken(), source="broken.osm")
    assert ei.value.source == "broken.osm"
    assert isinstance(ei.value.__cause__, OSError)


def test_unexpected_record_type_is_a_load_error():
    with pytest.raises(GraphLoadError):
        build_graph([*POINTS, ("way", [A, B])])


def test_build_graph_reports_stats_through_hooks():
    seen = {}

    class _Hooks:
        def load_start(self, *, source):
            seen["start"] = source

        def load_end(self, **kw):
            seen.update(kw)

        def load_failed(self, **kw):
            raise AssertionError("unexpected failure")

    g = build_graph(
        [*POINTS, _way([A, B, C], highway="residential"), _way([C, D], highway="footway")],
        hooks=_Hooks(),
        source="mem",
    )
    assert seen["start"] == "mem"
    assert seen["nodes"] == 4 == len(g)
    assert seen["edges"] == 4 == seen["edges_added"]
    assert seen["adjacency_keys"] == 3
    assert seen["ways_skipped"] == {"non_drivable": 1}
