import numpy as np
import pytest

from roadnet.domain.entities.geography import Coord
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_geodesic import distance_m
from roadnet.domain.mechanics.mechanics_locators import ExhaustiveNodeLocator
from roadnet.errors import EmptyGraphError


@pytest.fixture
def three() -> RoadGraph:
    return RoadGraph(
        {101: Coord(0.0, 0.0), 202: Coord(0.0, 0.001), 303: Coord(0.0, 0.002)},
        {},
    )


def test_exact_hit_returns_that_node(three: RoadGraph):
    loc = ExhaustiveNodeLocator(three)
    for nid, c in three.coords.items():
        got, d = loc.nearest_with_distance(c)
        assert got == nid
        assert d == 0.0


def test_off_graph_point_snaps_to_closest(three: RoadGraph):
    loc = ExhaustiveNodeLocator(three)
    assert loc.nearest(Coord(0.0003, 0.0012)) == 202
    assert loc.nearest(Coord(-1.0, -1.0)) == 101
    assert loc.nearest(Coord(5.0, 0.5)) == 303


def test_matches_brute_force_scan():
    rng = np.random.default_rng(3)
    coords = {
        int(i): Coord(float(la), float(lo))
        for i, la, lo in zip(
            range(1000, 1300), rng.uniform(24.80, 24.95, 300), rng.uniform(66.95, 67.15, 300)
        )
    }
    loc = ExhaustiveNodeLocator(RoadGraph(coords, {}))
    for la, lo in zip(rng.uniform(24.8, 24.95, 25), rng.uniform(66.95, 67.15, 25)):
        q = Coord(float(la), float(lo))
        best = min(coords, key=lambda n: distance_m(q, coords[n]))
        got, d = loc.nearest_with_distance(q)
        assert abs(d - distance_m(q, coords[best])) < 1e-6
        assert got == best or abs(distance_m(q, coords[got]) - d) < 1e-6


def test_ties_go_to_first_node_in_table_order():
    same = Coord(10.0, 10.0)
    g = RoadGraph({7: same, 3: same, 5: Coord(11.0, 11.0)}, {})
    loc = ExhaustiveNodeLocator(g)
    assert loc.nearest(Coord(10.0, 10.0)) == 7
    assert loc.nearest(Coord(9.0, 9.0)) == 7


def test_empty_graph_raises():
    loc = ExhaustiveNodeLocator(RoadGraph({}, {}))
    assert len(loc) == 0
    with pytest.raises(EmptyGraphError):
        loc.nearest(Coord(0.0, 0.0))
