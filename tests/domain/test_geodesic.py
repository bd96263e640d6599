import math

import numpy as np

from roadnet.domain.entities.geography import Coord
from roadnet.domain.mechanics.mechanics_geodesic import EARTH_RADIUS_M, distance_m, haversine_m


def test_zero_distance_to_self():
    for c in (Coord(0.0, 0.0), Coord(24.8607, 67.0011), Coord(-89.9, 179.9)):
        assert distance_m(c, c) == 0.0


def test_symmetric_on_random_pairs():
    rng = np.random.default_rng(7)
    lat = rng.uniform(-89.0, 89.0, size=(200, 2))
    lon = rng.uniform(-179.0, 179.0, size=(200, 2))
    for (la, lb), (oa, ob) in zip(lat, lon):
        a, b = Coord(float(la), float(oa)), Coord(float(lb), float(ob))
        d1, d2 = distance_m(a, b), distance_m(b, a)
        assert abs(d1 - d2) <= 1e-9 * max(1.0, d1)


def test_known_arcs_on_sphere():
    one_deg = EARTH_RADIUS_M * math.pi / 180.0
    assert abs(distance_m(Coord(0.0, 0.0), Coord(0.0, 1.0)) - one_deg) < 1e-6
    assert abs(distance_m(Coord(0.0, 0.0), Coord(1.0, 0.0)) - one_deg) < 1e-6
    # quarter meridian and antipode
    assert abs(distance_m(Coord(0.0, 0.0), Coord(90.0, 0.0)) - EARTH_RADIUS_M * math.pi / 2) < 1e-3
    assert abs(distance_m(Coord(0.0, 0.0), Coord(0.0, 180.0)) - EARTH_RADIUS_M * math.pi) < 1e-3


def test_longitude_shrinks_with_latitude():
    at_equator = distance_m(Coord(0.0, 0.0), Coord(0.0, 1.0))
    at_60 = distance_m(Coord(60.0, 0.0), Coord(60.0, 1.0))
    assert at_60 < at_equator
    assert abs(at_60 / at_equator - 0.5) < 1e-3


def test_array_inputs_match_scalar_calls():
    lats = np.array([0.0, 10.0, -33.9])
    lons = np.array([0.001, 20.0, 151.2])
    d = haversine_m(0.0, 0.0, lats, lons)
    assert d.shape == (3,)
    for i in range(3):
        assert abs(d[i] - distance_m(Coord(0.0, 0.0), Coord(float(lats[i]), float(lons[i])))) < 1e-6
