import numpy as np

from roadnet.domain.entities.geography import Coord

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1, lon1, lat2, lon2):
    """
    Great-circle distance in meters on a sphere of radius EARTH_RADIUS_M.

    Inputs are decimal degrees and may be scalars or numpy arrays (broadcast
    together). Edge weights, the A* heuristic and nearest-node scoring all go
    through this one function; A* admissibility relies on that.
    """
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    dphi = np.radians(lat2 - lat1)
    dlmb = np.radians(lon2 - lon1)
    a = np.sin(dphi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2.0) ** 2
    a = np.minimum(a, 1.0)  # rounding near antipodes
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: Coord, b: Coord) -> float:
    return float(haversine_m(a.lat, a.lon, b.lat, b.lon))
