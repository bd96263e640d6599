import numpy as np

from roadnet.domain.entities.geography import Coord
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_geodesic import haversine_m
from roadnet.errors import EmptyGraphError


class ExhaustiveNodeLocator:
    """
    Exact nearest node by haversine distance, scanning every node per query.

    Coordinates are snapshotted into read-only arrays in the graph's table
    order; np.argmin returns the first minimum, so ties go to the node seen
    first. A spatial index can replace this class behind the same nearest().
    """

    def __init__(self, graph: RoadGraph):
        coords = graph.coords
        n = len(coords)
        self._ids = np.fromiter(coords.keys(), dtype=np.int64, count=n)
        self._lat = np.fromiter((c.lat for c in coords.values()), dtype=np.float64, count=n)
        self._lon = np.fromiter((c.lon for c in coords.values()), dtype=np.float64, count=n)
        for arr in (self._ids, self._lat, self._lon):
            arr.flags.writeable = False

    def __len__(self) -> int:
        return int(self._ids.size)

    def nearest_with_distance(self, p: Coord) -> tuple[int, float]:
        if self._ids.size == 0:
            raise EmptyGraphError("graph has no nodes")
        d = haversine_m(p.lat, p.lon, self._lat, self._lon)
        i = int(np.argmin(d))
        return int(self._ids[i]), float(d[i])

    def nearest(self, p: Coord) -> int:
        return self.nearest_with_distance(p)[0]
