from collections.abc import Mapping
from dataclasses import dataclass, field
from math import isfinite


# Core geography types used by mechanics
@dataclass(frozen=True)
class Coord:
    lat: float  # decimal degrees, WGS84
    lon: float

    @property
    def is_valid(self) -> bool:
        return (
            isfinite(self.lat)
            and isfinite(self.lon)
            and -90.0 <= self.lat <= 90.0
            and -180.0 <= self.lon <= 180.0
        )


@dataclass(frozen=True)
class Edge:
    target: int
    weight_m: float  # geodesic length, fixed at insertion


# Raw primitives handed to the graph builder by a primitive source
@dataclass(frozen=True)
class PointRecord:
    id: int
    coord: Coord | None = None  # None => location unknown, never enters the graph


@dataclass(frozen=True)
class WayRecord:
    node_ids: tuple[int, ...]
    tags: Mapping[str, str] = field(default_factory=dict)
    id: int | None = None


@dataclass(frozen=True)
class Route:
    """Answer to one routing query, ready for a reporting or rendering layer."""

    start: int
    goal: int
    path: tuple[int, ...] | None  # None => goal unreachable
    coords: tuple[Coord, ...]
    total_m: float
    straight_m: float
    explored: int
    elapsed_ms: float = 0.0
    start_snap_m: float | None = None  # set when the query came in as coordinates
    goal_snap_m: float | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def efficiency(self) -> float:
        # 1.0 is a perfectly straight route
        if not self.found or self.straight_m <= 0.0:
            return 0.0
        return self.total_m / self.straight_m

    def is_indirect(self, ratio: float = 1.3) -> bool:
        return self.efficiency > ratio
