from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from roadnet.domain.entities.geography import Coord, PointRecord, Route, WayRecord
from roadnet.search.engine import SearchResult


# ------------- Inputs --------------------
@runtime_checkable
class PrimitiveSource(Protocol):
    """
    Responsibilities:
      • Decode a map file into point and way records, in a single pass.
      • Points may precede or interleave with ways; a way can only connect
        points that were already yielded.
    """

    def __iter__(self) -> Iterator[PointRecord | WayRecord]: ...


# ------------- Mechanics --------------------
@runtime_checkable
class NodeLocator(Protocol):
    """
    Responsibilities:
      • Resolve an arbitrary coordinate to the graph node nearest to it.
    Units: decimal degrees in, meters out.
    """

    def nearest(self, p: Coord) -> int: ...
    def nearest_with_distance(self, p: Coord) -> tuple[int, float]: ...


@runtime_checkable
class SearchEngine(Protocol):
    """
    Responsibilities:
      • Shortest directed path between two known node ids.
      • Report how many nodes were expanded, found or not.
    Unknown ids raise UnknownNodeError; an unreachable goal is a normal result.
    """

    def search(self, start: int, goal: int) -> SearchResult: ...


@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Turn node ids or free coordinates into a Route with distance metrics.
    """

    def route_nodes(self, start: int, goal: int) -> Route: ...
    def route_coords(self, a: Coord, b: Coord) -> Route: ...


@runtime_checkable
class RouteSink(Protocol):
    def write(self, ev) -> None: ...

