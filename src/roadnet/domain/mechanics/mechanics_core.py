# roadnet/domain/mechanics/mechanics_core.py
from dataclasses import dataclass

from roadnet.app.protocols import NodeLocator, RoutePlanner, SearchEngine
from roadnet.domain.entities.geography import Coord, Route
from roadnet.domain.entities.graph import RoadGraph
from roadnet.search.engine import SearchResult


@dataclass
class Mechanics:
    """Convenience façade so call sites don't juggle graph, locator, engine and planner."""

    graph: RoadGraph
    locator: NodeLocator
    engine: SearchEngine
    route_planner: RoutePlanner

    def nearest(self, p: Coord) -> int:
        return self.locator.nearest(p)

    def search(self, start: int, goal: int) -> SearchResult:
        return self.engine.search(start, goal)

    def route(self, a: int | Coord, b: int | Coord) -> Route:
        if isinstance(a, Coord) and isinstance(b, Coord):
            return self.route_planner.route_coords(a, b)
        if isinstance(a, Coord):
            a = self.locator.nearest(a)
        if isinstance(b, Coord):
            b = self.locator.nearest(b)
        return self.route_planner.route_nodes(a, b)
