import time

from roadnet.app.protocols import NodeLocator, RoutePlanner, SearchEngine
from roadnet.domain.entities.geography import Coord, Route
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_geodesic import distance_m
from roadnet.search.hooks import NoopHooks, RoutingHooks


class NetworkRoutePlanner(RoutePlanner):
    def __init__(
        self,
        graph: RoadGraph,
        locator: NodeLocator,
        engine: SearchEngine,
        *,
        hooks: RoutingHooks | None = None,
    ):
        self.G, self.locator, self.engine = graph, locator, engine
        self._hooks = hooks or NoopHooks()

    def route_nodes(self, start: int, goal: int) -> Route:
        return self._route(start, goal)

    def route_coords(self, a: Coord, b: Coord) -> Route:
        na, da = self.locator.nearest_with_distance(a)
        nb, db = self.locator.nearest_with_distance(b)
        return self._route(na, nb, start_snap_m=da, goal_snap_m=db)

    def distance_m(self, a: Coord, b: Coord) -> float:
        return self.route_coords(a, b).total_m

    def _route(self, start: int, goal: int, **snap) -> Route:
        t0 = time.perf_counter()
        res = self.engine.search(start, goal)  # raises UnknownNodeError first
        ms = (time.perf_counter() - t0) * 1000
        straight = distance_m(self.G.coord(start), self.G.coord(goal))
        if res.found:
            path = tuple(res.path)
            coords = tuple(self.G.coord(n) for n in path)
            total = res.cost_m
        else:
            path, coords, total = None, (), 0.0
        route = Route(
            start=start,
            goal=goal,
            path=path,
            coords=coords,
            total_m=total,
            straight_m=straight,
            explored=res.explored,
            elapsed_ms=ms,
            **snap,
        )
        self._hooks.route_done(route)
        return route
