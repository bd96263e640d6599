# search/engine.py

import heapq
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass, field

from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_geodesic import haversine_m
from roadnet.errors import UnknownNodeError

from .hooks import NoopHooks, RoutingHooks

STALE_EPSILON = 1e-9


@dataclass(frozen=True)
class SearchResult:
    start: int
    goal: int
    path: list[int] | None  # start..goal inclusive; None => no path
    cost_m: float  # math.inf when no path
    explored: int  # pops that were not stale; diagnostics only
    g_scores: Mapping[int, float] = field(default_factory=dict, repr=False)

    @property
    def found(self) -> bool:
        return self.path is not None


class AStarSearch:
    """
    Single-query A* over a RoadGraph with the haversine heuristic.

    The frontier is a binary heap of (f, seq, node). A better path to a node
    pushes a fresh entry instead of decreasing a key; superseded entries are
    dropped when popped. seq breaks f ties in discovery order. All search
    state lives inside search(), so one instance serves concurrent callers.
    """

    def __init__(
        self,
        graph: RoadGraph,
        *,
        stale_epsilon: float = STALE_EPSILON,
        hooks: RoutingHooks | None = None,
    ):
        self.G = graph
        self.eps = stale_epsilon
        self._hooks = hooks or NoopHooks()

    def search(self, start: int, goal: int) -> SearchResult:
        G = self.G
        if start not in G:
            raise UnknownNodeError(start)
        if goal not in G:
            raise UnknownNodeError(goal)

        t0 = time.perf_counter()
        self._hooks.search_start(start=start, goal=goal)

        coords = G.coords
        pg = coords[goal]

        def h(n: int) -> float:
            pn = coords[n]
            return float(haversine_m(pn.lat, pn.lon, pg.lat, pg.lon))

        g: dict[int, float] = {start: 0.0}
        f: dict[int, float] = {start: h(start)}
        parent: dict[int, int] = {}
        seq = 0
        frontier: list[tuple[float, int, int]] = [(f[start], seq, start)]
        explored = 0
        result = None

        while frontier:
            score, _, current = heapq.heappop(frontier)
            if score > f[current] + self.eps:
                continue  # stale
            explored += 1

            if current == goal:
                result = SearchResult(
                    start, goal, self._reconstruct(parent, start, goal), g[goal], explored, g
                )
                break

            gc = g[current]
            for edge in G.edges_from(current):
                v = edge.target
                tentative = gc + edge.weight_m
                if v not in g or tentative < g[v]:
                    parent[v] = current
                    g[v] = tentative
                    f[v] = tentative + h(v)
                    seq += 1
                    heapq.heappush(frontier, (f[v], seq, v))

        if result is None:
            result = SearchResult(start, goal, None, math.inf, explored, g)

        self._hooks.search_end(
            start=start,
            goal=goal,
            found=result.found,
            explored=explored,
            ms=(time.perf_counter() - t0) * 1000,
        )
        return result

    @staticmethod
    def _reconstruct(parent: dict[int, int], start: int, goal: int) -> list[int]:
        path = [goal]
        at = goal
        while at != start:
            at = parent[at]
            path.append(at)
        path.reverse()
        return path
