# roadnet/io/route_events.py

from dataclasses import dataclass

from roadnet.domain.entities.geography import Route


# Base type for analytics records written by the Recorder
@dataclass
class RouteEvent:
    run_id: str
    name: str  # stable record name


@dataclass
class RouteReport(RouteEvent):
    start: int
    goal: int
    found: bool
    path: list[int] | None
    total_m: float
    straight_m: float
    efficiency: float
    explored: int
    elapsed_ms: float
    indirect: bool = False
    start_snap_m: float | None = None
    goal_snap_m: float | None = None

    @classmethod
    def from_route(cls, route: Route, *, run_id: str, indirect_ratio: float = 1.3) -> "RouteReport":
        return cls(
            run_id=run_id,
            name="RouteReport",
            start=route.start,
            goal=route.goal,
            found=route.found,
            path=list(route.path) if route.found else None,
            total_m=route.total_m,
            straight_m=route.straight_m,
            efficiency=route.efficiency,
            explored=route.explored,
            elapsed_ms=route.elapsed_ms,
            indirect=route.is_indirect(indirect_ratio),
            start_snap_m=route.start_snap_m,
            goal_snap_m=route.goal_snap_m,
        )
