import time
from collections import Counter, defaultdict
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from roadnet.app.protocols import PrimitiveSource
from roadnet.domain.entities.geography import Coord, Edge, PointRecord, WayRecord
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_geodesic import distance_m
from roadnet.errors import GraphLoadError
from roadnet.search.hooks import NoopHooks, RoutingHooks

# highway=* values usable by motor vehicles
DRIVABLE = frozenset(
    {
        "motorway",
        "trunk",
        "primary",
        "secondary",
        "tertiary",
        "unclassified",
        "residential",
        "service",
        "living_street",
        "motorway_link",
        "trunk_link",
        "primary_link",
        "secondary_link",
        "tertiary_link",
    }
)

# pedestrian / cycle / steps etc.
NON_DRIVABLE = frozenset(
    {"footway", "path", "cycleway", "steps", "pedestrian", "track", "bridleway", "corridor"}
)


class Direction(Enum):
    FORWARD = "forward"  # stored node order only
    REVERSE = "reverse"  # against stored node order only
    BOTH = "both"


@dataclass(frozen=True)
class RoadPolicy:
    """Tag-equality rules deciding which ways become edges and in which direction."""

    drivable: frozenset[str] = DRIVABLE
    non_drivable: frozenset[str] = NON_DRIVABLE
    category_key: str = "highway"
    access_keys: tuple[str, ...] = ("access", "motor_vehicle")
    oneway_key: str = "oneway"
    oneway_forward: frozenset[str] = frozenset({"yes", "true", "1"})
    oneway_reverse: frozenset[str] = frozenset({"-1"})
    junction_key: str = "junction"
    roundabout: frozenset[str] = frozenset({"roundabout"})

    def skip_reason(self, tags: Mapping[str, str]) -> str | None:
        """None if the way is drivable, else a short reason key."""
        hw = tags.get(self.category_key)
        if hw is None:
            return "no_highway"
        if hw in self.non_drivable:
            return "non_drivable"
        # ambiguous or unknown categories are dropped, not guessed at
        if hw not in self.drivable:
            return "unknown_category"
        if any(tags.get(k) == "no" for k in self.access_keys):
            return "access_no"
        return None

    def direction(self, tags: Mapping[str, str]) -> Direction:
        if tags.get(self.junction_key) in self.roundabout:
            return Direction.FORWARD
        ow = tags.get(self.oneway_key)
        if ow in self.oneway_forward:
            return Direction.FORWARD
        if ow in self.oneway_reverse:
            return Direction.REVERSE
        return Direction.BOTH


@dataclass
class BuildStats:
    points_seen: int = 0
    points_kept: int = 0
    ways_seen: int = 0
    ways_kept: int = 0
    ways_skipped: Counter = field(default_factory=Counter)
    points_duplicate: int = 0
    segments_missing_coord: int = 0
    edges_added: int = 0

    def as_dict(self) -> dict:
        return {
            "points_seen": self.points_seen,
            "points_kept": self.points_kept,
            "points_duplicate": self.points_duplicate,
            "ways_seen": self.ways_seen,
            "ways_kept": self.ways_kept,
            "ways_skipped": dict(self.ways_skipped),
            "segments_missing_coord": self.segments_missing_coord,
            "edges_added": self.edges_added,
        }


class GraphBuilder:
    """
    Accumulates point and way records, then freezes them into a RoadGraph.

    Ways only connect points already seen: a segment with an unknown endpoint
    is skipped, the rest of the way is still processed. Parallel edges from
    overlapping ways are kept as-is.
    """

    def __init__(self, policy: RoadPolicy | None = None):
        self.policy = policy or RoadPolicy()
        self.stats = BuildStats()
        self._coords: dict[int, Coord] = {}
        self._adj: defaultdict[int, list[Edge]] = defaultdict(list)

    def add_point(self, rec: PointRecord) -> None:
        self.stats.points_seen += 1
        if rec.coord is None or not rec.coord.is_valid:
            return
        # first location wins; edges may already depend on it
        if rec.id in self._coords:
            self.stats.points_duplicate += 1
            return
        self.stats.points_kept += 1
        self._coords[rec.id] = rec.coord

    def add_way(self, rec: WayRecord) -> None:
        self.stats.ways_seen += 1
        reason = self.policy.skip_reason(rec.tags)
        if reason:
            self.stats.ways_skipped[reason] += 1
            return
        self.stats.ways_kept += 1
        direction = self.policy.direction(rec.tags)

        ids = rec.node_ids
        for u, v in zip(ids, ids[1:]):
            cu, cv = self._coords.get(u), self._coords.get(v)
            if cu is None or cv is None:
                self.stats.segments_missing_coord += 1
                continue
            d = distance_m(cu, cv)
            if direction is Direction.FORWARD:
                self._connect(u, v, d)
            elif direction is Direction.REVERSE:
                self._connect(v, u, d)
            else:
                self._connect(u, v, d)
                self._connect(v, u, d)

    def _connect(self, u: int, v: int, d: float) -> None:
        self._adj[u].append(Edge(v, d))
        self.stats.edges_added += 1

    def consume(self, records: PrimitiveSource) -> "GraphBuilder":
        for rec in records:
            if isinstance(rec, PointRecord):
                self.add_point(rec)
            elif isinstance(rec, WayRecord):
                self.add_way(rec)
            else:
                raise TypeError(f"unexpected primitive {type(rec).__name__}")
        return self

    def build(self) -> RoadGraph:
        return RoadGraph(self._coords, self._adj)


def build_graph(
    records: PrimitiveSource,
    *,
    policy: RoadPolicy | None = None,
    hooks: RoutingHooks | None = None,
    source: str = "<records>",
) -> RoadGraph:
    """
    Consume the whole primitive stream and return the frozen graph.

    Any read/decode failure in the stream becomes a GraphLoadError; nothing
    partially built escapes.
    """
    hooks = hooks or NoopHooks()
    hooks.load_start(source=source)
    t0 = time.perf_counter()
    builder = GraphBuilder(policy)
    try:
        builder.consume(records)
    except (OSError, ValueError, SyntaxError, EOFError, TypeError) as exc:
        hooks.load_failed(source=source, exc=exc)
        raise GraphLoadError(source, str(exc) or type(exc).__name__) from exc
    graph = builder.build()
    hooks.load_end(
        source=source,
        nodes=len(graph),
        adjacency_keys=len(graph.adjacency),
        edges=graph.edge_count,
        wall_ms=(time.perf_counter() - t0) * 1000,
        **builder.stats.as_dict(),
    )
    return graph
