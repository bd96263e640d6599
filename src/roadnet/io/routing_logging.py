# io/routing_logging.py
import json
import logging
import sys

from roadnet.domain.entities.geography import Route
from roadnet.io.recorder import Recorder
from roadnet.io.route_events import RouteReport
from roadnet.search.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def _default_json_logger(name="roadnet", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class RoutingLogging(NoopHooks):
    """
    One place to shape and emit structured logs for graph loading and queries,
    and to hand finished routes to the Recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        indirect_ratio: float = 1.3,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.indirect_ratio = run_id, debug, indirect_ratio
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # graph lifecycle

    def load_start(self, *, source):
        self._emit("INFO", "load_start", source=source)

    def load_end(self, *, source, nodes, adjacency_keys, edges, wall_ms, **stats):
        self._emit(
            "INFO",
            "load_end",
            source=source,
            nodes=nodes,
            adjacency_keys=adjacency_keys,
            edges=edges,
            wall_ms=wall_ms,
            **stats,
        )

    def load_failed(self, *, source, exc: BaseException):
        self._emit("ERROR", "load_failed", source=source, error=str(exc), error_type=type(exc).__name__)

    # queries

    def search_start(self, *, start, goal):
        if self.debug:
            self._emit("DEBUG", "search_start", start=start, goal=goal)

    def search_end(self, *, start, goal, found, explored, ms):
        self._emit("INFO", "search_end", start=start, goal=goal, found=found, explored=explored, ms=ms)

    def route_done(self, route: Route):
        self._emit(
            "INFO",
            "route_done",
            start=route.start,
            goal=route.goal,
            found=route.found,
            nodes=len(route.path) if route.found else 0,
            total_m=route.total_m,
            straight_m=route.straight_m,
            efficiency=route.efficiency,
            explored=route.explored,
        )
        if route.is_indirect(self.indirect_ratio):
            # possible restriction or missing connection in the source data
            self._emit(
                "WARNING",
                "route_indirect",
                start=route.start,
                goal=route.goal,
                efficiency=route.efficiency,
                threshold=self.indirect_ratio,
            )
        if self.recorder:
            self.recorder.emit(
                RouteReport.from_route(route, run_id=self.run_id, indirect_ratio=self.indirect_ratio)
            )
