# roadnet/runtime/resources.py
import os
import pickle
import time

from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_builder import RoadPolicy, build_graph
from roadnet.errors import GraphLoadError
from roadnet.io.osm_xml import OsmXmlSource
from roadnet.search.hooks import RoutingHooks

_graph_cache: dict[tuple[str, str, RoadPolicy | None], RoadGraph] = {}


def load_osm_xml(
    file: str, *, policy: RoadPolicy | None = None, hooks: RoutingHooks | None = None
) -> RoadGraph:
    return build_graph(OsmXmlSource(file), policy=policy, hooks=hooks, source=file)


def load_pickle(file: str, *, hooks: RoutingHooks | None = None, **_) -> RoadGraph:
    if hooks:
        hooks.load_start(source=file)
    t0 = time.perf_counter()
    try:
        with open(file, "rb") as f:
            g = pickle.load(f)
        if not isinstance(g, RoadGraph):
            raise TypeError(f"expected RoadGraph, got {type(g).__name__}")
    except (
        OSError,
        EOFError,
        pickle.PickleError,
        TypeError,
        ValueError,
        KeyError,
        IndexError,
        OverflowError,
        AttributeError,
        ImportError,
    ) as exc:
        if hooks:
            hooks.load_failed(source=file, exc=exc)
        raise GraphLoadError(file, str(exc) or type(exc).__name__) from exc
    if hooks:
        hooks.load_end(
            source=file,
            nodes=len(g),
            adjacency_keys=len(g.adjacency),
            edges=g.edge_count,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
    return g


def save_graph_to_path(graph: RoadGraph, file: str) -> None:
    tmp = file + ".tmp"
    with open(tmp, "wb") as f:
        pickle.dump(graph, f, protocol=pickle.HIGHEST_PROTOCOL)
    os.replace(tmp, file)


def load_graph_from_path(
    file: str,
    fmt: str,
    *,
    policy: RoadPolicy | None = None,
    hooks: RoutingHooks | None = None,
) -> RoadGraph:
    """Load once per (file, fmt, policy); later calls return the same graph."""
    key = (file, fmt, policy)
    if key in _graph_cache:
        return _graph_cache[key]
    if fmt == "osm_xml":
        g = load_osm_xml(file, policy=policy, hooks=hooks)
    elif fmt == "pickle":
        g = load_pickle(file, hooks=hooks)
    else:
        raise ValueError(f"Unsupported graph fmt {fmt!r}")
    _graph_cache[key] = g
    return g


def clear_graph_cache() -> None:
    _graph_cache.clear()
