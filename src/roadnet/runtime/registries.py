# runtime/registries.py
import os
from collections.abc import Callable

from roadnet.app.protocols import RouteSink
from roadnet.config.models import (
    GraphByName,
    GraphByPath,
    GraphRef,
    ReportFileModel,
    ReportMemoryModel,
    ReportStdoutModel,
    ReportUnion,
)
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_builder import RoadPolicy
from roadnet.io.recorder import JsonlSink, MemorySink
from roadnet.runtime.resources import load_graph_from_path
from roadnet.search.hooks import RoutingHooks

SinkFactory = Callable[[ReportUnion], RouteSink]

_sink_registry: dict[str, SinkFactory] = {}


# ----------------------- Graphs ----------------------------


def resolve_graph(
    ref: GraphRef | None,
    *,
    deps: dict,
    policy: RoadPolicy | None = None,
    hooks: RoutingHooks | None = None,
) -> RoadGraph:
    """
    deps can include:
      - 'graphs': dict[str, RoadGraph]  # prebuilt graphs by name
      - 'graph': RoadGraph              # a direct fallback/default
    """
    if ref is None:
        if "graph" in deps:
            return deps["graph"]
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByName):
        graphs = deps.get("graphs") or {}
        if ref.name not in graphs:
            raise ValueError(f"unknown graph name {ref.name!r}")
        return graphs[ref.name]
    if isinstance(ref, GraphByPath):
        if not ref.must_exist and not os.path.exists(ref.file):
            return RoadGraph({}, {})
        return load_graph_from_path(ref.file, ref.fmt, policy=policy, hooks=hooks)
    raise TypeError(ref)


# -------------------- Report sinks -------------------------


def register_sink(kind: str):
    def deco(fn: SinkFactory):
        _sink_registry[kind] = fn
        return fn

    return deco


def make_sink(cfg: ReportUnion) -> RouteSink:
    try:
        factory = _sink_registry[cfg.sink]
    except KeyError:
        raise ValueError(f"Unknown report sink {cfg.sink!r}") from None
    return factory(cfg)


@register_sink("stdout")
def _make_stdout(cfg: ReportStdoutModel):
    return JsonlSink()


@register_sink("memory")
def _make_memory(cfg: ReportMemoryModel):
    return MemorySink()


@register_sink("file")
def _make_file(cfg: ReportFileModel):
    return JsonlSink.open(cfg.path)
