# roadnet/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from roadnet.config.models import RoutingModel
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_core import Mechanics
from roadnet.domain.mechanics.mechanics_factory import build_mechanics
from roadnet.io.recorder import Recorder
from roadnet.io.routing_logging import RoutingLogging
from roadnet.runtime.registries import make_sink, resolve_graph
from roadnet.search.hooks import NoopHooks, RoutingHooks


@dataclass
class App:
    config: RoutingModel
    graph: RoadGraph
    mechanics: Mechanics
    recorder: Recorder
    hooks: RoutingHooks

    def close(self) -> None:
        self.recorder.close()


def build(
    cfg: RoutingModel | Mapping,
    *,
    graphs: Mapping[str, RoadGraph] | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, RoutingModel) else RoutingModel.model_validate(cfg)

    # 1) Reports & hooks
    recorder = Recorder(make_sink(model.report))
    hooks = (
        RoutingLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            indirect_ratio=model.search.indirect_ratio,
            recorder=recorder,
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Graph (GraphLoadError propagates; nothing is queryable on failure)
    try:
        graph = resolve_graph(
            model.graph,
            deps={"graphs": dict(graphs or {})},
            policy=model.policy.to_policy(),
            hooks=hooks,
        )
    except Exception:
        recorder.close()
        raise

    # 3) Locator, engine, planner
    mechanics = build_mechanics(graph, model.search, hooks=hooks)

    return App(model, graph, mechanics, recorder, hooks)
