# roadnet/domain/mechanics/mechanics_factory.py

from roadnet.config.models import SearchModel
from roadnet.domain.entities.graph import RoadGraph
from roadnet.domain.mechanics.mechanics_core import Mechanics
from roadnet.domain.mechanics.mechanics_locators import ExhaustiveNodeLocator
from roadnet.domain.mechanics.mechanics_routers import NetworkRoutePlanner
from roadnet.search.engine import AStarSearch
from roadnet.search.hooks import RoutingHooks


def build_mechanics(
    graph: RoadGraph, cfg: SearchModel | None = None, *, hooks: RoutingHooks | None = None
) -> Mechanics:
    cfg = cfg or SearchModel()
    locator = ExhaustiveNodeLocator(graph)
    engine = AStarSearch(graph, stale_epsilon=cfg.stale_epsilon, hooks=hooks)
    route_planner = NetworkRoutePlanner(graph, locator, engine, hooks=hooks)

    return Mechanics(graph=graph, locator=locator, engine=engine, route_planner=route_planner)
