# search/hooks.py
from typing import Protocol


class RoutingHooks(Protocol):
    def load_start(self, *, source): ...
    def load_end(self, *, source, nodes, adjacency_keys, edges, wall_ms, **stats): ...
    def load_failed(self, *, source, exc: BaseException): ...
    def search_start(self, *, start, goal): ...
    def search_end(self, *, start, goal, found, explored, ms): ...
    def route_done(self, route): ...


class NoopHooks:
    def load_start(self, **_):
        pass

    def load_end(self, **_):
        pass

    def load_failed(self, **_):
        pass

    def search_start(self, **_):
        pass

    def search_end(self, **_):
        pass

    def route_done(self, *_, **__):
        pass
