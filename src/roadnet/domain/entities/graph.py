from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from roadnet.domain.entities.geography import Coord, Edge
from roadnet.errors import UnknownNodeError


class RoadGraph:
    """
    Directed, weighted road graph: a coordinate table keyed by node id plus
    per-node outgoing edge lists.

    Read-only after construction. Both tables are exposed through
    MappingProxyType and adjacency entries are tuples, so one instance can be
    shared by any number of concurrent queries without locking. Every edge
    target is a key of the coordinate table.
    """

    __slots__ = ("_coords", "_adj", "_n_edges")

    def __init__(self, coords: Mapping[int, Coord], adjacency: Mapping[int, Iterable[Edge]]):
        coords = dict(coords)
        adj: dict[int, tuple[Edge, ...]] = {}
        n_edges = 0
        for u, edges in adjacency.items():
            out = tuple(edges)
            if not out:
                continue
            if u not in coords:
                raise ValueError(f"adjacency source {u} has no coordinate")
            for e in out:
                if e.target not in coords:
                    raise ValueError(f"edge {u}->{e.target} targets a node without coordinate")
            adj[u] = out
            n_edges += len(out)
        self._coords = MappingProxyType(coords)
        self._adj = MappingProxyType(adj)
        self._n_edges = n_edges

    # ---------------- pickling (MappingProxyType is not picklable) ----------

    def __getstate__(self):
        return {"coords": dict(self._coords), "adj": dict(self._adj)}

    def __setstate__(self, state):
        self.__init__(state["coords"], state["adj"])

    # ---------------- lookups ------------------------------------------------

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._coords

    def __len__(self) -> int:
        return len(self._coords)

    def __repr__(self) -> str:
        return f"RoadGraph(nodes={len(self._coords)}, edges={self._n_edges})"

    @property
    def coords(self) -> Mapping[int, Coord]:
        return self._coords

    @property
    def adjacency(self) -> Mapping[int, tuple[Edge, ...]]:
        return self._adj

    @property
    def edge_count(self) -> int:
        return self._n_edges

    def node_ids(self) -> Iterator[int]:
        return iter(self._coords)

    def coord(self, node_id: int) -> Coord:
        try:
            return self._coords[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def edges_from(self, node_id: int) -> tuple[Edge, ...]:
        """Outgoing edges; empty when the node has none (or is unknown)."""
        return self._adj.get(node_id, ())

    def iter_edges(self, nodes: list[int]) -> Iterator[tuple[int, int, Edge]]:
        """Yield (u, v, edge) along a node path, cheapest of any parallel edges."""
        for u, v in zip(nodes, nodes[1:]):
            candidates = [e for e in self.edges_from(u) if e.target == v]
            if not candidates:
                raise ValueError(f"no edge {u}->{v} in graph")
            yield u, v, min(candidates, key=lambda e: e.weight_m)
