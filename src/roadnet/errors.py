# roadnet/errors.py


class RoadnetError(Exception):
    """Base class for every error raised by roadnet."""


class GraphLoadError(RoadnetError):
    """The raw map source was missing, unreadable or malformed; no graph was produced."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"failed to load graph from {source!r}: {reason}")
        self.source = source
        self.reason = reason


class UnknownNodeError(RoadnetError, KeyError):
    """A query referenced a node id that is not in the coordinate table."""

    def __init__(self, node_id: int):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"unknown node id {self.node_id}"


class EmptyGraphError(RoadnetError, LookupError):
    """Nearest-node lookup against a graph without nodes."""
