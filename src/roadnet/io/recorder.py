# roadnet/io/recorder.py
import json
import logging
import sys
from dataclasses import asdict

from roadnet.app.protocols import RouteSink

log = logging.getLogger("roadnet.recorder")


class JsonlSink:
    """JSON Lines writer. Without a stream it follows whatever sys.stdout is at write time."""

    def __init__(self, fp=None):
        self.fp = fp
        self._owns_fp = False

    @classmethod
    def open(cls, path: str) -> "JsonlSink":
        sink = cls(open(path, "a", encoding="utf-8"))
        sink._owns_fp = True
        return sink

    def write(self, ev) -> None:
        fp = self.fp if self.fp is not None else sys.stdout
        fp.write(json.dumps(asdict(ev)) + "\n")
        fp.flush()

    def close(self) -> None:
        # borrowed streams belong to the caller
        if self._owns_fp:
            self.fp.close()


class MemorySink:
    def __init__(self):
        self.events: list = []

    def write(self, ev) -> None:
        self.events.append(ev)


class Recorder:
    def __init__(self, *sinks: RouteSink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, ev):
        for s in self.sinks:
            try:
                s.write(ev)
            except (OSError, TypeError, ValueError) as exc:
                # a broken sink never fails the query
                log.warning("sink %s dropped %s: %s", type(s).__name__, type(ev).__name__, exc)

    def close(self):
        for s in self.sinks:
            close = getattr(s, "close", None)
            if close:
                close()
