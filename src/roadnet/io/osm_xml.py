# roadnet/io/osm_xml.py
"""
Streaming reader for OpenStreetMap XML (.osm) files.

Yields PointRecord for every <node> and WayRecord for every <way>, in document
order. Relations and metadata are ignored. Elements are cleared after use so
memory stays flat for large extracts.
"""

import xml.etree.ElementTree as ET
from collections.abc import Iterator

from roadnet.domain.entities.geography import Coord, PointRecord, WayRecord


def _coord(el: ET.Element) -> Coord | None:
    lat, lon = el.get("lat"), el.get("lon")
    if lat is None or lon is None:
        return None
    c = Coord(float(lat), float(lon))
    return c if c.is_valid else None


def _tags(el: ET.Element) -> dict[str, str]:
    return {t.get("k"): t.get("v") for t in el.iter("tag") if t.get("k") is not None}


def read_osm_xml(path: str) -> Iterator[PointRecord | WayRecord]:
    """Raises OSError for unreadable files, ET.ParseError / ValueError for malformed ones."""
    context = ET.iterparse(path, events=("start", "end"))
    _, root = next(context)
    for event, el in context:
        if event != "end":
            continue
        if el.tag == "node":
            yield PointRecord(int(el.get("id")), _coord(el))
        elif el.tag == "way":
            refs = tuple(int(nd.get("ref")) for nd in el.iter("nd"))
            yield WayRecord(refs, _tags(el), int(el.get("id")))
        else:
            continue
        root.clear()


class OsmXmlSource:
    """Re-iterable PrimitiveSource over one .osm file."""

    def __init__(self, path: str):
        self.path = path

    def __iter__(self) -> Iterator[PointRecord | WayRecord]:
        return read_osm_xml(self.path)
