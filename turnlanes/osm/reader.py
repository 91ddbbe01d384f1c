# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import bz2
import gzip
import io
import json
import xml.sax
import xml.sax.xmlreader
from dataclasses import dataclass, field
from typing import IO, Any, Dict, Iterable, List, Literal, Optional, Tuple, Union

from osmiter import iter_from_osm

from ..err import OsmStructureError
from ..protocols import Position

FILE_FORMAT_T = Optional[Literal["json", "xml", "gz", "bz2", "pbf"]]
"""Type of the ``format`` argument of :py:func:`read_features`.

Useful when passing this argument forward from custom functions.
"""

FILE_FORMATS = ("json", "xml", "gz", "bz2", "pbf")

DEFAULT_FILE_FORMAT = None
"""Default value for the ``format`` argument of :py:func:`read_features`.

Useful when passing this argument forward from custom functions.
"""

DEFAULT_CHUNK_SIZE = io.DEFAULT_BUFFER_SIZE
"""Default value for ``chunk_size`` argument of :py:func:`read_features`,
`io.DEFAULT_BUFFER_SIZE <https://docs.python.org/3/library/io.html#io.DEFAULT_BUFFER_SIZE>`_.
"""


@dataclass
class Node:
    """Node represents a single `OpenStreetMap node <https://wiki.openstreetmap.org/wiki/Node>`_."""

    id: int
    position: Position


@dataclass
class Way:
    """Way represents a single `OpenStreetMap way <https://wiki.openstreetmap.org/wiki/Way>`_."""

    id: int
    nodes: List[int] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)


Feature = Union[Node, Way]
"""Feature represents a single `OpenStreetMap feature <https://wiki.openstreetmap.org/wiki/Map_features>`_
relevant for lane analysis: a :py:class:`Node` or a :py:class:`Way`. Relations are never read.
"""


class _OSMContentHandler(xml.sax.ContentHandler):
    def __init__(self) -> None:
        super().__init__()
        self.ready_features: List[Feature] = []
        self.current_feature: Optional[Feature] = None

    def startElement(self, name: str, attrs: "xml.sax.xmlreader.AttributesImpl") -> None:
        try:
            if name == "node":
                self.current_feature = Node(
                    id=int(attrs["id"]),
                    position=(float(attrs["lat"]), float(attrs["lon"])),
                )

            elif name == "way":
                self.current_feature = Way(id=int(attrs["id"]))

            elif name == "tag":
                if isinstance(self.current_feature, Way):
                    self.current_feature.tags[attrs["k"]] = attrs["v"]

            elif name == "nd":
                if isinstance(self.current_feature, Way):
                    self.current_feature.nodes.append(int(attrs["ref"]))

        except (KeyError, ValueError) as e:
            raise OsmStructureError(f"invalid <{name}> element: {e}") from e

    def endElement(self, name: str) -> None:
        if name in ("node", "way") and self.current_feature:
            self.ready_features.append(self.current_feature)
            self.current_feature = None


def _read_features_from_xml(
    buf: Union[IO[bytes], IO[str]],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterable[Feature]:
    """_read_features_from_xml generates :py:obj:`Feature` instances from an
    `OSM XML <https://wiki.openstreetmap.org/wiki/OSM_XML>`_ file."""
    parser = xml.sax.make_parser()
    if not isinstance(parser, xml.sax.xmlreader.IncrementalParser):
        raise RuntimeError(
            "expected xml.sax.make_parser() to return an IncrementalParser, but got "
            + type(parser).__qualname__
        )
    handler = _OSMContentHandler()
    parser.setContentHandler(handler)

    try:
        while data := buf.read(chunk_size):
            parser.feed(data)  # type: ignore

            if handler.ready_features:
                yield from handler.ready_features
                handler.ready_features.clear()

        parser.close()  # type: ignore
    except xml.sax.SAXParseException as e:
        raise OsmStructureError(f"invalid OSM XML: {e}") from e

    if handler.ready_features:
        yield from handler.ready_features


def _parse_json_element(element: Any) -> Optional[Feature]:
    if not isinstance(element, dict):
        raise OsmStructureError(f"expected a JSON object as an element, got {element!r}")

    type = element.get("type")
    try:
        if type == "node":
            return Node(
                id=int(element["id"]),
                position=(float(element["lat"]), float(element["lon"])),
            )
        elif type == "way":
            return Way(
                id=int(element["id"]),
                nodes=[int(i) for i in element["nodes"]],
                tags={str(k): str(v) for k, v in element.get("tags", {}).items()},
            )
    except (KeyError, TypeError, ValueError) as e:
        raise OsmStructureError(f"invalid {type} element {element.get('id')!r}: {e!r}") from e

    return None


def _read_features_from_json(buf: Union[IO[bytes], IO[str]]) -> Iterable[Feature]:
    """_read_features_from_json generates :py:obj:`Feature` instances from an
    `Overpass API JSON <https://wiki.openstreetmap.org/wiki/OSM_JSON>`_ document."""
    try:
        document = json.load(buf)
    except ValueError as e:
        raise OsmStructureError(f"invalid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("elements"), list):
        raise OsmStructureError('expected a JSON object with an "elements" array')

    for element in document["elements"]:
        feature = _parse_json_element(element)
        if feature is not None:
            yield feature


def _read_features_from_pbf(buf: IO[bytes]) -> Iterable[Feature]:
    """_read_features_from_pbf generates :py:obj:`Feature` instances from an
    `OSM PBF <https://wiki.openstreetmap.org/wiki/PBF_Format>`_ file, using osmiter."""
    for feature in iter_from_osm(buf, "pbf", set()):
        if feature["type"] == "node":
            yield Node(id=feature["id"], position=(feature["lat"], feature["lon"]))
        elif feature["type"] == "way":
            yield Way(id=feature["id"], nodes=list(feature["nd"]), tags=dict(feature["tag"]))


def guess_format(name: str) -> FILE_FORMAT_T:
    """Guesses the format of a file based on its name. Returns ``None`` (plain XML)
    if the extension is not recognized."""
    for format in ("json", "gz", "bz2", "pbf"):
        if name.endswith("." + format):
            return format  # type: ignore
    return None


def read_features(
    buf: IO[bytes],
    format: FILE_FORMAT_T = DEFAULT_FILE_FORMAT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterable[Feature]:
    """read_features generates :py:obj:`Feature` instances from an
    `Overpass API JSON <https://wiki.openstreetmap.org/wiki/OSM_JSON>`_ document,
    a possibly-compressed `OSM XML <https://wiki.openstreetmap.org/wiki/OSM_XML>`_ file or a
    `OSM PBF <https://wiki.openstreetmap.org/wiki/PBF_Format>`_ file.

    If ``format`` is not provided, it is determined by :py:func:`guess_format` from ``buf.name``.
    If the file format cannot be determined, assumes that data will be in uncompressed XML format.

    Malformed data causes :py:exc:`OsmStructureError` to be raised.
    """
    if format is None:
        format = guess_format(getattr(buf, "name", ""))

    if format == "json":
        yield from _read_features_from_json(buf)
    elif format == "gz":
        with gzip.open(buf, mode="rb") as decompressed_buffer:
            yield from _read_features_from_xml(decompressed_buffer, chunk_size)  # type: ignore
    elif format == "bz2":
        with bz2.open(buf, mode="rb") as decompressed_buffer:
            yield from _read_features_from_xml(decompressed_buffer, chunk_size)
    elif format == "pbf":
        yield from _read_features_from_pbf(buf)
    else:
        yield from _read_features_from_xml(buf, chunk_size)


def collect_all_features(
    buf: IO[bytes],
    format: FILE_FORMAT_T = DEFAULT_FILE_FORMAT,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Tuple[List[Node], List[Way]]:
    """collect_all_features reads all :py:obj:`Feature` instances from a file
    supported by :py:func:`read_features`.

    ``format`` and ``chunk_size`` are passed through to :py:func:`osm.reader.read_features`.
    """

    nodes: List[Node] = []
    ways: List[Way] = []

    for feature in read_features(buf, format, chunk_size):
        if isinstance(feature, Node):
            nodes.append(feature)
        else:
            ways.append(feature)

    return nodes, ways
