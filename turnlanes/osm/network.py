# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from logging import getLogger
from typing import IO, Dict, Iterable, List, Mapping, Optional

from typing_extensions import Self

from ..geometry import line_length
from ..protocols import Line, Position
from . import reader
from .profile import RoadProfile

osm_logger = getLogger("turnlanes.osm")


@dataclass(frozen=True)
class NetworkWay:
    """NetworkWay is a road way, with its node references resolved into a :py:obj:`Line`
    and its legal directions of travel derived once from its tags."""

    id: int
    nodes: List[int]
    tags: Mapping[str, str]
    line: Line
    forward: bool
    backward: bool

    @property
    def highway(self) -> str:
        return self.tags.get("highway", "")

    @property
    def is_oneway(self) -> bool:
        return self.forward != self.backward

    @property
    def length(self) -> float:
        """Length of the way, in meters."""
        return line_length(self.line)

    def progressions(self) -> List[int]:
        """progressions returns the legal directions of travel: +1 for forward,
        -1 for backward; forward first."""
        result: List[int] = []
        if self.forward:
            result.append(1)
        if self.backward:
            result.append(-1)
        return result


@dataclass
class Network:
    """Network holds the road data of a single run: node positions and
    ways indexed by their ID, in the order they were read.

    Once built, a Network is never modified - every stage of maneuver
    processing only reads from it.
    """

    profile: RoadProfile = field(default_factory=RoadProfile)
    nodes: Dict[int, Position] = field(default_factory=dict)
    ways: Dict[int, NetworkWay] = field(default_factory=dict)

    def get_way(self, id: int) -> NetworkWay:
        return self.ways[id]

    def get_node(self, id: int) -> Position:
        return self.nodes[id]

    @classmethod
    def from_features(
        cls,
        features: Iterable[reader.Feature],
        profile: Optional[RoadProfile] = None,
    ) -> Self:
        """Creates a :py:class:`Network` from the provided ``features``.

        Contrary to the usual OSM file ordering, ways may precede the nodes they refer to
        (as is the case with Overpass API output), as all features are collected first.

        References to unknown nodes are removed from ways and ways with fewer than 2 nodes
        are skipped; any such issues are reported as warnings through the
        ``turnlanes.osm`` logger. Ways which aren't roads according to
        :py:meth:`RoadProfile.is_road` are silently skipped.
        """
        network = cls(profile or RoadProfile())
        ways: List[reader.Way] = []

        for feature in features:
            if isinstance(feature, reader.Node):
                network.nodes.setdefault(feature.id, feature.position)
            else:
                ways.append(feature)

        for way in ways:
            network._add_way(way)

        return network

    @classmethod
    def from_file(
        cls,
        buf: IO[bytes],
        profile: Optional[RoadProfile] = None,
        format: reader.FILE_FORMAT_T = reader.DEFAULT_FILE_FORMAT,
        chunk_size: int = reader.DEFAULT_CHUNK_SIZE,
    ) -> Self:
        """Creates a :py:class:`Network` from a file supported by
        :py:func:`osm.reader.read_features`.

        ``format`` and ``chunk_size`` are passed through to :py:func:`osm.reader.read_features`.
        """
        return cls.from_features(reader.read_features(buf, format, chunk_size), profile)

    def _add_way(self, way: reader.Way) -> None:
        if not self.profile.is_road(way.tags):
            return

        if way.id in self.ways:
            osm_logger.warning("duplicate way %d - skipping", way.id)
            return

        nodes = self._get_way_nodes(way)
        if nodes is None:
            return

        forward, backward = self.profile.way_direction(way.tags)
        self.ways[way.id] = NetworkWay(
            id=way.id,
            nodes=nodes,
            tags=dict(way.tags),
            line=[self.nodes[i] for i in nodes],
            forward=forward,
            backward=backward,
        )

    def _get_way_nodes(self, way: reader.Way) -> Optional[List[int]]:
        """_get_way_nodes removes any unknown references from ``way.nodes``
        and emits warnings for them. Returns the filtered list, or ``None``
        if the way is too short to be usable after reference validation.
        """
        nodes: List[int] = []
        for node in way.nodes:
            if node in self.nodes:
                nodes.append(node)
            else:
                osm_logger.warning(
                    "way %d references non-existing node %d - skipping node",
                    way.id,
                    node,
                )

        if len(nodes) < 2:
            osm_logger.warning(
                "way %d has too few nodes (after unknown nodes were removed) - skipping way",
                way.id,
            )
            return None

        return nodes
