# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import List, Optional

from .geometry import line_length, oriented
from .lanes import (
    MANEUVER_TURNS,
    Lane,
    Turn,
    classify,
    decode_lanes,
    decode_speeds,
    resolve_tag,
)
from .osm.network import Network, NetworkWay
from .osm.profile import is_link, is_service
from .protocols import Line


@dataclass
class Maneuver:
    """Maneuver represents a turn (left, right or reverse) available from one or more lanes
    approaching an intersection.

    A freshly extracted maneuver covers a single way; after flattening it may traverse
    multiple ways, not necessarily in the same direction along all of them.
    """

    ways: List[int]
    """IDs of traversed ways, in the order of travel."""

    progressions: List[int]
    """Direction of travel along each of :py:attr:`ways`: +1 forward, -1 backward."""

    from_node: int
    """ID of the node where the turn lanes begin."""

    via_node: int
    """ID of the node where the turn is executed."""

    line: Line
    """Geometry of the turn lanes, in the order of travel."""

    turn: Turn
    lanes: int
    """Number of lanes which can be used for the maneuver."""

    protected: Optional[bool]
    """Whether the lanes of the maneuver are separated from other lanes
    by lane change restrictions. ``None`` if unknown or irrelevant."""

    max_speed: Optional[float] = None
    """Maximum speed, normalized by :py:func:`lanes.normalize_speed`."""

    protection_node: Optional[int] = None
    """ID of the node where a lane change restriction begins, if it begins partway
    along a multi-way maneuver."""

    protected_length: Optional[float] = None
    """Length, in meters, of the part of a maneuver starting at :py:attr:`protection_node`."""

    next: Optional[int] = field(default=None, compare=False)
    """Index of the maneuver continuing this one, set by :py:func:`linker.link_maneuvers`."""

    is_connection: bool = field(default=False, compare=False)
    """Set on maneuvers which continue another maneuver."""

    @property
    def first_way(self) -> int:
        return self.ways[0]

    @property
    def last_way(self) -> int:
        return self.ways[-1]

    @property
    def length(self) -> float:
        """Length of the maneuver, in meters."""
        return line_length(self.line)


def is_turn_channel(way: NetworkWay) -> bool:
    """is_turn_channel returns True for a single-lane (or turn-tagged), one-way link or service
    road. Such ways are most likely turn channels, past the maneuver itself."""
    return (
        ("turn" in way.tags or way.tags.get("lanes") == "1")
        and way.is_oneway
        and (is_link(way.highway) or is_service(way.highway))
    )


def lanes_protection(group: List[Lane]) -> Optional[bool]:
    """lanes_protection determines whether a group of lanes used for a maneuver
    is hemmed in by lane change restrictions on both sides.

    The edge of the road counts as a restriction, unless the group spans the whole road;
    in that case (and when there are no change tags) ``None`` is returned,
    as it doesn't matter which lane a driver is in.
    """
    if not group:
        return None

    leftmost = group[0]
    rightmost = group[-1]
    if leftmost.change is None and rightmost.change is None:
        return None
    if (
        leftmost.change is not None
        and leftmost.change[0] is None
        and rightmost.change is not None
        and rightmost.change[1] is None
    ):
        return None

    return any(lane.restricts_left() for lane in group) and any(
        lane.restricts_right() for lane in group
    )


def _group_speed(
    speeds: List[Optional[float]],
    lanes: List[Lane],
    group: List[Lane],
) -> Optional[float]:
    """_group_speed picks the highest speed of lanes in the group, if speeds are tagged
    per lane; otherwise the speed of the first (usually the only) value is used."""
    if not speeds:
        return None
    if len(speeds) != len(lanes):
        return speeds[0]

    members = {id(lane) for lane in group}
    group_speeds = [s for lane, s in zip(lanes, speeds) if s is not None and id(lane) in members]
    return max(group_speeds) if group_speeds else None


def extract_maneuvers(network: Network, way: NetworkWay, progression: int) -> List[Maneuver]:
    """extract_maneuvers returns single-way maneuvers allowed by the turn lanes of a way
    in a single direction: at most one per each of :py:obj:`MANEUVER_TURNS`.

    Raises :py:exc:`InvalidLaneTagging` if the lane tags of the way are inconsistent.
    """
    lanes = decode_lanes(way, progression)
    if not lanes:
        return []

    groups = classify(lanes)
    line = oriented(way.line, progression)

    # Advisory speed limits take precedence over legal speed limits
    speed_factor = network.profile.numeric_speed_factor
    speeds = decode_speeds(
        resolve_tag(way.tags, "maxspeed:advisory", progression)
        or resolve_tag(way.tags, "maxspeed", progression),
        speed_factor,
    )

    return [
        Maneuver(
            ways=[way.id],
            progressions=[progression],
            from_node=way.nodes[0] if progression > 0 else way.nodes[-1],
            via_node=way.nodes[-1] if progression > 0 else way.nodes[0],
            line=line,
            turn=turn,
            lanes=len(groups[turn]),
            protected=lanes_protection(groups[turn]),
            max_speed=_group_speed(speeds, lanes, groups[turn]),
        )
        for turn in MANEUVER_TURNS
        if groups[turn]
    ]
