# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""Decoding of per-lane OpenStreetMap tags:
`turn:lanes <https://wiki.openstreetmap.org/wiki/Key:turn>`_,
`change:lanes <https://wiki.openstreetmap.org/wiki/Key:change>`_ and
`maxspeed <https://wiki.openstreetmap.org/wiki/Key:maxspeed>`_.
"""

import re
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from .err import InvalidLaneTagging
from .osm.network import NetworkWay
from .osm.profile import LEGACY_SPEED_FACTOR

lanes_logger = getLogger("turnlanes.lanes")

ChangePair = Tuple[Optional[bool], Optional[bool]]
"""ChangePair describes whether it's allowed to change from a lane into the lane on its left
and into the lane on its right. ``None`` is used on the edges of the road, where there
is no neighboring lane to change into."""

CHANGE_VALUES: Mapping[str, ChangePair] = {
    "yes": (True, True),
    "no": (False, False),
    "not_left": (False, True),
    "only_right": (False, True),
    "not_right": (True, False),
    "only_left": (True, False),
}

MPH_TO_MPS = 1609.344 / 3600.0
KNOTS_TO_MPS = 1852.0 / 3600.0

_LEADING_INT = re.compile(r"\s*(\d+)")
_SPEED = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*(mph|knots|km/h|kmh|kph)?\s*$")


class Turn(Enum):
    """Turn is a group of lanes sharing a turn indication.
    A lane may belong to multiple groups, e.g. ``left;through``."""

    NONE = "none"
    REVERSE = "reverse"
    LEFT = "left"
    THROUGH = "through"
    RIGHT = "right"

    def __str__(self) -> str:
        return self.value


MANEUVER_TURNS = (Turn.REVERSE, Turn.LEFT, Turn.RIGHT)
"""Turns which make up standalone maneuvers, in the order maneuvers are generated."""

_TURN_INDICATIONS: Mapping[Turn, FrozenSet[str]] = {
    Turn.REVERSE: frozenset(("reverse",)),
    Turn.LEFT: frozenset(("left", "slight_left")),
    Turn.THROUGH: frozenset(("through",)),
    Turn.RIGHT: frozenset(("right", "slight_right")),
}


@dataclass(frozen=True)
class Lane:
    """Lane describes a single lane in the direction of travel."""

    turns: FrozenSet[str]
    change: Optional[ChangePair] = None
    """``None`` if the way has no lane change tags at all."""

    def restricts_left(self) -> bool:
        """Whether a driver can't leave this lane to the left: either a change restriction
        or the edge of the road. Lanes without change tagging are never restricted."""
        return self.change is not None and not self.change[0]

    def restricts_right(self) -> bool:
        return self.change is not None and not self.change[1]


def direction_of(progression: int) -> str:
    return "forward" if progression > 0 else "backward"


def _parse_int(value: Optional[str]) -> int:
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match[1]) if match else 0


def lane_count(way: NetworkWay, progression: int) -> int:
    """lane_count returns the number of lanes of the way going in a single direction.

    ``lanes:forward``/``lanes:backward`` is preferred; otherwise the ``lanes`` tag is used,
    halved on two-way roads. Defaults to 1.
    """
    count = _parse_int(way.tags.get(f"lanes:{direction_of(progression)}"))
    if count <= 0:
        count = _parse_int(way.tags.get("lanes"))
        if not way.is_oneway:
            count //= 2
    return count if count > 0 else 1


def resolve_tag(
    tags: Mapping[str, str],
    tag: str,
    progression: int,
    lane_count: Optional[int] = None,
) -> Optional[str]:
    """resolve_tag returns the most specific value of ``tag`` for the direction of travel,
    checking ``{tag}:lanes:{direction}``, ``{tag}:lanes``, ``{tag}:{direction}`` and ``{tag}``,
    in that order.

    A value not split into lanes is repeated ``lane_count`` times (joined with ``|``),
    if ``lane_count`` is provided.
    """
    direction = direction_of(progression)
    value = tags.get(f"{tag}:lanes:{direction}") or tags.get(f"{tag}:lanes")
    if value:
        return value

    value = tags.get(f"{tag}:{direction}") or tags.get(tag)
    if value and lane_count:
        return "|".join([value] * lane_count)
    return value


def decode_turns(value: str) -> List[FrozenSet[str]]:
    """decode_turns splits a ``turn:lanes`` value into the turn indications of every lane."""
    return [frozenset(i for i in lane.split(";") if i) for lane in value.split("|")]


def decode_change(value: str, way_id: int = 0, lane_number: int = 0) -> ChangePair:
    pair = CHANGE_VALUES.get(value)
    if pair is None:
        lanes_logger.warning(
            "way %d: lane #%d has unrecognized change tag %r - assuming changes are allowed",
            way_id,
            lane_number,
            value,
        )
        return True, True
    return pair


def decode_changes(value: str, way_id: int = 0) -> List[ChangePair]:
    """decode_changes splits a ``change:lanes`` value into :py:obj:`ChangePair` of every lane.

    The restriction on the outer side of the leftmost and rightmost lanes is reset to ``None``:
    crossing into the opposing traffic or onto the shoulder is not a lane change.
    """
    changes = [decode_change(lane, way_id, idx + 1) for idx, lane in enumerate(value.split("|"))]
    changes[0] = (None, changes[0][1])
    changes[-1] = (changes[-1][0], None)
    return changes


def decode_lanes(way: NetworkWay, progression: int) -> Optional[List[Lane]]:
    """decode_lanes returns the lanes of a way in the direction of travel, left to right,
    or ``None`` if the way has no turn lane tagging for that direction.

    Raises :py:exc:`InvalidLaneTagging` if the number of lanes in turn and change tags
    don't match.
    """
    turn_tags = resolve_tag(way.tags, "turn", progression, lane_count(way, progression))
    if not turn_tags:
        return None
    turns = decode_turns(turn_tags)

    change_tags = resolve_tag(way.tags, "change", progression, len(turns))
    if not change_tags:
        return [Lane(t) for t in turns]

    changes = decode_changes(change_tags, way.id)
    if len(changes) != len(turns):
        raise InvalidLaneTagging(
            way.id,
            progression,
            f"{len(turns)} lanes in turn tags, but {len(changes)} lanes in change tags",
        )

    return [Lane(t, c) for t, c in zip(turns, changes)]


def classify(lanes: List[Lane]) -> Dict[Turn, List[Lane]]:
    """classify groups lanes by their turn indications. Slight turns are equivalent
    to full turns; a lane without any indication (or with ``none``) is a :py:obj:`Turn.NONE` lane.
    """
    groups: Dict[Turn, List[Lane]] = {
        Turn.NONE: [lane for lane in lanes if not lane.turns or "none" in lane.turns]
    }
    for turn, indications in _TURN_INDICATIONS.items():
        groups[turn] = [lane for lane in lanes if lane.turns & indications]
    return groups


def normalize_speed(
    value: Optional[str],
    numeric_factor: float = LEGACY_SPEED_FACTOR,
) -> Optional[float]:
    """normalize_speed converts a maxspeed tag value into meters per second.

    Values in mph and knots are converted into meters per second.
    Bare numbers (and km/h values) are multiplied by ``numeric_factor``, see
    :py:attr:`RoadProfile.numeric_speed_factor`. Returns ``None`` for values which aren't
    numeric, like ``none``, ``signals`` or ``walk``.
    """
    if not value:
        return None

    match = _SPEED.match(value)
    if not match:
        return None

    speed = float(match[1])
    unit = match[2]
    if unit == "mph":
        return speed * MPH_TO_MPS
    elif unit == "knots":
        return speed * KNOTS_TO_MPS
    return speed * numeric_factor


def decode_speeds(
    value: Optional[str],
    numeric_factor: float = LEGACY_SPEED_FACTOR,
) -> List[Optional[float]]:
    """decode_speeds normalizes a, possibly per-lane, maxspeed value."""
    if not value:
        return []
    return [normalize_speed(lane, numeric_factor) for lane in value.split("|")]
