# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import math
from typing import Iterable, Tuple

from .protocols import Line, Position

EARTH_RADIUS = 6_371_008.8
"""Mean radius of Earth, in meters.
Source: https://en.wikipedia.org/wiki/Earth_radius#Arithmetic_mean_radius
"""

EARTH_DIAMETER = EARTH_RADIUS + EARTH_RADIUS
"""Mean diameter of Earth, in meters.
Source: https://en.wikipedia.org/wiki/Earth_radius#Arithmetic_mean_radius
"""

DEFAULT_BEARING_LOOKAHEAD = 36.0
"""Maximum distance, in meters, from the end of a line which is taken into account
by :py:func:`bearing_at_start` and :py:func:`bearing_at_end`."""


def haversine_earth_distance(a: Position, b: Position) -> float:
    """Calculates the great-circle distance between two lat-lon positions
    on Earth using the `haversine formula <https://en.wikipedia.org/wiki/Haversine_formula>`_.
    Returns the result in meters.
    """

    lat1: float = math.radians(a[0])
    lon1: float = math.radians(a[1])
    lat2: float = math.radians(b[0])
    lon2: float = math.radians(b[1])

    sin_dlat_half = math.sin((lat2 - lat1) * 0.5)
    sin_dlon_half = math.sin((lon2 - lon1) * 0.5)

    h = (
        sin_dlat_half * sin_dlat_half
        + math.cos(lat1) * math.cos(lat2) * sin_dlon_half * sin_dlon_half
    )

    return EARTH_DIAMETER * math.asin(math.sqrt(min(h, 1.0)))


def initial_bearing(a: Position, b: Position) -> float:
    """Calculates the initial great-circle bearing when travelling from ``a`` to ``b``,
    in degrees clockwise from north, in the range (-180, 180].
    Returns 0 for two equal positions.
    """
    lat1 = math.radians(a[0])
    lat2 = math.radians(b[0])
    dlon = math.radians(b[1] - a[1])

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    return math.degrees(math.atan2(y, x))


def destination(origin: Position, distance: float, bearing: float) -> Position:
    """Returns the position reached after travelling ``distance`` meters from ``origin``
    along the great circle with the initial ``bearing`` (in degrees)."""
    lat1 = math.radians(origin[0])
    lon1 = math.radians(origin[1])
    brg = math.radians(bearing)
    delta = distance / EARTH_RADIUS

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(brg)
    )
    lon2 = lon1 + math.atan2(
        math.sin(brg) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return math.degrees(lat2), math.degrees(lon2)


def pairwise(iterable: Iterable[Position]) -> Iterable[Tuple[Position, Position]]:
    it = iter(iterable)
    a = next(it, None)
    for b in it:
        yield a, b  # type: ignore
        a = b


def line_length(line: Line) -> float:
    """Returns the length of a line, in meters."""
    return sum(haversine_earth_distance(a, b) for a, b in pairwise(line))


def along(line: Line, distance: float) -> Position:
    """Returns the position ``distance`` meters along the line.
    Distances beyond the end of the line are clamped to the last position,
    negative distances to the first one.
    """
    if not line:
        raise ValueError("along() requires a non-empty line")

    travelled = 0.0
    for a, b in pairwise(line):
        segment = haversine_earth_distance(a, b)
        if travelled + segment >= distance:
            remaining = distance - travelled
            if remaining <= 0.0:
                return a
            return destination(a, remaining, initial_bearing(a, b))
        travelled += segment

    return line[-1]


def bearing_at_start(line: Line, lookahead: float = DEFAULT_BEARING_LOOKAHEAD) -> float:
    """Returns the bearing of travel at the start of an oriented line, measured between
    the first position and the position min(line length, ``lookahead``) meters further along.
    """
    offset = min(line_length(line), lookahead)
    return initial_bearing(line[0], along(line, offset))


def bearing_at_end(line: Line, lookahead: float = DEFAULT_BEARING_LOOKAHEAD) -> float:
    """Returns the bearing of travel at the end of an oriented line, measured between
    the position min(line length, ``lookahead``) meters before the end and the last position.
    """
    length = line_length(line)
    offset = min(length, lookahead)
    return initial_bearing(along(line, length - offset), line[-1])


def oriented(line: Line, progression: int) -> Line:
    """Returns a copy of an way's line in the order of travel:
    unchanged for positive ``progression``, reversed for negative."""
    return list(line) if progression > 0 else line[::-1]


def angle_difference(from_bearing: float, to_bearing: float) -> float:
    """Returns the signed difference between two bearings, wrapped to (-180, 180]."""
    delta = (to_bearing - from_bearing) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta
