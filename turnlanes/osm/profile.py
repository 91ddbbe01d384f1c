# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Mapping, Tuple

from typing_extensions import Self

LEGACY_SPEED_FACTOR = 1000.0
"""Multiplier historically applied to bare numeric speed tags (km/h).
It converts kilometers per hour into meters per hour, not meters per second;
it is kept as the default so that output stays comparable with earlier runs.
"""

KMH_TO_MPS = 1000.0 / 3600.0
"""Multiplier converting kilometers per hour into meters per second."""

DEFAULT_HIGHWAYS: FrozenSet[str] = frozenset(
    (
        "motorway",
        "motorway_link",
        "trunk",
        "trunk_link",
        "primary",
        "primary_link",
        "secondary",
        "secondary_link",
        "tertiary",
        "tertiary_link",
        "unclassified",
        "residential",
        "living_street",
        "service",
        "road",
    )
)


@dataclass(frozen=True)
class RoadProfile:
    """RoadProfile instructs how :py:class:`Network` should interpret OSM ways,
    and holds the tunable parameters of maneuver extraction and linking.
    """

    highways: FrozenSet[str] = field(default=DEFAULT_HIGHWAYS, repr=False)
    """highways is the set of highway=* values which are considered roads."""

    access: List[str] = field(
        default_factory=lambda: ["access", "vehicle", "motor_vehicle", "motorcar"],
        repr=False,
    )
    """access is the hierarchy of `access tags <https://wiki.openstreetmap.org/wiki/Key:access>`_
    to consider when checking if a road is usable. Keys must be listed from least-specific first.
    """

    max_turn_angle: float = 30.0
    """Maximum difference, in degrees, between the bearing at the end of a maneuver
    and the bearing at the start of a maneuver continuing it."""

    bearing_lookahead: float = 36.0
    """Maximum length, in meters, of a line taken into account when calculating
    its bearing at either end."""

    numeric_speed_factor: float = LEGACY_SPEED_FACTOR
    """Multiplier applied to speed tags without an explicit unit (km/h)."""

    @classmethod
    def metric(cls) -> Self:
        """Returns a profile which normalizes bare numeric speeds into meters per second."""
        return cls(numeric_speed_factor=KMH_TO_MPS)

    def with_speed_factor(self, factor: float) -> Self:
        return replace(self, numeric_speed_factor=factor)

    def is_road(self, way_tags: Mapping[str, str]) -> bool:
        """is_road checks if the way is a road usable by motor vehicles: its highway tag
        must be in :py:attr:`highways` and :py:meth:`is_allowed` must return True."""
        return way_tags.get("highway") in self.highways and self.is_allowed(way_tags)

    def is_allowed(self, way_tags: Mapping[str, str]) -> bool:
        """is_allowed checks if a way is allowed, as per the
        `access tags <https://wiki.openstreetmap.org/wiki/Key:access>`_ and the hierarchy
        defined in :py:attr:`access`. Only values of "no" and "private" can exclude a way.
        """
        for access_tag in reversed(self.access):
            value = way_tags.get(access_tag)
            if value in ("no", "private"):
                return False
            elif value is not None:
                return True
        return True

    def way_direction(self, way_tags: Mapping[str, str]) -> Tuple[bool, bool]:
        """way_direction returns whether travel is legal forward and backward along a way.
        Apart from considering the oneway tag, ``highway=motorway``, ``highway=motorway_link``,
        ``junction=roundabout`` and ``junction=circular`` default to being oneway.
        """
        forward = True
        backward = True

        # fmt: off
        if (
            way_tags.get("highway") in ("motorway", "motorway_link")
            or way_tags.get("junction") in ("roundabout", "circular")
        ):
            # fmt: on
            backward = False

        oneway = way_tags.get("oneway", "")
        if oneway in ("yes", "true", "1"):
            forward = True
            backward = False
        elif oneway in ("-1", "reverse"):
            forward = False
            backward = True
        elif oneway == "no":
            forward = True
            backward = True

        return forward, backward


def is_link(highway: str) -> bool:
    """is_link returns True for ramps and turn channels (``highway=*_link``)."""
    return highway.endswith("_link")


def is_service(highway: str) -> bool:
    return highway == "service"
