# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import csv
from dataclasses import astuple, dataclass
from typing import IO, Iterable, Optional

from typing_extensions import Self

from .maneuver import Maneuver
from .osm.network import Network


@dataclass(frozen=True)
class ManeuverRecord:
    """ManeuverRecord is the output representation of a single, flattened :py:class:`Maneuver`."""

    from_node: int
    via_node: int
    turn: str
    highway: str
    """Highway classification of the way at the via node."""

    lanes: int
    length: float
    """Length of the maneuver, in meters."""

    protected_length: Optional[float]
    """Length of the part of the maneuver with lane changes restricted, in meters.
    Only set if the restriction begins partway along the maneuver."""

    max_speed: Optional[float]

    @classmethod
    def from_maneuver(cls, network: Network, maneuver: Maneuver) -> Self:
        return cls(
            from_node=maneuver.from_node,
            via_node=maneuver.via_node,
            turn=maneuver.turn.value,
            highway=network.get_way(maneuver.last_way).highway,
            lanes=maneuver.lanes,
            length=maneuver.length,
            protected_length=(
                maneuver.protected_length if maneuver.protection_node is not None else None
            ),
            max_speed=maneuver.max_speed,
        )


def write_tsv(records: Iterable[ManeuverRecord], buf: IO[str]) -> None:
    """write_tsv writes records as tab-separated values, one record per line, without a header.
    Absent values are written as empty strings."""
    w = csv.writer(buf, delimiter="\t", lineterminator="\n")
    for record in records:
        w.writerow("" if value is None else value for value in astuple(record))
