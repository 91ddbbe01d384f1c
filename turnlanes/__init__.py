# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""Turn lane maneuvers from OpenStreetMap data"""

__title__ = "turnlanes"
__description__ = "Turn lane maneuvers from OpenStreetMap data"
__author__ = "Mikołaj Kuranowski"
__copyright__ = "© Copyright 2024 Mikołaj Kuranowski"
__license__ = "GPL-3.0-or-later"
__version__ = "1.0.0"

from . import osm
from .err import (
    AmbiguousConnection,
    CyclicConnection,
    InvalidLaneTagging,
    ManeuverDiagnostic,
    OsmStructureError,
    TurnLanesError,
)
from .flatten import flatten_maneuvers
from .lanes import Lane, Turn, normalize_speed
from .linker import link_maneuvers
from .maneuver import Maneuver, extract_maneuvers
from .output import ManeuverRecord, write_tsv
from .pipeline import collect_maneuvers, find_maneuvers

__all__ = [
    "AmbiguousConnection",
    "collect_maneuvers",
    "CyclicConnection",
    "extract_maneuvers",
    "find_maneuvers",
    "flatten_maneuvers",
    "InvalidLaneTagging",
    "Lane",
    "link_maneuvers",
    "Maneuver",
    "ManeuverDiagnostic",
    "ManeuverRecord",
    "normalize_speed",
    "osm",
    "OsmStructureError",
    "Turn",
    "TurnLanesError",
    "write_tsv",
]
