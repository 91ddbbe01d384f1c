# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from . import reader
from .network import Network, NetworkWay
from .profile import KMH_TO_MPS, LEGACY_SPEED_FACTOR, RoadProfile

__all__ = [
    "KMH_TO_MPS",
    "LEGACY_SPEED_FACTOR",
    "Network",
    "NetworkWay",
    "reader",
    "RoadProfile",
]
