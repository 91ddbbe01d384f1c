# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from logging import getLogger
from typing import List

from .err import InvalidLaneTagging
from .flatten import flatten_maneuvers
from .linker import link_maneuvers
from .maneuver import Maneuver, extract_maneuvers, is_turn_channel
from .osm.network import Network

logger = getLogger("turnlanes")


def collect_maneuvers(network: Network) -> List[Maneuver]:
    """collect_maneuvers extracts single-way maneuvers from every way of the network,
    in the order of ways, forward before backward. Ways with inconsistent lane tagging
    are reported and skipped; turn channels are skipped."""
    maneuvers: List[Maneuver] = []
    for way in network.ways.values():
        if is_turn_channel(way):
            continue

        for progression in way.progressions():
            try:
                maneuvers.extend(extract_maneuvers(network, way, progression))
            except InvalidLaneTagging as e:
                e.log()

    return maneuvers


def find_maneuvers(network: Network) -> List[Maneuver]:
    """find_maneuvers runs the whole analysis: extracts single-way maneuvers,
    links maneuvers split across multiple ways and merges them together."""
    maneuvers = collect_maneuvers(network)
    link_maneuvers(network, maneuvers)
    flattened = flatten_maneuvers(maneuvers)
    logger.info(
        "found %d maneuvers (from %d single-way maneuvers)",
        len(flattened),
        len(maneuvers),
    )
    return flattened
