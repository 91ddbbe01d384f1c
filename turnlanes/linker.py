# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from logging import getLogger
from typing import Dict, List, Optional

from .err import AmbiguousConnection, CyclicConnection
from .geometry import angle_difference, bearing_at_end, bearing_at_start
from .lanes import resolve_tag
from .maneuver import Maneuver
from .osm.network import Network
from .osm.profile import is_link, is_service

linker_logger = getLogger("turnlanes.linker")


def link_maneuvers(network: Network, maneuvers: List[Maneuver]) -> None:
    """link_maneuvers finds maneuvers which continue each other across a way boundary.

    The continuing maneuver is stored in :py:attr:`Maneuver.next` as an index into
    ``maneuvers``, and is marked with :py:attr:`Maneuver.is_connection`.
    Any previous links are discarded, so that calling this function multiple times
    gives the same result.

    A maneuver with multiple equally good continuations is left unlinked and reported
    through :py:exc:`AmbiguousConnection`. Links which would create a cycle are
    never made.
    """
    for maneuver in maneuvers:
        maneuver.next = None
        maneuver.is_connection = False

    by_from_node: Dict[int, List[int]] = {}
    for idx, maneuver in enumerate(maneuvers):
        by_from_node.setdefault(maneuver.from_node, []).append(idx)

    for idx, maneuver in enumerate(maneuvers):
        candidates = [
            i
            for i in by_from_node.get(maneuver.via_node, [])
            if maneuvers[i].first_way != maneuver.last_way and maneuvers[i].turn is maneuver.turn
        ]
        if not candidates:
            continue

        try:
            successor = _pick_successor(network, maneuvers, idx, candidates)
        except AmbiguousConnection as e:
            e.log()
            continue

        if successor is None:
            continue

        if _leads_to(maneuvers, successor, idx):
            CyclicConnection(
                maneuver,
                f"linking with way {maneuvers[successor].first_way} would create a cycle "
                "- leaving unlinked",
            ).log()
            continue

        linker_logger.debug(
            "linking %s maneuver: way %d → way %d via node %d",
            maneuver.turn.value,
            maneuver.last_way,
            maneuvers[successor].first_way,
            maneuver.via_node,
        )
        maneuver.next = successor
        maneuvers[successor].is_connection = True


def _pick_successor(
    network: Network,
    maneuvers: List[Maneuver],
    idx: int,
    candidates: List[int],
) -> Optional[int]:
    """_pick_successor narrows down the list of candidates for continuing
    the ``idx``-th maneuver to a single one, or returns None if none of them matches.

    Raises :py:exc:`AmbiguousConnection` if more than one candidate remains.
    """
    maneuver = maneuvers[idx]
    way = network.get_way(maneuver.last_way)
    profile = network.profile

    # Ramps, turn channels and service roads don't continue a maneuver on the main road;
    # neither does a maneuver after its lane change restriction has been lifted.
    candidates = [
        i
        for i in candidates
        if not _crosses_road_class(way.highway, network.get_way(maneuvers[i].first_way).highway)
        and not (maneuver.protected and maneuvers[i].protected is False)
    ]

    # Candidates on cross streets turn too sharply
    exit_bearing = bearing_at_end(maneuver.line, profile.bearing_lookahead)
    deltas: Dict[int, float] = {
        i: angle_difference(
            exit_bearing,
            bearing_at_start(maneuvers[i].line, profile.bearing_lookahead),
        )
        for i in candidates
    }
    candidates = [i for i in candidates if abs(deltas[i]) <= profile.max_turn_angle]

    # Prefer candidates with the same road classification, and then with the same name
    if len(candidates) > 1:
        same_class = [
            i
            for i in candidates
            if network.get_way(maneuvers[i].first_way).highway == way.highway
        ]
        candidates = same_class or candidates

    if len(candidates) > 1:
        name = resolve_tag(way.tags, "name", maneuver.progressions[-1])
        same_name = [
            i
            for i in candidates
            if resolve_tag(
                network.get_way(maneuvers[i].first_way).tags,
                "name",
                maneuvers[i].progressions[0],
            )
            == name
        ]
        candidates = same_name or candidates

    if len(candidates) > 1:
        raise AmbiguousConnection(
            maneuver,
            [maneuvers[i] for i in candidates],
            [deltas[i] for i in candidates],
        )

    return candidates[0] if candidates else None


def _crosses_road_class(from_highway: str, to_highway: str) -> bool:
    """_crosses_road_class returns True when going from a main road onto a service road,
    or from a regular road onto a link road."""
    return (not is_service(from_highway) and is_service(to_highway)) or (
        not is_link(from_highway) and is_link(to_highway)
    )


def _leads_to(maneuvers: List[Maneuver], start: int, target: int) -> bool:
    """_leads_to checks if following the links from ``start`` reaches ``target``."""
    seen = set()
    current: Optional[int] = start
    while current is not None and current not in seen:
        if current == target:
            return True
        seen.add(current)
        current = maneuvers[current].next
    return False
