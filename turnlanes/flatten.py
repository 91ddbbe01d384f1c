# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import replace
from logging import getLogger
from typing import List, Set

from .err import CyclicConnection
from .maneuver import Maneuver

flatten_logger = getLogger("turnlanes.flatten")


def flatten_maneuvers(maneuvers: List[Maneuver]) -> List[Maneuver]:
    """flatten_maneuvers merges every chain of linked maneuvers (as set up by
    :py:func:`linker.link_maneuvers`) into a single maneuver traversing multiple ways.

    Returns one maneuver for every maneuver which isn't a connection, in the input order.
    Input maneuvers are left untouched; returned maneuvers have no links.
    """
    result: List[Maneuver] = []
    reached: Set[int] = set()

    for idx, maneuver in enumerate(maneuvers):
        if maneuver.is_connection:
            continue
        chain = _collect_chain(maneuvers, idx)
        reached.update(chain)
        result.append(_fold_chain(maneuvers, chain))

    for idx, maneuver in enumerate(maneuvers):
        if idx not in reached:
            CyclicConnection(
                maneuver,
                "maneuver is only reachable through a cycle of connections - dropping",
            ).log()

    return result


def _collect_chain(maneuvers: List[Maneuver], root: int) -> List[int]:
    """_collect_chain returns the indices of maneuvers linked from ``root``, in the order of
    travel. A link back to a maneuver already in the chain is reported and cut off."""
    chain = [root]
    seen = {root}
    next_idx = maneuvers[root].next

    while next_idx is not None:
        if next_idx in seen:
            CyclicConnection(
                maneuvers[chain[-1]],
                f"link back to way {maneuvers[next_idx].first_way} creates a cycle - cutting",
            ).log()
            break

        if not maneuvers[next_idx].is_connection:
            flatten_logger.warning(
                "maneuver from way %d links to way %d, which is not marked as a connection",
                maneuvers[chain[-1]].last_way,
                maneuvers[next_idx].first_way,
            )

        chain.append(next_idx)
        seen.add(next_idx)
        next_idx = maneuvers[next_idx].next

    return chain


def _fold_chain(maneuvers: List[Maneuver], chain: List[int]) -> Maneuver:
    """_fold_chain merges maneuvers at ``chain`` indices, starting from the end of the chain."""
    merged = _detached_copy(maneuvers[chain[-1]])
    for idx in reversed(chain[:-1]):
        merged = merge_maneuvers(_detached_copy(maneuvers[idx]), merged)
    return merged


def _detached_copy(maneuver: Maneuver) -> Maneuver:
    return replace(
        maneuver,
        ways=list(maneuver.ways),
        progressions=list(maneuver.progressions),
        line=list(maneuver.line),
        next=None,
        is_connection=False,
    )


def merge_maneuvers(head: Maneuver, tail: Maneuver) -> Maneuver:
    """merge_maneuvers extends ``head`` with an (already flattened) maneuver continuing it.
    ``head`` is modified in place and returned.

    Suspicious merges - narrowing to fewer lanes, or lifting a lane change restriction -
    are reported as warnings, as they may signal an incorrect link or a tagging error.
    """
    if head.protected and tail.protected is False:
        flatten_logger.warning(
            "maneuver disallows lane changes at way %d but allows lane changes at way %d",
            head.last_way,
            tail.first_way,
        )

    if head.lanes > tail.lanes:
        flatten_logger.warning(
            "maneuver drops %d lane(s) from way %d to way %d",
            head.lanes - tail.lanes,
            head.last_way,
            tail.first_way,
        )

    length = head.length
    tail_length = tail.length

    head.ways.extend(tail.ways)
    head.progressions.extend(tail.progressions)
    head.line.extend(tail.line)
    head.via_node = tail.via_node

    # The number of lanes for a turn may increase approaching a large intersection
    head.lanes = max(head.lanes, tail.lanes)

    # Lane change restriction beginning partway along the turn lane
    if not head.protected and tail.protected:
        head.protection_node = tail.from_node
        head.protected_length = tail_length
    else:
        head.protection_node = tail.protection_node
        head.protected_length = tail.protected_length

    if head.max_speed is not None and tail.max_speed is not None and length + tail_length > 0:
        head.max_speed = (length * head.max_speed + tail_length * tail.max_speed) / (
            length + tail_length
        )
    elif head.max_speed is None:
        head.max_speed = tail.max_speed

    head.next = None
    return head
