# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""Contains errors used by turnlanes"""

from logging import getLogger
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .maneuver import Maneuver

diagnostics_logger = getLogger("turnlanes.diagnostics")


class TurnLanesError(Exception):
    """Base for all errors thrown by turnlanes."""
    pass


class OsmStructureError(TurnLanesError, ValueError):
    """Provided OSM data is invalid and can't be loaded."""
    pass


class ManeuverDiagnostic(TurnLanesError):
    """ManeuverDiagnostic is the base for recoverable problems with the input data.
    Such errors are raised and caught while processing a single way or maneuver,
    logged through :py:meth:`log`, and processing continues with the next one.
    """

    def log(self) -> None:
        diagnostics_logger.warning(self.args[0])


class InvalidLaneTagging(ManeuverDiagnostic, ValueError):
    """Turn and lane change tags of a way, in one direction, are inconsistent."""

    def __init__(self, way_id: int, progression: int, reason: str) -> None:
        direction = "forward" if progression > 0 else "backward"
        super().__init__(f"way {way_id} ({direction}): {reason} - skipping")
        self.way_id = way_id
        self.progression = progression
        self.reason = reason


class AmbiguousConnection(ManeuverDiagnostic):
    """A maneuver could be continued by more than one maneuver,
    even after applying all tie-breaking heuristics."""

    def __init__(
        self,
        maneuver: "Maneuver",
        candidates: Sequence["Maneuver"],
        bearing_deltas: Sequence[float],
    ) -> None:
        candidate_ways = ", ".join(str(c.first_way) for c in candidates)
        deltas = ", ".join(f"{d:.1f}" for d in bearing_deltas)
        super().__init__(
            f"ambiguous {maneuver.turn.value} maneuver from way {maneuver.last_way} "
            f"via node {maneuver.via_node} into one of ways {candidate_ways} "
            f"(bearing deltas: {deltas}) - leaving unlinked"
        )
        self.maneuver = maneuver
        self.candidates = list(candidates)
        self.bearing_deltas = list(bearing_deltas)


class CyclicConnection(ManeuverDiagnostic):
    """Following the connections between maneuvers leads back to an already visited maneuver."""

    def __init__(self, maneuver: "Maneuver", reason: str) -> None:
        super().__init__(
            f"{maneuver.turn.value} maneuver from way {maneuver.last_way} "
            f"via node {maneuver.via_node}: {reason}"
        )
        self.maneuver = maneuver
        self.reason = reason
