# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""
turnlanes entry point.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .osm.network import Network
from .osm.profile import KMH_TO_MPS, RoadProfile
from .osm.reader import FILE_FORMATS
from .output import ManeuverRecord, write_tsv
from .pipeline import find_maneuvers


def run(argv: Optional[List[str]] = None) -> None:
    """
    Command-line interface.

    Read OpenStreetMap data from the input file and write turn lane maneuvers
    as tab-separated values into the output file, or to standard output.
    """
    parser = argparse.ArgumentParser(
        prog="turnlanes",
        description="Extract turn lane maneuvers from OpenStreetMap data.",
    )
    parser.add_argument("input", type=Path, help="input OSM file path (JSON, XML or PBF)")
    parser.add_argument("output", type=Path, nargs="?", help="output TSV file path")
    parser.add_argument(
        "-f",
        "--format",
        choices=FILE_FORMATS,
        help="format of the input file (default: guessed from the file name)",
    )
    parser.add_argument(
        "--metric-speeds",
        action="store_true",
        help="convert unitless speed limits from km/h into m/s",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug messages")

    arguments = parser.parse_args(sys.argv[1:] if argv is None else argv)

    logging.basicConfig(
        level=logging.DEBUG if arguments.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    profile = RoadProfile()
    if arguments.metric_speeds:
        profile = profile.with_speed_factor(KMH_TO_MPS)

    with arguments.input.open("rb") as input_file:
        network = Network.from_file(input_file, profile, arguments.format)

    records = [ManeuverRecord.from_maneuver(network, m) for m in find_maneuvers(network)]

    if arguments.output:
        with arguments.output.open("w", encoding="utf-8", newline="") as output_file:
            write_tsv(records, output_file)
    else:
        write_tsv(records, sys.stdout)


if __name__ == "__main__":
    run()
