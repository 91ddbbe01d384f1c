# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from pathlib import Path
from unittest import TestCase

from .network import Network
from .profile import KMH_TO_MPS, RoadProfile
from .reader import Node, Way

FIXTURES_DIR = Path(__file__).with_name("test_fixtures")


class TestNetwork(TestCase):
    def test_from_file(self) -> None:
        with (FIXTURES_DIR / "intersection.json").open("rb") as f:
            network = Network.from_file(f)

        self.assertEqual(len(network.nodes), 6)
        self.assertListEqual(list(network.ways), [100, 101, 102, 103, 104])
        self.assertEqual(network.get_node(5), (0.002, -0.001))

        way = network.get_way(104)
        self.assertEqual(way.highway, "secondary")
        self.assertListEqual(way.nodes, [3, 6])
        self.assertListEqual(way.line, [(0.002, 0.0), (0.002, 0.001)])
        self.assertAlmostEqual(way.length, 111.19508, places=3)

    def test_profile(self) -> None:
        with (FIXTURES_DIR / "intersection.osm").open("rb") as f:
            network = Network.from_file(f, RoadProfile.metric())
        self.assertEqual(network.profile.numeric_speed_factor, KMH_TO_MPS)
        self.assertEqual(len(network.ways), 5)

    def test_ways_before_nodes(self) -> None:
        network = Network.from_features(
            [
                Way(10, [1, 2], {"highway": "primary"}),
                Node(1, (0.0, 0.0)),
                Node(2, (0.001, 0.0)),
            ]
        )
        self.assertListEqual(network.get_way(10).line, [(0.0, 0.0), (0.001, 0.0)])

    def test_direction(self) -> None:
        network = Network.from_features(
            [
                Node(1, (0.0, 0.0)),
                Node(2, (0.001, 0.0)),
                Way(10, [1, 2], {"highway": "primary"}),
                Way(11, [1, 2], {"highway": "primary", "oneway": "yes"}),
                Way(12, [1, 2], {"highway": "primary", "oneway": "-1"}),
            ]
        )

        self.assertFalse(network.get_way(10).is_oneway)
        self.assertListEqual(network.get_way(10).progressions(), [1, -1])
        self.assertTrue(network.get_way(11).is_oneway)
        self.assertListEqual(network.get_way(11).progressions(), [1])
        self.assertTrue(network.get_way(12).is_oneway)
        self.assertListEqual(network.get_way(12).progressions(), [-1])

    def test_unknown_nodes(self) -> None:
        with self.assertLogs("turnlanes.osm", level="WARNING") as logs:
            network = Network.from_features(
                [
                    Node(1, (0.0, 0.0)),
                    Node(2, (0.001, 0.0)),
                    Way(10, [1, 3, 2], {"highway": "primary"}),
                    Way(11, [1, 4], {"highway": "primary"}),
                ]
            )

        self.assertListEqual(network.get_way(10).nodes, [1, 2])
        self.assertNotIn(11, network.ways)
        self.assertEqual(len(logs.records), 3)

    def test_non_roads_are_skipped(self) -> None:
        network = Network.from_features(
            [
                Node(1, (0.0, 0.0)),
                Node(2, (0.001, 0.0)),
                Way(10, [1, 2], {"highway": "footway"}),
                Way(11, [1, 2], {"highway": "primary", "motor_vehicle": "private"}),
                Way(12, [1, 2], {"railway": "tram"}),
            ]
        )
        self.assertDictEqual(network.ways, {})

    def test_duplicate_way(self) -> None:
        with self.assertLogs("turnlanes.osm", level="WARNING"):
            network = Network.from_features(
                [
                    Node(1, (0.0, 0.0)),
                    Node(2, (0.001, 0.0)),
                    Way(10, [1, 2], {"highway": "primary"}),
                    Way(10, [2, 1], {"highway": "primary"}),
                ]
            )
        self.assertListEqual(network.get_way(10).nodes, [1, 2])
