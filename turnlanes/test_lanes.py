# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Dict
from unittest import TestCase

from .err import InvalidLaneTagging
from .lanes import (
    Lane,
    Turn,
    classify,
    decode_changes,
    decode_lanes,
    decode_speeds,
    decode_turns,
    lane_count,
    normalize_speed,
    resolve_tag,
)
from .osm import reader
from .osm.network import Network, NetworkWay
from .osm.profile import KMH_TO_MPS


def make_way(tags: Dict[str, str]) -> NetworkWay:
    tags = {"highway": "primary", **tags}
    network = Network.from_features(
        [
            reader.Node(1, (0.0, 0.0)),
            reader.Node(2, (0.001, 0.0)),
            reader.Way(10, [1, 2], tags),
        ]
    )
    return network.get_way(10)


class TestLaneCount(TestCase):
    def test_two_way_total_is_halved(self) -> None:
        way = make_way({"lanes": "4"})
        self.assertEqual(lane_count(way, 1), 2)
        self.assertEqual(lane_count(way, -1), 2)

    def test_two_way_odd_total(self) -> None:
        way = make_way({"lanes": "3"})
        self.assertEqual(lane_count(way, 1), 1)

    def test_oneway_total_is_not_halved(self) -> None:
        self.assertEqual(lane_count(make_way({"lanes": "4", "oneway": "yes"}), 1), 4)
        self.assertEqual(lane_count(make_way({"lanes": "3", "oneway": "-1"}), -1), 3)

    def test_directional_tag_takes_precedence(self) -> None:
        way = make_way({"lanes": "5", "lanes:forward": "3", "lanes:backward": "2"})
        self.assertEqual(lane_count(way, 1), 3)
        self.assertEqual(lane_count(way, -1), 2)

    def test_defaults_to_one(self) -> None:
        self.assertEqual(lane_count(make_way({}), 1), 1)
        self.assertEqual(lane_count(make_way({"lanes": "1"}), 1), 1)
        self.assertEqual(lane_count(make_way({"lanes": "many"}), 1), 1)

    def test_leading_integer(self) -> None:
        self.assertEqual(lane_count(make_way({"lanes": "2;3", "oneway": "yes"}), 1), 2)


class TestResolveTag(TestCase):
    def test_precedence(self) -> None:
        tags = {
            "turn:lanes:forward": "left|through",
            "turn:lanes": "through|through",
            "turn:forward": "right",
            "turn": "reverse",
        }
        self.assertEqual(resolve_tag(tags, "turn", 1), "left|through")
        self.assertEqual(resolve_tag(tags, "turn", -1), "through|through")

        del tags["turn:lanes"]
        self.assertEqual(resolve_tag(tags, "turn", 1), "left|through")
        self.assertEqual(resolve_tag(tags, "turn", -1), "reverse")

        del tags["turn:lanes:forward"]
        self.assertEqual(resolve_tag(tags, "turn", 1), "right")

    def test_scalar_is_repeated(self) -> None:
        tags = {"change": "no"}
        self.assertEqual(resolve_tag(tags, "change", 1, 3), "no|no|no")
        self.assertEqual(resolve_tag(tags, "change", 1), "no")

    def test_lanes_value_is_not_repeated(self) -> None:
        tags = {"change:lanes": "no|yes"}
        self.assertEqual(resolve_tag(tags, "change", 1, 3), "no|yes")

    def test_missing(self) -> None:
        self.assertIsNone(resolve_tag({}, "turn", 1, 2))


class TestDecodeTurns(TestCase):
    def test(self) -> None:
        self.assertListEqual(
            decode_turns("left|through;right|"),
            [frozenset({"left"}), frozenset({"through", "right"}), frozenset()],
        )


class TestDecodeChanges(TestCase):
    def test_values(self) -> None:
        self.assertListEqual(
            decode_changes("yes|no|not_left|only_right|not_right|only_left"),
            [
                (None, True),
                (False, False),
                (False, True),
                (False, True),
                (True, False),
                (True, None),
            ],
        )

    def test_single_lane(self) -> None:
        self.assertListEqual(decode_changes("no"), [(None, None)])

    def test_unrecognized_value(self) -> None:
        with self.assertLogs("turnlanes.lanes", level="WARNING") as logs:
            changes = decode_changes("no|maybe|no", way_id=42)

        self.assertListEqual(changes, [(None, False), (True, True), (False, None)])
        self.assertEqual(len(logs.records), 1)
        self.assertIn("42", logs.output[0])
        self.assertIn("maybe", logs.output[0])


class TestDecodeLanes(TestCase):
    def test_no_turn_tags(self) -> None:
        self.assertIsNone(decode_lanes(make_way({"lanes": "2"}), 1))
        self.assertIsNone(decode_lanes(make_way({"turn:lanes:backward": "left|"}), 1))

    def test_turn_only(self) -> None:
        lanes = decode_lanes(make_way({"turn:lanes": "left|through", "oneway": "yes"}), 1)
        self.assertListEqual(
            lanes or [],
            [Lane(frozenset({"left"})), Lane(frozenset({"through"}))],
        )

    def test_scalar_turn_is_repeated_over_lanes(self) -> None:
        lanes = decode_lanes(make_way({"turn": "left", "lanes": "2", "oneway": "yes"}), 1)
        self.assertEqual(len(lanes or []), 2)

    def test_scalar_change_is_repeated_over_turn_lanes(self) -> None:
        way = make_way({"turn:lanes": "left|left|through", "change": "no", "oneway": "yes"})
        lanes = decode_lanes(way, 1) or []
        self.assertListEqual(
            [lane.change for lane in lanes],
            [(None, False), (False, False), (False, None)],
        )

    def test_mismatched_lane_counts(self) -> None:
        way = make_way(
            {"turn:lanes": "left|through", "change:lanes": "no|yes|yes", "oneway": "yes"}
        )
        with self.assertRaises(InvalidLaneTagging) as ctx:
            decode_lanes(way, 1)
        self.assertEqual(ctx.exception.way_id, 10)
        self.assertEqual(ctx.exception.progression, 1)


class TestClassify(TestCase):
    def test(self) -> None:
        lanes = [Lane(t) for t in decode_turns("left|through;right|none||slight_left;reverse")]
        groups = classify(lanes)

        self.assertListEqual(groups[Turn.LEFT], [lanes[0], lanes[4]])
        self.assertListEqual(groups[Turn.THROUGH], [lanes[1]])
        self.assertListEqual(groups[Turn.RIGHT], [lanes[1]])
        self.assertListEqual(groups[Turn.NONE], [lanes[2], lanes[3]])
        self.assertListEqual(groups[Turn.REVERSE], [lanes[4]])

    def test_decoder_example(self) -> None:
        way = make_way({"turn:lanes:forward": "left|through;right", "lanes": "2", "oneway": "yes"})
        lanes = decode_lanes(way, 1) or []
        groups = classify(lanes)

        self.assertListEqual(groups[Turn.LEFT], [lanes[0]])
        self.assertListEqual(groups[Turn.RIGHT], [lanes[1]])
        self.assertListEqual(groups[Turn.THROUGH], [lanes[1]])
        self.assertListEqual(groups[Turn.NONE], [])


class TestNormalizeSpeed(TestCase):
    def test_mph(self) -> None:
        self.assertAlmostEqual(normalize_speed("25 mph") or 0.0, 11.176, delta=0.01)
        self.assertAlmostEqual(normalize_speed("25mph") or 0.0, 11.176, delta=0.01)

    def test_knots(self) -> None:
        self.assertAlmostEqual(normalize_speed("10 knots") or 0.0, 5.1444, places=3)

    def test_numeric_legacy_scale(self) -> None:
        # Kilometers per hour into meters per hour
        self.assertEqual(normalize_speed("50"), 50_000.0)
        self.assertEqual(normalize_speed("50 km/h"), 50_000.0)

    def test_numeric_metric_scale(self) -> None:
        self.assertAlmostEqual(normalize_speed("50", KMH_TO_MPS) or 0.0, 13.8889, places=3)
        self.assertAlmostEqual(normalize_speed("36 km/h", KMH_TO_MPS) or 0.0, 10.0)

    def test_non_numeric(self) -> None:
        self.assertIsNone(normalize_speed(None))
        self.assertIsNone(normalize_speed(""))
        self.assertIsNone(normalize_speed("none"))
        self.assertIsNone(normalize_speed("signals"))
        self.assertIsNone(normalize_speed("walk"))

    def test_decode_speeds(self) -> None:
        self.assertListEqual(decode_speeds("50|30|none", KMH_TO_MPS)[1:], [30 * KMH_TO_MPS, None])
        self.assertListEqual(decode_speeds(None), [])
