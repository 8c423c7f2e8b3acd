"""Tests for pie slices and outside-label overlap resolution."""

import math

import pytest

from leaderlens.layout.pie import (
    PieLabel,
    label_lines,
    labels_overlap,
    layout_pie_labels,
    pie_slices,
    propose_labels,
    resolve_overlaps,
    side_groups,
    vertical_gap,
)

PADDING = 8.0

# Three labels per side; the right side's mid-angles sit at 17%, 38% and 45%
# of the circle, so tall labels collide pairwise down that side.
SIX_TOPICS = [
    ("Aspirations and long-term goals", 34),
    ("Risk", 8),
    ("Family", 6),
    ("Doubt", 6),
    ("Education", 23),
    ("Money", 23),
]


def tall(_lines):
    return 120.0, 200.0


def _adjacent_gaps(labels):
    gaps = []
    for group in side_groups(labels).values():
        gaps.extend(vertical_gap(a, b) for a, b in zip(group, group[1:]))
    return gaps


class TestPieSlices:
    def test_cover_full_circle_in_input_order(self):
        slices = pie_slices(SIX_TOPICS)

        assert slices[0].start_angle == 0
        assert slices[-1].end_angle == pytest.approx(2 * math.pi)
        for prev, current in zip(slices, slices[1:]):
            assert current.start_angle == pytest.approx(prev.end_angle)

    def test_non_positive_values_get_no_width(self):
        slices = pie_slices([("a", 1), ("b", 0), ("c", -3), ("d", 1)])

        assert slices[1].start_angle == slices[1].end_angle
        assert slices[2].start_angle == slices[2].end_angle
        assert slices[3].end_angle == pytest.approx(2 * math.pi)


class TestLabelLines:
    def test_short_topic_single_line(self):
        assert label_lines("Risk", 12.34) == ["Risk (12.3%)"]

    def test_long_topic_wraps(self):
        lines = label_lines("Leadership under uncertainty", 20)

        assert lines[-1] == "(20.0%)"
        assert len(lines) > 2
        assert " ".join(lines[:-1]) == "Leadership under uncertainty"


class TestProposeLabels:
    def test_sides_follow_mid_angle(self):
        labels = propose_labels(pie_slices(SIX_TOPICS), 150.0, tall)

        assert [l.side for l in labels] == ["right", "right", "right", "left", "left", "left"]
        assert all(l.x > 0 for l in labels if l.side == "right")
        assert all(l.x < 0 for l in labels if l.side == "left")

    def test_right_side_starts_with_two_adjacent_overlaps(self):
        labels = propose_labels(pie_slices(SIX_TOPICS), 150.0, tall)
        right = side_groups(labels)["right"]

        assert [l.index for l in right] == [0, 1, 2]
        assert labels_overlap(right[0], right[1], PADDING)
        assert labels_overlap(right[1], right[2], PADDING)


class TestResolveOverlaps:
    def test_six_slices_end_with_padding_between_neighbours(self):
        layout = layout_pie_labels(SIX_TOPICS, padding=PADDING, measure=tall)

        right = side_groups(layout.labels)["right"]
        assert len(right) == 3
        for a, b in zip(right, right[1:]):
            assert vertical_gap(a, b) >= PADDING - 1e-9
        assert all(gap >= PADDING - 1e-9 for gap in _adjacent_gaps(layout.labels))

    def test_labels_stay_inside_viewport(self):
        layout = layout_pie_labels(SIX_TOPICS, height=700, padding=PADDING, measure=tall)

        for label in layout.labels:
            assert label.top >= -350 - 1e-9
            assert label.bottom <= 350 + 1e-9

    def test_single_pass_collision_resolved_exactly(self):
        a = PieLabel(0, "a", 50, 1.0, "right", 10, 0.0, ["a"], height=20)
        b = PieLabel(1, "b", 50, 1.1, "right", 10, 5.0, ["b"], height=20)

        resolve_overlaps([a, b], PADDING)

        assert a.y == 0.0
        assert vertical_gap(a, b) == pytest.approx(PADDING)

    def test_labels_on_opposite_sides_never_collide(self):
        a = PieLabel(0, "a", 50, 1.0, "right", 10, 0.0, ["a"], height=20)
        b = PieLabel(1, "b", 50, 5.0, "left", -10, 0.0, ["b"], height=20)

        assert not labels_overlap(a, b, PADDING)

    def test_crowded_side_keeps_residual_overlap(self):
        # Six 60px labels per side cannot fit in a 300px viewport; the two
        # passes run once and some overlap is expected to remain.
        values = [(f"topic {i}", 1) for i in range(12)]

        layout = layout_pie_labels(
            values, height=300, margin=50, padding=PADDING, measure=lambda _l: (80.0, 60.0)
        )

        assert any(gap < PADDING for gap in _adjacent_gaps(layout.labels))
        for label in layout.labels:
            assert label.top >= -150 - 1e-9
            assert label.bottom <= 150 + 1e-9


class TestConnectors:
    def test_connector_runs_from_pie_edge_to_final_label(self):
        layout = layout_pie_labels(SIX_TOPICS, padding=PADDING, measure=tall)

        for label in layout.labels:
            start, elbow, end = label.points
            assert math.hypot(*start) == pytest.approx(layout.radius)
            assert math.hypot(*elbow) > layout.radius
            assert end == (label.x, label.y)

    def test_to_dict_is_serialisable(self):
        data = layout_pie_labels(SIX_TOPICS[:2]).to_dict()

        assert data["radius"] == 150.0
        assert {l["anchor"] for l in data["labels"]} <= {"start", "end"}
        assert len(data["slices"]) == 2
