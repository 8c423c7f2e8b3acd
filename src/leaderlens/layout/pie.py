"""Pie-chart slices and outside-label placement.

Angles follow the d3 convention: radians clockwise from 12 o'clock, with
``y`` growing downwards. Labels sit on the side of the circle their slice's
midpoint falls on and are then nudged apart vertically, per side, by one
downward and one upward pass. The passes are not repeated until nothing
moves, so a tall enough stack in a short viewport keeps some overlap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

LABEL_RADIUS_RATIO = 1.05
LABEL_OFFSET_RATIO = 1.5
ELBOW_RATIO = 1.2
WRAP_CHARS = 15
LINE_HEIGHT_EM = 1.2
CHAR_WIDTH_EM = 0.6
BOX_PAD_X = 12.0
BOX_PAD_Y = 6.0

SLICE_COLORS = (
    "#00bcd4", "#2196f3", "#3f51b5", "#673ab7", "#9c27b0",
    "#e91e63", "#f44336", "#ff9800", "#4caf50", "#8bc34a",
)

Measure = Callable[[list[str]], tuple[float, float]]


@dataclass
class PieSlice:
    index: int
    topic: str
    value: float
    start_angle: float
    end_angle: float
    color: str = ""

    @property
    def mid_angle(self) -> float:
        return self.start_angle + (self.end_angle - self.start_angle) / 2


@dataclass
class PieLabel:
    index: int
    topic: str
    percentage: float
    angle: float
    side: str  # left | right
    x: float
    y: float
    lines: list[str]
    width: float = 0.0
    height: float = 0.0
    points: list[tuple[float, float]] = field(default_factory=list)

    @property
    def anchor(self) -> str:
        return "start" if self.side == "right" else "end"

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2


@dataclass
class PieLayout:
    width: float
    height: float
    radius: float
    slices: list[PieSlice] = field(default_factory=list)
    labels: list[PieLabel] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "radius": self.radius,
            "slices": [vars(s) for s in self.slices],
            "labels": [
                {
                    "index": l.index,
                    "topic": l.topic,
                    "percentage": l.percentage,
                    "side": l.side,
                    "anchor": l.anchor,
                    "x": l.x,
                    "y": l.y,
                    "width": l.width,
                    "height": l.height,
                    "lines": l.lines,
                    "points": [list(p) for p in l.points],
                }
                for l in self.labels
            ],
        }


def polar(radius: float, angle: float) -> tuple[float, float]:
    return radius * math.sin(angle), -radius * math.cos(angle)


def pie_slices(values: list[tuple[str, float]]) -> list[PieSlice]:
    """Lay slices out in input order; non-positive values get zero width."""
    total = sum(v for _, v in values if v > 0)
    k = 2 * math.pi / total if total > 0 else 0.0
    slices = []
    angle = 0.0
    for i, (topic, value) in enumerate(values):
        span = value * k if value > 0 else 0.0
        slices.append(PieSlice(
            index=i,
            topic=topic,
            value=value,
            start_angle=angle,
            end_angle=angle + span,
            color=SLICE_COLORS[i % len(SLICE_COLORS)],
        ))
        angle += span
    return slices


def label_lines(topic: str, percentage: float) -> list[str]:
    """Short names share a line with the percentage; long ones wrap."""
    percent = f"({percentage:.1f}%)"
    if len(topic) <= WRAP_CHARS:
        return [f"{topic} {percent}"]

    lines: list[str] = []
    current: list[str] = []
    length = 0
    for word in topic.split():
        if current and length + len(word) > WRAP_CHARS:
            lines.append(" ".join(current))
            current = [word]
            length = len(word)
        else:
            current.append(word)
            length += len(word) + 1
    if current:
        lines.append(" ".join(current))
    lines.append(percent)
    return lines


def estimate_size(lines: list[str], font_size: float = 13.0) -> tuple[float, float]:
    """Approximate (width, height) of a label box including its background."""
    longest = max((len(line) for line in lines), default=0)
    width = longest * font_size * CHAR_WIDTH_EM + BOX_PAD_X
    height = len(lines) * font_size * LINE_HEIGHT_EM + BOX_PAD_Y
    return width, height


def propose_labels(
    slices: list[PieSlice],
    radius: float,
    measure: Measure,
) -> list[PieLabel]:
    """Initial label positions: beside the pie, level with the slice midpoint."""
    labels = []
    for s in slices:
        angle = s.mid_angle
        side = "right" if angle < math.pi else "left"
        _, y = polar(radius * LABEL_RADIUS_RATIO, angle)
        x = radius * LABEL_OFFSET_RATIO * (1 if side == "right" else -1)
        lines = label_lines(s.topic, s.value)
        width, height = measure(lines)
        labels.append(PieLabel(
            index=s.index,
            topic=s.topic,
            percentage=s.value,
            angle=angle,
            side=side,
            x=x,
            y=y,
            lines=lines,
            width=width,
            height=height,
        ))
    return labels


def vertical_gap(a: PieLabel, b: PieLabel) -> float:
    """Free space between two boxes; negative when they intersect."""
    return max(b.top - a.bottom, a.top - b.bottom)


def labels_overlap(a: PieLabel, b: PieLabel, padding: float) -> bool:
    if a.side != b.side:
        return False
    return vertical_gap(a, b) < padding


def side_groups(labels: list[PieLabel]) -> dict[str, list[PieLabel]]:
    """Labels per side, ordered top to bottom."""
    groups: dict[str, list[PieLabel]] = {"right": [], "left": []}
    for label in labels:
        groups[label.side].append(label)
    # clockwise on the right runs downwards, on the left upwards
    groups["right"].sort(key=lambda l: (l.y, l.angle, l.index))
    groups["left"].sort(key=lambda l: (l.y, -l.angle, l.index))
    return groups


def resolve_overlaps(
    group: list[PieLabel],
    padding: float,
    *,
    min_y: float | None = None,
    max_y: float | None = None,
) -> None:
    """Push apart colliding neighbours of one top-to-bottom group, in place."""
    if len(group) <= 1:
        return

    for prev, current in zip(group, group[1:]):
        if labels_overlap(prev, current, padding):
            current.y += padding - (current.top - prev.bottom)
            if max_y is not None and current.bottom > max_y:
                current.y = max_y - current.height / 2

    for i in range(len(group) - 2, -1, -1):
        current, following = group[i], group[i + 1]
        if labels_overlap(current, following, padding):
            current.y -= padding - (following.top - current.bottom)
            if min_y is not None and current.top < min_y:
                current.y = min_y + current.height / 2


def connector(label: PieLabel, radius: float) -> list[tuple[float, float]]:
    """Polyline from the slice's outer edge via an elbow to the label."""
    return [
        polar(radius, label.angle),
        polar(radius * ELBOW_RATIO, label.angle),
        (label.x, label.y),
    ]


def layout_pie_labels(
    values: list[tuple[str, float]],
    *,
    width: float = 1100.0,
    height: float = 700.0,
    margin: float = 200.0,
    padding: float = 8.0,
    font_size: float = 13.0,
    measure: Measure | None = None,
) -> PieLayout:
    """Slices, resolved labels and connectors for a pie centred at (0, 0)."""
    radius = max(min(width, height) / 2 - margin, 0.0)
    if measure is None:
        def measure(lines: list[str]) -> tuple[float, float]:
            return estimate_size(lines, font_size)

    slices = pie_slices(values)
    labels = propose_labels(slices, radius, measure)

    for group in side_groups(labels).values():
        resolve_overlaps(group, padding, min_y=-height / 2, max_y=height / 2)

    for label in labels:
        label.points = connector(label, radius)

    return PieLayout(width=width, height=height, radius=radius, slices=slices, labels=labels)
