"""Continuous scales mapping data values onto visual ranges."""

from __future__ import annotations

import math
from typing import Callable


def _normalizer(d0: float, d1: float) -> Callable[[float], float]:
    span = d1 - d0
    if span == 0:
        return lambda _x: 0.5
    return lambda x: (x - d0) / span


class LinearScale:
    """Linear map from ``domain`` to a numeric ``range``.

    A degenerate domain maps every value to the middle of the range.
    """

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = domain
        self.range = range_
        self._normalize = _normalizer(*domain)

    def __call__(self, value: float) -> float:
        r0, r1 = self.range
        t = self._normalize(value)
        return r0 + (r1 - r0) * t


class SqrtScale(LinearScale):
    """Power scale with exponent 1/2 (area grows linearly with the value)."""

    @staticmethod
    def _sqrt(x: float) -> float:
        return math.copysign(math.sqrt(abs(x)), x)

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        super().__init__(domain, range_)
        self._normalize = _normalizer(self._sqrt(domain[0]), self._sqrt(domain[1]))

    def __call__(self, value: float) -> float:
        r0, r1 = self.range
        return r0 + (r1 - r0) * self._normalize(self._sqrt(value))


def parse_hex(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex colour: {color}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def interpolate_rgb(start: str, end: str) -> Callable[[float], str]:
    """Channel-wise linear interpolation between two hex colours."""
    a = parse_hex(start)
    b = parse_hex(end)

    def interpolate(t: float) -> str:
        t = min(max(t, 0.0), 1.0)
        channels = (round(x + (y - x) * t) for x, y in zip(a, b))
        return "#" + "".join(f"{c:02x}" for c in channels)

    return interpolate


class ColorScale:
    """Linear scale onto a two-colour ramp."""

    def __init__(self, domain: tuple[float, float], colors: tuple[str, str]):
        self._position = LinearScale(domain, (0.0, 1.0))
        self._interpolate = interpolate_rgb(*colors)

    def __call__(self, value: float) -> str:
        return self._interpolate(self._position(value))


def extent(values: list[float]) -> tuple[float, float]:
    if not values:
        return (0.0, 0.0)
    return (min(values), max(values))
