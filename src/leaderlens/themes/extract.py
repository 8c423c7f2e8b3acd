"""Theme frequency and co-occurrence tallies across the corpus.

Counting happens at interview granularity: a theme counts once per leader no
matter how many chapters carry it, and two themes co-occur when they both
appear anywhere in the same interview's default version.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from leaderlens.models.leader import Leader

PAIR_SEPARATOR = "___"


def pair_key(a: str, b: str) -> str:
    """Canonical key for an unordered theme pair."""
    first, second = sorted((a, b))
    return f"{first}{PAIR_SEPARATOR}{second}"


def split_pair_key(key: str) -> tuple[str, str]:
    first, _, second = key.partition(PAIR_SEPARATOR)
    return first, second


@dataclass
class ThemeTallies:
    """Frequency and pair-count tables for official and custom themes."""

    official_frequency: dict[str, int] = field(default_factory=dict)
    custom_frequency: dict[str, int] = field(default_factory=dict)
    official_pairs: dict[str, int] = field(default_factory=dict)
    custom_pairs: dict[str, int] = field(default_factory=dict)
    interviews: int = 0

    def frequency(self, mode: str) -> dict[str, int]:
        return self.official_frequency if mode == "official" else self.custom_frequency

    def pairs(self, mode: str) -> dict[str, int]:
        return self.official_pairs if mode == "official" else self.custom_pairs


def _tally(
    themes: list[str],
    frequency: dict[str, int],
    pairs: dict[str, int],
) -> None:
    for theme in themes:
        frequency[theme] = frequency.get(theme, 0) + 1
    for i, first in enumerate(themes):
        for second in themes[i + 1:]:
            key = pair_key(first, second)
            pairs[key] = pairs.get(key, 0) + 1


def interview_themes(leader: Leader) -> tuple[list[str], list[str]] | None:
    """Distinct (official, custom) themes of a leader's default version.

    Returns None when the leader has no designated version.
    """
    version = leader.default_version()
    if version is None:
        return None

    # dicts as ordered sets keep iteration independent of string hashing
    official: dict[str, None] = {}
    custom: dict[str, None] = {}
    for marker in version.chapter_markers:
        official.update(dict.fromkeys(marker.themes))
        custom.update(dict.fromkeys(marker.custom_themes))
    if version.noise_segment is not None:
        official.update(dict.fromkeys(version.noise_segment.themes))
        custom.update(dict.fromkeys(version.noise_segment.custom_themes))

    return list(official), list(custom)


def extract_themes(leaders: Iterable[Leader]) -> ThemeTallies:
    tallies = ThemeTallies()
    for leader in leaders:
        themes = interview_themes(leader)
        if themes is None:
            continue
        official, custom = themes
        tallies.interviews += 1
        _tally(official, tallies.official_frequency, tallies.official_pairs)
        _tally(custom, tallies.custom_frequency, tallies.custom_pairs)
    return tallies


SORT_ORDERS = ("frequency", "frequency-asc", "alphabetical", "alphabetical-reverse")


def rank_themes(
    frequency: dict[str, int],
    *,
    sort: str = "frequency",
    limit: int | None = None,
) -> list[tuple[str, int]]:
    """Themes with counts for tabular display.

    The frequency orders sort by count (stable for ties), the alphabetical
    orders by case-insensitive name. ``limit`` keeps the first themes of the
    sorted listing.
    """
    if sort not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {sort}")

    items = list(frequency.items())
    if sort == "frequency":
        items.sort(key=lambda item: -item[1])
    elif sort == "frequency-asc":
        items.sort(key=lambda item: item[1])
    elif sort == "alphabetical":
        items.sort(key=lambda item: item[0].lower())
    else:
        items.sort(key=lambda item: item[0].lower(), reverse=True)

    if limit is not None:
        items = items[:limit]
    return items
