"""The fixed vocabulary of official interview themes.

Both prompt construction and response validation read this one constant.
"""

from __future__ import annotations

OFFICIAL_THEMES: tuple[str, ...] = (
    "Adversity",
    "Chance",
    "Change",
    "Choices",
    "Community",
    "Confidence",
    "Culture",
    "Determination & Hard Work",
    "Doubt",
    "Education",
    "Experience",
    "Exploration",
    "Failure",
    "Family",
    "Fear",
    "Fulfillment",
    "Goals",
    "Interests & Hobbies",
    "Individuality",
    "Integrity & Authenticity",
    "Inspiration",
    "Money",
    "Negativity",
    "Opportunities & Possibilities",
    "Passion",
    "Perseverance",
    "Planning",
    "Pressure",
    "Regrets",
    "Risk",
    "Self-Reflection",
    "Skills",
    "Success",
    "Support & Encouragement",
    "Trust & Hope",
    "Values",
    "Work Culture",
)

OFFICIAL_THEME_SET = frozenset(OFFICIAL_THEMES)

MAX_OFFICIAL_THEMES = 3
MAX_CUSTOM_THEMES = 2


def is_official_theme(name: str) -> bool:
    return name in OFFICIAL_THEME_SET


def split_official(
    themes: list[str],
    limit: int = MAX_OFFICIAL_THEMES,
) -> tuple[list[str], list[str]]:
    """Return (kept, rejected): vocabulary members in order, at most ``limit``.

    Duplicates are dropped silently; non-members and overflow are rejected.
    """
    kept: list[str] = []
    rejected: list[str] = []
    for theme in themes:
        if theme in kept:
            continue
        if is_official_theme(theme) and len(kept) < limit:
            kept.append(theme)
        else:
            rejected.append(theme)
    return kept, rejected
