"""Timestamp parsing and display helpers.

Accepted forms are ``HH:MM:SS``, ``MM:SS`` and bare seconds. A fractional
part after ``.`` (or the SRT-style ``,``) is always discarded before parsing.
"""

from __future__ import annotations

from leaderlens.utils.progress import log_warning


def _strip_fraction(timestamp: str) -> str:
    return timestamp.strip().split(".")[0].split(",")[0]


def parse_timestamp(timestamp: str | None) -> int:
    """Convert a timestamp string to whole seconds.

    Empty or unparseable input yields 0.
    """
    if not timestamp:
        return 0

    parts = _strip_fraction(str(timestamp)).split(":")
    try:
        values = [int(p) for p in parts]
    except ValueError:
        log_warning(f"Invalid timestamp format: {timestamp!r}")
        return 0

    if len(values) == 3:
        return values[0] * 3600 + values[1] * 60 + values[2]
    if len(values) == 2:
        return values[0] * 60 + values[1]
    if len(values) == 1:
        return values[0]

    log_warning(f"Invalid timestamp format: {timestamp!r}")
    return 0


def format_timestamp(timestamp: str | None) -> str:
    """Drop the fraction and a leading zero hour: ``00:03:07.5`` → ``03:07``."""
    if not timestamp:
        return ""
    clean = str(timestamp).split(".")[0]
    if clean.startswith("00:"):
        clean = clean[3:]
    return clean


def format_qa_timestamp(timestamp: str | None) -> str:
    """Fold hours into minutes: ``01:02:03`` → ``62:03``."""
    if not timestamp:
        return ""
    clean = _strip_fraction(str(timestamp))
    parts = clean.split(":")
    if len(parts) == 3:
        try:
            hours = int(parts[0])
        except ValueError:
            hours = 0
        try:
            minutes = int(parts[1])
        except ValueError:
            minutes = 0
        return f"{hours * 60 + minutes}:{parts[2]}"
    return clean


def seconds_to_timestamp(seconds: float) -> str:
    """Render whole seconds as ``HH:MM:SS``."""
    total = max(int(seconds), 0)
    return f"{total // 3600:02d}:{total % 3600 // 60:02d}:{total % 60:02d}"
