"""Chapter ranges and Q&A-to-chapter matching for playback views."""

from __future__ import annotations

import math
from dataclasses import dataclass

from leaderlens.models.leader import ChapterMarker, QASegment
from leaderlens.utils.timestamps import parse_timestamp


@dataclass
class ChapterRange:
    """A chapter with its resolved start and end in seconds."""

    marker: ChapterMarker
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


def chapter_ranges(
    markers: list[ChapterMarker],
    duration: float = math.inf,
) -> list[ChapterRange]:
    """Each chapter runs until the next marker, the last until ``duration``."""
    ranges = []
    for i, marker in enumerate(markers):
        start = parse_timestamp(marker.timestamp)
        end = parse_timestamp(markers[i + 1].timestamp) if i + 1 < len(markers) else duration
        ranges.append(ChapterRange(marker=marker, start=start, end=end))
    return ranges


def qa_for_chapter(
    qa_segments: list[QASegment],
    chapter_timestamp: str,
    next_chapter_timestamp: str | None = None,
) -> list[QASegment]:
    """Q&A segments whose start falls inside the chapter.

    A segment starts at its question, or at its answer when the question has
    no timestamp.
    """
    start = parse_timestamp(chapter_timestamp)
    end = parse_timestamp(next_chapter_timestamp) if next_chapter_timestamp else math.inf

    return [
        qa for qa in qa_segments
        if start <= parse_timestamp(qa.question_start or qa.answer_start) < end
    ]


def group_qa_by_chapter(
    markers: list[ChapterMarker],
    qa_segments: list[QASegment],
) -> list[tuple[ChapterMarker, list[QASegment]]]:
    grouped = []
    for i, marker in enumerate(markers):
        following = markers[i + 1].timestamp if i + 1 < len(markers) else None
        grouped.append((marker, qa_for_chapter(qa_segments, marker.timestamp, following)))
    return grouped
