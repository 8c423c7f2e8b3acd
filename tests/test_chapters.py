"""Tests for chapter ranges and Q&A matching."""

import math

from conftest import make_marker
from leaderlens.catalog.chapters import chapter_ranges, group_qa_by_chapter, qa_for_chapter
from leaderlens.models.leader import QASegment

MARKERS = [
    make_marker("Intro", timestamp="00:00:00"),
    make_marker("Career", timestamp="00:05:00"),
    make_marker("Advice", timestamp="00:12:30.5"),
]
QA = [
    QASegment(question="Who are you?", question_start="00:00:20"),
    QASegment(question="First job?", question_start="00:05:00"),
    QASegment(question="", answer="Be patient.", answer_start="00:13:00"),
]


class TestChapters:
    def test_ranges(self):
        ranges = chapter_ranges(MARKERS, duration=900)

        assert [(r.start, r.end) for r in ranges] == [(0, 300), (300, 750), (750, 900)]
        assert ranges[1].duration == 450

    def test_last_range_is_open_by_default(self):
        assert chapter_ranges(MARKERS)[-1].end == math.inf

    def test_qa_start_is_inclusive_end_exclusive(self):
        assert [q.question for q in qa_for_chapter(QA, "00:00:00", "00:05:00")] == ["Who are you?"]
        assert [q.question for q in qa_for_chapter(QA, "00:05:00", "00:12:30")] == ["First job?"]

    def test_answer_start_used_when_question_has_none(self):
        assert qa_for_chapter(QA, "00:12:30")[0].answer == "Be patient."

    def test_grouping(self):
        grouped = group_qa_by_chapter(MARKERS, QA)

        assert [(m.title, len(qs)) for m, qs in grouped] == [("Intro", 1), ("Career", 1), ("Advice", 1)]
