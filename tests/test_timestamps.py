"""Tests for timestamp parsing and display helpers."""

import pytest

from leaderlens.utils.timestamps import (
    format_qa_timestamp,
    format_timestamp,
    parse_timestamp,
    seconds_to_timestamp,
)


class TestParseTimestamp:
    @pytest.mark.parametrize("value,expected", [
        ("01:02:03", 3723),
        ("02:03", 123),
        ("45", 45),
        ("00:01:30.750", 90),
        ("00:01:30,750", 90),
        ("12.9", 12),
    ])
    def test_formats(self, value, expected):
        assert parse_timestamp(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "1:2:3:4"])
    def test_invalid_is_zero(self, value):
        assert parse_timestamp(value) == 0


class TestFormatting:
    def test_format_drops_zero_hour_and_fraction(self):
        assert format_timestamp("00:03:07.5") == "03:07"
        assert format_timestamp("01:03:07") == "01:03:07"
        assert format_timestamp(None) == ""

    def test_qa_folds_hours(self):
        assert format_qa_timestamp("01:02:03") == "62:03"
        assert format_qa_timestamp("00:05:09.2") == "5:09"

    def test_seconds_to_timestamp(self):
        assert seconds_to_timestamp(3723.9) == "01:02:03"
        assert seconds_to_timestamp(-5) == "00:00:00"
