"""Tests for timestamp parsing."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

import squashdates.parsing as parsing
from conftest import utc


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2024-05-06T10:00:00Z", utc(2024, 5, 6, 10, 0)),
        (
            "2024-05-06T10:00:00-07:00",
            datetime(2024, 5, 6, 10, 0, tzinfo=timezone(timedelta(hours=-7))),
        ),
        (
            "2024-05-06T10:00:00+05:30",
            datetime(2024, 5, 6, 10, 0, tzinfo=timezone(timedelta(hours=5, minutes=30))),
        ),
        ("2024-05-06T10:00:00Z Fix the build", utc(2024, 5, 6, 10, 0)),
        ("2024-05-06T10:00:00+00:00 abc123", utc(2024, 5, 6, 10, 0)),
    ],
)
def test_parse_timestamp(text, expected):
    parsed = parsing.parse_timestamp(text)
    assert parsed == expected
    assert parsed.utcoffset() == expected.utcoffset()


@pytest.mark.parametrize(
    "text",
    [
        "",
        "yesterday",
        "2024-05-06",
        "2024-05-06 10:00:00+00:00",
        "2024-13-06T10:00:00+00:00",
        "2024-05-06T10:00:00",
    ],
)
def test_parse_timestamp_rejects(text):
    with pytest.raises(parsing.TimestampParseError):
        parsing.parse_timestamp(text)


def test_read_timestamps_skips_bad_lines_with_warning(caplog):
    lines = [
        "2024-05-06T10:00:00Z\n",
        "not a date\n",
        "\n",
        "2024-05-06T11:00:00+02:00\r\n",
    ]
    with caplog.at_level(logging.WARNING, logger="squashdates.parsing"):
        stamps = parsing.read_timestamps(lines)
    assert stamps == [utc(2024, 5, 6, 10, 0), utc(2024, 5, 6, 9, 0)]
    assert len(caplog.records) == 1
    assert "line 2" in caplog.records[0].getMessage()


def test_filter_since_is_inclusive():
    since = utc(2024, 5, 6, 10, 0)
    stamps = [utc(2024, 5, 6, 9, 59, 59), since, utc(2024, 5, 6, 10, 0, 1)]
    assert parsing.filter_since(stamps, since) == stamps[1:]


def test_filter_since_compares_instants():
    since = datetime(2024, 5, 6, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert parsing.filter_since([utc(2024, 5, 6, 10, 0)], since) == [utc(2024, 5, 6, 10, 0)]
    assert parsing.filter_since([utc(2024, 5, 6, 9, 59)], since) == []


def test_filter_since_none_keeps_everything():
    stamps = [utc(2024, 5, 6, 10, 0)]
    assert parsing.filter_since(stamps, None) == stamps


def test_read_timestamps_logs_blank_lines_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="squashdates.parsing"):
        stamps = parsing.read_timestamps(["\n", "2024-05-06T10:00:00Z\n"])
    assert stamps == [utc(2024, 5, 6, 10, 0)]
    assert [record.levelno for record in caplog.records] == [logging.DEBUG]
    assert "blank line 1" in caplog.records[0].getMessage()
