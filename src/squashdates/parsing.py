"""Utilities to read timestamps from text lines."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

OFFSET_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# 2006-01-02T15:04:05Z / 2006-01-02T15:04:05-07:00
_UTC_WIDTH = 20
_OFFSET_WIDTH = 25


class TimestampParseError(ValueError):
    """Raised when a line does not start with a supported timestamp."""


def parse_timestamp(text: str) -> datetime:
    """Parse the fixed-width timestamp at the start of ``text``.

    Anything after the timestamp is ignored, so ``git log --format='%aI %s'``
    output can be fed in directly.
    """
    if len(text) >= _UTC_WIDTH and text[_UTC_WIDTH - 1] == "Z":
        prefix, fmt = text[:_UTC_WIDTH], UTC_FORMAT
    else:
        prefix, fmt = text[:_OFFSET_WIDTH], OFFSET_FORMAT
        if len(prefix) < _OFFSET_WIDTH:
            raise TimestampParseError(f"Timestamp {text!r} is too short")
    try:
        parsed = datetime.strptime(prefix, fmt)
    except ValueError as exc:
        raise TimestampParseError(f"Cannot parse timestamp from {text!r}: {exc}") from exc
    if fmt == UTC_FORMAT:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_timestamps(lines: Iterable[str]) -> list[datetime]:
    """Parse every line, warning about and skipping the ones that fail."""
    timestamps: list[datetime] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            logger.debug("Skipping blank line %d", lineno)
            continue
        try:
            timestamps.append(parse_timestamp(line))
        except TimestampParseError as exc:
            logger.warning("Skipping line %d: %s", lineno, exc)
    return timestamps


def filter_since(timestamps: Iterable[datetime], since: Optional[datetime]) -> list[datetime]:
    """Drop timestamps strictly before ``since``; equal ones are kept."""
    if since is None:
        return list(timestamps)
    return [stamp for stamp in timestamps if stamp >= since]
