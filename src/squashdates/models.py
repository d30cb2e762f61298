"""Domain models for work spans and their totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


@dataclass(slots=True)
class Span:
    """A continuous period of inferred work."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class Level(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True, slots=True)
class TotalRecord:
    """A finished total for one calendar day, month or year."""

    level: Level
    label: str
    total: timedelta


@dataclass(slots=True)
class DayGroup:
    """Spans that start on the same calendar day, in start order."""

    key: str
    label: str
    month_label: str
    year_label: str
    spans: list[Span] = field(default_factory=list)

    @property
    def total(self) -> timedelta:
        return sum((span.duration for span in self.spans), timedelta(0))


@dataclass(frozen=True, slots=True)
class Summary:
    """Overall result of a squash run.

    ``most_recent`` is ``None`` when there was no input at all.
    """

    total: timedelta
    most_recent: Optional[datetime]

    @property
    def total_seconds(self) -> int:
        return int(self.total.total_seconds())
