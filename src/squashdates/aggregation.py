"""Roll work spans up into day, month and year totals."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional, Protocol, Sequence

from .config import SquashSettings
from .models import DayGroup, Level, Span, Summary, TotalRecord
from .spans import iter_spans

logger = logging.getLogger(__name__)

DAY_KEY_FORMAT = "%Y-%m-%d"
DAY_FORMAT = "%a %b %d"
MONTH_FORMAT = "%b %Y"
YEAR_FORMAT = "%Y"


class ReportSink(Protocol):
    """Receives report events in the order the aggregator produces them."""

    def span_listing(self, label: str, spans: Sequence[Span]) -> None:
        ...

    def total(self, record: TotalRecord) -> None:
        ...


class TotalAccumulator:
    """Running total for one month or one year."""

    def __init__(self, level: Level) -> None:
        self.level = level
        self.label: Optional[str] = None
        self.total = timedelta(0)

    def add(self, duration: timedelta) -> None:
        self.total += duration

    def flush(self) -> Optional[TotalRecord]:
        """Return the finished record and reset; ``None`` if nothing was added."""
        if not self.total:
            return None
        record = TotalRecord(self.level, self.label or "", self.total)
        self.total = timedelta(0)
        return record


class Aggregator:
    """Group spans by calendar day and cascade totals up to months and years.

    Feed spans in start order through :meth:`add`, then call :meth:`finish`.
    Day, month and year boundaries are detected by comparing labels rendered
    in ``display_timezone`` (each span's own offset when ``None``).
    """

    def __init__(
        self,
        sink: ReportSink,
        *,
        quiet: bool = False,
        display_timezone: Optional[tzinfo] = None,
    ) -> None:
        self.sink = sink
        self.quiet = quiet
        self.display_timezone = display_timezone
        self.overall = timedelta(0)
        self._day: Optional[DayGroup] = None
        self._month = TotalAccumulator(Level.MONTH)
        self._year = TotalAccumulator(Level.YEAR)

    def add(self, span: Span) -> None:
        local_start = self._localize(span.start)
        key = local_start.strftime(DAY_KEY_FORMAT)
        if self._day is not None and self._day.key != key:
            self.flush_day()
        if self._day is None:
            self._day = DayGroup(
                key=key,
                label=local_start.strftime(DAY_FORMAT),
                month_label=local_start.strftime(MONTH_FORMAT),
                year_label=local_start.strftime(YEAR_FORMAT),
            )
        self._day.spans.append(span)

    def flush_day(self) -> None:
        day = self._day
        if day is None:
            return
        if self._month.label is not None and self._month.label != day.month_label:
            # a new year reports its predecessor before the last month
            if self._year.label is not None and self._year.label != day.year_label:
                self.flush_year()
            self.flush_month()
        self._month.label = day.month_label
        self._year.label = day.year_label

        total = day.total
        self._month.add(total)
        self._year.add(total)
        self.overall += total
        if not self.quiet:
            self.sink.span_listing(day.label, [self._display(span) for span in day.spans])
        self.sink.total(TotalRecord(Level.DAY, day.label, total))
        logger.debug("Flushed %s with %d span(s)", day.key, len(day.spans))
        self._day = None

    def flush_month(self) -> None:
        self._emit(self._month.flush())

    def flush_year(self) -> None:
        self._emit(self._year.flush())

    def finish(self) -> timedelta:
        self.flush_day()
        self.flush_month()
        self.flush_year()
        return self.overall

    def _emit(self, record: Optional[TotalRecord]) -> None:
        if record is not None:
            self.sink.total(record)

    def _localize(self, moment: datetime) -> datetime:
        if self.display_timezone is None:
            return moment
        return moment.astimezone(self.display_timezone)

    def _display(self, span: Span) -> Span:
        return Span(self._localize(span.start), self._localize(span.end))


def squash(
    timestamps: Iterable[datetime],
    settings: SquashSettings,
    sink: ReportSink,
    *,
    quiet: bool = False,
) -> Summary:
    """Estimate worked time for ``timestamps`` and report it to ``sink``.

    Returns the overall duration together with the latest timestamp seen,
    which is ``None`` for empty input.
    """
    ordered = sorted(timestamps)
    aggregator = Aggregator(sink, quiet=quiet, display_timezone=settings.display_timezone)
    for span in iter_spans(ordered, settings):
        aggregator.add(span)
    total = aggregator.finish()
    most_recent = ordered[-1] if ordered else None
    logger.debug("Squashed %d timestamp(s) into %s", len(ordered), total)
    return Summary(total=total, most_recent=most_recent)
