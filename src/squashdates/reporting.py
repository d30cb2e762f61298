"""Reporting utilities for CLI output."""

from __future__ import annotations

from datetime import timedelta, timezone
from typing import Sequence

import typer

from .models import Level, Span, Summary, TotalRecord
from .parsing import UTC_FORMAT

TIME_FORMAT = "%H:%M"

_TOTAL_INDENT = {
    Level.DAY: "    ",
    Level.MONTH: "  ",
    Level.YEAR: "",
}


class ConsoleReport:
    """Render span listings and totals as an indented, colorized report."""

    def __init__(self, *, err: bool = False) -> None:
        self.err = err

    def span_listing(self, label: str, spans: Sequence[Span]) -> None:
        self._echo(f"      {_dim('Spans for')} {_label(label)}{_dim(':')}")
        for span in spans:
            self._echo(
                f"    {_label(span.start.strftime(TIME_FORMAT))} {_dim('->')} "
                f"{_label(span.end.strftime(TIME_FORMAT))}{_dim(':')} "
                f"{format_hours(span.duration)}"
            )

    def total(self, record: TotalRecord) -> None:
        indent = _TOTAL_INDENT[record.level]
        self._echo(
            f"{indent}{_dim('Total for')} {_label(record.label)}{_dim(':')} "
            f"{format_hours(record.total)}"
        )

    def _echo(self, message: str) -> None:
        typer.echo(message, err=self.err)


class NullReport:
    """Discard every report event."""

    def span_listing(self, label: str, spans: Sequence[Span]) -> None:
        pass

    def total(self, record: TotalRecord) -> None:
        pass


def format_hours(duration: timedelta) -> str:
    hours = duration.total_seconds() / 3600
    return f"{typer.style(f'{hours:.1f}', fg=typer.colors.GREEN)} {_dim('hours.')}"


def format_mech(summary: Summary) -> list[str]:
    """Machine-readable summary: total seconds, then the latest timestamp in UTC."""
    lines = [str(summary.total_seconds)]
    if summary.most_recent is not None:
        lines.append(summary.most_recent.astimezone(timezone.utc).strftime(UTC_FORMAT))
    return lines


def _dim(text: str) -> str:
    return typer.style(text, dim=True)


def _label(text: str) -> str:
    return typer.style(text, fg=typer.colors.CYAN)
