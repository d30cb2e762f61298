"""Command-line interface for squashdates."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

import typer

from .aggregation import squash
from .config import SquashSettings, load_settings
from .parsing import TimestampParseError, filter_since, parse_timestamp, read_timestamps
from .paths import get_config_path
from .reporting import ConsoleReport, NullReport, format_mech

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Estimate time worked from a list of timestamps such as commit dates.",
    add_completion=False,
)


@app.command()
def main(
    files: Optional[List[Path]] = typer.Argument(
        None,
        help="Files with one timestamp per line. Reads stdin when omitted or '-'.",
        show_default=False,
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show day totals."),
    mech: bool = typer.Option(
        False, "--mech", help="Output # seconds followed by last time seen."
    ),
    since: Optional[str] = typer.Option(
        None, "--since", help="Only include timestamps at or after this one."
    ),
    pad_before: Optional[float] = typer.Option(
        None,
        "--pad-before",
        help="Minutes added to each timestamp to get the span start (usually negative).",
    ),
    pad_after: Optional[float] = typer.Option(
        None, "--pad-after", help="Minutes added to each timestamp to get the span end."
    ),
    margin: Optional[float] = typer.Option(
        None, "--margin", help="Join spans separated by at most this many minutes."
    ),
    timezone_name: Optional[str] = typer.Option(
        None,
        "--timezone",
        "--tz",
        help="IANA timezone used to group days. Defaults to each timestamp's own offset.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        path_type=Path,
        help="Settings file with a [squash] table.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
) -> None:
    """Squash timestamps into padded spans and report day, month and year totals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
    )

    settings = _resolve_settings(
        config_path,
        pad_before=pad_before,
        pad_after=pad_after,
        margin=margin,
        timezone_name=timezone_name,
    )
    since_moment = None
    if since is not None:
        try:
            since_moment = parse_timestamp(since)
        except TimestampParseError as exc:
            raise typer.BadParameter(str(exc), param_hint="'--since'") from exc

    timestamps = filter_since(read_timestamps(_iter_lines(files or [])), since_moment)
    sink = NullReport() if mech else ConsoleReport()
    summary = squash(timestamps, settings, sink, quiet=quiet)

    if mech:
        for line in format_mech(summary):
            typer.echo(line)


def _resolve_settings(
    config_path: Optional[Path],
    *,
    pad_before: Optional[float],
    pad_after: Optional[float],
    margin: Optional[float],
    timezone_name: Optional[str],
) -> SquashSettings:
    try:
        settings = load_settings(
            config_path or get_config_path(), required=config_path is not None
        )
        return settings.with_overrides(
            pad_before=pad_before,
            pad_after=pad_after,
            margin=margin,
            timezone_name=timezone_name,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _iter_lines(files: List[Path]) -> Iterator[str]:
    if not files:
        yield from _stdin()
        return
    for path in files:
        if str(path) == "-":
            yield from _stdin()
            continue
        try:
            with path.open(encoding="utf-8", errors="replace") as handle:
                yield from handle
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)


def _stdin() -> TextIO:
    # undecodable bytes in commit subjects must not abort the run
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="replace")
    return sys.stdin
