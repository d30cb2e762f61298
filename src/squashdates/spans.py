"""Turn timestamps into padded, merged work spans."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator

from .config import SquashSettings
from .models import Span


def build_spans(timestamps: Iterable[datetime], settings: SquashSettings) -> list[Span]:
    """Pad each timestamp into a span and merge spans separated by at most the margin.

    Timestamps may arrive in any order; they are sorted by instant first.
    Merging only ever moves a span's end forward.

    >>> from datetime import timezone
    >>> stamps = [datetime(2024, 5, 6, h, m, tzinfo=timezone.utc) for h, m in ((10, 0), (10, 10), (11, 0))]
    >>> [(s.start.strftime("%H:%M"), s.end.strftime("%H:%M")) for s in build_spans(stamps, SquashSettings())]
    [('09:55', '10:14'), ('10:55', '11:04')]
    """
    return list(iter_spans(sorted(timestamps), settings))


def iter_spans(ordered: Iterable[datetime], settings: SquashSettings) -> Iterator[Span]:
    """Yield spans for timestamps that are already in ascending order."""
    current: Span | None = None
    for stamp in ordered:
        start = stamp + settings.pad_before
        end = stamp + settings.pad_after
        if current is None:
            current = Span(start, end)
        elif start > current.end + settings.margin:
            yield current
            current = Span(start, end)
        else:
            current.end = end
    if current is not None:
        yield current
