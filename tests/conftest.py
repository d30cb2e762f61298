"""Shared pytest fixtures for squashdates tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

import pytest

from squashdates.config import SquashSettings
from squashdates.models import Level, Span, TotalRecord


class RecordingReport:
    """Report sink that keeps every event for inspection."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def span_listing(self, label: str, spans: Sequence[Span]) -> None:
        self.events.append(("spans", (label, list(spans))))

    def total(self, record: TotalRecord) -> None:
        self.events.append(("total", record))

    def totals(self, level: Level | None = None) -> list[TotalRecord]:
        records = [event for kind, event in self.events if kind == "total"]
        if level is None:
            return records
        return [record for record in records if record.level is level]

    def listings(self) -> list[tuple[str, list[Span]]]:
        return [event for kind, event in self.events if kind == "spans"]


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def report() -> RecordingReport:
    return RecordingReport()


@pytest.fixture
def settings() -> SquashSettings:
    return SquashSettings()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch) -> None:
    """Ensure tests never read the real per-user config file."""
    monkeypatch.setenv("SQUASHDATES_CONFIG", str(tmp_path / "missing-config.toml"))
