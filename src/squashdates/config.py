"""Configuration models and helpers for squashdates."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, replace
from datetime import timedelta, tzinfo
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

_SQUASH_TABLE = "squash"
_KNOWN_KEYS = frozenset(
    {"pad_before_minutes", "pad_after_minutes", "margin_minutes", "timezone"}
)


@dataclass(slots=True)
class SquashSettings:
    """Padding and grouping parameters for turning timestamps into work spans.

    ``pad_before`` is normally negative: work is assumed to start shortly before
    each timestamp. ``display_timezone`` decides which calendar day, month and
    year a span belongs to; ``None`` keeps each timestamp's own offset.
    """

    pad_before: timedelta = timedelta(minutes=-5)
    pad_after: timedelta = timedelta(minutes=4)
    margin: timedelta = timedelta(minutes=15)
    display_timezone: Optional[tzinfo] = None

    @classmethod
    def from_minutes(
        cls,
        pad_before: float = -5.0,
        pad_after: float = 4.0,
        margin: float = 15.0,
        timezone_name: str | None = None,
    ) -> "SquashSettings":
        settings = cls(
            pad_before=timedelta(minutes=pad_before),
            pad_after=timedelta(minutes=pad_after),
            margin=timedelta(minutes=margin),
            display_timezone=resolve_timezone(timezone_name),
        )
        settings.validate()
        return settings

    @property
    def span_length(self) -> timedelta:
        """Length of the span produced by a single isolated timestamp."""
        return self.pad_after - self.pad_before

    def validate(self) -> None:
        if self.pad_before > self.pad_after:
            raise ValueError(
                f"pad-before ({_minutes(self.pad_before)}m) must not be later "
                f"than pad-after ({_minutes(self.pad_after)}m)"
            )
        if self.margin < timedelta(0):
            raise ValueError(f"margin must not be negative, got {_minutes(self.margin)}m")

    def with_overrides(
        self,
        *,
        pad_before: float | None = None,
        pad_after: float | None = None,
        margin: float | None = None,
        timezone_name: str | None = None,
    ) -> "SquashSettings":
        changes: dict[str, Any] = {}
        if pad_before is not None:
            changes["pad_before"] = timedelta(minutes=pad_before)
        if pad_after is not None:
            changes["pad_after"] = timedelta(minutes=pad_after)
        if margin is not None:
            changes["margin"] = timedelta(minutes=margin)
        if timezone_name is not None:
            changes["display_timezone"] = resolve_timezone(timezone_name)
        settings = replace(self, **changes)
        settings.validate()
        return settings


def resolve_timezone(name: str | None) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone {name!r}") from exc


def load_settings(path: Path, *, required: bool = False) -> SquashSettings:
    """Read settings from a TOML file with a ``[squash]`` table.

    A missing file yields the defaults unless ``required`` is set.
    """
    path = Path(path)
    if not path.exists():
        if required:
            raise ValueError(f"Config file {path} does not exist")
        logger.debug("No config file at %s; using defaults.", path)
        return SquashSettings()

    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc

    table = document.get(_SQUASH_TABLE, {})
    if not isinstance(table, dict):
        raise ValueError(f"[{_SQUASH_TABLE}] in {path} must be a table")
    unknown = sorted(set(table) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown keys in [{_SQUASH_TABLE}] of {path}: {', '.join(unknown)}")

    logger.debug("Loaded settings from %s", path)
    defaults = SquashSettings()
    return SquashSettings.from_minutes(
        pad_before=_number(table, "pad_before_minutes", _minutes(defaults.pad_before), path),
        pad_after=_number(table, "pad_after_minutes", _minutes(defaults.pad_after), path),
        margin=_number(table, "margin_minutes", _minutes(defaults.margin), path),
        timezone_name=_string(table, "timezone", path),
    )


def _number(table: dict, key: str, default: float, path: Path) -> float:
    value = table.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} in {path} must be a number, got {value!r}")
    return float(value)


def _string(table: dict, key: str, path: Path) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} in {path} must be a string, got {value!r}")
    return value


def _minutes(delta: timedelta) -> float:
    return delta.total_seconds() / 60
