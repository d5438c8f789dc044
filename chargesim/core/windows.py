"""Lazy generation of aggregation windows over simulated time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator, Union

import pandas as pd

from .validator import ConfigurationError


class CalendarUnit(str, Enum):
    """Calendar-aligned aggregation buckets."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class TimeWindow:
    start: pd.Timestamp
    duration_ms: int

    @property
    def end(self) -> pd.Timestamp:
        return self.start + pd.Timedelta(milliseconds=self.duration_ms)


def _elapsed_ms(start: pd.Timestamp, end: pd.Timestamp) -> int:
    return int((end - start) // pd.Timedelta(milliseconds=1))


def calendar_window_start(moment: pd.Timestamp, unit: CalendarUnit) -> pd.Timestamp:
    """Start of the calendar window containing ``moment``."""
    if unit == CalendarUnit.HOURLY:
        return moment.floor("h")
    if unit == CalendarUnit.DAILY:
        return moment.normalize()
    if unit == CalendarUnit.WEEKLY:
        return moment.normalize() - pd.Timedelta(days=moment.weekday())
    if unit == CalendarUnit.MONTHLY:
        return moment.normalize().replace(day=1)
    if unit == CalendarUnit.YEARLY:
        return moment.normalize().replace(month=1, day=1)
    raise ConfigurationError(f"Unsupported calendar unit: {unit!r}")


def next_calendar_window_start(window_start: pd.Timestamp, unit: CalendarUnit) -> pd.Timestamp:
    """Exclusive end of the calendar window starting at ``window_start``."""
    if unit == CalendarUnit.HOURLY:
        return window_start + pd.Timedelta(hours=1)
    if unit == CalendarUnit.DAILY:
        return window_start + pd.Timedelta(days=1)
    if unit == CalendarUnit.WEEKLY:
        return window_start + pd.Timedelta(weeks=1)
    if unit == CalendarUnit.MONTHLY:
        return window_start + pd.DateOffset(months=1)
    if unit == CalendarUnit.YEARLY:
        return window_start + pd.DateOffset(years=1)
    raise ConfigurationError(f"Unsupported calendar unit: {unit!r}")


class FixedWindows:
    """Back-to-back windows of ``period_ms``; the last one is clipped to ``end``."""

    def __init__(self, start: datetime, end: datetime, period_ms: int) -> None:
        if period_ms <= 0:
            raise ConfigurationError(f"Window duration must be positive, got {period_ms} ms")
        self.start = pd.Timestamp(start)
        self.end = pd.Timestamp(end)
        self.period_ms = int(period_ms)

    def __iter__(self) -> Iterator[TimeWindow]:
        total_ms = _elapsed_ms(self.start, self.end)
        offset = 0
        while offset < total_ms:
            duration = min(self.period_ms, total_ms - offset)
            yield TimeWindow(self.start + pd.Timedelta(milliseconds=offset), duration)
            offset += self.period_ms


class CalendarWindows:
    """Calendar-aligned windows covering ``[start, end)``.

    The first window begins at the calendar boundary at or before ``start``;
    the last one is clipped to ``end``.
    """

    def __init__(self, start: datetime, end: datetime, unit: Union[CalendarUnit, str]) -> None:
        try:
            self.unit = CalendarUnit(unit)
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported calendar unit: {unit!r}") from exc
        self.start = pd.Timestamp(start)
        self.end = pd.Timestamp(end)

    def __iter__(self) -> Iterator[TimeWindow]:
        current = calendar_window_start(self.start, self.unit)
        while current < self.end:
            following = next_calendar_window_start(current, self.unit)
            yield TimeWindow(current, _elapsed_ms(current, min(following, self.end)))
            current = following


WindowGenerator = Union[FixedWindows, CalendarWindows]
WindowSpec = Union[int, CalendarUnit, str, FixedWindows, CalendarWindows]


def make_windows(start: datetime, end: datetime, window: WindowSpec) -> WindowGenerator:
    """Build a window generator from a period in ms, a calendar unit, or pass one through."""
    if isinstance(window, (FixedWindows, CalendarWindows)):
        return window
    if isinstance(window, bool):
        raise ConfigurationError(f"Unsupported aggregation window: {window!r}")
    if isinstance(window, (int, float)):
        if window <= 0:
            raise ConfigurationError(f"Window duration must be positive, got {window} ms")
        return FixedWindows(start, end, int(window))
    return CalendarWindows(start, end, window)


def ms_from_start_of_year(moment: datetime) -> int:
    """Milliseconds elapsed since January 1st, 00:00 of ``moment``'s year."""
    timestamp = pd.Timestamp(moment)
    return _elapsed_ms(calendar_window_start(timestamp, CalendarUnit.YEARLY), timestamp)


__all__ = [
    "CalendarUnit",
    "CalendarWindows",
    "FixedWindows",
    "TimeWindow",
    "WindowGenerator",
    "WindowSpec",
    "calendar_window_start",
    "make_windows",
    "ms_from_start_of_year",
    "next_calendar_window_start",
]
