"""Time-window aggregation and date filtering of simulation output.

Tick data and charging events are both mapped onto tick index ranges: a tick
belongs to the window containing its start instant, so consecutive windows
partition the ticks without overlap. Charging events are expected in
non-decreasing ``end_tick`` order, which is the order the engine emits them.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
import pandas as pd

from ..models.config import SimulationConfig
from ..models.results import AggregatedWindow, ChargingEvent, PerTickRecord
from .windows import TimeWindow, WindowSpec, make_windows, ms_from_start_of_year

T = TypeVar("T")

TickReducer = Callable[[Sequence[PerTickRecord]], T]
EventReducer = Callable[[Sequence[ChargingEvent]], Tuple[T, bool]]


class EventMembership(str, Enum):
    """How a charging event is assigned to aggregation windows."""

    OVERLAP = "overlap"
    START_POINT = "start_point"
    END_POINT = "end_point"


def window_tick_range(
    window: TimeWindow,
    start_date: datetime,
    granularity_ms: int,
    total_ticks: Optional[int] = None,
) -> Tuple[int, int]:
    """Return the ``[first, last)`` tick indices covered by ``window``."""
    origin = pd.Timestamp(start_date)
    start_offset_ms = (window.start - origin) / pd.Timedelta(milliseconds=1)
    end_offset_ms = start_offset_ms + window.duration_ms
    first = max(0, math.ceil(start_offset_ms / granularity_ms))
    last = max(0, math.ceil(end_offset_ms / granularity_ms))
    if total_ticks is not None:
        first = min(first, total_ticks)
        last = min(last, total_ticks)
    return first, last


def aggregate_tick_data(
    config: SimulationConfig,
    tick_data: Sequence[PerTickRecord],
    start_date: datetime,
    window: WindowSpec,
    reducer: TickReducer,
) -> List[AggregatedWindow[T]]:
    """Reduce per-tick records window by window.

    ``start_date`` is the real-world instant of ``tick_data[0]``. Windows that
    contain no tick are skipped.
    """
    total_ticks = len(tick_data)
    if total_ticks == 0:
        return []

    granularity_ms = config.simulation_granularity_ms
    origin = pd.Timestamp(start_date)
    end = origin + pd.Timedelta(milliseconds=total_ticks * granularity_ms)

    results: List[AggregatedWindow[T]] = []
    for time_window in make_windows(origin, end, window):
        first, last = window_tick_range(time_window, origin, granularity_ms, total_ticks)
        if first >= last:
            continue
        results.append(AggregatedWindow(date=time_window.start, value=reducer(tick_data[first:last])))
    return results


def _event_in_window(
    event: ChargingEvent, first: int, last: int, membership: EventMembership
) -> bool:
    if membership == EventMembership.OVERLAP:
        return event.start_tick < last and event.end_tick >= first
    if membership == EventMembership.START_POINT:
        return first <= event.start_tick < last
    return first <= event.end_tick < last


def aggregate_charging_events(
    config: SimulationConfig,
    charging_events: Sequence[ChargingEvent],
    start_date: datetime,
    window: WindowSpec,
    reducer: EventReducer,
    membership: EventMembership = EventMembership.OVERLAP,
) -> List[AggregatedWindow[T]]:
    """Reduce charging events window by window.

    ``reducer`` receives the events belonging to a window (possibly none) and
    returns ``(value, proceed)``. Aggregation stops after a window whose
    ``proceed`` flag is false, or once every event ended before the current
    window. Default windows extend to the tick after the last event ends.
    """
    if not charging_events:
        return []

    membership = EventMembership(membership)
    granularity_ms = config.simulation_granularity_ms
    origin = pd.Timestamp(start_date)
    max_end_tick = charging_events[-1].end_tick
    end = origin + pd.Timedelta(milliseconds=(max_end_tick + 1) * granularity_ms)

    # Events are sorted by end tick only; the longest session bounds how far
    # past a window's end an overlapping event can still finish.
    max_duration = max(event.duration_ticks for event in charging_events)

    results: List[AggregatedWindow[T]] = []
    pointer = 0
    for time_window in make_windows(origin, end, window):
        first, last = window_tick_range(time_window, origin, granularity_ms)
        if first >= last:
            continue

        while pointer < len(charging_events) and charging_events[pointer].end_tick < first:
            pointer += 1
        if pointer >= len(charging_events):
            break

        if membership == EventMembership.END_POINT:
            scan_limit = last
        else:
            scan_limit = last + max_duration

        in_window: List[ChargingEvent] = []
        for index in range(pointer, len(charging_events)):
            event = charging_events[index]
            if event.end_tick >= scan_limit:
                break
            if _event_in_window(event, first, last, membership):
                in_window.append(event)

        value, proceed = reducer(in_window)
        results.append(AggregatedWindow(date=time_window.start, value=value))
        if not proceed:
            break
    return results


def filter_tick_data(
    config: SimulationConfig,
    tick_data: Sequence[PerTickRecord],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[PerTickRecord]:
    """Keep the ticks between ``start`` and ``end``.

    Both bounds are interpreted as offsets from the start of their calendar
    year. An inverted or empty range yields an empty list.
    """
    granularity_ms = config.simulation_granularity_ms
    total = len(tick_data)
    first = 0
    last = total
    if start is not None:
        first = min(max(0, math.floor(ms_from_start_of_year(start) / granularity_ms)), total)
    if end is not None:
        last = min(max(0, math.ceil(ms_from_start_of_year(end) / granularity_ms)), total)
    if first >= last:
        return []
    return list(tick_data[first:last])


def filter_charging_events(
    config: SimulationConfig,
    charging_events: Sequence[ChargingEvent],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[ChargingEvent]:
    """Keep events whose ``[start_tick, end_tick]`` interval overlaps the range."""
    granularity_ms = config.simulation_granularity_ms
    first = 0
    last: Optional[int] = None
    if start is not None:
        first = max(0, math.floor(ms_from_start_of_year(start) / granularity_ms))
    if end is not None:
        last = max(0, math.ceil(ms_from_start_of_year(end) / granularity_ms))
    if last is not None and first >= last:
        return []
    return [
        event
        for event in charging_events
        if (last is None or event.start_tick < last) and event.end_tick >= first
    ]


# ------------------------------------------------------------------ Reducers
def mean_power_per_chargepoint(window: Sequence[PerTickRecord]) -> List[float]:
    """Average power demand of each chargepoint over the window."""
    matrix = np.array([record.power_demands_per_chargepoint_kw for record in window], dtype=float)
    return [float(value) for value in matrix.mean(axis=0)]


def mean_total_power(window: Sequence[PerTickRecord]) -> float:
    """Average total power of the site over the window."""
    return float(np.mean([record.total_power_kw for record in window]))


def count_events(events: Sequence[ChargingEvent]) -> Tuple[int, bool]:
    """Number of charging events in the window; never stops aggregation early."""
    return len(events), True


__all__ = [
    "EventMembership",
    "aggregate_charging_events",
    "aggregate_tick_data",
    "count_events",
    "filter_charging_events",
    "filter_tick_data",
    "mean_power_per_chargepoint",
    "mean_total_power",
    "window_tick_range",
]
