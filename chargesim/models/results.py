"""Result data models produced by the simulation and its consumers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, Tuple, TypeVar

import numpy as np
import pandas as pd

T = TypeVar("T")


@dataclass(frozen=True)
class ChargingEvent:
    """A completed charging session at one chargepoint."""

    chargepoint_id: int
    start_tick: int
    end_tick: int

    @property
    def duration_ticks(self) -> int:
        return self.end_tick - self.start_tick


@dataclass(frozen=True)
class PerTickRecord:
    """Instantaneous power demand of each chargepoint during one tick (kW)."""

    power_demands_per_chargepoint_kw: Tuple[float, ...]

    @property
    def total_power_kw(self) -> float:
        return float(sum(self.power_demands_per_chargepoint_kw))


@dataclass(frozen=True)
class SimulationResult:
    """Raw output of a single simulation run."""

    per_tick_data: Tuple[PerTickRecord, ...]
    charging_events: Tuple[ChargingEvent, ...]

    def power_matrix(self) -> np.ndarray:
        """Return a (ticks, chargepoints) array of power demands in kW."""
        if not self.per_tick_data:
            return np.zeros((0, 0), dtype=float)
        return np.array(
            [record.power_demands_per_chargepoint_kw for record in self.per_tick_data],
            dtype=float,
        )

    def power_frame(self) -> pd.DataFrame:
        """Per-tick power demand with one ``cp-<id>`` column per chargepoint."""
        matrix = self.power_matrix()
        columns = [f"cp-{index}" for index in range(matrix.shape[1])]
        frame = pd.DataFrame(matrix, columns=columns)
        frame.index.name = "tick"
        return frame

    def events_frame(self) -> pd.DataFrame:
        """Charging events as a dataframe in emission order."""
        columns = ["chargepoint_id", "start_tick", "end_tick"]
        if not self.charging_events:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([asdict(event) for event in self.charging_events], columns=columns)


@dataclass(frozen=True)
class Statistics:
    """Aggregate figures derived from per-tick power telemetry."""

    total_energy_kwh: float
    theoretical_max_power_kw: float
    actual_max_power_kw: float
    concurrency_factor: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class AggregatedWindow(Generic[T]):
    """Reduced value of one aggregation window, labelled by the window start."""

    date: datetime
    value: T


def aggregated_frame(windows: Iterable[AggregatedWindow[Any]]) -> pd.DataFrame:
    """Tabulate aggregation output with ``date`` and ``value`` columns."""
    rows = [{"date": window.date, "value": window.value} for window in windows]
    if not rows:
        return pd.DataFrame(columns=["date", "value"])
    return pd.DataFrame(rows)


__all__ = [
    "AggregatedWindow",
    "ChargingEvent",
    "PerTickRecord",
    "SimulationResult",
    "Statistics",
    "aggregated_frame",
]
