"""Reduction of per-tick power telemetry into summary statistics."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..models.config import SimulationConfig
from ..models.results import PerTickRecord, SimulationResult, Statistics


def compute_statistics(config: SimulationConfig, per_tick_data: Sequence[PerTickRecord]) -> Statistics:
    """Return total energy, peak power and the concurrency factor of a run.

    The concurrency factor is defined as 0 when no chargepoint power is
    installed, instead of propagating a division by zero.
    """
    theoretical_max = config.theoretical_max_power_kw

    if per_tick_data:
        tick_totals = np.array([sum(record.power_demands_per_chargepoint_kw) for record in per_tick_data], dtype=float)
        actual_max = max(float(tick_totals.max()), 0.0)
        total_energy = float(tick_totals.sum() * config.tick_duration_hours)
    else:
        actual_max = 0.0
        total_energy = 0.0

    concurrency_factor = actual_max / theoretical_max if theoretical_max > 0 else 0.0

    return Statistics(
        total_energy_kwh=total_energy,
        theoretical_max_power_kw=theoretical_max,
        actual_max_power_kw=actual_max,
        concurrency_factor=concurrency_factor,
    )


def events_energy_kwh(config: SimulationConfig, result: SimulationResult) -> float:
    """Energy delivered by the completed charging events of ``result``.

    Equals the telemetry-based total when no session is still running at the
    end of the horizon.
    """
    if not result.charging_events:
        return 0.0
    power_by_chargepoint = np.array(
        [cp_type.power for cp_type, count in config.chargepoints for _ in range(count)],
        dtype=float,
    )
    ids = np.array([event.chargepoint_id for event in result.charging_events], dtype=int)
    durations = np.array([event.duration_ticks for event in result.charging_events], dtype=float)
    return float((durations * power_by_chargepoint[ids]).sum() * config.tick_duration_hours)


__all__ = ["compute_statistics", "events_energy_kwh"]
