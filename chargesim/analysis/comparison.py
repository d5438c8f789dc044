"""Helpers that evaluate a configuration across many simulation runs."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import pandas as pd

from ..core.statistics import compute_statistics
from ..engine import simulate
from ..models.config import ChargepointType, SimulationConfig
from ..models.results import Statistics

LOGGER = logging.getLogger(__name__)


def evaluate_configuration(config: SimulationConfig) -> Statistics:
    """Simulate ``config`` once and return its statistics."""
    result = simulate(config)
    return compute_statistics(config, result.per_tick_data)


def sweep_chargepoint_counts(
    config: SimulationConfig,
    counts: Iterable[int],
    *,
    power_kw: Optional[float] = None,
) -> pd.DataFrame:
    """Concurrency factor for a site made of ``count`` identical chargepoints.

    ``power_kw`` defaults to the power of the first configured chargepoint type.
    """
    if power_kw is None:
        power_kw = config.chargepoints[0][0].power if config.chargepoints else 11.0
    rows = []
    for count in counts:
        variant = config.with_updates(chargepoints=((ChargepointType(power=power_kw), int(count)),))
        statistics = evaluate_configuration(variant)
        LOGGER.debug("%d chargepoints -> concurrency factor %.4f", count, statistics.concurrency_factor)
        rows.append({"chargepoints": int(count), **statistics.to_dict()})
    return pd.DataFrame(rows)


def repeat_runs(config: SimulationConfig, runs: int, *, seed: Optional[int] = None) -> pd.DataFrame:
    """Run ``config`` ``runs`` times, optionally pinning every run to ``seed``.

    With a seed every row is identical; without one the rows vary.
    """
    if runs <= 0:
        raise ValueError("runs must be positive")
    variant = config.with_updates(seed=seed) if seed is not None else config
    rows = []
    for run in range(1, runs + 1):
        statistics = evaluate_configuration(variant)
        rows.append(
            {
                "run": run,
                "total_energy_kwh": statistics.total_energy_kwh,
                "actual_max_power_kw": statistics.actual_max_power_kw,
            }
        )
    return pd.DataFrame(rows)


def compare_configurations(configs: Sequence[SimulationConfig]) -> pd.DataFrame:
    """Statistics of several configurations side by side, labelled by name."""
    columns = ["name", "total_energy_kwh", "theoretical_max_power_kw", "actual_max_power_kw", "concurrency_factor"]
    if not configs:
        return pd.DataFrame(columns=columns)
    rows = []
    for index, config in enumerate(configs, start=1):
        statistics = evaluate_configuration(config)
        rows.append({"name": config.name or f"config-{index}", **statistics.to_dict()})
    return pd.DataFrame(rows, columns=columns)


__all__ = [
    "compare_configurations",
    "evaluate_configuration",
    "repeat_runs",
    "sweep_chargepoint_counts",
]
