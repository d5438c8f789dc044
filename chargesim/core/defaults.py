"""Default simulation inputs used by the CLI and the analysis helpers."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..models.config import ArrivalStrategy, SimulationConfig

DEFAULT_SIMULATION_GRANULARITY_MS = 15 * 60 * 1000
DEFAULT_CHARGEPOINT_POWER_KW = 11.0
DEFAULT_CHARGEPOINT_COUNT = 20
DEFAULT_CAR_CONSUMPTION_KWH_PER_100KM = 18.0

# Probability of a car arriving at a chargepoint during each hour of the day.
DEFAULT_HOURLY_ARRIVAL_PROBABILITY_DISTRIBUTION: List[float] = [
    0.0094,  # 00:00
    0.0094,
    0.0094,
    0.0094,
    0.0094,
    0.0094,
    0.0094,
    0.0094,
    0.0283,  # 08:00
    0.0283,
    0.0566,
    0.0566,
    0.0566,
    0.0755,  # 13:00
    0.0755,
    0.0755,
    0.1038,  # 16:00
    0.1038,
    0.1038,
    0.0472,  # 19:00
    0.0472,
    0.0472,
    0.0094,  # 22:00
    0.0094,
]

# (distance in km, probability); 0 km means the car does not need to charge.
DEFAULT_CHARGING_DEMAND_PROBABILITY_DISTRIBUTION: List[Tuple[float, float]] = [
    (0.0, 0.3431),
    (5.0, 0.0490),
    (10.0, 0.0980),
    (20.0, 0.1176),
    (30.0, 0.0882),
    (50.0, 0.1176),
    (100.0, 0.1078),
    (200.0, 0.0490),
    (300.0, 0.0294),
]


def default_config_payload() -> Dict[str, Any]:
    """Return the default configuration as a wire-format dictionary."""
    return {
        "simulationGranularityMs": DEFAULT_SIMULATION_GRANULARITY_MS,
        "chargepoints": [[{"power": DEFAULT_CHARGEPOINT_POWER_KW}, DEFAULT_CHARGEPOINT_COUNT]],
        "arrivalAtHour": {
            "probabilityDistribution": list(DEFAULT_HOURLY_ARRIVAL_PROBABILITY_DISTRIBUTION),
            "multiplier": 1.0,
        },
        "chargingNeeds": {
            "probabilityDistribution": [
                list(pair) for pair in DEFAULT_CHARGING_DEMAND_PROBABILITY_DISTRIBUTION
            ],
        },
        "carConsumptionKWhPer100km": DEFAULT_CAR_CONSUMPTION_KWH_PER_100KM,
        "considerDST": False,
        "arrivalStrategy": ArrivalStrategy.NO_ARRIVAL_IF_OCCUPIED.value,
    }


def default_config(**overrides: Any) -> SimulationConfig:
    """Build the default configuration, applying snake_case ``overrides``."""
    config = SimulationConfig.model_validate(default_config_payload())
    if overrides:
        config = config.with_updates(**overrides)
    return config


__all__ = [
    "DEFAULT_CAR_CONSUMPTION_KWH_PER_100KM",
    "DEFAULT_CHARGEPOINT_COUNT",
    "DEFAULT_CHARGEPOINT_POWER_KW",
    "DEFAULT_CHARGING_DEMAND_PROBABILITY_DISTRIBUTION",
    "DEFAULT_HOURLY_ARRIVAL_PROBABILITY_DISTRIBUTION",
    "DEFAULT_SIMULATION_GRANULARITY_MS",
    "default_config",
    "default_config_payload",
]
