"""Stochastic simulation of EV charging-station utilisation."""

from .core.aggregation import (
    EventMembership,
    aggregate_charging_events,
    aggregate_tick_data,
    filter_charging_events,
    filter_tick_data,
)
from .core.statistics import compute_statistics
from .core.validator import ConfigurationError, parse_config
from .core.windows import CalendarUnit
from .engine import SimulationEngine, simulate
from .models.config import ArrivalStrategy, SimulationConfig
from .models.results import ChargingEvent, PerTickRecord, SimulationResult, Statistics

__all__ = [
    "ArrivalStrategy",
    "CalendarUnit",
    "ChargingEvent",
    "ConfigurationError",
    "EventMembership",
    "PerTickRecord",
    "SimulationConfig",
    "SimulationEngine",
    "SimulationResult",
    "Statistics",
    "aggregate_charging_events",
    "aggregate_tick_data",
    "compute_statistics",
    "filter_charging_events",
    "filter_tick_data",
    "parse_config",
    "simulate",
]
