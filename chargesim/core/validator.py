"""Configuration validation utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from ..models.config import (
    HOURS_PER_DAY,
    MS_PER_HOUR,
    PROBABILITY_TOLERANCE,
    ArrivalStrategy,
    SimulationConfig,
)

LOGGER = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a simulation configuration cannot be accepted."""


def _format_pydantic_error(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "config"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_config(payload: Union[str, bytes, Mapping[str, Any], SimulationConfig]) -> SimulationConfig:
    """Build a validated configuration from a JSON document or mapping."""
    if isinstance(payload, SimulationConfig):
        validate_config(payload)
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            config = SimulationConfig.model_validate_json(payload)
        else:
            config = SimulationConfig.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ConfigurationError(_format_pydantic_error(exc)) from exc
    validate_config(config)
    return config


def load_config_file(path: Union[str, Path]) -> SimulationConfig:
    """Read and validate a JSON configuration file."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file {file_path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Configuration file {file_path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file {file_path} must contain a JSON object")
    config = parse_config(payload)
    LOGGER.debug("Loaded configuration %r from %s", config.name, file_path)
    return config


def validate_config(config: SimulationConfig) -> None:
    """Check run invariants on an already constructed configuration.

    Models built through ``model_construct`` bypass pydantic validation, so the
    engine calls this before starting the simulation loop.
    """
    granularity = config.simulation_granularity_ms
    if not isinstance(granularity, int) or granularity <= 0:
        raise ConfigurationError(f"Simulation granularity must be a positive integer, got {granularity!r}")
    if MS_PER_HOUR % granularity != 0:
        raise ConfigurationError(
            f"Simulation granularity {granularity} ms does not divide one hour evenly"
        )

    hourly = config.arrival_at_hour.probability_distribution
    if len(hourly) != HOURS_PER_DAY:
        raise ConfigurationError(
            f"Arrival probability table must have {HOURS_PER_DAY} entries, got {len(hourly)}"
        )
    if any(not 0.0 <= p <= 1.0 for p in hourly):
        raise ConfigurationError("Arrival probabilities must be within [0, 1]")
    if config.arrival_at_hour.multiplier < 0:
        raise ConfigurationError("Arrival multiplier cannot be negative")

    total = 0.0
    for km, probability in config.charging_needs.probability_distribution:
        if km < 0 or not 0.0 <= probability <= 1.0:
            raise ConfigurationError(f"Invalid charging need entry ({km}, {probability})")
        total += probability
    if total > 1.0 + PROBABILITY_TOLERANCE:
        raise ConfigurationError(f"Charging need probabilities sum to {total:.6f}, exceeding 1")

    for chargepoint_type, count in config.chargepoints:
        if chargepoint_type.power < 0 or count < 0:
            raise ConfigurationError(
                f"Invalid chargepoint entry ({chargepoint_type.power} kW, {count})"
            )

    if config.car_consumption_kwh_per_100km < 0:
        raise ConfigurationError("Car consumption cannot be negative")

    if not isinstance(config.arrival_strategy, ArrivalStrategy):
        try:
            ArrivalStrategy(config.arrival_strategy)
        except ValueError as exc:
            raise ConfigurationError(
                f"Unsupported arrival strategy: {config.arrival_strategy!r}"
            ) from exc


__all__ = ["ConfigurationError", "load_config_file", "parse_config", "validate_config"]
