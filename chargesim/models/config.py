"""Simulation configuration data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MS_PER_HOUR = 60 * 60 * 1000
HOURS_PER_DAY = 24
DAYS_PER_YEAR = 365
PROBABILITY_TOLERANCE = 1e-9


class ArrivalStrategy(str, Enum):
    """Defines how arriving cars behave when chargepoints are occupied."""

    NO_ARRIVAL_IF_OCCUPIED = "PerChargepointNoArrivalIfOccupied"
    PER_CHARGEPOINT_QUEUE = "PerChargepointQueue"
    FIND_FREE_OR_GLOBAL_QUEUE = "PerChargepointFindFreeOrGlobalQueue"


class ChargepointType(BaseModel):
    """Charging power of one kind of chargepoint."""

    model_config = ConfigDict(frozen=True)

    power: float = Field(..., ge=0.0, description="Rated charging power in kW")


class ArrivalAtHour(BaseModel):
    """Hourly car arrival probabilities plus a global multiplier."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    probability_distribution: Tuple[float, ...] = Field(
        ...,
        alias="probabilityDistribution",
        description="24 arrival probabilities, one for each hour of the day.",
    )
    multiplier: float = Field(
        default=1.0,
        ge=0.2,
        le=2.0,
        description="Scales the arrival probabilities up or down.",
    )

    @field_validator("probability_distribution")
    @classmethod
    def _validate_hours(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if len(value) != HOURS_PER_DAY:
            raise ValueError(
                f"arrival probability table must have {HOURS_PER_DAY} entries, got {len(value)}"
            )
        for hour, probability in enumerate(value):
            if not 0.0 <= probability <= 1.0:
                raise ValueError(f"arrival probability for hour {hour} must be within [0, 1]")
        return tuple(float(p) for p in value)


class ChargingNeeds(BaseModel):
    """Distribution of charging needs, expressed as distance in km."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    probability_distribution: Tuple[Tuple[float, float], ...] = Field(
        ...,
        alias="probabilityDistribution",
        description=(
            "Ordered (km, probability) pairs. Probabilities sum to at most 1; "
            "the remainder falls back to the last entry when sampling."
        ),
    )

    @field_validator("probability_distribution")
    @classmethod
    def _validate_distribution(
        cls, value: Tuple[Tuple[float, float], ...]
    ) -> Tuple[Tuple[float, float], ...]:
        total = 0.0
        for km, probability in value:
            if km < 0:
                raise ValueError("charging need distance cannot be negative")
            if not 0.0 <= probability <= 1.0:
                raise ValueError(f"probability for {km} km must be within [0, 1]")
            total += probability
        if total > 1.0 + PROBABILITY_TOLERANCE:
            raise ValueError(f"charging need probabilities sum to {total:.6f}, exceeding 1")
        return tuple((float(km), float(p)) for km, p in value)


class SimulationConfig(BaseModel):
    """Immutable input of a single simulation run.

    Field names follow Python conventions; the camelCase aliases match the
    JSON documents exchanged with the front end.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[str] = Field(default=None, description="Display label for comparisons")
    simulation_granularity_ms: int = Field(
        ...,
        alias="simulationGranularityMs",
        gt=0,
        description="Duration of one simulation tick in milliseconds.",
    )
    chargepoints: Tuple[Tuple[ChargepointType, int], ...] = Field(
        ..., description="(chargepoint type, count) pairs"
    )
    arrival_at_hour: ArrivalAtHour = Field(..., alias="arrivalAtHour")
    charging_needs: ChargingNeeds = Field(..., alias="chargingNeeds")
    car_consumption_kwh_per_100km: float = Field(
        ...,
        alias="carConsumptionKWhPer100km",
        ge=0.0,
        description="Energy consumed by a car per 100 km in kWh.",
    )
    consider_dst: bool = Field(
        default=False,
        alias="considerDST",
        description="Whether daylight saving time is taken into account by the front end.",
    )
    arrival_strategy: ArrivalStrategy = Field(
        default=ArrivalStrategy.NO_ARRIVAL_IF_OCCUPIED, alias="arrivalStrategy"
    )
    seed: Optional[int] = Field(
        default=None, ge=0, description="Random seed; a random one is drawn when omitted."
    )

    @field_validator("chargepoints")
    @classmethod
    def _validate_chargepoints(
        cls, value: Tuple[Tuple[ChargepointType, int], ...]
    ) -> Tuple[Tuple[ChargepointType, int], ...]:
        for chargepoint_type, count in value:
            if count < 0:
                raise ValueError(
                    f"chargepoint count for {chargepoint_type.power} kW cannot be negative"
                )
        return value

    @model_validator(mode="after")
    def _validate_granularity(self) -> "SimulationConfig":
        if MS_PER_HOUR % self.simulation_granularity_ms != 0:
            raise ValueError(
                "simulation granularity must divide one hour evenly "
                f"({MS_PER_HOUR} ms), got {self.simulation_granularity_ms} ms"
            )
        return self

    # ------------------------------------------------------------ Derived values
    @property
    def chargepoint_count(self) -> int:
        """Total number of individual chargepoints."""
        return sum(count for _, count in self.chargepoints)

    @property
    def theoretical_max_power_kw(self) -> float:
        """Power drawn if every chargepoint charged at the same time."""
        return float(sum(cp_type.power * count for cp_type, count in self.chargepoints))

    @property
    def ticks_per_hour(self) -> int:
        return MS_PER_HOUR // self.simulation_granularity_ms

    @property
    def total_ticks(self) -> int:
        return DAYS_PER_YEAR * HOURS_PER_DAY * self.ticks_per_hour

    @property
    def tick_duration_hours(self) -> float:
        return self.simulation_granularity_ms / MS_PER_HOUR

    def energy_for_distance_kwh(self, distance_km: float) -> float:
        """Energy needed to cover ``distance_km`` with the configured consumption."""
        return (distance_km / 100.0) * self.car_consumption_kwh_per_100km

    def with_updates(self, **changes: Any) -> "SimulationConfig":
        """Return a validated copy with the supplied fields replaced."""
        payload = self.model_dump(by_alias=False)
        payload.update(changes)
        return SimulationConfig.model_validate(payload)

    def to_wire(self) -> dict:
        """Serialise using the camelCase field names of the wire format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "ArrivalAtHour",
    "ArrivalStrategy",
    "ChargepointType",
    "ChargingNeeds",
    "DAYS_PER_YEAR",
    "HOURS_PER_DAY",
    "MS_PER_HOUR",
    "SimulationConfig",
]
