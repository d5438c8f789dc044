"""Mutable per-run state owned by the simulation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..models.config import SimulationConfig
from .demand import ChargingDemandSampler
from .random_source import SeededRandomSource


@dataclass
class ChargeSession:
    """An EV currently being charged."""

    remaining_energy_kwh: float
    start_tick: int


@dataclass
class ChargepointState:
    id: int
    power_kw: float
    session: Optional[ChargeSession] = None

    @property
    def is_free(self) -> bool:
        return self.session is None


@dataclass
class QueuedVehicle:
    """An EV waiting for a chargepoint."""

    energy_needed_kwh: float


@dataclass
class SimulationState:
    config: SimulationConfig
    chargepoints: List[ChargepointState]
    rng: SeededRandomSource
    demand_sampler: ChargingDemandSampler
    current_tick: int = 0
    arrivals: int = 0

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "SimulationState":
        """Flatten the (type, count) pairs into chargepoints with sequential ids."""
        chargepoints: List[ChargepointState] = []
        for chargepoint_type, count in config.chargepoints:
            for _ in range(count):
                chargepoints.append(
                    ChargepointState(id=len(chargepoints), power_kw=float(chargepoint_type.power))
                )
        return cls(
            config=config,
            chargepoints=chargepoints,
            rng=SeededRandomSource(config.seed),
            demand_sampler=ChargingDemandSampler(config.charging_needs.probability_distribution),
        )

    def roll(self, probability: float) -> bool:
        """Consume one random draw and report whether it falls below ``probability``."""
        return self.rng.next() < probability

    def sample_vehicle(self) -> Optional[QueuedVehicle]:
        """Sample a charging need; ``None`` when the car does not need to charge."""
        distance_km = self.demand_sampler.sample(self.rng)
        if distance_km <= 0:
            return None
        self.arrivals += 1
        return QueuedVehicle(energy_needed_kwh=self.config.energy_for_distance_kwh(distance_km))

    def start_charging(self, chargepoint: ChargepointState, vehicle: QueuedVehicle) -> None:
        chargepoint.session = ChargeSession(
            remaining_energy_kwh=vehicle.energy_needed_kwh,
            start_tick=self.current_tick,
        )


__all__ = ["ChargeSession", "ChargepointState", "QueuedVehicle", "SimulationState"]
