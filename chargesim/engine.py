"""Tick-by-tick simulation of EV charging over one year."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .core.arrival import ArrivalPolicy, build_arrival_policy
from .core.state import SimulationState
from .core.validator import validate_config
from .models.config import HOURS_PER_DAY, SimulationConfig
from .models.results import ChargingEvent, PerTickRecord, SimulationResult

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class SimulationEngine:
    """Owns the state of one simulation run.

    Every engine builds fresh chargepoints, random source and arrival queues
    from its configuration, so independent runs never share mutable state.
    """

    def __init__(self, config: SimulationConfig) -> None:
        validate_config(config)
        self.config = config
        self.state = SimulationState.from_config(config)
        self.policy: ArrivalPolicy = build_arrival_policy(
            config.arrival_strategy, len(self.state.chargepoints)
        )
        self.ticks_per_hour = config.ticks_per_hour
        self.total_ticks = config.total_ticks
        self.tick_duration_hours = config.tick_duration_hours
        self._hourly = config.arrival_at_hour.probability_distribution
        self._multiplier = config.arrival_at_hour.multiplier
        self._per_tick_data: List[PerTickRecord] = []
        self._charging_events: List[ChargingEvent] = []

    # ----------------------------------------------------------------- Steps
    def _deliver_energy(self, tick: int) -> None:
        """Charge every occupied chargepoint for one tick and release finished cars."""
        for chargepoint in self.state.chargepoints:
            session = chargepoint.session
            if session is None:
                continue
            session.remaining_energy_kwh -= chargepoint.power_kw * self.tick_duration_hours
            if session.remaining_energy_kwh <= 0:
                self._charging_events.append(
                    ChargingEvent(
                        chargepoint_id=chargepoint.id,
                        start_tick=session.start_tick,
                        end_tick=tick,
                    )
                )
                chargepoint.session = None

    def arrival_probability(self, tick: int) -> float:
        """Arrival probability for ``tick``; non-zero only on the first tick of an hour."""
        if tick % self.ticks_per_hour != 0:
            return 0.0
        hour = (tick // self.ticks_per_hour) % HOURS_PER_DAY
        return self._hourly[hour] * self._multiplier

    def _record_power(self) -> None:
        self._per_tick_data.append(
            PerTickRecord(
                power_demands_per_chargepoint_kw=tuple(
                    0.0 if chargepoint.session is None else chargepoint.power_kw
                    for chargepoint in self.state.chargepoints
                )
            )
        )

    def step(self) -> None:
        """Advance the simulation by one tick."""
        tick = self.state.current_tick
        self._deliver_energy(tick)
        self.policy.simulate_arrivals(self.state, self.arrival_probability(tick))
        self._record_power()
        self.state.current_tick += 1

    # ------------------------------------------------------------- Execution
    def run(self, progress_callback: Optional[ProgressCallback] = None) -> SimulationResult:
        """Run the full horizon and return the collected telemetry."""
        LOGGER.info(
            "Simulating %d ticks (%d ms) for %d chargepoints, strategy=%s, seed=%s",
            self.total_ticks,
            self.config.simulation_granularity_ms,
            len(self.state.chargepoints),
            self.policy.strategy.value,
            self.config.seed,
        )
        ticks_per_day = self.ticks_per_hour * HOURS_PER_DAY
        while self.state.current_tick < self.total_ticks:
            self.step()
            if progress_callback and self.state.current_tick % ticks_per_day == 0:
                day = self.state.current_tick // ticks_per_day
                progress_callback(
                    self.state.current_tick,
                    self.total_ticks,
                    f"Simulated day {day}/{self.total_ticks // ticks_per_day}",
                )

        result = SimulationResult(
            per_tick_data=tuple(self._per_tick_data),
            charging_events=tuple(self._charging_events),
        )
        LOGGER.debug(
            "Simulation finished: %d charging events, %d arrivals, %d cars still queued",
            len(result.charging_events),
            self.state.arrivals,
            self.policy.queued_vehicles,
        )
        return result


def simulate(
    config: SimulationConfig,
    progress_callback: Optional[ProgressCallback] = None,
) -> SimulationResult:
    """Run a simulation of EV charging behaviour for one year."""
    return SimulationEngine(config).run(progress_callback=progress_callback)


__all__ = ["ProgressCallback", "SimulationEngine", "simulate"]
