"""Car arrival policies deciding how vehicles are matched to chargepoints."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Union

from ..models.config import ArrivalStrategy
from .state import ChargepointState, QueuedVehicle, SimulationState
from .validator import ConfigurationError


class NoArrivalIfOccupiedPolicy:
    """A car only arrives at a chargepoint that is free; other attempts are lost."""

    strategy = ArrivalStrategy.NO_ARRIVAL_IF_OCCUPIED

    @property
    def queued_vehicles(self) -> int:
        return 0

    def simulate_arrivals(self, state: SimulationState, probability: float) -> None:
        if probability == 0:
            return
        for chargepoint in state.chargepoints:
            if chargepoint.is_free and state.roll(probability):
                vehicle = state.sample_vehicle()
                if vehicle is not None:
                    state.start_charging(chargepoint, vehicle)


class PerChargepointQueuePolicy:
    """A car arrives at a specific chargepoint and waits in its private queue."""

    strategy = ArrivalStrategy.PER_CHARGEPOINT_QUEUE

    def __init__(self, chargepoint_count: int) -> None:
        self._queues: List[Deque[QueuedVehicle]] = [deque() for _ in range(chargepoint_count)]

    @property
    def queued_vehicles(self) -> int:
        return sum(len(queue) for queue in self._queues)

    def queue_length(self, chargepoint_id: int) -> int:
        return len(self._queues[chargepoint_id])

    def simulate_arrivals(self, state: SimulationState, probability: float) -> None:
        # Waiting cars move in as soon as their chargepoint frees up, every tick.
        for chargepoint in state.chargepoints:
            queue = self._queues[chargepoint.id]
            if chargepoint.is_free and queue:
                state.start_charging(chargepoint, queue.popleft())

        if probability == 0:
            return

        for chargepoint in state.chargepoints:
            if not state.roll(probability):
                continue
            vehicle = state.sample_vehicle()
            if vehicle is None:
                continue
            if chargepoint.is_free:
                state.start_charging(chargepoint, vehicle)
            else:
                self._queues[chargepoint.id].append(vehicle)


class FindFreeOrGlobalQueuePolicy:
    """A car takes its chargepoint, else any free one, else waits in a shared queue."""

    strategy = ArrivalStrategy.FIND_FREE_OR_GLOBAL_QUEUE

    def __init__(self) -> None:
        self._queue: Deque[QueuedVehicle] = deque()

    @property
    def queued_vehicles(self) -> int:
        return len(self._queue)

    def simulate_arrivals(self, state: SimulationState, probability: float) -> None:
        for chargepoint in state.chargepoints:
            if not self._queue:
                break
            if chargepoint.is_free:
                state.start_charging(chargepoint, self._queue.popleft())

        if probability == 0:
            return

        # Free chargepoints at the start of the arrival pass, in chargepoint order.
        available: Deque[ChargepointState] = deque(cp for cp in state.chargepoints if cp.is_free)
        for chargepoint in state.chargepoints:
            if not state.roll(probability):
                continue
            vehicle = state.sample_vehicle()
            if vehicle is None:
                continue
            if chargepoint.is_free:
                state.start_charging(chargepoint, vehicle)
                continue
            target = self._next_free(available)
            if target is not None:
                state.start_charging(target, vehicle)
            else:
                self._queue.append(vehicle)

    @staticmethod
    def _next_free(available: Deque[ChargepointState]) -> Optional[ChargepointState]:
        while available:
            candidate = available.popleft()
            if candidate.is_free:
                return candidate
        return None


ArrivalPolicy = Union[NoArrivalIfOccupiedPolicy, PerChargepointQueuePolicy, FindFreeOrGlobalQueuePolicy]


def build_arrival_policy(
    strategy: Union[ArrivalStrategy, str], chargepoint_count: int
) -> ArrivalPolicy:
    """Instantiate the policy selected by ``strategy``."""
    try:
        strategy = ArrivalStrategy(strategy)
    except ValueError as exc:
        raise ConfigurationError(f"Unsupported arrival strategy: {strategy!r}") from exc

    if strategy == ArrivalStrategy.NO_ARRIVAL_IF_OCCUPIED:
        return NoArrivalIfOccupiedPolicy()
    if strategy == ArrivalStrategy.PER_CHARGEPOINT_QUEUE:
        return PerChargepointQueuePolicy(chargepoint_count)
    if strategy == ArrivalStrategy.FIND_FREE_OR_GLOBAL_QUEUE:
        return FindFreeOrGlobalQueuePolicy()
    raise ConfigurationError(f"Unsupported arrival strategy: {strategy!r}")


__all__ = [
    "ArrivalPolicy",
    "FindFreeOrGlobalQueuePolicy",
    "NoArrivalIfOccupiedPolicy",
    "PerChargepointQueuePolicy",
    "build_arrival_policy",
]
