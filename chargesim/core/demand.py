"""Inverse-CDF sampling of car charging needs."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .random_source import SeededRandomSource


class ChargingDemandSampler:
    """Draws a charging need (km) from a discrete probability distribution."""

    def __init__(self, distribution: Sequence[Tuple[float, float]]) -> None:
        self.cumulative: List[Tuple[float, float]] = []
        cumulative_probability = 0.0
        for km, probability in distribution:
            cumulative_probability += probability
            self.cumulative.append((float(km), cumulative_probability))

    def sample(self, rng: SeededRandomSource) -> float:
        """Return the distance whose cumulative probability first exceeds a uniform draw.

        Probability mass missing from the table (a distribution summing to
        less than 1) falls back to the last entry.
        """
        if not self.cumulative:
            return 0.0
        draw = rng.next()
        for km, cumulative_probability in self.cumulative:
            if draw < cumulative_probability:
                return km
        return self.cumulative[-1][0]


__all__ = ["ChargingDemandSampler"]
