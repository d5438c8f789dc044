"""Seeded pseudo-random source shared by the simulation components."""

from __future__ import annotations

from typing import Optional

import numpy as np


class SeededRandomSource:
    """Uniform [0, 1) draws from a numpy PCG64 generator.

    A fixed seed reproduces the same sequence on every platform; without a
    seed the generator is initialised from operating system entropy.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is not None and seed < 0:
            raise ValueError("Random seed must be non-negative")
        self.seed = seed
        self._generator = np.random.Generator(np.random.PCG64(seed))

    def next(self) -> float:
        """Return the next value in [0, 1)."""
        return float(self._generator.random())

    def __call__(self) -> float:
        return self.next()


__all__ = ["SeededRandomSource"]
