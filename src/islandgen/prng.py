"""Deterministic random stream (Lehmer / Park-Miller minimal standard).

Every draw consumes exactly one step of the underlying generator, so a fixed
seed and a fixed sequence of calls always reproduce the same values.
"""

import math
import sys

import numpy as np
from numpy.typing import NDArray

MODULUS = 2147483647
MULTIPLIER = 16807

# Largest integer exactly representable as a float64
MAX_SAFE_INTEGER = 2**53 - 1


class RandomStream:
    """Seeded pseudo-random number generator with a single linear state."""

    def __init__(self, seed: int):
        self.seed = seed
        # Remainder takes the sign of the seed
        state = seed % MODULUS if seed >= 0 else -(-seed % MODULUS)
        if state <= 0:
            state += MODULUS - 1
        self.state = state

    def next(self) -> float:
        """Advance the stream and return a float in [0, 1)."""
        self.state = self.state * MULTIPLIER % MODULUS
        return (self.state - 1) / (MODULUS - 1)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability.

        A probability of 1 always returns True and a negative probability
        never does.
        """
        return self.next() <= probability

    def floats(self, count: int, min: float, max: float) -> NDArray[np.float64]:
        """Draw ``count`` sequential floats in [min, max) as an array.

        Equivalent to calling :meth:`float` ``count`` times in a row.
        """
        values = np.empty(count, dtype=np.float64)
        for i in range(count):
            values[i] = min + self.next() * (max - min)
        return values

    def int(self, min: int = 0, max: int = MAX_SAFE_INTEGER) -> int:
        """Integer between ``min`` (inclusive) and ``max`` (exclusive)."""
        return math.floor(min + self.next() * (max - min))

    def float(self, min: float = 0.0, max: float = sys.float_info.max) -> float:
        """Float between ``min`` (inclusive) and ``max`` (exclusive)."""
        return min + self.next() * (max - min)

    def __repr__(self) -> str:
        return f"RandomStream(seed={self.seed}, state={self.state})"
