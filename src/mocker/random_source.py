"""
RandomSource: the pseudo-random draws every generator is built on.

One source is created per run and handed to each generator at invocation
time. Tests substitute a subclass with a scripted sequence.
"""

import time
from typing import Optional

import numpy as np

from .models import LONG_MAX, LONG_MIN


class RandomSource:
    """Thin wrapper over a numpy Generator exposing the four draws in use."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000)
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next_long(self) -> int:
        """Uniform signed 64-bit integer."""
        return int(self._rng.integers(LONG_MIN, LONG_MAX, endpoint=True, dtype=np.int64))

    def next_int(self, bound: int) -> int:
        """Uniform integer in [0, bound)."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return int(self._rng.integers(0, bound))

    def next_double(self) -> float:
        """Uniform fraction in [0, 1)."""
        return float(self._rng.random())

    def next_gaussian(self) -> float:
        """Standard normal draw."""
        return float(self._rng.standard_normal())
