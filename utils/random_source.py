"""
Injectable source of uniform random numbers.

Demand noise and candidate-action sampling only ever need a float in [0, 1),
so the engine depends on this narrow capability instead of a global RNG.
Any object with a ``random()`` method qualifies, including
``numpy.random.Generator``.
"""

from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    def random(self) -> float: ...


class ConstantRandomSource:
    """Always returns the same value. Useful for deterministic runs."""

    def __init__(self, value: float = 0.5):
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Constant random value must be in [0, 1), got {value}")
        self.value = value

    def random(self) -> float:
        return self.value


def default_random_source(seed: int | None = None) -> RandomSource:
    """Return a numpy Generator, seeded when a seed is given."""
    return np.random.default_rng(seed)
