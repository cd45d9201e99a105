"""
Random Number Source

Uniform sampling over inclusive numeric ranges, backed by a private
random.Random generator so that one seed controls one engine.
"""

import random
from typing import Optional, Union

Number = Union[int, float]


class RandomSource:
    """
    Uniform random numbers for the engine and for problem definitions.

    Each instance owns its own generator. Code running on another thread
    should use spawn() to get an independent source instead of sharing one.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = random.Random(seed)

    def uniform(self, minimum: Number, maximum: Number) -> Number:
        """
        Draw a value uniformly from [minimum, maximum].

        Integer bounds give an integer, any float bound gives a float.
        """
        if isinstance(minimum, int) and isinstance(maximum, int):
            return self._generator.randint(minimum, maximum)
        return self._generator.uniform(float(minimum), float(maximum))

    def random(self) -> float:
        """Draw a float from [0, 1)."""
        return self._generator.random()

    def spawn(self) -> 'RandomSource':
        """Create an independent source seeded from this one."""
        return RandomSource(self._generator.getrandbits(64))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed!r})"
