from __future__ import annotations

import random
from typing import Optional

from incrementer.bit_pattern import BitPatternIncrementer, shift_within_density


class FixedBinaryDensityIncrementer(BitPatternIncrementer):
    """Every pattern with exactly ``density`` set bits among ``density + remaining_length``."""

    def __init__(self, density: int, remaining_length: int, rng: Optional[random.Random] = None):
        super().__init__(density + remaining_length, rng)
        self._density = density
        self.reset()

    def reset(self) -> None:
        self._state = [index < self._density for index in range(self._length)]
        self._is_started = False
        self._is_exhausted = False

    def try_increment(self) -> bool:
        if self._is_exhausted or self._length == 0:
            return False
        if not self._is_started:
            self._is_started = True
            return True
        if self._density == 0 or not shift_within_density(self._state):
            self._is_exhausted = True
            return False
        return True
