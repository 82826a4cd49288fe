from __future__ import annotations

import random
from typing import Optional

from incrementer.bit_pattern import BitPatternIncrementer, shift_within_density


class BinaryDensityIncrementer(BitPatternIncrementer):
    """Every boolean vector of ``length`` bits, ordered by ascending popcount.

    Within one popcount the set bits start packed on the left and walk right
    one position at a time.  For four bits the order is ``0000``, ``1000``,
    ``0100``, ``0010``, ``0001``, ``1100``, ``1010``, ``1001``, ``0110``,
    ``0101``, ``0011``, ``1110``, ``1101``, ``1011``, ``0111``, ``1111``.
    """

    def __init__(self, length: int, rng: Optional[random.Random] = None):
        super().__init__(length, rng)
        self.reset()

    def reset(self) -> None:
        self._state = [False] * self._length
        self._ones_total = 0
        self._is_started = False

    def get_density(self) -> int:
        return self._ones_total

    def try_increment(self) -> bool:
        if self._ones_total == self._length:
            return False
        if not self._is_started:
            self._is_started = True
            return True
        if not shift_within_density(self._state):
            self._ones_total += 1
            self._state = [index < self._ones_total for index in range(self._length)]
        return True
