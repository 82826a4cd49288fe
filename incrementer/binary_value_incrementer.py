from __future__ import annotations

import random
from typing import Optional

from incrementer.bit_pattern import BitPatternIncrementer


class BinaryValueIncrementer(BitPatternIncrementer):
    """Every boolean vector of ``length`` bits, counting with index 0 as the low bit."""

    def __init__(self, length: int, rng: Optional[random.Random] = None):
        super().__init__(length, rng)
        self.reset()

    def reset(self) -> None:
        self._state = [False] * self._length
        self._is_started = False

    def try_increment(self) -> bool:
        if all(self._state):
            return False
        if not self._is_started:
            self._is_started = True
            return True
        for index in range(self._length):
            if self._state[index]:
                self._state[index] = False
            else:
                self._state[index] = True
                break
        return True
