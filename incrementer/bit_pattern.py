from __future__ import annotations

import random
from typing import List, Optional

from incrementer.base import Incrementer
from models import IndexedElement
from shifter.base import system_rng


def shift_within_density(state: List[bool]) -> bool:
    """Advance ``state`` to the next pattern with the same number of set bits.

    Finds the rightmost set bit followed by a clear bit, moves it one place
    right and packs the set bits beyond it back against it.  Returns False
    (leaving ``state`` untouched) when the set bits are already packed at the
    right end.
    """
    is_zero_found = False
    option: Optional[int] = None
    for index in range(len(state) - 1, -1, -1):
        if not state[index]:
            is_zero_found = True
        elif is_zero_found:
            option = index
            break
    if option is None:
        return False
    state[option] = False
    state[option + 1] = True
    trailing_ones = sum(1 for bit in state[option + 2:] if bit)
    for index in range(option + 2, len(state)):
        state[index] = index < option + 2 + trailing_ones
    return True


class BitPatternIncrementer(Incrementer[bool]):
    """Shared storage for incrementers that walk fixed-length bit patterns.

    ``randomize`` permutes which reported index each bit position maps to, so
    the set of patterns and their density order are preserved.
    """

    def __init__(self, length: int, rng: Optional[random.Random] = None):
        self._length = length
        self._rng = rng
        self._index_per_bit: List[int] = list(range(length))
        self._state: List[bool] = [False] * length

    def get_length(self) -> int:
        return self._length

    def get(self) -> List[IndexedElement[bool]]:
        values = [False] * self._length
        for bit, is_set in enumerate(self._state):
            values[self._index_per_bit[bit]] = is_set
        return [IndexedElement(value, index) for index, value in enumerate(values)]

    def get_mask(self) -> List[bool]:
        return [indexed_element.element for indexed_element in self.get()]

    def randomize(self) -> None:
        (self._rng or system_rng()).shuffle(self._index_per_bit)
