from __future__ import annotations

import random
from typing import List, Optional, Tuple

from incrementer.binary_density_incrementer import BinaryDensityIncrementer
from models import IndexedElement
from shifter.base import Shifter


class ScalingSquareBreadthFirstSearchShifter(Shifter[int]):
    """Index vectors of ``length`` entries in growing square shells.

    Scale 0 yields only the all-zero vector.  Each later scale ``s`` yields
    every vector whose largest entry is exactly ``s``: a density mask picks
    which entries sit at ``s`` and the remaining entries range over
    ``0 .. s - 1``.  Masks are visited in density order so vectors with fewer
    maximal entries come first.  Only the first shift index advances the
    mask or the scale.
    """

    def __init__(self, length: int, maximum_scale: int, rng: Optional[random.Random] = None):
        self._length = length
        self._maximum_scale = maximum_scale
        self._possible_states: List[int] = list(range(maximum_scale + 1))
        self._binary_density_incrementer = BinaryDensityIncrementer(length, rng)
        self.reset()

    def reset(self) -> None:
        self._current_index: Optional[int] = None
        self._scale_per_index: List[Optional[int]] = []
        self._scale = 0
        self._mask: List[bool] = [False] * self._length
        self._is_exhausted = False
        self._binary_density_incrementer.reset()

    def get_scale(self) -> int:
        return self._scale

    def _load_mask(self) -> None:
        self._mask = self._binary_density_incrementer.get_mask()

    def _initial_value(self, index: int) -> int:
        return self._scale if self._mask[index] else 0

    def _last_value(self, index: int) -> int:
        if self._mask[index]:
            return self._scale
        return max(self._scale - 1, 0)

    def _try_advance_mask(self) -> bool:
        if self._scale == 0 or not self._binary_density_incrementer.try_increment():
            if self._scale == self._maximum_scale:
                return False
            self._scale += 1
            self._binary_density_incrementer.reset()
            # skip the all-zero mask, it only belongs to scale 0
            self._binary_density_incrementer.try_increment()
            self._binary_density_incrementer.try_increment()
        self._load_mask()
        return True

    def try_forward(self) -> bool:
        if self._length == 0:
            return False
        if self._current_index is None:
            self._binary_density_incrementer.reset()
            self._binary_density_incrementer.try_increment()
            self._scale = 0
            self._is_exhausted = False
            self._load_mask()
            self._current_index = 0
            self._scale_per_index.append(None)
            return True
        if self._current_index == self._length:
            return False
        self._current_index += 1
        if self._current_index == self._length:
            return False
        self._scale_per_index.append(None)
        return True

    def try_backward(self) -> bool:
        if self._length == 0 or self._current_index is None:
            return False
        if self._current_index != self._length:
            self._scale_per_index.pop()
        if self._current_index == 0:
            self._current_index = None
            self._scale = 0
            self._binary_density_incrementer.reset()
            return False
        self._current_index -= 1
        return True

    def try_increment(self) -> bool:
        index = self._current_index
        if index is None or index == self._length or self._is_exhausted:
            return False
        value = self._scale_per_index[index]
        if value is None:
            self._scale_per_index[index] = self._initial_value(index)
            return True
        if value < self._last_value(index):
            self._scale_per_index[index] = value + 1
            return True
        if index != 0:
            return False
        if not self._try_advance_mask():
            self._is_exhausted = True
            return False
        self._scale_per_index[0] = self._initial_value(0)
        return True

    def get_indexed_element(self) -> IndexedElement[int]:
        index, value = self.get_element_index_and_state_index()
        return IndexedElement(self._possible_states[value], index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        index = len(self._scale_per_index) - 1
        value = self._scale_per_index[index]
        if value is None:
            raise IndexError(f"shift index {index} has no selected scale")
        return index, value

    def get_states(self) -> List[int]:
        return list(self._possible_states)

    def get_length(self) -> int:
        return self._length

    def randomize(self) -> None:
        self._binary_density_incrementer.randomize()
