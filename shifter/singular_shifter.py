from __future__ import annotations

from typing import List, Optional, Tuple, TypeVar

from errors import SearchInvariantError
from models import IndexedElement
from shifter.base import Shifter

T = TypeVar("T")


class SingularShifter(Shifter[T]):
    """Collapses an inner shifter into a single shift index.

    Each increment drives the inner shifter to its next complete assignment.
    Element and state accessors report the inner shifter's deepest selection.
    """

    def __init__(self, shifter: Shifter[T]):
        self._shifter = shifter
        self.reset()

    def reset(self) -> None:
        self._shifter.reset()
        # None: unstarted, 0: active, 1: shifted outside
        self._shift_index: Optional[int] = None
        self._inner_shift_index: Optional[int] = None
        self._is_inner_exhausted = False

    def get_internal_shifter_length(self) -> int:
        return self._shifter.get_length()

    def try_forward(self) -> bool:
        if self._shift_index is None:
            self._shift_index = 0
            return True
        self._shift_index = 1
        return False

    def try_backward(self) -> bool:
        if self._shift_index is None:
            return False
        if self._shift_index == 1:
            self._shift_index = 0
            return True
        self._shifter.reset()
        self._shift_index = None
        self._inner_shift_index = None
        self._is_inner_exhausted = False
        return False

    def try_increment(self) -> bool:
        if self._shift_index != 0 or self._is_inner_exhausted:
            return False
        if self._inner_shift_index is None:
            if not self._shifter.try_forward():
                self._is_inner_exhausted = True
                return False
            self._inner_shift_index = 0
        inner_length = self._shifter.get_length()
        while True:
            if self._shifter.try_increment():
                if self._inner_shift_index + 1 == inner_length:
                    return True
                if not self._shifter.try_forward():
                    raise SearchInvariantError("inner shifter refused to move forward before reaching its length")
                self._inner_shift_index += 1
            else:
                if not self._shifter.try_backward():
                    self._is_inner_exhausted = True
                    return False
                self._inner_shift_index -= 1

    def get_indexed_element(self) -> IndexedElement[T]:
        return self._shifter.get_indexed_element()

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        return self._shifter.get_element_index_and_state_index()

    def get_states(self) -> List[T]:
        return self._shifter.get_states()

    def get_length(self) -> int:
        return 1

    def randomize(self) -> None:
        self._shifter.randomize()
