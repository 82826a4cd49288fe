from __future__ import annotations

import random
from typing import Dict, Hashable, List, Optional, Sequence, Tuple, TypeVar

from models import IndexedElement
from shifter.base import Shifter, system_rng

T = TypeVar("T", bound=Hashable)


class IndexShifter(Shifter[T]):
    """Shifter over explicit candidate lists, one list per shift index."""

    def __init__(self, states_per_shift_index: Sequence[Sequence[T]], rng: Optional[random.Random] = None):
        self._possible_states: List[T] = []
        state_index_per_state: Dict[T, int] = {}
        self._state_indexes_per_shift_index: List[List[int]] = []
        for states in states_per_shift_index:
            state_indexes: List[int] = []
            for state in states:
                state_index = state_index_per_state.get(state)
                if state_index is None:
                    state_index = len(self._possible_states)
                    state_index_per_state[state] = state_index
                    self._possible_states.append(state)
                state_indexes.append(state_index)
            self._state_indexes_per_shift_index.append(state_indexes)
        self._rng = rng
        self.reset()

    def reset(self) -> None:
        # None: unstarted, length: shifted outside
        self._current_shift_index: Optional[int] = None
        self._cursor_per_shift_index: List[Optional[int]] = []

    def try_forward(self) -> bool:
        length = self.get_length()
        if self._current_shift_index is None:
            next_shift_index = 0
        elif self._current_shift_index == length:
            return False
        else:
            next_shift_index = self._current_shift_index + 1
        self._current_shift_index = next_shift_index
        if next_shift_index == length:
            return False
        self._cursor_per_shift_index.append(None)
        return True

    def try_backward(self) -> bool:
        if self._current_shift_index is None:
            return False
        if self._current_shift_index != self.get_length():
            self._cursor_per_shift_index.pop()
        if self._current_shift_index == 0:
            self._current_shift_index = None
            return False
        self._current_shift_index -= 1
        return True

    def try_increment(self) -> bool:
        if self._current_shift_index is None or self._current_shift_index == self.get_length():
            return False
        cursor = self._cursor_per_shift_index[-1]
        next_cursor = 0 if cursor is None else cursor + 1
        if next_cursor >= len(self._state_indexes_per_shift_index[self._current_shift_index]):
            return False
        self._cursor_per_shift_index[-1] = next_cursor
        return True

    def get_indexed_element(self) -> IndexedElement[T]:
        element_index, state_index = self.get_element_index_and_state_index()
        return IndexedElement(self._possible_states[state_index], element_index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        shift_index = len(self._cursor_per_shift_index) - 1
        cursor = self._cursor_per_shift_index[shift_index]
        if cursor is None:
            raise IndexError(f"shift index {shift_index} has no selected state")
        return shift_index, self._state_indexes_per_shift_index[shift_index][cursor]

    def get_states(self) -> List[T]:
        return list(self._possible_states)

    def get_length(self) -> int:
        return len(self._state_indexes_per_shift_index)

    def randomize(self) -> None:
        rng = self._rng or system_rng()
        for state_indexes in self._state_indexes_per_shift_index:
            rng.shuffle(state_indexes)
