from __future__ import annotations

import random
from typing import Dict, Hashable, List, Optional, Sequence, Tuple, TypeVar

from models import IndexedElement
from shifter.base import Shifter, system_rng

T = TypeVar("T", bound=Hashable)


class CombinedShifter(Shifter[T]):
    """Concatenates child shifters into one logical shifter.

    Element indexes of child ``i`` are offset by the total length of the
    children constructed before it, so they stay stable when ``randomize``
    shuffles the order in which children are visited.  ``get_states`` is the
    value-deduplicated union of every child's states.
    """

    def __init__(
        self,
        shifters: Sequence[Shifter[T]],
        is_shifter_order_preserved_on_randomize: bool = False,
        rng: Optional[random.Random] = None,
    ):
        self._shifters: List[Shifter[T]] = list(shifters)
        self._is_shifter_order_preserved_on_randomize = is_shifter_order_preserved_on_randomize
        self._rng = rng

        self._element_index_offsets: List[int] = []
        offset = 0
        for shifter in self._shifters:
            self._element_index_offsets.append(offset)
            offset += shifter.get_length()
        self._length = offset

        self._possible_states: List[T] = []
        state_index_per_state: Dict[T, int] = {}
        self._global_state_indexes: List[List[int]] = []
        for shifter in self._shifters:
            global_indexes: List[int] = []
            for state in shifter.get_states():
                state_index = state_index_per_state.get(state)
                if state_index is None:
                    state_index = len(self._possible_states)
                    state_index_per_state[state] = state_index
                    self._possible_states.append(state)
                global_indexes.append(state_index)
            self._global_state_indexes.append(global_indexes)

        self._shifter_order: List[int] = list(range(len(self._shifters)))
        self._current_order_index: Optional[int] = None

    def reset(self) -> None:
        for shifter in self._shifters:
            shifter.reset()
        self._current_order_index = None

    def _current_shifter_index(self) -> int:
        order_index = min(self._current_order_index, len(self._shifters) - 1)
        return self._shifter_order[order_index]

    def try_forward(self) -> bool:
        shifters_total = len(self._shifters)
        if self._current_order_index is None:
            self._current_order_index = 0
        elif self._current_order_index == shifters_total:
            return False
        while self._current_order_index < shifters_total:
            if self._shifters[self._shifter_order[self._current_order_index]].try_forward():
                return True
            self._current_order_index += 1
        return False

    def try_backward(self) -> bool:
        if self._current_order_index is None:
            return False
        if not self._shifters:
            self._current_order_index = None
            return False
        if self._current_order_index == len(self._shifters):
            self._current_order_index -= 1
        while True:
            if self._shifters[self._shifter_order[self._current_order_index]].try_backward():
                return True
            if self._current_order_index == 0:
                self._current_order_index = None
                return False
            self._current_order_index -= 1

    def try_increment(self) -> bool:
        if self._current_order_index is None or self._current_order_index == len(self._shifters):
            return False
        return self._shifters[self._shifter_order[self._current_order_index]].try_increment()

    def get_indexed_element(self) -> IndexedElement[T]:
        element_index, state_index = self.get_element_index_and_state_index()
        return IndexedElement(self._possible_states[state_index], element_index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        shifter_index = self._current_shifter_index()
        element_index, state_index = self._shifters[shifter_index].get_element_index_and_state_index()
        return (
            self._element_index_offsets[shifter_index] + element_index,
            self._global_state_indexes[shifter_index][state_index],
        )

    def get_states(self) -> List[T]:
        return list(self._possible_states)

    def get_length(self) -> int:
        return self._length

    def randomize(self) -> None:
        for shifter in self._shifters:
            shifter.randomize()
        if not self._is_shifter_order_preserved_on_randomize:
            (self._rng or system_rng()).shuffle(self._shifter_order)
