from __future__ import annotations

import random
from typing import Dict, Hashable, List, Optional, Sequence, Tuple, TypeVar

from errors import SearchInvariantError
from models import IndexedElement
from shifter.base import Shifter, system_rng
from shifter.scaling_square_breadth_first_search_shifter import ScalingSquareBreadthFirstSearchShifter

T = TypeVar("T", bound=Hashable)


class ShiftingSquareBreadthFirstSearchShifter(Shifter[T]):
    """Concatenated child shifters walked in square breadth first order.

    Each shift index is steered by a ``ScalingSquareBreadthFirstSearchShifter``
    of the same length: its value at a shift index is the candidate position
    the child shifter has to reach there.  Every full assignment built from
    the first ``s`` candidates of each shift index comes before any that uses
    candidate ``s`` somewhere, so shifters cloned from one randomized shifter
    explore the same early candidates first.

    Element indexes and the state palette follow ``CombinedShifter``.
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
        maximum_candidates = 1
        for shifter in self._shifters:
            self._element_index_offsets.append(offset)
            offset += shifter.get_length()
            # a shift index never has more candidates than states times depth
            maximum_candidates = max(maximum_candidates, len(shifter.get_states()) * max(shifter.get_length(), 1))
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

        self._scaling_shifter = ScalingSquareBreadthFirstSearchShifter(self._length, maximum_candidates - 1)
        self._shifter_order: List[int] = list(range(len(self._shifters)))
        self._clear_cursor()

    def _clear_cursor(self) -> None:
        # None: unstarted, len(shifters): shifted outside
        self._current_order_index: Optional[int] = None
        # per pushed shift index: the child's selected candidate position and
        # its candidate count once the child ran out
        self._selected_per_shift_index: List[Optional[int]] = []
        self._limit_per_shift_index: List[Optional[int]] = []

    def reset(self) -> None:
        for shifter in self._shifters:
            shifter.reset()
        self._scaling_shifter.reset()
        self._clear_cursor()

    def _current_shifter(self) -> Shifter[T]:
        return self._shifters[self._shifter_order[self._current_order_index]]

    def _push_shift_index(self) -> None:
        if not self._scaling_shifter.try_forward():
            raise SearchInvariantError("scaling shifter refused to move forward before reaching its length")
        self._selected_per_shift_index.append(None)
        self._limit_per_shift_index.append(None)

    def try_forward(self) -> bool:
        shifters_total = len(self._shifters)
        if self._current_order_index is None:
            self._current_order_index = 0
        elif self._current_order_index == shifters_total:
            return False
        while self._current_order_index < shifters_total:
            if self._current_shifter().try_forward():
                self._push_shift_index()
                return True
            self._current_order_index += 1
        # every child is outside, so the scaling shifter follows
        self._scaling_shifter.try_forward()
        return False

    def try_backward(self) -> bool:
        if self._current_order_index is None:
            return False
        if not self._shifters:
            self._current_order_index = None
            return False
        if self._current_order_index == len(self._shifters):
            # returning from outside keeps every selection
            self._current_order_index -= 1
        elif self._selected_per_shift_index:
            self._selected_per_shift_index.pop()
            self._limit_per_shift_index.pop()
        while True:
            if self._current_shifter().try_backward():
                if not self._scaling_shifter.try_backward():
                    raise SearchInvariantError("scaling shifter refused to move backward alongside its children")
                return True
            if self._current_order_index == 0:
                self._current_order_index = None
                self._scaling_shifter.reset()
                return False
            self._current_order_index -= 1

    def _restart_shift_index(self, shifter: Shifter[T]) -> None:
        shifter.try_backward()
        if not shifter.try_forward():
            raise SearchInvariantError("child shifter refused to restart its current shift index")

    def _try_select(self, shifter: Shifter[T], candidate: int) -> bool:
        limit = self._limit_per_shift_index[-1]
        if limit is not None and candidate >= limit:
            return False
        selected = self._selected_per_shift_index[-1]
        if selected == candidate:
            return True
        if selected is not None and selected > candidate:
            self._restart_shift_index(shifter)
            selected = None
        cursor = -1 if selected is None else selected
        while cursor < candidate:
            if not shifter.try_increment():
                # the child ran out: remember its candidate count and sit past it
                self._limit_per_shift_index[-1] = cursor + 1
                self._selected_per_shift_index[-1] = cursor + 1
                return False
            cursor += 1
        self._selected_per_shift_index[-1] = cursor
        return True

    def try_increment(self) -> bool:
        if self._current_order_index is None or self._current_order_index == len(self._shifters):
            return False
        shifter = self._current_shifter()
        while self._scaling_shifter.try_increment():
            _, candidate = self._scaling_shifter.get_element_index_and_state_index()
            if self._try_select(shifter, candidate):
                return True
        return False

    def get_indexed_element(self) -> IndexedElement[T]:
        element_index, state_index = self.get_element_index_and_state_index()
        return IndexedElement(self._possible_states[state_index], element_index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        if self._current_order_index is None:
            raise IndexError("shifter has not started")
        order_index = min(self._current_order_index, len(self._shifters) - 1)
        shifter_index = self._shifter_order[order_index]
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
