from __future__ import annotations

import random
from typing import Dict, Generic, Hashable, List, Optional, Sequence, Set, Tuple, TypeVar

from models import IndexedElement
from shifter.base import Shifter, system_rng

T = TypeVar("T", bound=Hashable)


class StatefulHyperGraphNode(Generic[T]):
    """Candidate state for one slot plus the compatible nodes seen in other slots.

    ``neighbors[slot]`` holds node indexes into that slot's node list.
    ``is_always_connected[slot]`` marks slots whose every node is compatible
    with this one without needing an observed edge.
    """

    def __init__(self, state: T, slot_index: int, is_always_connected: Sequence[bool]):
        self.state = state
        self.slot_index = slot_index
        self.is_always_connected: List[bool] = list(is_always_connected)
        self.neighbors: List[Set[int]] = [set() for _ in self.is_always_connected]

    def add_neighbor(self, slot_index: int, node_index: int) -> bool:
        if node_index in self.neighbors[slot_index]:
            return False
        self.neighbors[slot_index].add(node_index)
        return True

    def is_connected_to(self, slot_index: int, node_index: int) -> bool:
        return self.is_always_connected[slot_index] or node_index in self.neighbors[slot_index]

    def is_connected_to_all_slots(self) -> bool:
        for slot_index, neighbors in enumerate(self.neighbors):
            if slot_index == self.slot_index:
                continue
            if not self.is_always_connected[slot_index] and not neighbors:
                return False
        return True


class StatefulHyperGraph(Generic[T]):
    """Append-only arena of hypergraph nodes, one node list per slot."""

    def __init__(self, is_always_connected_per_slot: Sequence[Sequence[bool]]):
        self._is_always_connected_per_slot = [list(row) for row in is_always_connected_per_slot]
        slots_total = len(self._is_always_connected_per_slot)
        self.nodes_per_slot: List[List[StatefulHyperGraphNode[T]]] = [[] for _ in range(slots_total)]
        self._node_index_per_state_per_slot: List[Dict[T, int]] = [{} for _ in range(slots_total)]

    def get_slots_length(self) -> int:
        return len(self.nodes_per_slot)

    def get_or_add_node(self, slot_index: int, state: T) -> Tuple[int, bool]:
        node_index = self._node_index_per_state_per_slot[slot_index].get(state)
        if node_index is not None:
            return node_index, False
        node_index = len(self.nodes_per_slot[slot_index])
        self.nodes_per_slot[slot_index].append(
            StatefulHyperGraphNode(state, slot_index, self._is_always_connected_per_slot[slot_index])
        )
        self._node_index_per_state_per_slot[slot_index][state] = node_index
        return node_index, True

    def connect(self, slot_a: int, node_a: int, slot_b: int, node_b: int) -> bool:
        is_new = self.nodes_per_slot[slot_a][node_a].add_neighbor(slot_b, node_b)
        is_new = self.nodes_per_slot[slot_b][node_b].add_neighbor(slot_a, node_a) or is_new
        return is_new

    def observe(self, indexed_elements: Sequence[IndexedElement[T]]) -> List[Tuple[int, int]]:
        """Record one joint observation; returns the (slot, node) pairs it changed."""
        touched: Dict[Tuple[int, int], None] = {}
        located: List[Tuple[int, int]] = []
        for indexed_element in indexed_elements:
            node_index, is_new = self.get_or_add_node(indexed_element.index, indexed_element.element)
            located.append((indexed_element.index, node_index))
            if is_new:
                touched[(indexed_element.index, node_index)] = None
        for position, (slot_a, node_a) in enumerate(located):
            for slot_b, node_b in located[position + 1:]:
                if slot_a == slot_b:
                    continue
                if self.connect(slot_a, node_a, slot_b, node_b):
                    touched[(slot_a, node_a)] = None
                    touched[(slot_b, node_b)] = None
        return list(touched)

    def is_every_slot_populated(self) -> bool:
        return all(self.nodes_per_slot)

    def is_cliche_possible(self, touched: Sequence[Tuple[int, int]]) -> bool:
        if not self.is_every_slot_populated():
            return False
        return any(self.nodes_per_slot[slot_index][node_index].is_connected_to_all_slots() for slot_index, node_index in touched)


class HyperGraphClicheShifter(Shifter[T]):
    """Depth-first search for one node per slot, pairwise connected.

    Shift index ``k`` selects a node of slot ``k``; a candidate is accepted
    only when every node already selected at a shallower shift index is
    connected to it.
    """

    def __init__(self, nodes_per_slot: Sequence[Sequence[StatefulHyperGraphNode[T]]], rng: Optional[random.Random] = None):
        self._nodes_per_slot: List[List[StatefulHyperGraphNode[T]]] = [list(nodes) for nodes in nodes_per_slot]
        self._rng = rng
        self._node_order_per_slot: List[List[int]] = [list(range(len(nodes))) for nodes in self._nodes_per_slot]

        self._possible_states: List[T] = []
        state_index_per_state: Dict[T, int] = {}
        self._state_index_per_node_per_slot: List[List[int]] = []
        for nodes in self._nodes_per_slot:
            state_indexes: List[int] = []
            for node in nodes:
                state_index = state_index_per_state.get(node.state)
                if state_index is None:
                    state_index = len(self._possible_states)
                    state_index_per_state[node.state] = state_index
                    self._possible_states.append(node.state)
                state_indexes.append(state_index)
            self._state_index_per_node_per_slot.append(state_indexes)
        self.reset()

    def reset(self) -> None:
        self._current_shift_index: Optional[int] = None
        self._cursor_per_shift_index: List[Optional[int]] = []

    def _selected_node_index(self, shift_index: int) -> int:
        return self._node_order_per_slot[shift_index][self._cursor_per_shift_index[shift_index]]

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
        shift_index = self._current_shift_index
        if shift_index is None or shift_index == self.get_length():
            return False
        node_order = self._node_order_per_slot[shift_index]
        cursor = self._cursor_per_shift_index[shift_index]
        start = 0 if cursor is None else cursor + 1
        for next_cursor in range(start, len(node_order)):
            node_index = node_order[next_cursor]
            is_connected = True
            for previous_shift_index in range(shift_index):
                previous_node = self._nodes_per_slot[previous_shift_index][self._selected_node_index(previous_shift_index)]
                if not previous_node.is_connected_to(shift_index, node_index):
                    is_connected = False
                    break
            if is_connected:
                self._cursor_per_shift_index[shift_index] = next_cursor
                return True
        self._cursor_per_shift_index[shift_index] = len(node_order)
        return False

    def get_indexed_element(self) -> IndexedElement[T]:
        shift_index = len(self._cursor_per_shift_index) - 1
        node = self._nodes_per_slot[shift_index][self._selected_node_index(shift_index)]
        return IndexedElement(node.state, shift_index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        shift_index = len(self._cursor_per_shift_index) - 1
        return shift_index, self._state_index_per_node_per_slot[shift_index][self._selected_node_index(shift_index)]

    def get_states(self) -> List[T]:
        return list(self._possible_states)

    def get_length(self) -> int:
        return len(self._nodes_per_slot)

    def randomize(self) -> None:
        rng = self._rng or system_rng()
        for node_order in self._node_order_per_slot:
            rng.shuffle(node_order)
