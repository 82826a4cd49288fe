from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from errors import SearchInvariantError
from incrementer.base import Incrementer
from models import CellGroup, IndexedElement, Location
from shifter.base import Shifter

_NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass
class CellGroupDependency:
    """One jointly validated sub-problem.

    Element ``i`` of ``shifter`` is the location of cell group
    ``cell_group_index_mapping[i]``.
    """

    cell_group_index_mapping: List[int]
    shifter: Shifter[Location]


class ShiftingCellGroupDependencyIncrementer(Incrementer[Location]):
    """Walks each dependency's shifter, rejecting conflicting placements early.

    Every newly selected location is checked against every location already
    selected for the current dependency.  Two placed cell groups conflict
    when their cells overlap, when a cell of one lands on a detection offset
    of the other, or when their 4-neighbour adjacency differs from what
    ``is_adjacent_cell_group_index_per_cell_group_index`` requires.  Pair
    results are memoized per dependency.  Dependencies are exhausted in
    order; each successful increment yields one full assignment of the
    current dependency with cell group indexes as element indexes.
    """

    def __init__(
        self,
        cell_groups: Sequence[CellGroup],
        cell_group_dependencies: Sequence[CellGroupDependency],
        detection_offsets_per_cell_group_index_per_cell_group_index: Optional[Sequence[Sequence[Sequence[Location]]]] = None,
        is_adjacent_cell_group_index_per_cell_group_index: Optional[Sequence[Sequence[bool]]] = None,
    ):
        for dependency_index, dependency in enumerate(cell_group_dependencies):
            if len(dependency.cell_group_index_mapping) != dependency.shifter.get_length():
                raise ValueError(
                    f"dependency {dependency_index} maps {len(dependency.cell_group_index_mapping)} cell groups "
                    f"onto a shifter of length {dependency.shifter.get_length()}"
                )
        self._cell_groups: List[CellGroup] = list(cell_groups)
        self._cell_group_dependencies: List[CellGroupDependency] = list(cell_group_dependencies)
        self._detection_offsets = detection_offsets_per_cell_group_index_per_cell_group_index
        self._is_adjacent = is_adjacent_cell_group_index_per_cell_group_index
        self.reset()

    def reset(self) -> None:
        for dependency in self._cell_group_dependencies:
            dependency.shifter.reset()
        self._dependency_index = 0
        self._is_dependency_started = False
        self._located: List[IndexedElement[Location]] = []
        self._element_and_state_indexes: List[Tuple[int, int]] = []
        self._is_valid_per_pair: Dict[Tuple[int, int, int, int], bool] = {}
        self.pair_checks_total = 0
        self.pair_cache_hits_total = 0

    def get_current_dependency_index(self) -> Optional[int]:
        if self._dependency_index >= len(self._cell_group_dependencies):
            return None
        return self._dependency_index

    def _start_dependency(self) -> None:
        self._is_dependency_started = True
        self._located.clear()
        self._element_and_state_indexes.clear()
        self._is_valid_per_pair.clear()

    def _finish_dependency(self) -> None:
        self._dependency_index += 1
        self._is_dependency_started = False
        self._located.clear()
        self._element_and_state_indexes.clear()

    def _pop(self) -> None:
        self._located.pop()
        self._element_and_state_indexes.pop()

    def try_increment(self) -> bool:
        while self._dependency_index < len(self._cell_group_dependencies):
            dependency = self._cell_group_dependencies[self._dependency_index]
            shifter = dependency.shifter
            length = shifter.get_length()
            if length == 0:
                self._finish_dependency()
                continue
            if not self._is_dependency_started:
                self._start_dependency()
                if not shifter.try_forward():
                    self._finish_dependency()
                    continue
            else:
                self._pop()
            while True:
                if shifter.try_increment():
                    element_index, state_index = shifter.get_element_index_and_state_index()
                    location = shifter.get_indexed_element().element
                    cell_group_index = dependency.cell_group_index_mapping[element_index]
                    if not self._is_valid_against_located(element_index, state_index, cell_group_index, location):
                        continue
                    self._located.append(IndexedElement(location, cell_group_index))
                    self._element_and_state_indexes.append((element_index, state_index))
                    if len(self._located) == length:
                        return True
                    if not shifter.try_forward():
                        raise SearchInvariantError("dependency shifter refused to move forward before reaching its length")
                else:
                    if not shifter.try_backward():
                        break
                    self._pop()
            self._finish_dependency()
        return False

    def _is_valid_against_located(self, element_index: int, state_index: int, cell_group_index: int, location: Location) -> bool:
        for located, (other_element_index, other_state_index) in zip(self._located, self._element_and_state_indexes):
            if element_index < other_element_index:
                key = (element_index, state_index, other_element_index, other_state_index)
            else:
                key = (other_element_index, other_state_index, element_index, state_index)
            is_valid = self._is_valid_per_pair.get(key)
            if is_valid is None:
                is_valid = self.is_valid_pair(cell_group_index, location, located.index, located.element)
                self._is_valid_per_pair[key] = is_valid
            else:
                self.pair_cache_hits_total += 1
            if not is_valid:
                return False
        return True

    def is_valid_pair(self, cell_group_index_a: int, location_a: Location, cell_group_index_b: int, location_b: Location) -> bool:
        self.pair_checks_total += 1
        cells_a: Set[Location] = set(self._cell_groups[cell_group_index_a].absolute_cells(location_a))
        cells_b: Set[Location] = set(self._cell_groups[cell_group_index_b].absolute_cells(location_b))
        if not cells_a.isdisjoint(cells_b):
            return False
        if self._detection_offsets is not None:
            if self._is_detected(self._detection_offsets[cell_group_index_a][cell_group_index_b], location_a, cells_b):
                return False
            if self._is_detected(self._detection_offsets[cell_group_index_b][cell_group_index_a], location_b, cells_a):
                return False
        if self._is_adjacent is not None:
            is_required = (
                self._is_adjacent[cell_group_index_a][cell_group_index_b]
                or self._is_adjacent[cell_group_index_b][cell_group_index_a]
            )
            is_found = any(
                (x + dx, y + dy) in cells_b
                for x, y in cells_a
                for dx, dy in _NEIGHBOR_OFFSETS
            )
            if is_found != is_required:
                return False
        return True

    @staticmethod
    def _is_detected(detection_offsets: Sequence[Location], location: Location, other_cells: Set[Location]) -> bool:
        x, y = location
        return any((x + dx, y + dy) in other_cells for dx, dy in detection_offsets)

    def get(self) -> List[IndexedElement[Location]]:
        return list(self._located)

    def randomize(self) -> None:
        for dependency in self._cell_group_dependencies:
            dependency.shifter.randomize()
