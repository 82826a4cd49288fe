from __future__ import annotations

import copy
import random
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence

from config import CFG
from errors import SearchInvariantError, SearchLimitError
from incrementer.base import Incrementer
from incrementer.limited_incrementer import LimitedIncrementer
from incrementer.round_robin_incrementer import RoundRobinIncrementer
from incrementer.shifter_incrementer import ShifterIncrementer
from incrementer.shifting_cell_group_dependency_incrementer import (
    CellGroupDependency,
    ShiftingCellGroupDependencyIncrementer,
)
from models import CORNER_WALL, WALL_SEGMENT, IndexedElement, Location, LocatedCellGroup, Segment
from pixel_board.board_decomposition import (
    BOTTOM,
    LEFT,
    TOP,
    BoardDecomposition,
    InvalidLocationOffsets,
    decompose,
)
from pixel_board.pixel_board import PixelBoard
from shifter.base import Shifter, system_rng
from shifter.hyper_graph_cliche_shifter import HyperGraphClicheShifter, StatefulHyperGraph
from shifter.index_shifter import IndexShifter
from shifter.segment_permutation_shifter import SegmentPermutationShifter
from shifter.shifting_square_breadth_first_search_shifter import ShiftingSquareBreadthFirstSearchShifter


class PixelBoardRandomizer:
    """Produces boards with the same cell groups as ``pixel_board`` in new places.

    Corner walls stay put, wall segments slide and reorder along their side,
    wall-adjacent blobs move along the walls they touch and floaters move
    anywhere inside.  Every produced board keeps the adjacency, overlap and
    detection relations of the original.

    ``observer`` is told about each search through ``search_started``,
    ``search_observed`` and ``search_finished`` (the ``progress`` module fits).
    Without one the randomizer touches no files.
    """

    def __init__(
        self,
        pixel_board: PixelBoard,
        invalid_location_offsets: Optional[InvalidLocationOffsets] = None,
        rng: Optional[random.Random] = None,
        observer: Any = None,
    ):
        self._pixel_board = pixel_board
        self._rng = rng
        self._observer = observer
        self._decomposition: BoardDecomposition = decompose(pixel_board, invalid_location_offsets)
        self._is_always_valid = self._build_is_always_valid()
        self.observations_total = 0
        self.cliche_attempts_total = 0
        self.dependencies_total = 0

    def get_decomposition(self) -> BoardDecomposition:
        return self._decomposition

    def _side_per_cell_group_index(self) -> Dict[int, str]:
        side_per_index: Dict[int, str] = {}
        for side_segments in self._decomposition.side_segments:
            for cell_group_index in side_segments.cell_group_indexes:
                side_per_index[cell_group_index] = side_segments.side
        return side_per_index

    def _build_is_always_valid(self) -> List[List[bool]]:
        decomposition = self._decomposition
        total = decomposition.cell_groups_length()
        side_per_index = self._side_per_cell_group_index()
        interior = set(decomposition.interior_cell_group_indexes)
        is_always_valid = [[False] * total for _ in range(total)]
        for index_a in range(total):
            is_always_valid[index_a][index_a] = True
            for index_b in range(index_a + 1, total):
                type_a = decomposition.cell_groups[index_a].cell_group_type
                type_b = decomposition.cell_groups[index_b].cell_group_type
                if index_a in interior or index_b in interior:
                    is_valid = False
                elif type_a == CORNER_WALL and type_b == CORNER_WALL:
                    is_valid = True
                elif side_per_index.get(index_a) is not None and side_per_index.get(index_a) == side_per_index.get(index_b):
                    is_valid = False
                else:
                    is_valid = (
                        not decomposition.detection_offsets[index_a][index_b]
                        and not decomposition.detection_offsets[index_b][index_a]
                    )
                is_always_valid[index_a][index_b] = is_valid
                is_always_valid[index_b][index_a] = is_valid
        return is_always_valid

    # ------------------------------
    # Domain shifters
    # ------------------------------

    def _shifter_mappings(self) -> List[List[int]]:
        """Cell group indexes per domain shifter: one per corner wall, per side and per interior group."""
        decomposition = self._decomposition
        mappings: List[List[int]] = [[index] for index in decomposition.corner_cell_group_indexes]
        for side_segments in decomposition.side_segments:
            mappings.append(list(side_segments.cell_group_indexes))
        mappings.extend([index] for index in decomposition.interior_cell_group_indexes)
        return mappings

    def _build_shifter(self, mapping: Sequence[int], rng: random.Random) -> Shifter[Location]:
        decomposition = self._decomposition
        cell_group_type = decomposition.cell_groups[mapping[0]].cell_group_type
        if cell_group_type == CORNER_WALL:
            return IndexShifter([[decomposition.anchors[index]] for index in mapping], rng)
        if cell_group_type != WALL_SEGMENT:
            return IndexShifter([decomposition.location_candidates(index) for index in mapping], rng)
        side_segments = next(
            candidate for candidate in decomposition.side_segments if candidate.cell_group_indexes[0] == mapping[0]
        )
        start = side_segments.bound_start
        if side_segments.side == TOP:
            origin, is_horizontal = (start, 0), True
        elif side_segments.side == BOTTOM:
            origin, is_horizontal = (start, decomposition.height - 1), True
        elif side_segments.side == LEFT:
            origin, is_horizontal = (0, start), False
        else:
            origin, is_horizontal = (decomposition.width - 1, start), False
        return SegmentPermutationShifter(
            [Segment(length) for length in side_segments.lengths],
            origin,
            side_segments.bounding_length(),
            is_horizontal,
            CFG.WALL_PADDING,
            rng,
        )

    @staticmethod
    def _clone(shifter: Shifter[Location], rng: random.Random) -> Shifter[Location]:
        # clones keep the randomized visitation order and share the random source
        return copy.deepcopy(shifter, {id(rng): rng})

    def _has_conflicts(self, mapping_a: Sequence[int], mapping_b: Sequence[int]) -> bool:
        return any(not self._is_always_valid[index_a][index_b] for index_a in mapping_a for index_b in mapping_b)

    def _build_dependency(self, mapping: List[int], shifters: Sequence[Shifter[Location]]) -> ShiftingCellGroupDependencyIncrementer:
        decomposition = self._decomposition
        shifter = ShiftingSquareBreadthFirstSearchShifter(shifters, is_shifter_order_preserved_on_randomize=True)
        return ShiftingCellGroupDependencyIncrementer(
            decomposition.cell_groups,
            [CellGroupDependency(mapping, shifter)],
            decomposition.detection_offsets,
            decomposition.is_adjacent,
        )

    def _build_incrementers(
        self,
        mappings: Sequence[List[int]],
        shifters: Sequence[Shifter[Location]],
        rng: random.Random,
    ) -> List[Incrementer[Location]]:
        """One dependency per conflicting pair of domain shifters, each over clones of the same shifters."""
        if len(mappings) == 1:
            return [self._build_dependency(mappings[0], [self._clone(shifters[0], rng)])]

        incrementers: List[Incrementer[Location]] = []
        is_paired = [False] * len(mappings)
        for position_a, position_b in combinations(range(len(mappings)), 2):
            mapping_a, mapping_b = mappings[position_a], mappings[position_b]
            if not self._has_conflicts(mapping_a, mapping_b):
                continue
            is_paired[position_a] = is_paired[position_b] = True
            incrementers.append(self._build_dependency(
                mapping_a + mapping_b,
                [self._clone(shifters[position_a], rng), self._clone(shifters[position_b], rng)],
            ))
        for position, mapping in enumerate(mappings):
            if is_paired[position]:
                continue
            shifter = self._clone(shifters[position], rng)
            if self._has_conflicts(mapping, mapping):
                incrementers.append(self._build_dependency(mapping, [shifter]))
            else:
                incrementers.append(LimitedIncrementer(ShifterIncrementer(shifter, mapping), 1))
        return incrementers

    # ------------------------------
    # Search
    # ------------------------------

    def _materialize(self, located_cell_groups: Sequence[LocatedCellGroup]) -> PixelBoard:
        decomposition = self._decomposition
        board = PixelBoard(self._pixel_board.get_width(), self._pixel_board.get_height())
        for located in located_cell_groups:
            cell_group = decomposition.cell_groups[located.cell_group_index]
            ax, ay = decomposition.anchors[located.cell_group_index]
            lx, ly = located.location
            for dx, dy in cell_group.cells:
                board.set(lx + dx, ly + dy, self._pixel_board.get(ax + dx, ay + dy))
        return board

    def _try_find_cliche(self, graph: StatefulHyperGraph, rng: random.Random) -> Optional[List[IndexedElement[Location]]]:
        cliche_incrementer = ShifterIncrementer(HyperGraphClicheShifter(graph.nodes_per_slot, rng))
        cliche_incrementer.randomize()
        if cliche_incrementer.try_increment():
            return cliche_incrementer.get()
        return None

    def _search(self, round_robin: RoundRobinIncrementer, graph: StatefulHyperGraph, rng: random.Random) -> PixelBoard:
        while round_robin.try_increment():
            self.observations_total += 1
            touched = graph.observe(round_robin.get())
            if graph.is_cliche_possible(touched):
                self.cliche_attempts_total += 1
                cliche = self._try_find_cliche(graph, rng)
                if cliche is not None:
                    return self._materialize(
                        [LocatedCellGroup(indexed.index, indexed.element) for indexed in cliche]
                    )
            if self._observer is not None:
                self._observer.search_observed(self.observations_total, self.cliche_attempts_total)
            if CFG.MAX_OBSERVATIONS and self.observations_total >= CFG.MAX_OBSERVATIONS:
                raise SearchLimitError(f"no placement found within {CFG.MAX_OBSERVATIONS} observations")
        raise SearchInvariantError("Unexpected failure to find the original placement, let alone a new random one.")

    def get_random_pixel_board(self) -> PixelBoard:
        decomposition = self._decomposition
        self.observations_total = 0
        self.cliche_attempts_total = 0
        total = decomposition.cell_groups_length()
        if total == 0:
            self.dependencies_total = 0
            return self._pixel_board.copy()

        rng = self._rng or system_rng()
        mappings = self._shifter_mappings()
        shifters = [self._build_shifter(mapping, rng) for mapping in mappings]
        for shifter in shifters:
            shifter.randomize()
        incrementers = self._build_incrementers(mappings, shifters, rng)
        self.dependencies_total = len(incrementers)
        round_robin = RoundRobinIncrementer(incrementers, rng)
        graph: StatefulHyperGraph[Location] = StatefulHyperGraph(self._is_always_valid)

        observer = self._observer
        started = None
        if observer is not None:
            started = observer.search_started(decomposition.width, decomposition.height, total, len(incrementers))
        is_found = False
        message = None
        try:
            board = self._search(round_robin, graph, rng)
            is_found = True
            return board
        except Exception as exc:
            message = exc
            raise
        finally:
            if observer is not None:
                observer.search_finished(
                    is_found,
                    started=started,
                    observations=self.observations_total,
                    cliche_attempts=self.cliche_attempts_total,
                    message=message,
                )
