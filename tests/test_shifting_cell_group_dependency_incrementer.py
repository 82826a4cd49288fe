import pytest

from incrementer.shifting_cell_group_dependency_incrementer import (
    CellGroupDependency,
    ShiftingCellGroupDependencyIncrementer,
)
from models import CellGroup, IndexedElement
from shifter.index_shifter import IndexShifter

A = (14, 140)
B = (15, 150)


def _single_cell():
    return CellGroup(((0, 0),))


def _square(size):
    return CellGroup(tuple((x, y) for y in range(size) for x in range(size)))


def _all_fits(cell_group, width, height):
    return [
        (x, y)
        for y in range(height - cell_group.height() + 1)
        for x in range(width - cell_group.width() + 1)
    ]


def test_overlapping_locations_are_skipped():
    incrementer = ShiftingCellGroupDependencyIncrementer(
        [_single_cell(), _single_cell()],
        [CellGroupDependency([0, 1], IndexShifter([[A, B], [A, B]]))],
    )
    assert incrementer.try_increment() is True
    assert incrementer.get() == [IndexedElement(A, 0), IndexedElement(B, 1)]
    assert incrementer.try_increment() is True
    assert incrementer.get() == [IndexedElement(B, 0), IndexedElement(A, 1)]
    assert incrementer.try_increment() is False
    assert incrementer.get_current_dependency_index() is None


def test_mapping_routes_shifter_elements_to_cell_groups():
    incrementer = ShiftingCellGroupDependencyIncrementer(
        [_square(2), _single_cell()],
        [CellGroupDependency([1, 0], IndexShifter([[(1, 1)], [(0, 0), (1, 1), (2, 0)]]))],
    )
    results = [assignment for assignment in incrementer]
    # the 2x2 square at (0, 0) or (1, 1) would cover the single cell at (1, 1)
    assert results == [[IndexedElement((1, 1), 1), IndexedElement((2, 0), 0)]]


def test_mismatched_mapping_is_rejected():
    with pytest.raises(ValueError):
        ShiftingCellGroupDependencyIncrementer(
            [_single_cell()],
            [CellGroupDependency([0, 1], IndexShifter([[A]]))],
        )


def test_squares_fill_minimal_area():
    squares = [_square(size) for size in (1, 2, 3)]
    shifter = IndexShifter([_all_fits(square, 5, 3) for square in squares])
    incrementer = ShiftingCellGroupDependencyIncrementer(squares, [CellGroupDependency([0, 1, 2], shifter)])
    results = list(incrementer)
    assert len(results) == 8
    for assignment in results:
        occupied = set()
        for indexed in assignment:
            occupied.update(squares[indexed.index].absolute_cells(indexed.element))
        assert len(occupied) == 1 + 4 + 9
    assert incrementer.pair_cache_hits_total > 0


def test_adjacency_is_exact_in_both_directions():
    adjacent = ShiftingCellGroupDependencyIncrementer(
        [_single_cell(), _single_cell()], [], None, [[False, True], [False, False]],
    )
    assert adjacent.is_valid_pair(0, (0, 0), 1, (1, 0)) is True
    assert adjacent.is_valid_pair(1, (1, 0), 0, (0, 0)) is True
    assert adjacent.is_valid_pair(0, (0, 0), 1, (1, 1)) is False
    apart = ShiftingCellGroupDependencyIncrementer(
        [_single_cell(), _single_cell()], [], None, [[False, False], [False, False]],
    )
    assert apart.is_valid_pair(0, (0, 0), 1, (1, 0)) is False
    assert apart.is_valid_pair(0, (0, 0), 1, (1, 1)) is True


def test_detection_offsets_apply_per_ordered_pair():
    detection = [[[], [(2, 0)]], [[], []]]
    incrementer = ShiftingCellGroupDependencyIncrementer([_single_cell(), _single_cell()], [], detection, None)
    assert incrementer.is_valid_pair(0, (0, 0), 1, (2, 0)) is False
    # the same placement seen from the other group still trips group 0's zone
    assert incrementer.is_valid_pair(1, (2, 0), 0, (0, 0)) is False
    assert incrementer.is_valid_pair(0, (2, 0), 1, (0, 0)) is True
    assert incrementer.pair_checks_total == 3


def test_dependencies_run_in_order():
    cells = [_single_cell(), _single_cell(), _single_cell()]
    incrementer = ShiftingCellGroupDependencyIncrementer(
        cells,
        [
            CellGroupDependency([0], IndexShifter([[A, B]])),
            CellGroupDependency([], IndexShifter([])),
            CellGroupDependency([2, 1], IndexShifter([[A], [B]])),
        ],
    )
    seen = []
    while incrementer.try_increment():
        seen.append((incrementer.get_current_dependency_index(), incrementer.get()))
    assert seen == [
        (0, [IndexedElement(A, 0)]),
        (0, [IndexedElement(B, 0)]),
        (2, [IndexedElement(A, 2), IndexedElement(B, 1)]),
    ]
