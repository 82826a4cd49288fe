import pytest

from element_indexer import ElementIndexer, IndexIncrementerElementIndexer
from models import IndexedElement


def test_every_combination_then_none():
    indexer = IndexIncrementerElementIndexer([3, 5], [[(0, 0), (1, 0)], [(2, 2)]])
    assert isinstance(indexer, ElementIndexer)
    assert indexer.try_get_next_indexed_elements() == [IndexedElement((0, 0), 3), IndexedElement((2, 2), 5)]
    assert indexer.try_get_next_indexed_elements() == [IndexedElement((1, 0), 3), IndexedElement((2, 2), 5)]
    assert indexer.try_get_next_indexed_elements() is None
    assert indexer.try_get_next_indexed_elements() is None


def test_iteration_covers_product():
    locations = [[(x, 0) for x in range(3)], [(0, y) for y in range(4)]]
    assignments = list(IndexIncrementerElementIndexer([0, 1], locations))
    assert len(assignments) == 12
    assert len({tuple(assignment) for assignment in assignments}) == 12


def test_length_mismatch_is_rejected():
    with pytest.raises(ValueError):
        IndexIncrementerElementIndexer([0, 1], [[(0, 0)]])
