import random

import pytest

from incrementer.limited_incrementer import LimitedIncrementer
from incrementer.round_robin_incrementer import RoundRobinIncrementer
from incrementer.shifter_incrementer import ShifterIncrementer
from models import IndexedElement
from shifter.index_shifter import IndexShifter


def test_shifter_incrementer_maps_indexes():
    incrementer = ShifterIncrementer(IndexShifter([["a"], ["b", "c"]]), [4, 2])
    assert list(incrementer) == [
        [IndexedElement("a", 4), IndexedElement("b", 2)],
        [IndexedElement("a", 4), IndexedElement("c", 2)],
    ]
    assert incrementer.try_increment() is False
    incrementer.reset()
    assert incrementer.try_increment() is True


def test_shifter_incrementer_rejects_bad_mapping():
    with pytest.raises(ValueError):
        ShifterIncrementer(IndexShifter([["a"], ["b"]]), [0])


def test_limited_incrementer_caps_increments():
    limited = LimitedIncrementer(ShifterIncrementer(IndexShifter([["a", "b", "c"]])), 2)
    assert [assignment[0].element for assignment in limited] == ["a", "b"]
    limited.reset()
    assert limited.try_increment() is True


def test_round_robin_alternates_and_drains():
    first = ShifterIncrementer(IndexShifter([["a", "b", "c"]]), [0])
    second = ShifterIncrementer(IndexShifter([["x"]]), [1])
    round_robin = RoundRobinIncrementer([first, second])
    seen = []
    while round_robin.try_increment():
        seen.append((round_robin.get_current_incrementer_index(), round_robin.get()[0].element))
    assert seen == [(0, "a"), (1, "x"), (0, "b"), (0, "c")]
    assert round_robin.get() == []


def test_round_robin_randomize_keeps_every_assignment():
    incrementers = [ShifterIncrementer(IndexShifter([list(range(3))]), [index]) for index in range(4)]
    round_robin = RoundRobinIncrementer(incrementers, random.Random(2))
    round_robin.randomize()
    seen = [tuple(assignment) for assignment in round_robin]
    assert len(seen) == 12
    assert len(set(seen)) == 12
    # each pass through the rotation touches every incrementer once
    assert sorted(assignment[0].index for assignment in seen[:4]) == [0, 1, 2, 3]
