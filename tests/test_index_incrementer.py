import pytest

from errors import InvalidDomainError
from index_incrementer import IndexIncrementer


def _drain(incrementer):
    seen = [incrementer.get()]
    while incrementer.try_increment():
        seen.append(incrementer.get())
    return seen


@pytest.mark.parametrize("size", [1, 2, 5, 10])
def test_single_domain_wraps_after_every_index(size):
    incrementer = IndexIncrementer([size])
    seen = _drain(incrementer)
    assert seen == [[index] for index in range(size)]
    # the failing call leaves the odometer back at zero
    assert incrementer.get() == [0]


def test_first_index_cycles_fastest():
    incrementer = IndexIncrementer([2, 3])
    seen = _drain(incrementer)
    assert len(seen) == 6
    assert seen[:4] == [[0, 0], [1, 0], [0, 1], [1, 1]]
    assert seen[-1] == [1, 2]
    assert incrementer.get() == [0, 0]


def test_reset_and_collections():
    incrementer = IndexIncrementer.from_collections([["a", "b"], ["c"]])
    assert incrementer.get_domain_sizes() == [2, 1]
    assert incrementer.try_increment() is True
    incrementer.reset()
    assert incrementer.get() == [0, 0]


def test_zero_size_domain_is_rejected():
    with pytest.raises(InvalidDomainError):
        IndexIncrementer([3, 0])
    with pytest.raises(ValueError):
        IndexIncrementer.from_collections([[]])
