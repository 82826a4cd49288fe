from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Tuple, TypeVar

from models import IndexedElement

T = TypeVar("T")

_RNG: Optional[random.Random] = None


def system_rng() -> random.Random:
    global _RNG
    if _RNG is None:
        try:
            _RNG = random.SystemRandom()
        except NotImplementedError:
            _RNG = random.Random()
    return _RNG


class Shifter(ABC, Generic[T]):
    """Depth-first cursor over an ordered sequence of shift indexes.

    ``try_forward`` pushes a shift index with no selected state,
    ``try_increment`` selects the next candidate state for the top shift
    index and ``try_backward`` discards the top selection and moves one level
    shallower.  Moving forward past ``get_length()`` leaves the shifter
    outside; the next ``try_backward`` returns to the last shift index with
    its selection intact.  Moving backward from the first shift index leaves
    the shifter unstarted and returns False.
    """

    @abstractmethod
    def try_forward(self) -> bool:
        ...

    @abstractmethod
    def try_backward(self) -> bool:
        ...

    @abstractmethod
    def try_increment(self) -> bool:
        ...

    @abstractmethod
    def get_indexed_element(self) -> IndexedElement[T]:
        ...

    @abstractmethod
    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        ...

    @abstractmethod
    def get_states(self) -> List[T]:
        ...

    @abstractmethod
    def get_length(self) -> int:
        ...

    @abstractmethod
    def randomize(self) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...
