from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

from incrementer.base import Incrementer
from models import IndexedElement
from shifter.base import system_rng

T = TypeVar("T")


class RoundRobinIncrementer(Incrementer[T]):
    """Advances one inner incrementer per call, in rotation.

    Exhausted incrementers leave the rotation; the round robin is exhausted
    once every inner incrementer is.  ``get`` returns the assignment of the
    incrementer advanced last.
    """

    def __init__(self, incrementers: Sequence[Incrementer[T]], rng: Optional[random.Random] = None):
        self._incrementers: List[Incrementer[T]] = list(incrementers)
        self._rng = rng
        self._rotation: List[int] = list(range(len(self._incrementers)))
        self.reset()

    def reset(self) -> None:
        for incrementer in self._incrementers:
            incrementer.reset()
        self._available: List[int] = list(self._rotation)
        self._cursor = -1
        self._current: Optional[int] = None

    def get_current_incrementer_index(self) -> Optional[int]:
        return self._current

    def try_increment(self) -> bool:
        while self._available:
            self._cursor = (self._cursor + 1) % len(self._available)
            incrementer_index = self._available[self._cursor]
            if self._incrementers[incrementer_index].try_increment():
                self._current = incrementer_index
                return True
            del self._available[self._cursor]
            self._cursor -= 1
        self._current = None
        return False

    def get(self) -> List[IndexedElement[T]]:
        if self._current is None:
            return []
        return self._incrementers[self._current].get()

    def randomize(self) -> None:
        for incrementer in self._incrementers:
            incrementer.randomize()
        (self._rng or system_rng()).shuffle(self._rotation)
        available = set(self._available)
        self._available = [index for index in self._rotation if index in available]
        self._cursor = -1
