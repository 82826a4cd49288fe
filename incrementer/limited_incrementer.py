from __future__ import annotations

from typing import List, TypeVar

from incrementer.base import Incrementer
from models import IndexedElement

T = TypeVar("T")


class LimitedIncrementer(Incrementer[T]):
    """Stops an inner incrementer after ``limit`` successful increments."""

    def __init__(self, incrementer: Incrementer[T], limit: int):
        self._incrementer = incrementer
        self._limit = limit
        self._increments_total = 0

    def try_increment(self) -> bool:
        if self._increments_total >= self._limit:
            return False
        if not self._incrementer.try_increment():
            self._increments_total = self._limit
            return False
        self._increments_total += 1
        return True

    def get(self) -> List[IndexedElement[T]]:
        return self._incrementer.get()

    def reset(self) -> None:
        self._incrementer.reset()
        self._increments_total = 0

    def randomize(self) -> None:
        self._incrementer.randomize()
