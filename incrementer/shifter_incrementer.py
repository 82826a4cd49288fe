from __future__ import annotations

from typing import Generic, List, Optional, Sequence, TypeVar

from errors import SearchInvariantError
from incrementer.base import Incrementer
from models import IndexedElement
from shifter.base import Shifter

T = TypeVar("T")


class ShifterIncrementer(Incrementer[T], Generic[T]):
    """Drives a shifter to full depth once per increment.

    Element indexes reported by the shifter are translated through
    ``index_mapping`` when one is given.
    """

    def __init__(self, shifter: Shifter[T], index_mapping: Optional[Sequence[int]] = None):
        if index_mapping is not None and len(index_mapping) != shifter.get_length():
            raise ValueError(
                f"index mapping has {len(index_mapping)} entries for a shifter of length {shifter.get_length()}"
            )
        self._shifter = shifter
        self._index_mapping: Optional[List[int]] = None if index_mapping is None else list(index_mapping)
        self.reset()

    def reset(self) -> None:
        self._shifter.reset()
        self._indexed_elements: List[IndexedElement[T]] = []
        self._is_started = False
        self._is_completed = False

    def _mapped(self, indexed_element: IndexedElement[T]) -> IndexedElement[T]:
        if self._index_mapping is None:
            return indexed_element
        return IndexedElement(indexed_element.element, self._index_mapping[indexed_element.index])

    def try_increment(self) -> bool:
        if self._is_completed:
            return False
        length = self._shifter.get_length()
        if not self._is_started:
            self._is_started = True
            if not self._shifter.try_forward():
                self._is_completed = True
                return False
        else:
            self._indexed_elements.pop()
        while True:
            if self._shifter.try_increment():
                self._indexed_elements.append(self._mapped(self._shifter.get_indexed_element()))
                if len(self._indexed_elements) == length:
                    return True
                if not self._shifter.try_forward():
                    raise SearchInvariantError("shifter refused to move forward before reaching its length")
            else:
                if not self._shifter.try_backward():
                    self._is_completed = True
                    return False
                self._indexed_elements.pop()

    def get(self) -> List[IndexedElement[T]]:
        return list(self._indexed_elements)

    def randomize(self) -> None:
        self._shifter.randomize()
