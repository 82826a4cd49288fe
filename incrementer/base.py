from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Iterator, List, TypeVar

from models import IndexedElement

T = TypeVar("T")


class Incrementer(ABC, Generic[T]):
    """Cursor producing one complete joint assignment per successful increment."""

    @abstractmethod
    def try_increment(self) -> bool:
        ...

    @abstractmethod
    def get(self) -> List[IndexedElement[T]]:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...

    @abstractmethod
    def randomize(self) -> None:
        ...

    def __iter__(self) -> Iterator[List[IndexedElement[T]]]:
        while self.try_increment():
            yield self.get()
