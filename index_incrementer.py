from __future__ import annotations

from typing import List, Sequence

from errors import InvalidDomainError


class IndexIncrementer:
    """Odometer over independent index domains, least significant index first."""

    def __init__(self, domain_sizes: Sequence[int]):
        for position, size in enumerate(domain_sizes):
            if size <= 0:
                raise InvalidDomainError(f"domain {position} has size {size}; every domain needs at least one index")
        self._domain_sizes: List[int] = list(domain_sizes)
        self._indexes: List[int] = [0] * len(self._domain_sizes)

    @classmethod
    def from_collections(cls, collections: Sequence[Sequence]) -> "IndexIncrementer":
        return cls([len(collection) for collection in collections])

    def try_increment(self) -> bool:
        # False once every index has wrapped back to zero
        for position, size in enumerate(self._domain_sizes):
            self._indexes[position] += 1
            if self._indexes[position] < size:
                return True
            self._indexes[position] = 0
        return False

    def get(self) -> List[int]:
        return list(self._indexes)

    def reset(self) -> None:
        self._indexes = [0] * len(self._domain_sizes)

    def get_domain_sizes(self) -> List[int]:
        return list(self._domain_sizes)
