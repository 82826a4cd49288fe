from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Sequence

from index_incrementer import IndexIncrementer
from models import IndexedElement, Location
from segment_permutation_incrementer import SegmentPermutationIncrementer


class ElementIndexer(ABC):
    """Source of successive location assignments keyed by external element index."""

    @abstractmethod
    def try_get_next_indexed_elements(self) -> Optional[List[IndexedElement[Location]]]:
        ...

    def __iter__(self) -> Iterator[List[IndexedElement[Location]]]:
        while True:
            indexed_elements = self.try_get_next_indexed_elements()
            if indexed_elements is None:
                return
            yield indexed_elements


class SegmentPermutationIncrementerElementIndexer(ElementIndexer):
    """Projects segment layouts along one axis onto board locations."""

    def __init__(
        self,
        element_indexes: Sequence[int],
        segment_permutation_incrementer: SegmentPermutationIncrementer,
        origin: Location,
        is_horizontal: bool,
    ):
        if len(element_indexes) != segment_permutation_incrementer.get_segments_length():
            raise ValueError(
                f"{len(element_indexes)} element indexes for "
                f"{segment_permutation_incrementer.get_segments_length()} segments"
            )
        self._element_indexes = list(element_indexes)
        self._segment_permutation_incrementer = segment_permutation_incrementer
        self._origin = origin
        self._is_horizontal = is_horizontal

    def try_get_next_indexed_elements(self) -> Optional[List[IndexedElement[Location]]]:
        located_segments = self._segment_permutation_incrementer.try_get_next_segment_location_permutations()
        if located_segments is None:
            return None
        x, y = self._origin
        indexed_elements: List[IndexedElement[Location]] = []
        for located_segment in located_segments:
            if self._is_horizontal:
                location = (x + located_segment.position, y)
            else:
                location = (x, y + located_segment.position)
            indexed_elements.append(IndexedElement(location, self._element_indexes[located_segment.segment_index]))
        return indexed_elements


class IndexIncrementerElementIndexer(ElementIndexer):
    """Every combination of one candidate location per element."""

    def __init__(self, element_indexes: Sequence[int], locations_per_element: Sequence[Sequence[Location]]):
        if len(element_indexes) != len(locations_per_element):
            raise ValueError(
                f"{len(element_indexes)} element indexes for {len(locations_per_element)} location lists"
            )
        self._element_indexes = list(element_indexes)
        self._locations_per_element = [list(locations) for locations in locations_per_element]
        self._index_incrementer = IndexIncrementer.from_collections(self._locations_per_element)
        self._is_last_increment_successful = True

    def try_get_next_indexed_elements(self) -> Optional[List[IndexedElement[Location]]]:
        if not self._is_last_increment_successful:
            return None
        location_index_per_element = self._index_incrementer.get()
        self._is_last_increment_successful = self._index_incrementer.try_increment()
        return [
            IndexedElement(self._locations_per_element[element][location_index], self._element_indexes[element])
            for element, location_index in enumerate(location_index_per_element)
        ]
