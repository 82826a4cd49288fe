from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from models import LocatedSegment, Segment


class SegmentPermutationIncrementer:
    """Lazily lays out every ordering of ``segments`` inside a 1D bound.

    Consecutive segments are separated by at least ``padding`` cells.  The
    segment placed first (leftmost) is chosen from the segments still
    available; the remaining segments are laid out recursively in the
    rightmost ``other_length`` cells of the bound, for every ``other_length``
    the chosen segment leaves room for.  Only the outermost level slides its
    segment across the slack; nested levels sit flush at the start of their
    sub-bound and receive their absolute offset from the caller.
    """

    def __init__(self, segments: Sequence[Segment], bounding_length: int, padding: int):
        self._segments: List[Segment] = list(segments)
        self._bounding_length = bounding_length
        self._padding = padding
        self.reset()

    def reset(self) -> None:
        self._is_available: List[bool] = [True] * len(self._segments)
        self._permutations: Iterator[List[LocatedSegment]] = self._iter_permutations(self._bounding_length, 0, 0)
        self._is_exhausted = False

    def get_segments_length(self) -> int:
        return len(self._segments)

    def try_get_next_segment_location_permutations(self) -> Optional[List[LocatedSegment]]:
        if self._is_exhausted:
            return None
        permutation = next(self._permutations, None)
        if permutation is None:
            self._is_exhausted = True
        return permutation

    def __iter__(self) -> Iterator[List[LocatedSegment]]:
        while True:
            permutation = self.try_get_next_segment_location_permutations()
            if permutation is None:
                return
            yield permutation

    def _positions(self, last_position: int, depth: int) -> range:
        if last_position < 0:
            return range(0)
        if depth == 0:
            return range(last_position + 1)
        return range(1)

    def _iter_permutations(self, bounding_length: int, position_offset: int, depth: int) -> Iterator[List[LocatedSegment]]:
        for segment_index, segment in enumerate(self._segments):
            if not self._is_available[segment_index]:
                continue
            self._is_available[segment_index] = False
            others = [other for other_index, other in enumerate(self._segments) if self._is_available[other_index]]
            if not others:
                for position in self._positions(bounding_length - segment.length, depth):
                    yield [LocatedSegment(segment_index, position_offset + position)]
            else:
                other_total = sum(other.length for other in others) + self._padding * (len(others) - 1)
                maximum_other_length = bounding_length - segment.length - self._padding
                for other_length in range(other_total, maximum_other_length + 1):
                    other_offset = bounding_length - other_length
                    last_position = other_offset - segment.length - self._padding
                    for located_others in self._iter_permutations(other_length, position_offset + other_offset, depth + 1):
                        for position in self._positions(last_position, depth):
                            yield [LocatedSegment(segment_index, position_offset + position)] + located_others
            self._is_available[segment_index] = True
