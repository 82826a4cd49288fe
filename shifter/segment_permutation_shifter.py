from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from models import IndexedElement, Location, Segment
from shifter.base import Shifter, system_rng


class _ShiftFrame:
    __slots__ = ("initial_position", "candidates", "cursor", "segment_index", "position")

    def __init__(self, initial_position: int):
        self.initial_position = initial_position
        self.candidates: Optional[List[Tuple[int, int]]] = None
        self.cursor: Optional[int] = None
        self.segment_index: Optional[int] = None
        self.position: Optional[int] = None


class SegmentPermutationShifter(Shifter[Location]):
    """Resumable cursor over segment orderings along one board edge.

    Shift index ``k`` holds the ``k``-th segment from the origin.  Its
    candidates are every segment not yet placed at a shallower shift index,
    each at every position from just past the previous segment (plus
    ``padding``) up to the last position that still leaves room for the
    unplaced segments.  Elements are the absolute location of each
    segment's first cell; element indexes are the segment's index in
    ``segments`` no matter how the visitation order is shuffled.
    """

    def __init__(
        self,
        segments: Sequence[Segment],
        origin: Location,
        bounding_length: int,
        is_horizontal: bool,
        padding: int,
        rng: Optional[random.Random] = None,
    ):
        self._segments: List[Segment] = list(segments)
        self._origin = origin
        self._bounding_length = bounding_length
        self._is_horizontal = is_horizontal
        self._padding = padding
        self._rng = rng
        self._segment_order: List[int] = list(range(len(self._segments)))
        # visitation rank per position along the axis; identity until randomized
        self._position_rank: List[int] = list(range(bounding_length))
        self._possible_locations: List[Location] = [self._location_at(position) for position in range(bounding_length)]
        self.reset()

    def reset(self) -> None:
        self._frames: List[_ShiftFrame] = []
        self._is_placed: List[bool] = [False] * len(self._segments)
        self._is_shifted_outside = False

    def _location_at(self, position: int) -> Location:
        x, y = self._origin
        if self._is_horizontal:
            return (x + position, y)
        return (x, y + position)

    def _build_candidates(self, frame: _ShiftFrame) -> List[Tuple[int, int]]:
        unplaced = [segment_index for segment_index in self._segment_order if not self._is_placed[segment_index]]
        needed = sum(self._segments[segment_index].length for segment_index in unplaced)
        needed += self._padding * (len(unplaced) - 1)
        slack = self._bounding_length - frame.initial_position - needed
        candidates: List[Tuple[int, int]] = []
        if slack < 0:
            return candidates
        positions = sorted(
            range(frame.initial_position, frame.initial_position + slack + 1),
            key=self._position_rank.__getitem__,
        )
        for segment_index in unplaced:
            candidates.extend((segment_index, position) for position in positions)
        return candidates

    def try_forward(self) -> bool:
        if self._is_shifted_outside:
            return False
        if len(self._frames) == len(self._segments):
            self._is_shifted_outside = True
            return False
        if self._frames:
            previous = self._frames[-1]
            initial_position = previous.position + self._segments[previous.segment_index].length + self._padding
        else:
            initial_position = 0
        self._frames.append(_ShiftFrame(initial_position))
        return True

    def try_backward(self) -> bool:
        if self._is_shifted_outside:
            self._is_shifted_outside = False
            return bool(self._frames)
        if not self._frames:
            return False
        frame = self._frames.pop()
        if frame.segment_index is not None:
            self._is_placed[frame.segment_index] = False
        return bool(self._frames)

    def try_increment(self) -> bool:
        if self._is_shifted_outside or not self._frames:
            return False
        frame = self._frames[-1]
        if frame.segment_index is not None:
            self._is_placed[frame.segment_index] = False
            frame.segment_index = None
            frame.position = None
        if frame.candidates is None:
            frame.candidates = self._build_candidates(frame)
        next_cursor = 0 if frame.cursor is None else frame.cursor + 1
        if next_cursor >= len(frame.candidates):
            frame.cursor = len(frame.candidates)
            return False
        frame.cursor = next_cursor
        frame.segment_index, frame.position = frame.candidates[next_cursor]
        self._is_placed[frame.segment_index] = True
        return True

    def get_indexed_element(self) -> IndexedElement[Location]:
        segment_index, position = self.get_element_index_and_state_index()
        return IndexedElement(self._possible_locations[position], segment_index)

    def get_element_index_and_state_index(self) -> Tuple[int, int]:
        frame = self._frames[-1]
        if frame.segment_index is None:
            raise IndexError(f"shift index {len(self._frames) - 1} has no selected segment")
        return frame.segment_index, frame.position

    def get_states(self) -> List[Location]:
        return list(self._possible_locations)

    def get_length(self) -> int:
        return len(self._segments)

    def randomize(self) -> None:
        rng = self._rng or system_rng()
        rng.shuffle(self._segment_order)
        rng.shuffle(self._position_rank)
