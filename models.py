from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Tuple, TypeVar

T = TypeVar("T")

Location = Tuple[int, int]

CORNER_WALL = "corner_wall"
WALL_SEGMENT = "wall_segment"
WALL_ADJACENT = "wall_adjacent"
FLOATER = "floater"


@dataclass(frozen=True)
class Segment:
    length: int


@dataclass(frozen=True)
class LocatedSegment:
    segment_index: int
    position: int


@dataclass(frozen=True)
class IndexedElement(Generic[T]):
    element: T
    index: int


@dataclass(frozen=True)
class CellGroup:
    cells: Tuple[Location, ...]
    cell_group_type: str = FLOATER

    @classmethod
    def from_absolute_cells(cls, cells: Iterable[Location], cell_group_type: str = FLOATER) -> Tuple["CellGroup", Location]:
        """Normalize absolute board cells; returns the group and its anchor."""
        cells = list(cells)
        if not cells:
            raise ValueError("a cell group needs at least one cell")
        min_x = min(x for x, _ in cells)
        min_y = min(y for _, y in cells)
        normalized = tuple(sorted((x - min_x, y - min_y) for x, y in cells))
        return cls(normalized, cell_group_type), (min_x, min_y)

    def width(self) -> int:
        return max(x for x, _ in self.cells) + 1

    def height(self) -> int:
        return max(y for _, y in self.cells) + 1

    def absolute_cells(self, location: Location) -> Tuple[Location, ...]:
        lx, ly = location
        return tuple((lx + x, ly + y) for x, y in self.cells)


@dataclass(frozen=True)
class LocatedCellGroup:
    cell_group_index: int
    location: Location
