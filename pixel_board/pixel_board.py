from __future__ import annotations

from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from models import Location


class Pixel:
    """Payload stored on a board cell.

    Subclasses describe their exclusion zone through
    ``get_invalid_location_offsets_for_other_pixel``: the offsets, relative to
    this pixel, where ``other`` may never be placed when it belongs to a
    different cell group.
    """

    def get_invalid_location_offsets_for_other_pixel(self, other: "Pixel") -> List[Location]:
        return []


P = TypeVar("P")


class PixelBoard(Generic[P]):
    """Sparse width x height grid of shared payloads."""

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"board size must be non-negative, got {width} x {height}")
        self._width = width
        self._height = height
        self._pixels: Dict[Location, P] = {}

    def get_width(self) -> int:
        return self._width

    def get_height(self) -> int:
        return self._height

    def _check(self, x: int, y: int) -> Location:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"({x}, {y}) is outside a {self._width} x {self._height} board")
        return x, y

    def exists(self, x: int, y: int) -> bool:
        return self._check(x, y) in self._pixels

    def get(self, x: int, y: int) -> Optional[P]:
        return self._pixels.get(self._check(x, y))

    def set(self, x: int, y: int, pixel: P) -> None:
        self._pixels[self._check(x, y)] = pixel

    def clear(self, x: int, y: int) -> None:
        self._pixels.pop(self._check(x, y), None)

    def copy(self) -> "PixelBoard[P]":
        board: PixelBoard[P] = PixelBoard(self._width, self._height)
        board._pixels = dict(self._pixels)
        return board

    def iter_cells(self) -> Iterator[Tuple[Location, P]]:
        """Occupied cells in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                pixel = self._pixels.get((x, y))
                if pixel is not None:
                    yield (x, y), pixel

    def __len__(self) -> int:
        return len(self._pixels)
