# board_parser.py
from typing import Any, List, Optional, Sequence, Tuple

from config import CFG
from pixel_board.pixel_board import Pixel, PixelBoard

PARSER_SOURCE = __file__


class TextPixel(Pixel):
    """One character of a text board.

    Lowercase letters (and any other non-empty character) are plain tiles.
    Uppercase letters are elements: no cell of another group may come within
    ``CFG.ELEMENT_PADDING`` cells of them, diagonals included.
    """

    __slots__ = ("char",)

    def __init__(self, char: str):
        if len(char) != 1:
            raise ValueError(f"a text pixel is one character, got {char!r}")
        self.char = char

    def is_element(self) -> bool:
        return self.char.isupper()

    def get_invalid_location_offsets_for_other_pixel(self, other: Pixel) -> List[Tuple[int, int]]:
        if not self.is_element():
            return []
        padding = CFG.ELEMENT_PADDING
        return [
            (dx, dy)
            for dy in range(-padding, padding + 1)
            for dx in range(-padding, padding + 1)
            if (dx, dy) != (0, 0)
        ]

    def __repr__(self) -> str:
        return f"TextPixel({self.char!r})"


def _normalize_rows(rows: Any) -> List[str]:
    if isinstance(rows, str):
        rows = rows.splitlines()
    if not isinstance(rows, (list, tuple)):
        raise ValueError("board rows must be a list of strings")
    lines = [str(row).rstrip("\r") for row in rows]
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def parse_board(rows: Any) -> PixelBoard:
    """
    Parse text rows into a PixelBoard of TextPixels.
    ``CFG.EMPTY_CELL`` (and spaces) mark empty cells; rows must share one width.
    """
    lines = _normalize_rows(rows)
    if not lines:
        raise ValueError("board has no rows")
    width = len(lines[0])
    for y, line in enumerate(lines):
        if len(line) != width:
            raise ValueError(f"row {y} has {len(line)} cells, expected {width}")
    height = len(lines)
    if width * height > CFG.MAX_BOARD_CELLS:
        raise ValueError(f"board has {width * height} cells, limit is {CFG.MAX_BOARD_CELLS}")

    board: PixelBoard = PixelBoard(width, height)
    # one shared payload per character keeps payload identity per letter
    pixels = {}
    for y, line in enumerate(lines):
        for x, char in enumerate(line):
            if char == CFG.EMPTY_CELL or char == " ":
                continue
            pixel = pixels.get(char)
            if pixel is None:
                pixel = pixels[char] = TextPixel(char)
            board.set(x, y, pixel)
    return board


def try_parse_board(rows: Any) -> Tuple[bool, Any]:
    """(True, board) on success, (False, message) otherwise."""
    try:
        return (True, parse_board(rows))
    except ValueError as exc:
        return (False, str(exc))


def format_board(board: PixelBoard, empty: Optional[str] = None) -> List[str]:
    empty = CFG.EMPTY_CELL if empty is None else empty
    rows: List[str] = []
    for y in range(board.get_height()):
        chars: List[str] = []
        for x in range(board.get_width()):
            pixel = board.get(x, y)
            chars.append(empty if pixel is None else getattr(pixel, "char", "?"))
        rows.append("".join(chars))
    return rows


def format_boards(boards: Sequence[PixelBoard]) -> List[List[str]]:
    return [format_board(board) for board in boards]
