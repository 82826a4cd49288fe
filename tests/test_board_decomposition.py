import pytest

from board_parser import parse_board
from models import CORNER_WALL, FLOATER, WALL_ADJACENT, WALL_SEGMENT
from pixel_board.board_decomposition import LEFT, TOP, decompose, perimeter_cells
from pixel_board.pixel_board import PixelBoard

MIXED = [
    "aa..b..",
    "a...e..",
    ".......",
    "d..f...",
    ".......",
    "......g",
]


def _types(decomposition):
    return [cell_group.cell_group_type for cell_group in decomposition.cell_groups]


def test_perimeter_is_clockwise():
    assert perimeter_cells(3, 3) == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (1, 2), (0, 2), (0, 1)]


def test_mixed_board_groups():
    decomposition = decompose(parse_board(MIXED))
    assert _types(decomposition) == [CORNER_WALL, CORNER_WALL, WALL_SEGMENT, WALL_SEGMENT, WALL_ADJACENT, FLOATER]
    # the top-left run wraps around the start of the perimeter
    assert decomposition.anchors[0] == (0, 0)
    assert set(decomposition.cell_groups[0].cells) == {(0, 0), (1, 0), (0, 1)}
    assert decomposition.anchors[1] == (6, 5)

    top, left = decomposition.side_segments
    assert (top.side, top.cell_group_indexes, top.bound_start, top.bound_end) == (TOP, [2], 3, 5)
    assert (left.side, left.cell_group_indexes, left.bound_start, left.bound_end) == (LEFT, [3], 3, 4)

    assert decomposition.interior_cell_group_indexes == [4, 5]
    assert decomposition.touched_walls_per_cell_group_index[4] == {2}
    assert decomposition.touched_sides_per_cell_group_index[4] == {TOP}
    assert decomposition.is_adjacent[4][2] and decomposition.is_adjacent[2][4]
    assert not decomposition.is_adjacent[5][2]


def test_location_candidates_follow_touched_sides():
    decomposition = decompose(parse_board(MIXED))
    assert decomposition.location_candidates(4) == [(x, 1) for x in range(1, 6)]
    assert len(decomposition.location_candidates(5)) == 5 * 4


def test_fully_walled_board_is_one_corner_group():
    decomposition = decompose(parse_board(["abc", "h.d", "gfe"]))
    assert _types(decomposition) == [CORNER_WALL]
    assert len(decomposition.cell_groups[0].cells) == 8


def test_detection_offsets_come_from_payload_policy():
    decomposition = decompose(parse_board(["....", ".A..", "....", "...b"]))
    element_index = decomposition.interior_cell_group_indexes[0]
    corner_index = decomposition.corner_cell_group_indexes[0]
    offsets = decomposition.detection_offsets[element_index][corner_index]
    assert len(offsets) == 8 and (0, 0) not in offsets
    # lowercase tiles exclude nothing
    assert decomposition.detection_offsets[corner_index][element_index] == []


def test_custom_policy_overrides_payloads():
    calls = []

    def policy(pixel, other):
        calls.append((pixel.char, other.char))
        return [(5, 5)]

    decomposition = decompose(parse_board(["...", ".x.", "..y"]), policy)
    assert decomposition.detection_offsets[0][1] == [(5, 5)]
    assert decomposition.detection_offsets[1][0] == [(5, 5)]
    assert sorted(calls) == [("x", "y"), ("y", "x")]


def test_small_boards_are_rejected():
    with pytest.raises(ValueError):
        decompose(PixelBoard(2, 5))
