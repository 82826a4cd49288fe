import unittest

from board_parser import TextPixel, format_board, parse_board, try_parse_board
from config import CFG


class BoardParserTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._orig_padding = CFG.ELEMENT_PADDING
        self._orig_limit = CFG.MAX_BOARD_CELLS

    def tearDown(self) -> None:
        CFG.ELEMENT_PADDING = self._orig_padding
        CFG.MAX_BOARD_CELLS = self._orig_limit

    def test_round_trip_keeps_rows(self) -> None:
        rows = ["ab.", "...", "..C"]
        board = parse_board(rows)
        self.assertEqual(board.get_width(), 3)
        self.assertEqual(board.get_height(), 3)
        self.assertTrue(board.exists(0, 0))
        self.assertFalse(board.exists(2, 0))
        self.assertEqual(format_board(board), rows)

    def test_text_block_and_trailing_blank_lines(self) -> None:
        board = parse_board("a..\n...\n..b\n\n")
        self.assertEqual(board.get_height(), 3)
        self.assertIs(board.get(0, 0).__class__, TextPixel)

    def test_same_letter_shares_payload(self) -> None:
        board = parse_board(["aa.", "...", "..."])
        self.assertIs(board.get(0, 0), board.get(1, 0))

    def test_ragged_rows_are_rejected(self) -> None:
        ok, message = try_parse_board(["abc", "ab"])
        self.assertFalse(ok)
        self.assertIn("row 1", message)
        with self.assertRaises(ValueError):
            parse_board([])

    def test_board_cell_limit(self) -> None:
        CFG.MAX_BOARD_CELLS = 8
        with self.assertRaises(ValueError):
            parse_board(["...", "...", "..."])

    def test_element_padding_offsets(self) -> None:
        CFG.ELEMENT_PADDING = 2
        element = TextPixel("E")
        tile = TextPixel("t")
        offsets = element.get_invalid_location_offsets_for_other_pixel(tile)
        self.assertEqual(len(offsets), 24)
        self.assertNotIn((0, 0), offsets)
        self.assertEqual(tile.get_invalid_location_offsets_for_other_pixel(element), [])

    def test_text_pixel_is_one_character(self) -> None:
        with self.assertRaises(ValueError):
            TextPixel("ab")


if __name__ == "__main__":
    unittest.main()
