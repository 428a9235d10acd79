import unittest

from game import (
    EMPTY_BOARD,
    WINNING_LINES,
    Mark,
    Outcome,
    check_draw,
    check_win,
    classify,
    empty_cells,
    place,
    pretty,
    to_symbols,
    validate_cells,
    winning_line,
)

X = Mark.HUMAN
O = Mark.COMPUTER
_ = Mark.EMPTY


class TestBoardPrimitives(unittest.TestCase):
    def test_given_winning_lines_then_eight_distinct_triples_cover_rows_columns_diagonals(self):
        self.assertEqual(len(WINNING_LINES), 8)
        self.assertEqual(len(set(WINNING_LINES)), 8)
        self.assertIn((0, 4, 8), WINNING_LINES)
        self.assertIn((2, 4, 6), WINNING_LINES)
        for line in WINNING_LINES:
            self.assertEqual(len(line), 3)
            self.assertTrue(all(0 <= i <= 8 for i in line))

    def test_given_each_line_filled_when_checking_win_then_only_that_player_wins(self):
        for line in WINNING_LINES:
            board = list(EMPTY_BOARD)
            for i in line:
                board[i] = O
            self.assertTrue(check_win(board, O), line)
            self.assertFalse(check_win(board, X), line)
            self.assertEqual(winning_line(board), line)

    def test_given_empty_mark_when_checking_win_then_false_even_on_empty_board(self):
        self.assertFalse(check_win(EMPTY_BOARD, Mark.EMPTY))

    def test_given_scenario_board_when_classifying_then_human_diagonal_win(self):
        # [X,O,X, O,X,O, _,_,X]
        board = (X, O, X, O, X, O, _, _, X)
        status = classify(board)
        self.assertEqual(status.kind, "win")
        self.assertIs(status.winner, X)
        self.assertEqual(status.line, (0, 4, 8))
        self.assertTrue(status.is_terminal)

    def test_given_full_and_won_board_when_classifying_then_win_takes_precedence(self):
        board = (X, O, X, O, X, O, O, X, X)
        self.assertTrue(check_draw(board))
        status = classify(board)
        self.assertEqual(status.kind, "win")
        self.assertEqual(status.outcome, Outcome.HUMAN_WIN)

    def test_given_full_board_without_line_when_classifying_then_draw(self):
        board = (X, O, X, X, O, O, O, X, X)
        status = classify(board)
        self.assertEqual(status.kind, "draw")
        self.assertIsNone(status.winner)
        self.assertEqual(status.outcome, Outcome.DRAW)

    def test_given_partial_board_when_classifying_repeatedly_then_ongoing_and_stable(self):
        board = (X, _, _, _, O, _, _, _, _)
        first = classify(board)
        self.assertEqual(first.kind, "ongoing")
        self.assertFalse(first.is_terminal)
        self.assertIsNone(first.outcome)
        for _i in range(5):
            self.assertEqual(classify(board), first)

    def test_given_board_when_placing_then_copy_returned_and_input_untouched(self):
        board = EMPTY_BOARD
        nb = place(board, 3, X)
        self.assertIs(nb[3], X)
        self.assertEqual(board, EMPTY_BOARD)
        self.assertEqual(empty_cells(nb), [0, 1, 2, 4, 5, 6, 7, 8])

    def test_given_symbol_strings_when_validating_then_marks_parsed(self):
        cells = validate_cells("x-o-x----")
        self.assertEqual(cells[:3], (X, _, O))
        self.assertEqual(to_symbols(cells), ["x", "", "o", "", "x", "", "", "", ""])
        self.assertEqual(validate_cells(["X", None, "", "o", ".", "_", "-", "", ""])[0], X)

    def test_given_malformed_boards_when_validating_then_value_error(self):
        with self.assertRaises(ValueError):
            validate_cells("x-o")  # too short
        with self.assertRaises(ValueError):
            validate_cells("xxx------")  # counts differ by 3
        with self.assertRaises(ValueError):
            validate_cells("z--------")  # unknown symbol

    def test_given_both_players_with_a_line_when_validating_then_value_error(self):
        with self.assertRaises(ValueError):
            validate_cells("xxxooo---")
        with self.assertRaises(ValueError):
            validate_cells(["o", "x", "", "o", "x", "", "o", "x", ""])

    def test_given_board_when_pretty_then_marks_and_free_indices_shown(self):
        txt = pretty((X, _, O, _, _, _, _, _, _))
        self.assertIn("X", txt)
        self.assertIn("O", txt)
        self.assertIn("8", txt)
        self.assertNotIn("0", txt)

    def test_given_marks_when_asking_opponent_then_swapped(self):
        self.assertIs(X.opponent(), O)
        self.assertIs(O.opponent(), X)
        with self.assertRaises(ValueError):
            Mark.EMPTY.opponent()


if __name__ == "__main__":
    unittest.main()
