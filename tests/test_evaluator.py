from __future__ import annotations

import itertools

from tictactoe import Board, Evaluator, Mark
from tictactoe.board import LINES


def test_rows_columns_and_diagonals_win():
    assert Evaluator.winner(Board.from_string("XXX-O-O--")) is Mark.X
    assert Evaluator.winner(Board.from_string("OX-OX-O--")) is Mark.O
    assert Evaluator.winner(Board.from_string("X-O-XO--X")) is Mark.X
    assert Evaluator.winning_line(Board.from_string("X-O-O-OXX")) == (2, 4, 6)


def test_win_on_nearly_full_board_is_not_a_draw():
    board = Board.from_string("XXOOXO--X")
    assert Evaluator.winner(board) is Mark.X
    assert Evaluator.winning_line(board) == (0, 4, 8)
    assert not Evaluator.is_draw(board)


def test_full_board_without_line_is_draw():
    board = Board.from_string("XOXXOOOXX")
    assert Evaluator.winner(board) is None
    assert Evaluator.is_draw(board)
    outcome = Evaluator.outcome(board)
    assert outcome is not None and outcome.is_draw
    assert outcome.label == "draw"


def test_full_board_with_line_reports_win():
    board = Board.from_string("XXXOOXOXO")
    outcome = Evaluator.outcome(board)
    assert outcome.winner is Mark.X
    assert outcome.label == "X win"
    assert outcome.line == (0, 1, 2)


def test_open_board_has_no_outcome():
    assert Evaluator.outcome(Board.from_string("XO--X----")) is None


def completed_lines(board: Board):
    return [(line, m) for line in LINES for m in Mark if all(board[i] is m for i in line)]


def test_winner_matches_the_single_completed_line():
    # Every board with up to 5 marks of each kind and at most one full line
    for layout in itertools.product("XO-", repeat=9):
        if layout.count("X") > 5 or layout.count("O") > 5:
            continue
        board = Board.from_string("".join(layout))
        completed = completed_lines(board)
        if not completed:
            assert Evaluator.winner(board) is None
            assert Evaluator.winning_line(board) is None
        elif len(completed) == 1:
            line, mark = completed[0]
            assert Evaluator.winner(board) is mark
            assert Evaluator.winning_line(board) == line


def test_move_completing_two_lines_still_has_one_winner():
    # X's last move at 0 closes row 0 and column 0 together
    board = Board.from_string("XXXXOOXOO")
    assert len(completed_lines(board)) == 2
    assert Evaluator.winner(board) is Mark.X
    assert Evaluator.winning_line(board) == (0, 1, 2)
    assert not Evaluator.is_draw(board)


def test_evaluator_does_not_modify_board():
    board = Board.from_string("XXXOO----")
    before = board.cells
    Evaluator.outcome(board)
    Evaluator.winning_line(board)
    assert board.cells == before
