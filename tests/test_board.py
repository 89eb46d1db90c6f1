from __future__ import annotations

import pytest

from tictactoe import Board, InvalidMove, Mark, Move


def test_new_board_is_empty():
    board = Board()
    assert board.is_empty()
    assert not board.is_full()
    assert board.empty_cells() == list(range(9))


def test_place_rejects_bad_index_and_taken_cell():
    board = Board()
    board.place(4, Mark.X)
    with pytest.raises(InvalidMove):
        board.place(4, Mark.O)
    for bad in (-1, 9, 42):
        with pytest.raises(InvalidMove):
            board.place(bad, Mark.O)
    assert board.to_string() == "----X----"


def test_from_string_accepts_several_empty_markers():
    board = Board.from_string("XO-. ox--")
    assert board.cells == (Mark.X, Mark.O, None, None, None, Mark.O, Mark.X, None, None)


def test_is_full_and_clear():
    board = Board.from_string("XOXOXOOXO")
    assert board.is_full()
    board.clear()
    assert board.is_empty()


def test_trial_restores_cell_even_on_error():
    board = Board.from_string("X--------")
    with board.trial(4, Mark.O):
        assert board[4] is Mark.O
    assert board[4] is None

    with pytest.raises(RuntimeError):
        with board.trial(8, Mark.O):
            raise RuntimeError("boom")
    assert board == Board.from_string("X--------")


def test_copy_is_independent():
    board = Board.from_string("X--------")
    other = board.copy()
    other.place(1, Mark.O)
    assert board[1] is None


def test_move_annotation_uses_one_based_position():
    assert Move(index=4, mark=Mark.O).describe() == "O played at position 5"
