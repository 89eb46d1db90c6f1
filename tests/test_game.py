from __future__ import annotations

import pytest

from tictactoe import Board, Game, InvalidMove, Mark


def play(game: Game, *indices: int):
    outcome = None
    for index in indices:
        outcome = game.apply(index)
    return outcome


def test_moves_alternate_starting_with_x():
    game = Game()
    assert game.current_mark is Mark.X
    assert game.apply(4) is None
    assert game.current_mark is Mark.O
    game.apply(0)
    assert game.current_mark is Mark.X
    assert [m.mark for m in game.moves] == [Mark.X, Mark.O]
    assert game.board.count() == len(game.moves)


def test_completing_a_line_ends_round():
    game = Game()
    outcome = play(game, 0, 3, 1, 4, 2)
    assert outcome.winner is Mark.X
    assert outcome.line == (0, 1, 2)
    assert not game.active
    # Turn stays with the winner
    assert game.current_mark is Mark.X


def test_filling_board_without_line_is_draw():
    game = Game()
    # X O X / X O O / O X X
    outcome = play(game, 0, 1, 2, 4, 3, 5, 7, 6, 8)
    assert outcome is not None and outcome.is_draw
    assert not game.active


def test_no_moves_after_round_ends():
    game = Game()
    play(game, 0, 3, 1, 4, 2)
    with pytest.raises(InvalidMove):
        game.apply(8)
    assert game.board[8] is None
    assert len(game.moves) == 5


def test_invalid_move_changes_nothing():
    game = Game()
    game.apply(4)
    with pytest.raises(InvalidMove):
        game.apply(4)
    with pytest.raises(InvalidMove):
        game.apply(9)
    assert game.current_mark is Mark.O
    assert len(game.moves) == 1


def test_undo_is_inverse_of_two_moves():
    game = Game()
    play(game, 4, 0)
    board_before = game.board.copy()
    mark_before = game.current_mark

    play(game, 8, 2)
    removed = game.undo(2)

    assert [m.index for m in removed] == [2, 8]
    assert game.board == board_before
    assert game.current_mark is mark_before
    assert [m.index for m in game.moves] == [4, 0]


def test_undo_rejected_without_enough_moves_or_after_end():
    game = Game()
    game.apply(4)
    assert game.undo(2) == []
    assert len(game.moves) == 1

    play(game, 0, 1, 3, 7)
    assert not game.active
    assert game.undo(2) == []


def test_reset_restores_fresh_round_and_is_idempotent():
    game = Game()
    play(game, 0, 3, 1, 4, 2)
    game.reset()
    first = game.snapshot()
    game.reset()
    assert game.snapshot() == first
    assert game.board == Board()
    assert game.active
    assert game.current_mark is Mark.X
    assert game.moves == ()


def test_settle_detects_terminal_board():
    game = Game()
    game.board = Board.from_string("XOXXOOOXX")
    outcome = game.settle()
    assert outcome is not None and outcome.is_draw
    assert not game.active


def test_snapshot_reports_winning_line():
    game = Game()
    play(game, 0, 1, 4, 2, 8)
    snap = game.snapshot()
    assert snap["result"] == "X win"
    assert snap["winner"] == "X"
    assert snap["winning_line"] == [0, 4, 8]
    assert snap["board"][0] == "X"
    assert snap["active"] is False
