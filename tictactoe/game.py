from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .board import Board, InvalidMove, Mark, Move
from .evaluator import Evaluator, Outcome


class Game:
    """One round of tic-tac-toe: the board, whose turn it is, and the result.

    The round is active until a move completes a line or fills the board.
    After that only ``reset`` brings it back.
    """

    STARTING_MARK = Mark.X

    def __init__(self) -> None:
        self.board = Board()
        self.current_mark: Mark = self.STARTING_MARK
        self.outcome: Optional[Outcome] = None
        self._moves: List[Move] = []

    def reset(self) -> None:
        self.board.clear()
        self.current_mark = self.STARTING_MARK
        self.outcome = None
        self._moves = []

    @property
    def active(self) -> bool:
        return self.outcome is None

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    def apply(self, index: int) -> Optional[Outcome]:
        """Place the current mark at ``index``.

        Returns the outcome if this move ended the round, otherwise None
        (and the turn passes to the other mark).
        """
        if not self.active:
            raise InvalidMove("Round is already over")

        mark = self.current_mark
        self.board.place(index, mark)
        self._moves.append(Move(index=index, mark=mark))

        self.outcome = Evaluator.outcome(self.board)
        if self.outcome is None:
            self.current_mark = mark.opposite()
        return self.outcome

    def undo(self, plies: int = 2) -> List[Move]:
        """Take back the last ``plies`` moves of an active round.

        Returns the removed moves, most recent first, or an empty list if
        the round is over or not enough moves were made.
        """
        if not self.active or plies < 1 or len(self._moves) < plies:
            return []

        removed: List[Move] = []
        for _ in range(plies):
            move = self._moves.pop()
            self.board.clear_cell(move.index)
            removed.append(move)
        self.current_mark = removed[-1].mark
        return removed

    def settle(self) -> Optional[Outcome]:
        """Re-check the board for a finished round."""
        if self.active:
            self.outcome = Evaluator.outcome(self.board)
        return self.outcome

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return Evaluator.winning_line(self.board)

    def snapshot(self) -> Dict[str, object]:
        winner: Optional[str] = None
        if self.outcome is not None and self.outcome.winner is not None:
            winner = self.outcome.winner.value

        line = self.winning_line()
        return {
            "board": [cell.value if cell else None for cell in self.board],
            "turn": self.current_mark.value,
            "active": self.active,
            "result": self.outcome.label if self.outcome else None,
            "winner": winner,
            "winning_line": list(line) if line else None,
            "moves": [move.to_dict() for move in self._moves],
        }
