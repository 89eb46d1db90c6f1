from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .board import LINES, Board, Mark


@dataclass(frozen=True)
class Outcome:
    winner: Optional[Mark] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @property
    def label(self) -> str:
        # Result string stored in the game log
        return "draw" if self.winner is None else f"{self.winner.value} win"


class Evaluator:
    """Terminal-state detection over the eight fixed lines.

    Every query here is pure: nothing on the board is touched, and the
    winning line used for highlighting is a separate lookup from the
    winner check.
    """

    @classmethod
    def winning_line(cls, board: Board) -> Optional[Tuple[int, int, int]]:
        for line in LINES:
            a, b, c = line
            mark = board[a]
            if mark is not None and mark == board[b] == board[c]:
                return line
        return None

    @classmethod
    def winner(cls, board: Board) -> Optional[Mark]:
        line = cls.winning_line(board)
        if line is None:
            return None
        return board[line[0]]

    @classmethod
    def is_draw(cls, board: Board) -> bool:
        return board.is_full() and cls.winner(board) is None

    @classmethod
    def outcome(cls, board: Board) -> Optional[Outcome]:
        """Return the terminal outcome, or None while the game can continue.

        A full board that also completes a line is a win, never a draw.
        """
        line = cls.winning_line(board)
        if line is not None:
            return Outcome(winner=board[line[0]], line=line)
        if board.is_full():
            return Outcome()
        return None
