from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

import logging
import random

from .board import CENTER, CORNERS, LINES, Board, Mark
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Strategy(Enum):
    RANDOM = "random"
    SMART = "smart"
    MINIMAX = "minimax"


class NoMoveAvailable(Exception):
    """A strategy was asked to move on a full board."""


@dataclass
class SearchResult:
    best_move: Optional[int]
    score: float
    nodes: int
    scored_moves: Optional[List[Tuple[int, float]]] = None


class AIPlayer:
    """Move selection: random, heuristic and minimax with alpha-beta pruning.

    The acting mark is passed on every call, so one instance can play
    either side (or both, in AI-vs-AI mode).
    """

    # Chance of using the heuristic instead of a random move
    SMART_PROBABILITY: Dict[Difficulty, float] = {
        Difficulty.EASY: 0.3,
        Difficulty.MEDIUM: 0.7,
    }

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self._selectors: Dict[Strategy, Callable[[Board, Mark], int]] = {
            Strategy.RANDOM: lambda board, _mark: self.random_move(board),
            Strategy.SMART: self.smart_move,
            Strategy.MINIMAX: self.best_move,
        }

    def strategy_for(self, difficulty: Difficulty) -> Strategy:
        if difficulty is Difficulty.HARD:
            return Strategy.MINIMAX
        if self.rng.random() < self.SMART_PROBABILITY[difficulty]:
            return Strategy.SMART
        return Strategy.RANDOM

    def select(self, strategy: Strategy, board: Board, mark: Mark) -> int:
        return self._selectors[strategy](board, mark)

    def choose_move(self, board: Board, mark: Mark, difficulty: Difficulty) -> int:
        strategy = self.strategy_for(difficulty)
        logger.debug("%s (%s) uses %s strategy", mark.value, difficulty.value, strategy.value)
        return self.select(strategy, board, mark)

    def random_move(self, board: Board) -> int:
        available = board.empty_cells()
        if not available:
            raise NoMoveAvailable("Board is full")
        return self.rng.choice(available)

    def smart_move(self, board: Board, mark: Mark) -> int:
        """Win, block, center, corner, then anything."""
        winning = self._completing_cell(board, mark)
        if winning is not None:
            return winning

        blocking = self._completing_cell(board, mark.opposite())
        if blocking is not None:
            return blocking

        if board[CENTER] is None:
            return CENTER

        corners = [i for i in CORNERS if board[i] is None]
        if corners:
            return self.rng.choice(corners)

        return self.random_move(board)

    @staticmethod
    def _completing_cell(board: Board, mark: Mark) -> Optional[int]:
        for line in LINES:
            cells = [board[i] for i in line]
            if cells.count(mark) == 2 and cells.count(None) == 1:
                return line[cells.index(None)]
        return None

    def best_move(self, board: Board, mark: Mark) -> int:
        """Optimal move for ``mark``; a random cell on an empty board."""
        if board.is_empty():
            # Vary the opening, optimal play resumes from the second move
            return self.rng.randrange(Board.SIZE)

        result = self.search(board, mark)
        logger.debug(
            "Minimax for %s evaluated %d positions. Best move: %s (score: %s)",
            mark.value,
            result.nodes,
            result.best_move,
            result.score,
        )
        if result.best_move is None:
            return self.random_move(board)
        return result.best_move

    def search(self, board: Board, mark: Mark) -> SearchResult:
        """Score every empty cell for ``mark`` and keep the first best one."""
        best_score = float("-inf")
        best_move: Optional[int] = None
        nodes = 0
        scored_moves: List[Tuple[int, float]] = []

        # The search owns its scratch board; the caller's board is never touched
        scratch = board.copy()
        for index in scratch.empty_cells():
            with scratch.trial(index, mark):
                score, sub_nodes = self._alphabeta(
                    scratch, mark, 0, float("-inf"), float("inf"), maximizing=False
                )
            nodes += sub_nodes + 1
            scored_moves.append((index, score))
            if score > best_score:
                best_score = score
                best_move = index

        return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)

    def _alphabeta(
        self,
        board: Board,
        mark: Mark,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
    ) -> Tuple[float, int]:
        winner = Evaluator.winner(board)
        if winner is mark:
            return WIN_SCORE - depth, 1
        if winner is not None:
            return depth - WIN_SCORE, 1
        if board.is_full():
            return 0, 1

        nodes = 0
        if maximizing:
            value = float("-inf")
            for index in board.empty_cells():
                with board.trial(index, mark):
                    score, child_nodes = self._alphabeta(
                        board, mark, depth + 1, alpha, beta, maximizing=False
                    )
                nodes += child_nodes + 1
                value = max(value, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return value, nodes
        else:
            value = float("inf")
            opponent = mark.opposite()
            for index in board.empty_cells():
                with board.trial(index, opponent):
                    score, child_nodes = self._alphabeta(
                        board, mark, depth + 1, alpha, beta, maximizing=True
                    )
                nodes += child_nodes + 1
                value = min(value, score)
                beta = min(beta, score)
                if beta <= alpha:
                    break
            return value, nodes
