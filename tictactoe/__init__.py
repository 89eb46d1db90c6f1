"""Tic-tac-toe engine package: board, rules, AI and the playing session.

Modules:
- board: Cells, marks, moves and the fixed winning lines
- evaluator: Win and draw detection
- ai: Random, heuristic and minimax (alpha-beta) move selection
- game: Round state machine with undo
- scheduler: Cancellable delayed callbacks pacing the AI
- preferences: Theme/difficulty/symbol/mode and their key-value storage
- session: Scores, logs and the event surface a front end talks to
"""

from .board import Board, InvalidMove, Mark, Move
from .evaluator import Evaluator, Outcome
from .ai import AIPlayer, Difficulty, NoMoveAvailable, SearchResult, Strategy
from .game import Game
from .scheduler import ManualClock, ScheduledTask, Scheduler
from .preferences import JsonFileStore, MemoryStore, Mode, Preferences
from .session import GameRecord, Session, Status, Timing

__all__ = [
    "Board",
    "InvalidMove",
    "Mark",
    "Move",
    "Evaluator",
    "Outcome",
    "AIPlayer",
    "Difficulty",
    "NoMoveAvailable",
    "SearchResult",
    "Strategy",
    "Game",
    "ManualClock",
    "ScheduledTask",
    "Scheduler",
    "JsonFileStore",
    "MemoryStore",
    "Mode",
    "Preferences",
    "GameRecord",
    "Session",
    "Status",
    "Timing",
]
