from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional, Tuple

import logging

from .ai import AIPlayer, Difficulty, NoMoveAvailable, Strategy
from .board import InvalidMove, Mark, Move
from .evaluator import Outcome
from .game import Game
from .preferences import MemoryStore, Mode, Preferences
from .scheduler import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)


class Status(str, Enum):
    YOUR_TURN = "your-turn"
    AI_THINKING = "ai-thinking"
    YOU_WON = "you-won"
    AI_WON = "ai-won"
    DRAW = "draw"
    SYSTEM_X_WON = "system-X-won"
    SYSTEM_O_WON = "system-O-won"


@dataclass(frozen=True)
class GameRecord:
    result: str
    moves: Tuple[Move, ...]

    def to_dict(self) -> Dict[str, object]:
        return {"result": self.result, "moves": [move.to_dict() for move in self.moves]}


@dataclass
class Timing:
    """Pauses, in seconds, before the AI acts."""

    ai_reply: float = 0.5
    ai_opening: float = 0.45
    autoplay: float = 0.8
    auto_restart: float = 3.0


class Session:
    """Everything one player's visit needs: the round, the AI, scores and logs.

    Callers drive it with the event methods (``select_cell``, ``configure``,
    ``reset_round``, ``reset_scores``, ``undo``) and call ``tick`` so that
    delayed AI moves get their turn. ``snapshot`` is what gets rendered.
    """

    HISTORY_LIMIT = 10

    def __init__(
        self,
        store=None,
        preferences: Optional[Preferences] = None,
        scheduler: Optional[Scheduler] = None,
        ai: Optional[AIPlayer] = None,
        timing: Optional[Timing] = None,
    ) -> None:
        self.store = store if store is not None else MemoryStore()
        self.preferences = preferences or Preferences.load(self.store)
        self.scheduler = scheduler or Scheduler()
        self.ai = ai or AIPlayer()
        self.timing = timing or Timing()

        self.game = Game()
        self.scores: Dict[Mark, int] = {Mark.X: 0, Mark.O: 0}
        self.game_log: List[GameRecord] = []
        # Newest first
        self.history: Deque[str] = deque(maxlen=self.HISTORY_LIMIT)

        self._ai_task: Optional[ScheduledTask] = None
        self._restart_task: Optional[ScheduledTask] = None

        self.reset_round(silent=True)

    # -- derived state -------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self.preferences.mode

    @property
    def human_mark(self) -> Mark:
        return self.preferences.human_mark

    @property
    def ai_mark(self) -> Mark:
        return self.preferences.ai_mark

    @property
    def busy(self) -> bool:
        return self._ai_task is not None and self._ai_task.pending

    def is_ai_controlled(self, mark: Mark) -> bool:
        return self.mode is Mode.AI_VS_AI or mark is self.ai_mark

    def can_undo(self) -> bool:
        return (
            self.mode is Mode.PLAYER_VS_AI
            and self.game.active
            and not self.busy
            and len(self.game.moves) >= 2
        )

    def status(self) -> Status:
        outcome = self.game.outcome
        if outcome is None:
            if self.mode is Mode.AI_VS_AI or self.busy or self.game.current_mark is not self.human_mark:
                return Status.AI_THINKING
            return Status.YOUR_TURN
        if outcome.is_draw:
            return Status.DRAW
        if self.mode is Mode.AI_VS_AI:
            return Status.SYSTEM_X_WON if outcome.winner is Mark.X else Status.SYSTEM_O_WON
        return Status.YOU_WON if outcome.winner is self.human_mark else Status.AI_WON

    def status_text(self) -> str:
        status = self.status()
        if status is Status.AI_THINKING:
            if self.mode is Mode.AI_VS_AI:
                return f"System ({self.game.current_mark.value}) is thinking..."
            return "AI is thinking..."
        if status is Status.SYSTEM_X_WON:
            return "System (X) won!"
        if status is Status.SYSTEM_O_WON:
            return "System (O) won!"
        return {
            Status.YOUR_TURN: "Your turn!",
            Status.YOU_WON: "You won!",
            Status.AI_WON: "AI won!",
            Status.DRAW: "It's a draw!",
        }[status]

    # -- events ----------------------------------------------------------

    def select_cell(self, index: int) -> bool:
        """Human move. Returns False (and changes nothing) if it is not allowed."""
        if self.mode is Mode.AI_VS_AI or self.busy:
            return False
        if not self.game.active or self.game.current_mark is not self.human_mark:
            return False
        if not self._play(index):
            return False
        self._schedule_next(self.timing.ai_reply)
        return True

    def reset_round(self, silent: bool = False) -> None:
        self._cancel_pending()
        self.game.reset()
        if not silent:
            self._note("Round reset")
        delay = self.timing.autoplay if self.mode is Mode.AI_VS_AI else self.timing.ai_opening
        self._schedule_next(delay)

    def reset_scores(self) -> None:
        self.scores = {Mark.X: 0, Mark.O: 0}
        self.game_log = []
        self._note("Scores reset")

    def undo(self) -> bool:
        """Take back the AI's last move and the human move before it."""
        if not self.can_undo():
            return False
        removed = self.game.undo(2)
        if not removed:
            return False
        self._note("Moves undone")
        return True

    def configure(
        self,
        theme: Optional[str] = None,
        difficulty: Optional[str] = None,
        symbol: Optional[str] = None,
        mode: Optional[str] = None,
    ) -> None:
        """Apply preference changes and persist them.

        Raises ValueError for an unknown difficulty, symbol or mode; in that
        case nothing is applied. Changing the symbol or the mode starts a
        new round.
        """
        new_difficulty = Difficulty(difficulty) if difficulty is not None else None
        new_mark = Mark(symbol) if symbol is not None else None
        new_mode = Mode(mode) if mode is not None else None

        changed: List[str] = []
        if theme is not None:
            self.preferences.theme = str(theme)
            changed.append("theme")
        if new_difficulty is not None:
            self.preferences.difficulty = new_difficulty
            changed.append("difficulty")
        if new_mark is not None:
            self.preferences.human_mark = new_mark
            changed.append("human_mark")
        if new_mode is not None:
            self.preferences.mode = new_mode
            changed.append("mode")

        if changed:
            self.preferences.save(self.store, *changed)

        if new_mode is not None:
            self.reset_round()
        elif new_mark is not None:
            self.reset_round(silent=True)

    def tick(self) -> int:
        return self.scheduler.run_pending()

    def close(self) -> None:
        self._cancel_pending()

    # -- rendering ---------------------------------------------------------

    def score_slots(self) -> Tuple[int, int]:
        """(left, right) score boxes: player/AI, or System X/System O."""
        if self.mode is Mode.AI_VS_AI:
            return self.scores[Mark.X], self.scores[Mark.O]
        return self.scores[self.human_mark], self.scores[self.ai_mark]

    def snapshot(self) -> Dict[str, object]:
        state = self.game.snapshot()
        player_score, ai_score = self.score_slots()
        state.update(
            {
                "mode": self.mode.value,
                "human_mark": self.human_mark.value,
                "ai_mark": self.ai_mark.value,
                "status": self.status().value,
                "status_text": self.status_text(),
                "busy": self.busy,
                "can_undo": self.can_undo(),
                "scores": {mark.value: count for mark, count in self.scores.items()},
                "player_score": player_score,
                "ai_score": ai_score,
                "history": list(self.history),
                "games_played": len(self.game_log),
                "preferences": self.preferences.to_dict(),
            }
        )
        return state

    def game_records(self) -> List[Dict[str, object]]:
        return [record.to_dict() for record in self.game_log]

    # -- internals ---------------------------------------------------------

    def _note(self, message: str) -> None:
        self.history.appendleft(message)

    def _play(self, index: int) -> bool:
        try:
            outcome = self.game.apply(index)
        except InvalidMove as exc:
            logger.debug("Rejected move at %r: %s", index, exc)
            return False
        self._note(self.game.moves[-1].describe())
        if outcome is not None:
            self._end_round(outcome)
        return True

    def _schedule_next(self, delay: float) -> None:
        if self.game.active and self.is_ai_controlled(self.game.current_mark):
            self._schedule_ai(delay)

    def _schedule_ai(self, delay: float) -> None:
        if self._ai_task is not None:
            self._ai_task.cancel()
        mark = self.game.current_mark
        self._ai_task = self.scheduler.call_later(
            delay, lambda: self._ai_move(mark), name=f"ai-move-{mark.value}"
        )

    def _ai_move(self, mark: Mark) -> None:
        self._ai_task = None
        # The board may have moved on since this was scheduled
        if not self.game.active or self.game.current_mark is not mark or not self.is_ai_controlled(mark):
            return

        if self.mode is Mode.AI_VS_AI:
            strategy = Strategy.MINIMAX
        else:
            strategy = self.ai.strategy_for(self.preferences.difficulty)

        try:
            index = self.ai.select(strategy, self.game.board, mark)
        except NoMoveAvailable:
            outcome = self.game.settle()
            if outcome is not None:
                self._end_round(outcome)
            return

        if self._play(index):
            self._schedule_next(self.timing.autoplay)

    def _end_round(self, outcome: Outcome) -> None:
        self._cancel_pending()
        if outcome.winner is not None:
            self.scores[outcome.winner] += 1
        self.game_log.append(GameRecord(result=outcome.label, moves=self.game.moves))
        logger.info("Round over: %s after %d moves", outcome.label, len(self.game.moves))

        if self.mode is Mode.AI_VS_AI:
            self._restart_task = self.scheduler.call_later(
                self.timing.auto_restart, self._auto_restart, name="auto-restart"
            )

    def _auto_restart(self) -> None:
        self._restart_task = None
        self.reset_round()

    def _cancel_pending(self) -> None:
        for task in (self._ai_task, self._restart_task):
            if task is not None:
                task.cancel()
        self._ai_task = None
        self._restart_task = None
