from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

import json
import logging

from .ai import Difficulty
from .board import Mark

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    PLAYER_VS_AI = "player-vs-ai"
    AI_VS_AI = "ai-vs-ai"


DEFAULT_THEME = "canvas"

STORAGE_KEYS: Dict[str, str] = {
    "theme": "ttt-theme",
    "difficulty": "ttt-difficulty",
    "human_mark": "ttt-symbol",
    "mode": "ttt-mode",
}


class MemoryStore:
    """Key-value preference storage that lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Key-value preference storage kept in a small JSON object on disk.

    Read and write errors propagate; ``Preferences`` decides what to do
    with them.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Preference file {self.path} does not hold an object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


@dataclass
class Preferences:
    theme: str = DEFAULT_THEME
    difficulty: Difficulty = Difficulty.EASY
    human_mark: Mark = Mark.X
    mode: Mode = Mode.PLAYER_VS_AI

    @property
    def ai_mark(self) -> Mark:
        return self.human_mark.opposite()

    @classmethod
    def load(cls, store) -> "Preferences":
        """Read every field from ``store``, keeping the default for anything missing or broken."""
        prefs = cls()
        prefs.theme = _safe_get(store, "theme") or prefs.theme
        prefs.difficulty = _parse(Difficulty, _safe_get(store, "difficulty"), prefs.difficulty)
        prefs.human_mark = _parse(Mark, _safe_get(store, "human_mark"), prefs.human_mark)
        prefs.mode = _parse(Mode, _safe_get(store, "mode"), prefs.mode)
        return prefs

    def save(self, store, *names: str) -> None:
        """Write the named fields (all of them when none are given)."""
        for name in names or tuple(f.name for f in fields(self)):
            value = getattr(self, name)
            _safe_set(store, name, value.value if isinstance(value, Enum) else str(value))

    def to_dict(self) -> Dict[str, str]:
        return {
            "theme": self.theme,
            "difficulty": self.difficulty.value,
            "symbol": self.human_mark.value,
            "mode": self.mode.value,
        }


def _parse(enum_cls, raw: Optional[str], default):
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        logger.debug("Ignoring stored %s value %r", enum_cls.__name__, raw)
        return default


def _safe_get(store, name: str) -> Optional[str]:
    key = STORAGE_KEYS[name]
    try:
        return store.get(key)
    except (OSError, ValueError) as exc:
        logger.debug("Preference read failed for %s: %s", key, exc)
        return None


def _safe_set(store, name: str, value: str) -> None:
    key = STORAGE_KEYS[name]
    try:
        store.set(key, value)
    except (OSError, ValueError) as exc:
        logger.debug("Preference write failed for %s: %s", key, exc)
