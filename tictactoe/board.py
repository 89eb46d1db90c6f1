from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple


class Mark(str, Enum):
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        return Mark.O if self is Mark.X else Mark.X


Cell = Optional[Mark]

# Rows, columns, diagonals
LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

CENTER = 4
CORNERS: Tuple[int, ...] = (0, 2, 6, 8)

_EMPTY_CHARS = "-. "


class InvalidMove(ValueError):
    """Raised when a mark cannot be placed: bad index, taken cell or finished round."""


@dataclass(frozen=True)
class Move:
    index: int
    mark: Mark

    def describe(self) -> str:
        return f"{self.mark.value} played at position {self.index + 1}"

    def to_dict(self) -> dict:
        return {"index": self.index, "mark": self.mark.value}


class Board:
    """Nine cells addressed by index 0..8, row by row."""

    SIZE = 9

    def __init__(self, cells: Optional[Iterable[Cell]] = None) -> None:
        self._cells: List[Cell] = list(cells) if cells is not None else [None] * self.SIZE
        if len(self._cells) != self.SIZE:
            raise ValueError(f"Board needs {self.SIZE} cells, got {len(self._cells)}")

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """Parse a 9 character layout such as ``"XXO-X-O--"``.

        ``-``, ``.`` and spaces are empty cells.
        """
        if len(text) != cls.SIZE:
            raise ValueError(f"Board string must be {cls.SIZE} characters: {text!r}")
        cells: List[Cell] = []
        for ch in text.upper():
            if ch in _EMPTY_CHARS:
                cells.append(None)
            else:
                cells.append(Mark(ch))
        return cls(cells)

    def __getitem__(self, index: int) -> Cell:
        return self._cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __len__(self) -> int:
        return self.SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"

    def to_string(self) -> str:
        return "".join(cell.value if cell else "-" for cell in self._cells)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def empty_cells(self) -> List[int]:
        return [i for i, cell in enumerate(self._cells) if cell is None]

    def is_empty(self) -> bool:
        return all(cell is None for cell in self._cells)

    def is_full(self) -> bool:
        return all(cell is not None for cell in self._cells)

    def count(self) -> int:
        return sum(1 for cell in self._cells if cell is not None)

    def place(self, index: int, mark: Mark) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < self.SIZE:
            raise InvalidMove(f"Invalid cell index {index!r}. Must be 0-8.")
        if self._cells[index] is not None:
            raise InvalidMove(f"Cell {index} is already occupied by {self._cells[index].value}")
        self._cells[index] = mark

    def clear_cell(self, index: int) -> None:
        self._cells[index] = None

    def clear(self) -> None:
        self._cells = [None] * self.SIZE

    def copy(self) -> "Board":
        return Board(self._cells)

    @contextmanager
    def trial(self, index: int, mark: Mark) -> Iterator["Board"]:
        """Place ``mark`` for the duration of the block, then empty the cell again."""
        self.place(index, mark)
        try:
            yield self
        finally:
            self._cells[index] = None
